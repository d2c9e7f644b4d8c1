"""
PostgreSQL replication lag health check
Compares replica WAL positions against the primary and classifies the result
"""
__version__ = "1.0.0"
