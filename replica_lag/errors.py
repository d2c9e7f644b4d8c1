"""
Exception hierarchy shared by the check
"""


class ReplicationCheckError(Exception):
    """Base class for failures that abort a check run"""
