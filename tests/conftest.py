"""
Pytest configuration shared by the test modules
"""

import pytest

from replica_lag.db_config import DatabaseConfig


@pytest.fixture
def base_config():
    return DatabaseConfig(
        host="db-master",
        port=5432,
        database="postgres",
        user="monitor",
        password="secret"
    )
