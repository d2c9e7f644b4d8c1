"""
Database connection utilities for single-shot read-only probes
"""
import psycopg2
import logging

from replica_lag.db_config import DatabaseConfig
from replica_lag.errors import ReplicationCheckError

logger = logging.getLogger(__name__)


class QueryFailed(ReplicationCheckError):
    """A scalar result could not be obtained from a host"""

    def __init__(self, host: str, field: str, cause: object):
        self.host = host
        self.field = field
        self.cause = cause
        super().__init__(f"{host}: querying {field} failed: {cause}")


class ConnectionFailed(QueryFailed):
    """The host could not be connected to"""

    def __init__(self, host: str, cause: object):
        super().__init__(host, "connection", cause)


class DatabaseConnection:
    """Manages one read-only connection to a host"""

    def __init__(self, config: DatabaseConfig):
        """
        Initialize database connection manager

        Args:
            config: DatabaseConfig instance
        """
        self.config = config
        self.conn = None

    @property
    def host(self) -> str:
        return self.config.host

    def connect(self):
        """Open the connection; no retries"""
        logger.debug(f"Connecting to {self.config.describe()}")
        try:
            self.conn = psycopg2.connect(**self.config.connect_kwargs())
            self.conn.set_session(readonly=True, autocommit=True)
        except psycopg2.Error as e:
            self.close()
            raise ConnectionFailed(self.host, e) from e
        logger.debug(f"Connected to {self.host}:{self.config.port}")
        return self

    @property
    def server_version(self) -> int:
        """Server version number, e.g. 150004"""
        if self.conn is None:
            self.connect()
        return self.conn.server_version

    def query_scalar(self, query: str, field: str) -> str:
        """
        Execute a query and return its single value as text

        Args:
            query: SQL query returning one row with one column
            field: Name of the value, used in error reports

        Returns:
            The value as a string; SQL NULL becomes ""
        """
        if self.conn is None:
            self.connect()
        try:
            with self.conn.cursor() as cursor:
                cursor.execute(query)
                row = cursor.fetchone()
        except psycopg2.Error as e:
            raise QueryFailed(self.host, field, e) from e

        if row is None:
            raise QueryFailed(self.host, field, "query returned no rows")

        value = row[0]
        logger.debug(f"{self.host}: {field} = {value!r}")
        return "" if value is None else str(value)

    def close(self):
        """Close the connection"""
        conn = self.conn
        self.conn = None
        if conn is not None:
            conn.close()

    def __enter__(self):
        return self.connect()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
