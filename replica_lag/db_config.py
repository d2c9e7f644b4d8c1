"""
Centralized database configuration and check defaults
"""
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import List
from dotenv import load_dotenv
from psycopg2.extensions import make_dsn

# Load environment variables from .env file
env_path = Path.cwd() / '.env'
if env_path.exists():
    load_dotenv(env_path)


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection configuration"""
    host: str
    port: int
    database: str
    user: str
    password: str
    sslmode: str = "disable"
    connect_timeout: int = 10

    def connect_kwargs(self) -> dict:
        """Keyword arguments for psycopg2.connect"""
        kwargs = {
            "host": self.host,
            "port": self.port,
            "dbname": self.database,
            "user": self.user,
            "sslmode": self.sslmode,
            "connect_timeout": self.connect_timeout,
        }
        if self.password:
            kwargs["password"] = self.password
        return kwargs

    def describe(self) -> str:
        """Connection string safe for logging"""
        kwargs = self.connect_kwargs()
        if "password" in kwargs:
            kwargs["password"] = "****"
        return make_dsn(**kwargs)

    def for_host(self, host: str) -> "DatabaseConfig":
        """Same settings pointed at another host"""
        return replace(self, host=host)


def split_hosts(value: str) -> List[str]:
    """Parse a comma-separated host list"""
    return [host.strip() for host in value.split(",") if host.strip()]


# Hosts to check
MASTER_HOST = os.getenv("MASTER_HOST")
SLAVE_HOSTS = split_hosts(os.getenv("SLAVE_HOSTS", ""))

# Connection parameters shared by every host
POSTGRES_PORT = int(os.getenv("POSTGRES_PORT", "5432"))
POSTGRES_USER = os.getenv("POSTGRES_USER", "postgres")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD", "")
POSTGRES_DB = os.getenv("POSTGRES_DB", "")  # empty means same as user
POSTGRES_SSLMODE = os.getenv("POSTGRES_SSLMODE", "disable")
CONNECT_TIMEOUT = int(os.getenv("CONNECT_TIMEOUT", "10"))

# Monitoring thresholds
REPLICATION_LAG_THRESHOLD_BYTES = int(os.getenv("LAG_THRESHOLD_BYTES", "8192"))  # 8KB default
