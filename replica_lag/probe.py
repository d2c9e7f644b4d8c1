"""
Fixed read-only queries that capture the role and WAL position of each host
"""
import logging
from dataclasses import dataclass

from replica_lag.db_connection import DatabaseConnection, QueryFailed
from replica_lag.snapshot import MasterSnapshot, SlaveSnapshot, build_master, build_slave

logger = logging.getLogger(__name__)

# PostgreSQL 10 renamed the xlog functions to wal
WAL_RENAME_VERSION = 100000

_TRUE_VALUES = {"t", "true", "on", "yes", "1"}
_FALSE_VALUES = {"f", "false", "off", "no", "0"}


@dataclass(frozen=True)
class WalFunctions:
    """Server-side function names for reading WAL positions"""
    current: str
    receive: str
    replay: str


WAL_FUNCTIONS = WalFunctions(
    current="pg_current_wal_lsn",
    receive="pg_last_wal_receive_lsn",
    replay="pg_last_wal_replay_lsn"
)

XLOG_FUNCTIONS = WalFunctions(
    current="pg_current_xlog_location",
    receive="pg_last_xlog_receive_location",
    replay="pg_last_xlog_replay_location"
)


def wal_functions_for(server_version: int) -> WalFunctions:
    """Pick function names for a server version number"""
    if server_version >= WAL_RENAME_VERSION:
        return WAL_FUNCTIONS
    return XLOG_FUNCTIONS


def parse_recovery_flag(host: str, text: str) -> bool:
    """Map the textual result of pg_is_in_recovery() to a bool"""
    value = text.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise QueryFailed(host, "pg_is_in_recovery", f"unexpected value {text!r}")


class ReplicationProbe:
    """Queries one host for its recovery state and WAL positions"""

    def __init__(self, db: DatabaseConnection):
        self.db = db
        self._functions = None

    @property
    def functions(self) -> WalFunctions:
        if self._functions is None:
            self._functions = wal_functions_for(self.db.server_version)
        return self._functions

    def is_in_recovery(self) -> bool:
        """Check if the host is replaying WAL from elsewhere"""
        text = self.db.query_scalar("SELECT pg_is_in_recovery()::text", "pg_is_in_recovery")
        return parse_recovery_flag(self.db.host, text)

    def _position(self, function: str) -> str:
        return self.db.query_scalar(f"SELECT {function}()::text", function)

    def probe_master(self) -> MasterSnapshot:
        """Snapshot the host as the write master"""
        in_recovery = self.is_in_recovery()
        if in_recovery:
            # the current-position function errors out during recovery
            logger.debug(f"{self.db.host} is in recovery, reading its receive position instead")
            current = self._position(self.functions.receive)
        else:
            current = self._position(self.functions.current)
        return build_master(self.db.host, in_recovery, current)

    def probe_slave(self) -> SlaveSnapshot:
        """Snapshot the host as a read slave"""
        in_recovery = self.is_in_recovery()
        received = self._position(self.functions.receive)
        replayed = self._position(self.functions.replay)
        return build_slave(self.db.host, in_recovery, received, replayed)
