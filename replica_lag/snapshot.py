"""
Point-in-time snapshots of a probed PostgreSQL instance
"""
from dataclasses import dataclass
from typing import Optional

from replica_lag.lsn import InvalidLsnFormat, parse_lsn


@dataclass(frozen=True)
class InstanceSnapshot:
    """Role and recovery state of one instance at probe time"""
    name: str
    is_in_recovery: bool


@dataclass(frozen=True)
class MasterSnapshot(InstanceSnapshot):
    """Instance probed as the write master"""
    current_position: int


@dataclass(frozen=True)
class SlaveSnapshot(InstanceSnapshot):
    """Instance probed as a read slave"""
    received_position: int
    replayed_position: int


def _decode(name: str, field: str, text: Optional[str]) -> int:
    try:
        return parse_lsn(text)
    except InvalidLsnFormat as e:
        raise InvalidLsnFormat(e.text, host=name, field=field) from e


def build_master(name: str, is_in_recovery: bool, current_position_text: Optional[str]) -> MasterSnapshot:
    """Build a master snapshot from raw query results"""
    return MasterSnapshot(
        name=name,
        is_in_recovery=is_in_recovery,
        current_position=_decode(name, 'current_position', current_position_text)
    )


def build_slave(
    name: str,
    is_in_recovery: bool,
    received_position_text: Optional[str],
    replayed_position_text: Optional[str]
) -> SlaveSnapshot:
    """Build a slave snapshot from raw query results"""
    return SlaveSnapshot(
        name=name,
        is_in_recovery=is_in_recovery,
        received_position=_decode(name, 'received_position', received_position_text),
        replayed_position=_decode(name, 'replayed_position', replayed_position_text)
    )
