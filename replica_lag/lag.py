"""
Replication lag between a master and one slave
"""
from dataclasses import dataclass

from replica_lag.lsn import lsn_diff
from replica_lag.snapshot import MasterSnapshot, SlaveSnapshot


@dataclass(frozen=True)
class LagReport:
    """Lag of one slave, in WAL bytes"""
    receive_lag: int
    replay_lag: int


def evaluate(master: MasterSnapshot, slave: SlaveSnapshot) -> LagReport:
    """
    Compute how far a slave trails the master

    receive_lag is how much WAL the master has generated that the slave has
    not yet received; replay_lag is how much received WAL is not yet applied.
    Positions are read from different hosts at different moments, so a slave
    can appear ahead of its reference; such differences count as zero.
    """
    return LagReport(
        receive_lag=lsn_diff(master.current_position, slave.received_position),
        replay_lag=lsn_diff(slave.received_position, slave.replayed_position)
    )
