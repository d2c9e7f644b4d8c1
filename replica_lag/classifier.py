"""
Classifies the overall replication health from master and slave snapshots
"""
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple

from replica_lag.lag import evaluate
from replica_lag.snapshot import MasterSnapshot, SlaveSnapshot


class Verdict(Enum):
    HEALTHY = "healthy"
    TOPOLOGY_WRONG = "topology_wrong"
    LAGGING = "lagging"


@dataclass(frozen=True)
class SlaveReport:
    """Per-slave result line"""
    name: str
    is_in_recovery: bool
    received_position: int
    replayed_position: int
    receive_lag: int
    replay_lag: int
    lagging: bool


@dataclass(frozen=True)
class HealthReport:
    """Outcome of one check run"""
    verdict: Verdict
    master: MasterSnapshot
    threshold: int
    slaves: Tuple[SlaveReport, ...]
    problems: Tuple[str, ...]

    @property
    def is_healthy(self) -> bool:
        return self.verdict is Verdict.HEALTHY


def classify(master: MasterSnapshot, slaves: Sequence[SlaveSnapshot], threshold: int) -> HealthReport:
    """
    Fold the master and every slave into one verdict

    Topology problems (master in recovery, slave not in recovery) win over
    lag problems. A master in recovery stops evaluation before any slave,
    since its position is then a replica's receive pointer.

    Args:
        master: Snapshot of the configured write master
        slaves: Snapshots of the configured read slaves, in probe order
        threshold: Maximum accepted lag in bytes, applied to both lag metrics

    Returns:
        HealthReport with the verdict and one SlaveReport per slave
    """
    if threshold < 0:
        raise ValueError(f"lag threshold must not be negative: {threshold}")

    if master.is_in_recovery:
        return HealthReport(
            verdict=Verdict.TOPOLOGY_WRONG,
            master=master,
            threshold=threshold,
            slaves=(),
            problems=(f"{master.name} is in recovery, not a write master",)
        )

    reports = []
    topology_problems = []
    lag_problems = []

    for slave in slaves:
        lag = evaluate(master, slave)
        lagging = lag.receive_lag > threshold or lag.replay_lag > threshold

        reports.append(SlaveReport(
            name=slave.name,
            is_in_recovery=slave.is_in_recovery,
            received_position=slave.received_position,
            replayed_position=slave.replayed_position,
            receive_lag=lag.receive_lag,
            replay_lag=lag.replay_lag,
            lagging=lagging
        ))

        if not slave.is_in_recovery:
            topology_problems.append(f"{slave.name} is not in recovery, not a read slave")
        if lagging:
            lag_problems.append(
                f"{slave.name} is too far behind write master "
                f"(receive lag {lag.receive_lag}, replay lag {lag.replay_lag}, threshold {threshold})"
            )

    if topology_problems:
        verdict = Verdict.TOPOLOGY_WRONG
    elif lag_problems:
        verdict = Verdict.LAGGING
    else:
        verdict = Verdict.HEALTHY

    return HealthReport(
        verdict=verdict,
        master=master,
        threshold=threshold,
        slaves=tuple(reports),
        problems=tuple(topology_problems + lag_problems)
    )
