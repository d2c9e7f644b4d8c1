"""
Test: receive and replay lag between master and slave

Run with: pytest tests/test_lag.py
"""

from replica_lag.lag import LagReport, evaluate
from replica_lag.lsn import LSN_MAX
from replica_lag.snapshot import MasterSnapshot, SlaveSnapshot, build_master, build_slave


def test_calculate_lag():
    master = build_master("testMaster", False, "0/189B2E78")
    slave = build_slave("testSlave", True, "0/90000A1", "0/90000A0")

    assert evaluate(master, slave) == LagReport(receive_lag=261_828_055, replay_lag=1)


def test_caught_up_slave_has_no_lag():
    master = build_master("m", False, "3/1000")
    slave = build_slave("s", True, "3/1000", "3/1000")

    assert evaluate(master, slave) == LagReport(0, 0)


def test_slave_read_ahead_of_master_clamps_to_zero():
    """The master was probed before the slave received more WAL."""
    master = build_master("m", False, "0/90000A0")
    slave = build_slave("s", True, "0/189B2E78", "0/189B2E78")

    report = evaluate(master, slave)

    assert report.receive_lag == 0
    assert report.replay_lag == 0


def test_replay_ahead_of_receive_clamps_to_zero():
    master = build_master("m", False, "1/0")
    slave = build_slave("s", True, "0/10", "0/20")

    assert evaluate(master, slave).replay_lag == 0


def test_lag_across_the_full_range():
    master = MasterSnapshot(name="m", is_in_recovery=False, current_position=LSN_MAX)
    slave = SlaveSnapshot(name="s", is_in_recovery=True, received_position=0, replayed_position=0)

    assert evaluate(master, slave).receive_lag == LSN_MAX


def test_evaluate_ignores_recovery_flags():
    master = build_master("m", True, "0/200")
    slave = build_slave("s", False, "0/100", "0/80")

    assert evaluate(master, slave) == LagReport(receive_lag=0x100, replay_lag=0x80)
