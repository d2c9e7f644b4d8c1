"""
Test: console and JSON rendering of check results

Run with: pytest tests/test_report.py
"""

import json

from replica_lag.classifier import classify
from replica_lag.report import format_bytes, format_json, format_report, report_to_dict
from replica_lag.snapshot import build_master, build_slave


def sample_report(threshold=8192, slave_in_recovery=True):
    master = build_master("db-master", False, "0/189B2E78")
    slaves = [
        build_slave("db-slave-1", True, "0/189B2E78", "0/189B2E70"),
        build_slave("db-slave-2", slave_in_recovery, "0/90000A1", "0/90000A0"),
    ]
    return classify(master, slaves, threshold)


def test_format_bytes():
    assert format_bytes(None) == "N/A"
    assert format_bytes(512) == "512 B"
    assert format_bytes(8192) == "8.00 KB"
    assert format_bytes(3 * 1024 * 1024) == "3.00 MB"
    assert format_bytes(5 * 1024 ** 3) == "5.00 GB"


def test_format_report_lagging():
    lines = format_report(sample_report()).splitlines()

    assert lines[0] == "db-master: 0/189B2E78"
    assert lines[1] == "db-slave-1: 0/189B2E78 (0)            to 0/189B2E70 (8)"
    assert lines[2].startswith("db-slave-2: 0/90000A1 (261828055)    to 0/90000A0 (1)")
    assert lines[2].endswith("!! too far behind write master")
    assert lines[3] == "FAILED: lagging"


def test_format_report_healthy():
    lines = format_report(sample_report(threshold=300_000_000)).splitlines()

    assert "!!" not in "\n".join(lines)
    assert lines[-1] == "OK (threshold 286.10 MB)"


def test_format_report_marks_slave_not_in_recovery():
    text = format_report(sample_report(slave_in_recovery=False))

    assert "!! not in recovery, !! too far behind write master" in text
    assert text.endswith("FAILED: topology wrong")


def test_format_report_master_in_recovery():
    report = classify(build_master("db-master", True, "0/10"), [], 8192)

    assert format_report(report) == "db-master: 0/10    !! in recovery\nFAILED: topology wrong"


def test_report_to_dict():
    data = report_to_dict(sample_report())

    assert data["verdict"] == "LAGGING"
    assert data["master"] == {
        "name": "db-master",
        "is_in_recovery": False,
        "current_lsn": "0/189B2E78",
    }
    assert data["slaves"][1]["received_lsn"] == "0/90000A1"
    assert data["slaves"][1]["receive_lag"] == 261_828_055
    assert data["slaves"][1]["lagging"] is True
    assert len(data["problems"]) == 1


def test_format_json_is_parseable():
    assert json.loads(format_json(sample_report())) == report_to_dict(sample_report())
