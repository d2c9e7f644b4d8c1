"""
Console and JSON rendering of a HealthReport
"""
import json
from typing import Optional

from replica_lag.classifier import HealthReport, SlaveReport, Verdict
from replica_lag.lsn import format_lsn

STATUS_LINES = {
    Verdict.HEALTHY: "OK",
    Verdict.TOPOLOGY_WRONG: "FAILED: topology wrong",
    Verdict.LAGGING: "FAILED: lagging",
}


def format_bytes(bytes_val: Optional[int]) -> str:
    """Format bytes for display"""
    if bytes_val is None:
        return "N/A"

    if bytes_val < 1024:
        return f"{bytes_val} B"
    elif bytes_val < 1024 * 1024:
        return f"{bytes_val / 1024:.2f} KB"
    elif bytes_val < 1024 * 1024 * 1024:
        return f"{bytes_val / (1024 * 1024):.2f} MB"
    else:
        return f"{bytes_val / (1024 * 1024 * 1024):.2f} GB"


def format_slave_line(slave: SlaveReport) -> str:
    line = (
        f"{slave.name}: "
        f"{format_lsn(slave.received_position)} {f'({slave.receive_lag})':<12}   to "
        f"{format_lsn(slave.replayed_position)} {f'({slave.replay_lag})':<12}"
    )
    markers = []
    if not slave.is_in_recovery:
        markers.append("!! not in recovery")
    if slave.lagging:
        markers.append("!! too far behind write master")
    if markers:
        line += "    " + ", ".join(markers)
    return line.rstrip()


def format_report(report: HealthReport) -> str:
    """Format a report for console display"""
    master = report.master
    output = [f"{master.name}: {format_lsn(master.current_position)}"]
    if master.is_in_recovery:
        output[0] += "    !! in recovery"

    output.extend(format_slave_line(slave) for slave in report.slaves)

    status = STATUS_LINES[report.verdict]
    if report.verdict is Verdict.HEALTHY:
        status += f" (threshold {format_bytes(report.threshold)})"
    output.append(status)

    return "\n".join(output)


def report_to_dict(report: HealthReport) -> dict:
    """Plain data form of a report, LSNs rendered as text"""
    master = report.master
    return {
        "verdict": report.verdict.name,
        "threshold": report.threshold,
        "master": {
            "name": master.name,
            "is_in_recovery": master.is_in_recovery,
            "current_lsn": format_lsn(master.current_position),
        },
        "slaves": [
            {
                "name": slave.name,
                "is_in_recovery": slave.is_in_recovery,
                "received_lsn": format_lsn(slave.received_position),
                "replayed_lsn": format_lsn(slave.replayed_position),
                "receive_lag": slave.receive_lag,
                "replay_lag": slave.replay_lag,
                "lagging": slave.lagging,
            }
            for slave in report.slaves
        ],
        "problems": list(report.problems),
    }


def format_json(report: HealthReport) -> str:
    return json.dumps(report_to_dict(report), indent=2)
