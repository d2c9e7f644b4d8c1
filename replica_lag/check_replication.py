"""
Checks that PostgreSQL read slaves keep up with the write master
Probes each host once, prints a report and exits with a status code
"""
import argparse
import logging
import sys
from enum import IntEnum
from typing import Callable, List, Optional, Sequence

from replica_lag import db_config
from replica_lag.classifier import HealthReport, Verdict, classify
from replica_lag.db_config import DatabaseConfig
from replica_lag.db_connection import ConnectionFailed, DatabaseConnection, QueryFailed
from replica_lag.errors import ReplicationCheckError
from replica_lag.lsn import InvalidLsnFormat
from replica_lag.probe import ReplicationProbe
from replica_lag.report import format_json, format_report

logger = logging.getLogger(__name__)


class ExitCode(IntEnum):
    OK = 0
    CONNECTION_FAILED = 3
    MASTER_QUERY_FAILED = 4
    SLAVE_QUERY_FAILED = 5
    INVALID_LSN = 6
    TOPOLOGY_WRONG = 7
    LAGGING = 8


VERDICT_EXIT_CODES = {
    Verdict.HEALTHY: ExitCode.OK,
    Verdict.TOPOLOGY_WRONG: ExitCode.TOPOLOGY_WRONG,
    Verdict.LAGGING: ExitCode.LAGGING,
}


class SlaveQueryFailed(QueryFailed):
    """A query against a read slave failed"""


def run_check(
    master_config: DatabaseConfig,
    slave_configs: Sequence[DatabaseConfig],
    threshold: int,
    connection_factory: Optional[Callable[[DatabaseConfig], DatabaseConnection]] = None
) -> HealthReport:
    """
    Probe the master, then each slave in order, and classify the result

    Any connection, query or LSN failure aborts the run.
    """
    connection_factory = connection_factory or DatabaseConnection

    logger.debug(f"Checking on WRITE MASTER {master_config.host}:{master_config.port}")
    with connection_factory(master_config) as db:
        master = ReplicationProbe(db).probe_master()

    slaves = []
    for config in slave_configs:
        logger.debug(f"Checking on READ SLAVE {config.host}:{config.port}")
        try:
            with connection_factory(config) as db:
                slaves.append(ReplicationProbe(db).probe_slave())
        except ConnectionFailed:
            raise
        except QueryFailed as e:
            raise SlaveQueryFailed(e.host, e.field, e.cause) from e

    return classify(master, slaves, threshold)


def exit_code_for_error(error: Exception) -> ExitCode:
    if isinstance(error, ConnectionFailed):
        return ExitCode.CONNECTION_FAILED
    if isinstance(error, SlaveQueryFailed):
        return ExitCode.SLAVE_QUERY_FAILED
    if isinstance(error, QueryFailed):
        return ExitCode.MASTER_QUERY_FAILED
    if isinstance(error, InvalidLsnFormat):
        return ExitCode.INVALID_LSN
    raise TypeError(f"no exit code for {type(error).__name__}")


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="PostgreSQL Replication Lag Check")
    parser.add_argument(
        "-M", "--master",
        default=db_config.MASTER_HOST,
        help="Replication master host. May only be specified once"
    )
    parser.add_argument(
        "-S", "--slave",
        dest="slaves",
        action="append",
        help="Replication slave host(s). May be specified more than once"
    )
    parser.add_argument(
        "-p", "--port",
        type=int,
        default=db_config.POSTGRES_PORT,
        help=f"TCP port that Postgres listens on (default: {db_config.POSTGRES_PORT})"
    )
    parser.add_argument(
        "-u", "--user",
        default=db_config.POSTGRES_USER,
        help="User to connect as"
    )
    parser.add_argument(
        "-w", "--password",
        default=db_config.POSTGRES_PASSWORD,
        help="Password to connect with"
    )
    parser.add_argument(
        "-d", "--database",
        default=db_config.POSTGRES_DB,
        help="Database to connect to (default: same as user)"
    )
    parser.add_argument(
        "-l", "--lag",
        type=non_negative_int,
        default=db_config.REPLICATION_LAG_THRESHOLD_BYTES,
        help=(
            "Maximum acceptable lag behind the master WAL position, in bytes "
            f"(default: {db_config.REPLICATION_LAG_THRESHOLD_BYTES})"
        )
    )
    parser.add_argument(
        "-D", "--debug",
        action="store_true",
        help="Enable debugging output (to standard error)"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON"
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.slaves is None:
        args.slaves = list(db_config.SLAVE_HOSTS)
    if not args.master:
        parser.error("a master host is required (--master or MASTER_HOST)")
    if not args.slaves:
        parser.error("at least one slave host is required (--slave or SLAVE_HOSTS)")
    # argparse skips type conversion for non-string defaults
    if args.lag < 0:
        parser.error(f"lag threshold must not be negative: {args.lag} (--lag or LAG_THRESHOLD_BYTES)")
    if not args.database:
        args.database = args.user

    return args


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    base = DatabaseConfig(
        host=args.master,
        port=args.port,
        database=args.database,
        user=args.user,
        password=args.password,
        sslmode=db_config.POSTGRES_SSLMODE,
        connect_timeout=db_config.CONNECT_TIMEOUT
    )

    try:
        report = run_check(base, [base.for_host(host) for host in args.slaves], args.lag)
    except ReplicationCheckError as e:
        logger.error(f"Replication check failed: {e}")
        return exit_code_for_error(e)

    print(format_json(report) if args.json else format_report(report))

    for problem in report.problems:
        logger.warning(problem)

    return VERDICT_EXIT_CODES[report.verdict]


if __name__ == "__main__":
    sys.exit(main())
