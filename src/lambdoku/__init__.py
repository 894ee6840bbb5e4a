import argparse
import sys
from functools import partial
from importlib.metadata import PackageNotFoundError, version
from typing import TYPE_CHECKING

import boto3
from botocore.config import Config
from rich.console import Console

if TYPE_CHECKING:
    from mypy_boto3_logs.client import CloudWatchLogsClient

from .core.config import TailConfig, resolve_targets, write_target_file
from .core.errors import LambdokuError
from .core.utils import configure_logging, print_error, print_success
from .features.logs.ui import LogsUI

try:
    __version__ = version("lambdoku")
except PackageNotFoundError:
    __version__ = "dev"

console = Console()


def main(argv: list[str] | None = None) -> int:
    """Tail AWS Lambda logs."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(getattr(args, "debug", False))

    if args.command == "init":
        path = write_target_file(args.function)
        print_success(f"Using lambda {args.function} in {path.parent}")
        return 0
    if args.command == "logs":
        return _run_logs(args)

    parser.print_help()
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lambdoku", description="Operator tool for AWS Lambda functions")
    parser.add_argument("--version", action="version", version=f"lambdoku {__version__}")
    subparsers = parser.add_subparsers(dest="command")

    init_parser = subparsers.add_parser("init", help="remember the lambda to operate on in this directory")
    init_parser.add_argument("function", help="function name or ARN")

    defaults = TailConfig()
    logs_parser = subparsers.add_parser("logs", help="show logs of the lambda")
    logs_parser.add_argument(
        "-a", "--lambda", dest="lambdas", action="append", help="function name or ARN (repeatable)", default=None
    )
    logs_parser.add_argument("-t", "--tail", action="store_true", help="keep following new log lines")
    logs_parser.add_argument("-n", "--lines", type=int, default=defaults.page_size, help="page size per request")
    logs_parser.add_argument(
        "--lookback", type=float, default=defaults.lookback_ms / 1000, help="seconds of history re-read each poll"
    )
    logs_parser.add_argument(
        "--interval", type=float, default=defaults.poll_interval_ms / 1000, help="seconds between polls"
    )
    logs_parser.add_argument(
        "--timeout", type=float, default=defaults.request_timeout_s, help="per-request timeout in seconds"
    )
    logs_parser.add_argument("--profile", help="AWS profile to use for authentication", type=str, default=None)
    logs_parser.add_argument("--debug", action="store_true", help="print diagnostic logging")
    return parser


def _run_logs(args: argparse.Namespace) -> int:
    try:
        targets = resolve_targets(args.lambdas)
        config = TailConfig(
            lookback_ms=int(args.lookback * 1000),
            poll_interval_ms=int(args.interval * 1000),
            page_size=args.lines,
            request_timeout_s=args.timeout,
            follow=args.tail,
        )
    except (LambdokuError, ValueError) as e:
        print_error(str(e))
        return 1

    client_factory = partial(_create_logs_client, args.profile, config.request_timeout_s)
    logs_ui = LogsUI(client_factory, config, console)
    return logs_ui.tail(targets)


def _create_logs_client(profile_name: str | None, timeout: float, region_name: str | None) -> "CloudWatchLogsClient":
    """Create CloudWatch Logs client with connection pooling and a per-call timeout."""
    config = Config(
        max_pool_connections=5,
        connect_timeout=timeout,
        read_timeout=timeout,
        retries={"max_attempts": 2, "mode": "adaptive"},
    )

    session = boto3.Session(profile_name=profile_name) if profile_name else boto3
    return session.client("logs", region_name=region_name, config=config)


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
