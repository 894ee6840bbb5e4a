"""Utility functions for lambdoku."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager, nullcontext
from datetime import UTC, datetime

from rich.console import Console
from rich.logging import RichHandler
from rich.spinner import Spinner

console = Console()
err_console = Console(stderr=True)

ProgressHook = Callable[[str], AbstractContextManager[None]]


def print_error(message: str) -> None:
    console.print(f"❌ {message}", style="red")


def print_success(message: str) -> None:
    console.print(f"✅ {message}", style="green")


def print_warning(message: str) -> None:
    console.print(f"⚠️ {message}", style="yellow")


def print_info(message: str) -> None:
    console.print(message, style="blue")


@contextmanager
def show_spinner(message: str = "") -> Iterator[None]:
    """Context manager that shows a spinner while running operations."""
    spinner = Spinner("dots", text=message, style="cyan")
    with console.status(spinner):
        yield


def no_progress(_message: str) -> AbstractContextManager[None]:
    return nullcontext()


def spinner_progress(message: str) -> AbstractContextManager[None]:
    return show_spinner(message)


@contextmanager
def checkmark_progress(message: str) -> Iterator[None]:
    """Print the message to stderr, run the operation, then tick it off."""
    err_console.print(message, end="")
    try:
        yield
    except BaseException:
        err_console.print(". [red]✗[/red]")
        raise
    err_console.print(". [green]✓[/green]")


def format_timestamp(epoch_ms: int) -> str:
    """Format epoch milliseconds as UTC ISO-8601, e.g. 2024-05-01T12:00:00.123Z."""
    dt = datetime.fromtimestamp(epoch_ms / 1000, tz=UTC)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def configure_logging(debug: bool = False) -> None:
    """Route diagnostic logging through rich. Botocore stays quiet either way."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=debug)],
        force=True,
    )
    for noisy in ("botocore", "boto3", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
