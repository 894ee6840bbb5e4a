"""Configuration for lambdoku - tail tunables and the per-directory target file."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path

from .errors import TargetNotConfigured

TARGET_FILE = ".lambdoku"


@dataclass(frozen=True)
class TailConfig:
    """Tunables for one tail session.

    ``dedup_capacity`` must cover every event the source can return for one
    lookback window: 20 s at a sustained ~500 events/s per function is 10k ids.
    A smaller value re-emits duplicates, a larger one only costs memory.
    """

    lookback_ms: int = 20_000
    poll_interval_ms: int = 1_000
    dedup_capacity: int = 10_000
    color_horizon_ms: int = 300_000
    sweep_every: int = 100
    page_size: int = 100
    max_consecutive_failures: int = 5
    backoff_initial_ms: int = 1_000
    backoff_max_ms: int = 30_000
    request_timeout_s: float = 10.0
    follow: bool = False

    def __post_init__(self) -> None:
        for field in fields(self):
            value = getattr(self, field.name)
            if isinstance(value, bool):
                continue
            if value <= 0:
                raise ValueError(f"{field.name} must be positive, got {value}")
        if self.backoff_max_ms < self.backoff_initial_ms:
            raise ValueError("backoff_max_ms must not be smaller than backoff_initial_ms")


def write_target_file(function_name: str, directory: Path | None = None) -> Path:
    path = (directory or Path.cwd()) / TARGET_FILE
    path.write_text(function_name, encoding="utf-8")
    return path


def read_target_file(directory: Path | None = None) -> str:
    """Read the function remembered by ``lambdoku init`` for this directory."""
    path = (directory or Path.cwd()) / TARGET_FILE
    try:
        name = path.read_text(encoding="utf-8").strip()
    except OSError as e:
        raise TargetNotConfigured(
            "No lambda name param passed and reading .lambdoku file failed. Did you run 'lambdoku init'?"
        ) from e
    if not name:
        raise TargetNotConfigured(f"{path} is empty. Did you run 'lambdoku init'?")
    return name


def resolve_targets(cli_targets: list[str] | None, directory: Path | None = None) -> list[str]:
    """Targets from the command line win, otherwise fall back to the .lambdoku file."""
    if cli_targets:
        # Keep order, drop repeats
        return list(dict.fromkeys(cli_targets))
    return [read_target_file(directory)]
