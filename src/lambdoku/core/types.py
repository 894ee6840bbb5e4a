"""Type definitions for lambdoku."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mypy_boto3_logs.type_defs import FilteredLogEventTypeDef


@dataclass(frozen=True)
class LogEvent:
    """A single event returned by CloudWatch Logs."""

    event_id: str
    timestamp: int
    message: str

    @classmethod
    def from_aws(cls, event: FilteredLogEventTypeDef | dict[str, Any]) -> LogEvent:
        """Build a LogEvent from a FilterLogEvents event dict."""
        return cls(
            event_id=str(event.get("eventId", "")),
            timestamp=int(event.get("timestamp", 0)),
            message=str(event.get("message", "")),
        )


@dataclass(frozen=True)
class Page:
    """One page of a windowed log query. No token means the window is exhausted."""

    events: tuple[LogEvent, ...]
    next_token: str | None = None


@dataclass(frozen=True)
class StartRecord:
    request_id: str
    version: str


@dataclass(frozen=True)
class EndRecord:
    request_id: str


@dataclass(frozen=True)
class ReportRecord:
    request_id: str
    duration_ms: str
    billed_duration_ms: str
    memory_size_mb: str
    max_memory_used_mb: str


@dataclass(frozen=True)
class SimpleRecord:
    request_id: str
    message: str


@dataclass(frozen=True)
class UnrecognizedRecord:
    raw_line: str

    @property
    def request_id(self) -> None:
        return None


ParsedLogRecord = StartRecord | EndRecord | ReportRecord | SimpleRecord | UnrecognizedRecord


@dataclass(frozen=True)
class LambdaTarget:
    """A Lambda function resolved from a name or ARN."""

    name: str
    region: str | None

    @property
    def log_group(self) -> str:
        return f"/aws/lambda/{self.name}"
