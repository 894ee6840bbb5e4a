"""Rendering of parsed log records for the console."""

from __future__ import annotations

from rich.text import Text

from ...core.types import (
    EndRecord,
    LogEvent,
    ParsedLogRecord,
    ReportRecord,
    SimpleRecord,
    StartRecord,
    UnrecognizedRecord,
)
from ...core.utils import format_timestamp
from .colors import NEUTRAL_STYLE, ColorCache

EMPTY_LINE = "(empty log line)"
MISSING_REQUEST_ID = "-"


def render(record: ParsedLogRecord) -> str:
    """Human-readable text for a record. Never empty, never raises."""
    if isinstance(record, StartRecord):
        return "Request started"
    if isinstance(record, EndRecord):
        return "Request finished"
    if isinstance(record, ReportRecord):
        return (
            f"Request reported. Duration: {record.duration_ms}ms, "
            f"Billed Duration: {record.billed_duration_ms}ms, "
            f"Memory Size: {record.memory_size_mb}MB, "
            f"Max Memory Used: {record.max_memory_used_mb}MB"
        )
    if isinstance(record, SimpleRecord):
        return record.message.strip() or EMPTY_LINE
    if isinstance(record, UnrecognizedRecord):
        return record.raw_line.strip() or EMPTY_LINE
    return str(record) or EMPTY_LINE


class LogLineFormatter:
    """Builds the final ``<timestamp> <request-id>: <message>`` line."""

    def __init__(self, color_cache: ColorCache, label: str | None = None) -> None:
        self.color_cache = color_cache
        self.label = label

    def format_event(self, event: LogEvent, record: ParsedLogRecord) -> Text:
        request_id = record.request_id
        if request_id:
            style = self.color_cache.style_for(request_id)
        else:
            request_id, style = MISSING_REQUEST_ID, NEUTRAL_STYLE

        line = Text()
        if self.label:
            line.append(f"[{self.label}] ", style="bold")
        line.append(format_timestamp(event.timestamp), style=style)
        line.append(" ")
        line.append(request_id, style=style)
        line.append(": ")
        line.append(render(record))
        return line
