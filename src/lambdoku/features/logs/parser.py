"""Parsing of raw Lambda log lines into typed records."""

from __future__ import annotations

from ...core.types import EndRecord, ParsedLogRecord, ReportRecord, SimpleRecord, StartRecord, UnrecognizedRecord

# (label prefix, index of the value token) for REPORT segments 1-4
REPORT_FIELDS = (
    ("Duration:", 1),
    ("Billed Duration:", 2),
    ("Memory Size:", 2),
    ("Max Memory Used:", 3),
)


def parse_log_line(raw: str) -> ParsedLogRecord:
    """Parse one log message. Never raises: anything odd becomes UnrecognizedRecord."""
    if raw.startswith("START"):
        return _parse_start(raw.strip())
    if raw.startswith("END"):
        return _parse_end(raw.strip())
    if raw.startswith("REPORT"):
        return _parse_report(raw.strip())

    line = raw.strip()
    segments = line.split("\t")
    if len(segments) >= 3:
        return SimpleRecord(request_id=segments[1], message=segments[2])
    return UnrecognizedRecord(raw_line=line)


def _parse_start(line: str) -> ParsedLogRecord:
    # START RequestId: <id> Version: <version>
    tokens = line.split(" ")
    if len(tokens) < 5:
        return UnrecognizedRecord(raw_line=line)
    return StartRecord(request_id=tokens[2], version=tokens[4])


def _parse_end(line: str) -> ParsedLogRecord:
    # END RequestId: <id>
    tokens = line.split(" ")
    if len(tokens) < 3:
        return UnrecognizedRecord(raw_line=line)
    return EndRecord(request_id=tokens[2])


def _parse_report(line: str) -> ParsedLogRecord:
    """REPORT RequestId: <id>\\tDuration: 1.23 ms\\tBilled Duration: 2 ms\\tMemory Size: 128 MB\\tMax Memory Used: 64 MB

    The format is positional and unversioned, so labels and token counts are
    checked before any value is trusted.
    """
    segments = line.split("\t")
    if len(segments) < 1 + len(REPORT_FIELDS):
        return UnrecognizedRecord(raw_line=line)

    head = segments[0].split(" ")
    if len(head) < 3 or head[1] != "RequestId:":
        return UnrecognizedRecord(raw_line=line)

    values: list[str] = []
    for segment, (label, index) in zip(segments[1:], REPORT_FIELDS, strict=False):
        tokens = segment.split(" ")
        if not segment.startswith(label) or len(tokens) <= index or not tokens[index]:
            return UnrecognizedRecord(raw_line=line)
        values.append(tokens[index])

    duration, billed, memory_size, max_memory = values
    return ReportRecord(
        request_id=head[2],
        duration_ms=duration,
        billed_duration_ms=billed,
        memory_size_mb=memory_size,
        max_memory_used_mb=max_memory,
    )
