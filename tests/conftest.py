"""Shared pytest fixtures for tests."""

from unittest.mock import Mock

import pytest
from rich.text import Text

from lambdoku.core.types import LogEvent, Page


@pytest.fixture
def make_page():
    def _make_page(*event_ids: str, next_token: str | None = None, base_ts: int = 1_700_000_000_000) -> Page:
        events = tuple(
            LogEvent(event_id=event_id, timestamp=base_ts + i, message=f"2024-01-01\treq-1\tmessage {event_id}")
            for i, event_id in enumerate(event_ids)
        )
        return Page(events=events, next_token=next_token)

    return _make_page


@pytest.fixture
def mock_source():
    source = Mock()
    source.name = "my-function"
    return source


@pytest.fixture
def captured_lines():
    lines: list[Text] = []
    return lines
