"""Polling tail loop: overlapping windows in, duplicate-free lines out."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from rich.text import Text

from ...core.config import TailConfig
from ...core.errors import InvalidContinuation, NoLogsForTarget, SourceUnavailable, TailAborted
from ...core.utils import print_warning
from .colors import ColorCache
from .dedup import DedupWindow
from .formatter import LogLineFormatter
from .parser import parse_log_line

if TYPE_CHECKING:
    from ...core.types import Page
    from .source import LogSource

logger = logging.getLogger(__name__)


def compute_backoff_ms(failures: int, initial_ms: int, max_ms: int) -> int:
    """Capped exponential backoff for the n-th consecutive failure (n >= 1)."""
    if failures < 1:
        return 0
    # Cap the exponent so the intermediate value stays small
    exponent = min(failures - 1, 32)
    return min(max_ms, initial_ms * 2**exponent)


class TailLoop:
    """Drives one LogSource through poll, drain, sleep cycles.

    Each cycle re-queries ``lookback_ms`` of history so late events are not
    missed, and the dedup window drops what was already printed. The stop
    event is only checked between pages, so a fetched page is always flushed.
    """

    def __init__(
        self,
        source: LogSource,
        config: TailConfig,
        output: Callable[[Text], None],
        stop_event: threading.Event | None = None,
        clock: Callable[[], float] = time.time,
        label: str | None = None,
    ) -> None:
        self.source = source
        self.config = config
        self.output = output
        self.stop_event = stop_event or threading.Event()
        self._clock = clock
        self.dedup = DedupWindow(config.dedup_capacity)
        self.colors = ColorCache(config.color_horizon_ms, config.sweep_every, clock=clock)
        self.formatter = LogLineFormatter(self.colors, label)

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _sleep(self, ms: int) -> bool:
        """Wait, waking early on stop. Returns True if the loop should stop."""
        return self.stop_event.wait(ms / 1000)

    def run(self) -> int:
        """Tail until stopped (or one cycle when not following). Returns lines printed."""
        emitted = 0
        failures = 0
        while not self.stop_event.is_set():
            since = self._now_ms() - self.config.lookback_ms
            try:
                emitted += self.poll_once(since)
            except SourceUnavailable as e:
                failures += 1
                if failures >= self.config.max_consecutive_failures:
                    raise TailAborted(
                        f"Giving up on {self.source.name} after {failures} consecutive failures: {e}"
                    ) from e
                delay = compute_backoff_ms(failures, self.config.backoff_initial_ms, self.config.backoff_max_ms)
                print_warning(f"Fetching logs of {self.source.name} failed ({e}), retrying in {delay / 1000:.1f}s")
                if self._sleep(delay):
                    break
                continue

            failures = 0
            if not self.config.follow:
                break
            if self._sleep(self.config.poll_interval_ms):
                break
        return emitted

    def poll_once(self, since_ms: int) -> int:
        """Query from since_ms and drain every continuation page. Returns lines printed."""
        try:
            page = self.source.query_from(since_ms)
        except NoLogsForTarget as e:
            logger.debug("%s", e)
            return 0

        emitted = self._emit_page(page)
        while page.next_token and not self.stop_event.is_set():
            try:
                page = self.source.query_continuation(page.next_token)
            except InvalidContinuation as e:
                print_warning(f"Continuation for {self.source.name} rejected ({e}), skipping rest of this cycle")
                break
            except NoLogsForTarget:
                break
            emitted += self._emit_page(page)
        return emitted

    def _emit_page(self, page: Page) -> int:
        emitted = 0
        for event in page.events:
            if self.dedup.was_seen(event.event_id):
                continue
            self.dedup.record(event.event_id)
            record = parse_log_line(event.message)
            self.output(self.formatter.format_event(event, record))
            emitted += 1
        logger.debug("%s: page of %d events, %d new", self.source.name, len(page.events), emitted)
        return emitted
