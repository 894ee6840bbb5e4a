"""Per-request color assignment for interleaved log output."""

from __future__ import annotations

import time
from collections.abc import Callable

# Foreground/background pairs, ordered so that neighbours differ in both.
STYLES: tuple[str, ...] = (
    "white on blue",
    "cyan",
    "black on green",
    "magenta",
    "black on yellow",
    "green",
    "white on red",
    "blue",
    "black on cyan",
    "yellow",
    "white on magenta",
    "red",
    "black on white",
    "bright_black",
    "white on bright_black",
    "bright_blue",
)

NEUTRAL_STYLE = "dim"

DEFAULT_HORIZON_MS = 300_000
DEFAULT_SWEEP_EVERY = 100


class ColorCache:
    """Stable, expiring request id -> style mapping.

    Styles are handed out round-robin and reused once the palette wraps, so
    distinctness only holds among requests seen within the horizon.
    """

    def __init__(
        self,
        horizon_ms: int = DEFAULT_HORIZON_MS,
        sweep_every: int = DEFAULT_SWEEP_EVERY,
        styles: tuple[str, ...] = STYLES,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not styles:
            raise ValueError("styles must not be empty")
        self.horizon_ms = horizon_ms
        self.sweep_every = sweep_every
        self.styles = styles
        self._clock = clock
        self._assignments: dict[str, tuple[str, int]] = {}
        self._next_index = 0
        self._assigned_since_sweep = 0

    def __len__(self) -> int:
        return len(self._assignments)

    def __contains__(self, stream_id: object) -> bool:
        return stream_id in self._assignments

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def style_for(self, stream_id: str) -> str:
        now = self._now_ms()
        entry = self._assignments.get(stream_id)
        if entry is not None:
            style = entry[0]
            self._assignments[stream_id] = (style, now)
            return style

        style = self.styles[self._next_index]
        self._next_index = (self._next_index + 1) % len(self.styles)
        self._assignments[stream_id] = (style, now)

        self._assigned_since_sweep += 1
        if self._assigned_since_sweep >= self.sweep_every:
            self.sweep(now)
        return style

    def sweep(self, now_ms: int | None = None) -> int:
        """Drop entries not used within the horizon. Returns how many were dropped."""
        now = self._now_ms() if now_ms is None else now_ms
        cutoff = now - self.horizon_ms
        expired = [stream_id for stream_id, (_, last) in self._assignments.items() if last < cutoff]
        for stream_id in expired:
            del self._assignments[stream_id]
        self._assigned_since_sweep = 0
        return len(expired)
