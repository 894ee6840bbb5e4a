"""Console front end for tailing one or more functions."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from botocore.exceptions import BotoCoreError
from rich.console import Console
from rich.text import Text

from ...core.config import TailConfig
from ...core.errors import LambdokuError, describe_aws_error
from ...core.utils import ProgressHook, checkmark_progress, no_progress, print_error, spinner_progress
from .source import LogSource
from .tail import TailLoop

if TYPE_CHECKING:
    from .source import ClientFactory

JOIN_POLL_INTERVAL = 0.2  # seconds
SHUTDOWN_GRACE = 1.0  # seconds

CREDENTIALS_HINT = "Make sure your AWS credentials and region are configured."


class LogsUI:
    """Runs one tail loop per target on its own thread, sharing the console."""

    def __init__(self, client_factory: ClientFactory, config: TailConfig, console: Console | None = None) -> None:
        self.client_factory = client_factory
        self.config = config
        self.console = console or Console()
        self.stop_event = threading.Event()

    def _print(self, line: Text) -> None:
        self.console.print(line, highlight=False)

    def build_loops(self, targets: list[str]) -> list[TailLoop]:
        # A rich spinner can only run once at a time and would fight with followed output
        progress: ProgressHook = no_progress
        if len(targets) == 1 and not self.config.follow:
            progress = spinner_progress if self.console.is_terminal else checkmark_progress
        loops = []
        for target in targets:
            source = LogSource(target, self.client_factory, page_size=self.config.page_size, progress=progress)
            label = source.name if len(targets) > 1 else None
            loops.append(TailLoop(source, self.config, self._print, stop_event=self.stop_event, label=label))
        return loops

    def tail(self, targets: list[str]) -> int:
        """Tail the targets until done or interrupted. Returns the process exit code."""
        try:
            loops = self.build_loops(targets)
        except ValueError as e:
            print_error(str(e))
            return 1
        except BotoCoreError as e:
            print_error(describe_aws_error(e))
            self.console.print(CREDENTIALS_HINT, style="dim")
            return 1

        failures: list[BaseException] = []

        def worker(loop: TailLoop) -> None:
            try:
                loop.run()
            except LambdokuError as e:
                failures.append(e)
                self.stop_event.set()
            except Exception as e:
                failures.append(e)
                self.stop_event.set()
                raise

        threads = [
            threading.Thread(target=worker, args=(loop,), name=f"tail-{loop.source.name}", daemon=True)
            for loop in loops
        ]
        for thread in threads:
            thread.start()

        try:
            while any(thread.is_alive() for thread in threads):
                for thread in threads:
                    thread.join(timeout=JOIN_POLL_INTERVAL)
        except KeyboardInterrupt:
            self.stop_event.set()
            self.console.print("\n🛑 Interrupted.", style="yellow")
            for thread in threads:
                thread.join(timeout=SHUTDOWN_GRACE)
            return 0

        for failure in failures:
            print_error(str(failure))
        return 1 if failures else 0
