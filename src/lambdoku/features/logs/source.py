"""CloudWatch Logs access for Lambda functions."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from botocore.exceptions import BotoCoreError, ClientError

from ...core.errors import InvalidContinuation, NoLogsForTarget, SourceUnavailable, describe_aws_error, error_code
from ...core.types import LambdaTarget, LogEvent, Page
from ...core.utils import ProgressHook, no_progress

if TYPE_CHECKING:
    from mypy_boto3_logs.client import CloudWatchLogsClient
    from mypy_boto3_logs.type_defs import FilterLogEventsResponseTypeDef

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str | None], "CloudWatchLogsClient"]

DEFAULT_PAGE_SIZE = 100


def parse_target(identifier: str, default_region: str | None = None) -> LambdaTarget:
    """Resolve a function name or Lambda ARN.

    ``arn:aws:lambda:<region>:<account>:function:<name>[:<qualifier>]`` carries
    its own region, which wins over the default.
    """
    identifier = identifier.strip()
    parts = identifier.split(":")
    if len(parts) == 1:
        if not identifier:
            raise ValueError("Function name must not be empty")
        return LambdaTarget(name=identifier, region=default_region)
    if len(parts) < 7 or not parts[6]:
        raise ValueError(f"Not a Lambda function ARN: {identifier}")
    return LambdaTarget(name=parts[6], region=parts[3] or default_region)


class LogSource:
    """Windowed, paginated FilterLogEvents queries against one function's log group."""

    def __init__(
        self,
        target: str,
        client_factory: ClientFactory,
        page_size: int = DEFAULT_PAGE_SIZE,
        progress: ProgressHook = no_progress,
    ) -> None:
        self.target = parse_target(target)
        self.logs_client = client_factory(self.target.region)
        self.page_size = page_size
        self.progress = progress
        self._window_start: int | None = None

    @property
    def name(self) -> str:
        return self.target.name

    def query_from(self, since_ms: int) -> Page:
        """Fetch the first page of events with timestamp >= since_ms."""
        self._window_start = since_ms
        with self.progress(f"Fetching logs of {self.target.name}"):
            return self._filter(startTime=since_ms)

    def query_continuation(self, token: str) -> Page:
        """Fetch the next page of the window opened by the last query_from."""
        kwargs: dict[str, Any] = {"nextToken": token}
        if self._window_start is not None:
            kwargs["startTime"] = self._window_start
        with self.progress(f"Fetching more logs of {self.target.name}"):
            return self._filter(continuation=True, **kwargs)

    def _filter(self, continuation: bool = False, **kwargs: Any) -> Page:  # noqa: ANN401
        logger.debug("filter_log_events %s %s", self.target.log_group, kwargs)
        try:
            response = self.logs_client.filter_log_events(
                logGroupName=self.target.log_group, limit=self.page_size, **kwargs
            )
        except ClientError as e:
            code = error_code(e)
            if code == "ResourceNotFoundException":
                raise NoLogsForTarget(f"No logs for lambda {self.target.name}") from e
            if continuation and code == "InvalidParameterException":
                raise InvalidContinuation(describe_aws_error(e)) from e
            raise SourceUnavailable(describe_aws_error(e)) from e
        except BotoCoreError as e:
            raise SourceUnavailable(describe_aws_error(e)) from e
        return self._to_page(response)

    @staticmethod
    def _to_page(response: FilterLogEventsResponseTypeDef | dict[str, Any]) -> Page:
        events = tuple(LogEvent.from_aws(event) for event in response.get("events", []))
        return Page(events=events, next_token=response.get("nextToken") or None)
