"""Tests for the CloudWatch Logs source."""

import time
from contextlib import nullcontext
from unittest.mock import Mock

import boto3
import pytest
from botocore.exceptions import ClientError, EndpointConnectionError
from moto import mock_aws

from lambdoku.core.errors import InvalidContinuation, NoLogsForTarget, SourceUnavailable
from lambdoku.core.types import LambdaTarget
from lambdoku.features.logs.source import LogSource, parse_target


def _client_error(code: str, message: str = "boom") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, "FilterLogEvents")


@pytest.fixture
def logs_client_with_events():
    with mock_aws():
        client = boto3.client("logs", region_name="us-east-1")
        client.create_log_group(logGroupName="/aws/lambda/my-function")
        client.create_log_stream(logGroupName="/aws/lambda/my-function", logStreamName="2024/05/01/[$LATEST]abc")
        now_ms = int(time.time() * 1000)
        client.put_log_events(
            logGroupName="/aws/lambda/my-function",
            logStreamName="2024/05/01/[$LATEST]abc",
            logEvents=[{"timestamp": now_ms - 5_000 + i, "message": f"line {i}"} for i in range(5)],
        )
        yield client, now_ms


def test_parse_target_plain_name_keeps_default_region():
    assert parse_target("my-function", "us-east-1") == LambdaTarget(name="my-function", region="us-east-1")


def test_parse_target_arn_overrides_region():
    target = parse_target("arn:aws:lambda:eu-west-1:123456789012:function:my-function", "us-east-1")

    assert target.name == "my-function"
    assert target.region == "eu-west-1"
    assert target.log_group == "/aws/lambda/my-function"


def test_parse_target_arn_with_qualifier():
    target = parse_target("arn:aws:lambda:eu-north-1:123456789012:function:my-function:prod")

    assert target == LambdaTarget(name="my-function", region="eu-north-1")


@pytest.mark.parametrize("identifier", ["", "arn:aws:lambda:eu-west-1", "arn:aws:lambda:eu-west-1:123:function:"])
def test_parse_target_rejects_malformed_identifiers(identifier):
    with pytest.raises(ValueError):
        parse_target(identifier)


def test_constructor_passes_arn_region_to_client_factory():
    factory = Mock()

    source = LogSource("arn:aws:lambda:ap-south-1:123456789012:function:worker", factory)

    factory.assert_called_once_with("ap-south-1")
    assert source.logs_client is factory.return_value
    assert source.name == "worker"


def test_constructor_passes_none_region_for_plain_name():
    factory = Mock()

    LogSource("worker", factory)

    factory.assert_called_once_with(None)


def test_query_from_returns_events(logs_client_with_events):
    client, now_ms = logs_client_with_events
    source = LogSource("my-function", lambda _region: client)

    page = source.query_from(now_ms - 60_000)

    assert [event.message for event in page.events] == [f"line {i}" for i in range(5)]
    assert all(event.event_id for event in page.events)
    assert page.next_token is None


def test_query_from_and_continuation_drain_all_pages(logs_client_with_events):
    client, now_ms = logs_client_with_events
    source = LogSource("my-function", lambda _region: client, page_size=2)

    page = source.query_from(now_ms - 60_000)
    messages = [event.message for event in page.events]
    while page.next_token:
        page = source.query_continuation(page.next_token)
        messages.extend(event.message for event in page.events)

    assert messages == [f"line {i}" for i in range(5)]


def test_query_from_missing_log_group_raises_no_logs():
    with mock_aws():
        client = boto3.client("logs", region_name="us-east-1")
        source = LogSource("missing-function", lambda _region: client)

        with pytest.raises(NoLogsForTarget, match="missing-function"):
            source.query_from(0)


def test_query_from_sends_window_and_page_size():
    client = Mock()
    client.filter_log_events.return_value = {
        "events": [{"eventId": "e1", "timestamp": 10, "message": "hi"}],
        "nextToken": "token-1",
    }
    source = LogSource("my-function", lambda _region: client, page_size=25)

    page = source.query_from(1_000)

    client.filter_log_events.assert_called_once_with(logGroupName="/aws/lambda/my-function", limit=25, startTime=1_000)
    assert page.next_token == "token-1"
    assert page.events[0].event_id == "e1"


def test_query_continuation_reuses_window_start():
    client = Mock()
    client.filter_log_events.return_value = {"events": []}
    source = LogSource("my-function", lambda _region: client, page_size=25)

    source.query_from(1_000)
    source.query_continuation("token-1")

    client.filter_log_events.assert_called_with(
        logGroupName="/aws/lambda/my-function", limit=25, nextToken="token-1", startTime=1_000
    )


def test_query_continuation_rejected_token_raises_invalid_continuation():
    client = Mock()
    client.filter_log_events.side_effect = _client_error("InvalidParameterException", "The specified nextToken is invalid")
    source = LogSource("my-function", lambda _region: client)

    with pytest.raises(InvalidContinuation, match="InvalidParameterException"):
        source.query_continuation("stale")


def test_query_from_invalid_parameter_is_source_unavailable():
    client = Mock()
    client.filter_log_events.side_effect = _client_error("InvalidParameterException")
    source = LogSource("my-function", lambda _region: client)

    with pytest.raises(SourceUnavailable):
        source.query_from(0)


def test_continuation_missing_group_raises_no_logs():
    client = Mock()
    client.filter_log_events.side_effect = _client_error("ResourceNotFoundException")
    source = LogSource("my-function", lambda _region: client)

    with pytest.raises(NoLogsForTarget):
        source.query_continuation("token")


def test_throttling_is_source_unavailable():
    client = Mock()
    client.filter_log_events.side_effect = _client_error("ThrottlingException", "Rate exceeded")
    source = LogSource("my-function", lambda _region: client)

    with pytest.raises(SourceUnavailable, match="ThrottlingException: Rate exceeded"):
        source.query_from(0)


def test_connection_error_is_source_unavailable():
    client = Mock()
    client.filter_log_events.side_effect = EndpointConnectionError(endpoint_url="https://logs.us-east-1.amazonaws.com")
    source = LogSource("my-function", lambda _region: client)

    with pytest.raises(SourceUnavailable, match="Could not connect"):
        source.query_from(0)


def test_progress_hook_wraps_each_query():
    client = Mock()
    client.filter_log_events.return_value = {"events": []}
    messages = []

    def progress(message):
        messages.append(message)
        return nullcontext()

    source = LogSource("my-function", lambda _region: client, progress=progress)
    source.query_from(0)
    source.query_continuation("token")

    assert messages == ["Fetching logs of my-function", "Fetching more logs of my-function"]
