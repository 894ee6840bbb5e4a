"""Error types for lambdoku."""

from __future__ import annotations

from botocore.exceptions import BotoCoreError, ClientError


class LambdokuError(Exception):
    """Base class for all lambdoku errors."""


class TargetNotConfigured(LambdokuError):
    """No function was given and no .lambdoku file was found."""


class LogSourceError(LambdokuError):
    """Base class for errors raised by the log source."""


class NoLogsForTarget(LogSourceError):
    """The log group of the function does not exist (yet)."""


class InvalidContinuation(LogSourceError):
    """A continuation token was rejected as stale or unknown."""


class SourceUnavailable(LogSourceError):
    """Transient failure talking to CloudWatch Logs. Retryable after backoff."""


class TailAborted(LambdokuError):
    """The tail loop gave up after too many consecutive failures."""


def error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "")


def describe_aws_error(error: Exception) -> str:
    """Turn a botocore error into a short, actionable message."""
    if isinstance(error, ClientError):
        details = error.response.get("Error", {})
        code = details.get("Code", "Unknown")
        message = details.get("Message", "")
        return f"{code}: {message}" if message else code
    if isinstance(error, BotoCoreError):
        return str(error)
    return f"{type(error).__name__}: {error}"
