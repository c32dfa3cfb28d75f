"""Common exceptions for hourglass."""


class HourglassError(RuntimeError):
    """Base error for everything hourglass raises on purpose."""


class ConfigError(HourglassError):
    """Configuration file is missing, unreadable or invalid."""


class JiraError(HourglassError):
    """A Jira REST call failed."""


class JiraUnavailableError(JiraError):
    """Jira answered with a transient failure (429 or 5xx)."""

    def __init__(self, message: str, *, retry_after: float | None = None):
        super().__init__(message)
        self.retry_after = retry_after


class WorklogError(HourglassError):
    """A work log could not be submitted with the given arguments."""
