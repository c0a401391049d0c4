"""Error taxonomy and the exit statuses the CLI maps them to."""

from __future__ import annotations

EXIT_OK = 0
EXIT_TIMEOUT = 1
EXIT_USAGE = 2
EXIT_DEVICE = 3


class EsplightError(Exception):
    """Base class for esplight errors."""


class UsageError(EsplightError):
    """User input could not be used as given."""


class FormatError(UsageError):
    """Color or numeric text that cannot be parsed."""

    def __init__(self, text: str, detail: str | None = None) -> None:
        self.text = text
        message = detail or f"Not a valid text or hex color: {text}"
        super().__init__(message)


class MissingParameterError(UsageError):
    def __init__(self, parameter: str) -> None:
        self.parameter = parameter
        super().__init__(f"Missing parameter: {parameter}")


class ResolveTimeoutError(EsplightError, TimeoutError):
    """A bounded wait ran past its deadline."""
