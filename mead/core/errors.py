"""Error types and classification for the explorer.

Every failure of a remote read is surfaced as one of two exception types:

- ConfigurationError: the base URL of a collection service is not set.
- TransportError: the request failed, the service answered with a non-2xx
  status, or the body could not be decoded into the expected shape.

Failures are never retried. They are caught where the data is used and turned
into a display string with describe_error().

Example:
    from mead.core.errors import TransportError, classify_error, describe_error

    try:
        items = await source.fetch_collection()
    except ExplorerError as ex:
        list_error = describe_error(ex)
        category = classify_error(ex)
"""

from enum import Enum, auto


class ErrorCategory(Enum):
    """Classification of explorer errors for handling decisions."""

    TIMEOUT = auto()  # Request timed out
    NETWORK = auto()  # Service unreachable
    SERVICE_UNAVAILABLE = auto()  # 5xx from the collection service
    INVALID_INPUT = auto()  # 4xx other than 404
    NOT_FOUND = auto()  # Record does not exist
    MALFORMED_RESPONSE = auto()  # Body is not the expected JSON shape
    CONFIGURATION = auto()  # Missing base URL
    UNKNOWN = auto()  # Unclassified error


class ExplorerError(Exception):
    """Base class for errors raised while reading a remote collection."""


class ConfigurationError(ExplorerError):
    """Raised when a collection service is used without a base URL.

    Attributes:
        setting: Name of the environment variable that should hold the URL.
    """

    def __init__(self, message: str, setting: str | None = None) -> None:
        super().__init__(message)
        self.setting = setting


class TransportError(ExplorerError):
    """Raised when a remote read does not produce a usable response.

    Attributes:
        status: HTTP status code, or None when no response was received.
        body: Best-effort response text, or the underlying failure reason.
        malformed: True when the response arrived but could not be decoded.
    """

    def __init__(
        self,
        status: int | None,
        body: str = "",
        malformed: bool = False,
    ) -> None:
        self.status = status
        self.body = body
        self.malformed = malformed
        super().__init__(self._format())

    def _format(self) -> str:
        if self.status is None:
            return f"Network error: {self.body}" if self.body else "Network error"
        if self.malformed:
            return f"HTTP {self.status}: malformed response body"
        return f"HTTP {self.status}: {self.body}" if self.body else f"HTTP {self.status}"


def classify_error(error: Exception) -> ErrorCategory:
    """Classify an exception into an error category.

    TransportError is classified by its status code. Errors raised outside
    the collection sources are UNKNOWN.

    Args:
        error: The exception to classify.

    Returns:
        The ErrorCategory that best matches the error.
    """
    if isinstance(error, ConfigurationError):
        return ErrorCategory.CONFIGURATION

    if isinstance(error, TimeoutError):
        return ErrorCategory.TIMEOUT

    if isinstance(error, TransportError):
        if error.malformed:
            return ErrorCategory.MALFORMED_RESPONSE
        if error.status is None:
            if "timeout" in error.body.lower():
                return ErrorCategory.TIMEOUT
            return ErrorCategory.NETWORK
        if error.status == 404:
            return ErrorCategory.NOT_FOUND
        if 400 <= error.status < 500:
            return ErrorCategory.INVALID_INPUT
        if error.status >= 500:
            return ErrorCategory.SERVICE_UNAVAILABLE
        return ErrorCategory.UNKNOWN

    return ErrorCategory.UNKNOWN


def describe_error(error: BaseException) -> str:
    """Convert an error into the string shown in place of a list or detail."""
    message = str(error)
    return message or error.__class__.__name__
