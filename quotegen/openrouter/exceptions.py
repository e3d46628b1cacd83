"""Error taxonomy for the OpenRouter client."""

from enum import Enum
from typing import Any, Optional

import httpx


class ErrorKind(Enum):
    """Closed set of failure kinds the client can surface."""

    CONFIGURATION = "configuration"
    HTTP = "http"
    TRANSPORT = "transport"
    CANCELLED = "cancelled"


class QuoteClientError(Exception):
    """Base exception for quote client errors."""

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(QuoteClientError):
    """Raised when a required setting (API key, model) is missing."""

    kind = ErrorKind.CONFIGURATION


class HTTPError(QuoteClientError):
    """Raised when OpenRouter answers with a non-2xx status."""

    kind = ErrorKind.HTTP

    def __init__(self, status_code: int, message: str = ""):
        super().__init__(message)
        self.status_code = status_code

    def __str__(self) -> str:
        return f"HTTP {self.status_code}: {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code}, message={self.message!r})"


class RateLimitError(HTTPError):
    """Raised on 429 responses."""

    def __init__(self, message: str = "Too Many Requests", retry_after: Optional[int] = None):
        super().__init__(429, message)
        self.retry_after = retry_after


class ServerError(HTTPError):
    """Raised for 5xx server errors."""

    def __init__(self, status_code: int = 500, message: str = "Internal Server Error"):
        super().__init__(status_code, message)


class InvalidRequestError(HTTPError):
    """Raised for 4xx client errors (except rate limit)."""


class TransportError(QuoteClientError):
    """Raised when no response was obtained (network, DNS, timeout)."""

    kind = ErrorKind.TRANSPORT


class OpenRouterConnectionError(TransportError):
    """Raised for network connectivity issues."""

    def __init__(self, message: str = "Failed to connect to OpenRouter"):
        super().__init__(message)


class OpenRouterTimeoutError(TransportError):
    """Raised when a request times out."""

    def __init__(self, timeout: Optional[float] = None):
        if timeout is None:
            message = "Request timed out"
        else:
            message = f"Request timed out after {timeout} seconds"
        super().__init__(message)
        self.timeout = timeout


class FetchCancelledError(QuoteClientError):
    """Raised when the caller's deadline aborts a fetch."""

    kind = ErrorKind.CANCELLED

    def __init__(self, message: str = "Fetch cancelled"):
        super().__init__(message)


def _retryable_http(err: HTTPError) -> bool:
    return err.status_code == 429 or err.status_code >= 500


_RETRY_POLICY = {
    ErrorKind.CONFIGURATION: lambda err: False,
    ErrorKind.HTTP: _retryable_http,
    ErrorKind.TRANSPORT: lambda err: True,
    ErrorKind.CANCELLED: lambda err: False,
}


def is_retryable_error(err: BaseException) -> bool:
    """
    Decide whether a failure is worth another attempt.

    HTTP errors retry on 429 and any 5xx; transport failures always retry.
    Everything else, including exceptions from outside this taxonomy, is
    terminal.
    """
    policy = _RETRY_POLICY.get(getattr(err, "kind", None))
    if policy is None or not isinstance(err, QuoteClientError):
        return False
    return policy(err)


def _parse_retry_after(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return max(0, int(value.strip()))
    except ValueError:
        # HTTP-date form is not honoured; fall back to computed backoff
        return None


def _error_message(response: httpx.Response) -> str:
    try:
        error_data = response.json()
    except ValueError:
        error_data = None

    if isinstance(error_data, dict):
        error = error_data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        if error_data.get("message"):
            return str(error_data["message"])

    text = response.text.strip()
    if text:
        return text
    return response.reason_phrase or ""


def http_error_from_status(
    status: int, message: str = "", retry_after: Optional[int] = None
) -> HTTPError:
    """Build the HTTPError subclass matching a status code."""
    if status == 429:
        return RateLimitError(message, retry_after=retry_after)
    if status >= 500:
        return ServerError(status, message)
    if status >= 400:
        return InvalidRequestError(status, message)
    return HTTPError(status, message)


def http_error_from_response(response: httpx.Response) -> HTTPError:
    """Convert a non-2xx response into the matching HTTPError subclass."""
    return http_error_from_status(
        response.status_code,
        _error_message(response),
        retry_after=_parse_retry_after(response.headers.get("Retry-After")),
    )


def error_from_completion_body(data: Any) -> QuoteClientError:
    """
    Explain a 2xx body that carries no completion.

    OpenRouter reports upstream provider failures as a 200 with an
    ``{"error": {"code": ..., "message": ...}}`` body. A usable code becomes
    the matching HTTPError; anything else is a TransportError.
    """
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict):
        message = str(error.get("message") or "")
        try:
            status = int(error.get("code"))
        except (TypeError, ValueError):
            status = None
        if status is not None and 400 <= status <= 599:
            return http_error_from_status(status, message)
        if message:
            return TransportError(f"OpenRouter error in response body: {message}")

    return TransportError("OpenRouter response has no completion content")
