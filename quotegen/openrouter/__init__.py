"""
OpenRouter client package.

Provides a resilient HTTP client for the OpenRouter API with:
- Retry with exponential backoff
- Rate limit handling
- Typed error classification
"""

from .client import OpenRouterClient
from .config import DEFAULT_BASE_URL, OpenRouterConfig, RetryConfig, TimeoutConfig
from .exceptions import (
    ConfigurationError,
    ErrorKind,
    FetchCancelledError,
    HTTPError,
    InvalidRequestError,
    OpenRouterConnectionError,
    OpenRouterTimeoutError,
    QuoteClientError,
    RateLimitError,
    ServerError,
    TransportError,
    error_from_completion_body,
    http_error_from_response,
    http_error_from_status,
    is_retryable_error,
)
from .retry import RetryableOperation, calculate_delay

__all__ = [
    # Client
    "OpenRouterClient",
    # Config
    "DEFAULT_BASE_URL",
    "OpenRouterConfig",
    "RetryConfig",
    "TimeoutConfig",
    # Retry
    "calculate_delay",
    "RetryableOperation",
    # Exceptions
    "QuoteClientError",
    "ErrorKind",
    "ConfigurationError",
    "HTTPError",
    "RateLimitError",
    "ServerError",
    "InvalidRequestError",
    "TransportError",
    "OpenRouterConnectionError",
    "OpenRouterTimeoutError",
    "FetchCancelledError",
    "error_from_completion_body",
    "http_error_from_response",
    "http_error_from_status",
    "is_retryable_error",
]
