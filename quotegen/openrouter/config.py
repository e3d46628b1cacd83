"""Configuration for OpenRouter client."""

from dataclasses import dataclass, field

from .exceptions import ConfigurationError

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior."""

    max_attempts: int = 3  # Total attempts, first one included
    initial_delay: float = 1.0  # Delay before the second attempt, in seconds
    max_delay: float = 30.0  # Maximum delay in seconds
    exponential_base: float = 2.0  # Exponential backoff base
    jitter: bool = True  # Add random jitter to delays

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ConfigurationError("max_attempts must be at least 1")
        if self.initial_delay < 0 or self.max_delay < 0:
            raise ConfigurationError("retry delays must not be negative")


@dataclass(frozen=True)
class TimeoutConfig:
    """Configuration for request timeouts."""

    connect_timeout: float = 10.0  # Time to establish connection
    read_timeout: float = 60.0  # Time to receive response


@dataclass(frozen=True)
class OpenRouterConfig:
    """Complete configuration for OpenRouter client."""

    api_key: str
    model: str
    base_url: str = DEFAULT_BASE_URL

    retry: RetryConfig = field(default_factory=RetryConfig)
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)

    # Request defaults
    temperature: float = 0.8
    max_tokens: int = 256

    # Logging
    log_requests: bool = True
    log_responses: bool = False  # Can be verbose

    def __post_init__(self):
        if not self.api_key:
            raise ConfigurationError("OPENROUTER_API_KEY is required")
        if not self.model:
            raise ConfigurationError("OPENROUTER_MODEL is required")
        if not self.base_url:
            object.__setattr__(self, "base_url", DEFAULT_BASE_URL)
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
