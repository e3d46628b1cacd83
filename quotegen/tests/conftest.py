"""Pytest configuration and shared fixtures."""

import json
from typing import Any, Dict, List, Optional, Union

import httpx
import pytest
from prometheus_client import CollectorRegistry

from quotegen.metrics import QuoteMetrics
from quotegen.openrouter import OpenRouterClient, OpenRouterConfig, RetryConfig
from quotegen.settings import get_settings

from .fixtures.responses import SAMPLE_COMPLETION, SAMPLE_ERROR_BODIES

OPENROUTER_ENV_VARS = (
    "OPENROUTER_API_KEY",
    "OPENROUTER_MODEL",
    "OPENROUTER_BASE_URL",
    "OPENROUTER_TIMEOUT",
    "OPENROUTER_MAX_ATTEMPTS",
)

# A scripted step is a status code, a (status, body) pair, or an exception
Step = Union[int, tuple, Exception]


class ScriptedTransport(httpx.MockTransport):
    """
    Mock transport replaying a fixed script of responses.

    The last step repeats once the script runs out. Every request is kept
    in ``requests`` so tests can count attempts and inspect payloads.
    """

    def __init__(self, steps: List[Step]):
        self.steps = list(steps)
        self.requests: List[httpx.Request] = []
        super().__init__(self._handle)

    @property
    def attempts(self) -> int:
        return len(self.requests)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests), len(self.steps)) - 1
        step = self.steps[index]

        if isinstance(step, Exception):
            raise step

        if isinstance(step, tuple):
            status, body = step
        else:
            status = step
            body = SAMPLE_COMPLETION if status == 200 else SAMPLE_ERROR_BODIES.get(status, {})

        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body)
        return httpx.Response(status, content=body)

    def last_payload(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def registry():
    """Fresh Prometheus registry per test."""
    return CollectorRegistry()


@pytest.fixture
def metrics(registry):
    """Metrics recorder bound to the per-test registry."""
    return QuoteMetrics(registry)


@pytest.fixture
def retry_config():
    """Retry config without real waiting."""
    return RetryConfig(max_attempts=3, initial_delay=0.0, jitter=False)


@pytest.fixture
def config(retry_config):
    """Client config pointing at a test endpoint."""
    return OpenRouterConfig(
        api_key="test-key",
        model="test-model",
        base_url="https://test.example.com",
        retry=retry_config,
        log_requests=False,
    )


@pytest.fixture
def make_client(config, metrics):
    """Factory building a client over a scripted transport."""
    def _make(steps: List[Step], client_config: Optional[OpenRouterConfig] = None):
        transport = ScriptedTransport(steps)
        client = OpenRouterClient(client_config or config, metrics=metrics, transport=transport)
        return client, transport

    return _make


@pytest.fixture
def clean_env(monkeypatch):
    """Clear OpenRouter environment variables and the settings cache."""
    for name in OPENROUTER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()

