"""Resilient OpenRouter HTTP client."""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from ..metrics import QuoteMetrics, get_metrics
from ..quotes import Quote, build_messages, extract_content, split_author
from ..tags import get_tag_source
from .config import OpenRouterConfig
from .exceptions import (
    FetchCancelledError,
    OpenRouterConnectionError,
    OpenRouterTimeoutError,
    TransportError,
    error_from_completion_body,
    http_error_from_response,
)
from .retry import RetryableOperation

logger = logging.getLogger(__name__)

COMPLETIONS_PATH = "/chat/completions"


class OpenRouterClient:
    """
    HTTP client for the OpenRouter chat completions API.

    Features:
    - Bounded retry with exponential backoff on 429, 5xx and network errors
    - Typed errors (HTTPError, TransportError, FetchCancelledError)
    - One metrics report per logical fetch
    - Injectable transport for testing

    The client keeps no per-call state, so one instance can serve many
    concurrent tasks.
    """

    def __init__(
        self,
        config: OpenRouterConfig,
        metrics: Optional[QuoteMetrics] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.metrics = metrics if metrics is not None else get_metrics()

        self.http_client = httpx.AsyncClient(
            base_url=config.base_url,
            headers={
                "Authorization": f"Bearer {config.api_key}",
                "Content-Type": "application/json",
                "HTTP-Referer": "https://quotegen.local",
                "X-Title": "Quotegen",
            },
            timeout=httpx.Timeout(
                config.timeout.read_timeout, connect=config.timeout.connect_timeout
            ),
            transport=transport,
        )

    @property
    def api_key(self) -> str:
        return self.config.api_key

    @property
    def model(self) -> str:
        return self.config.model

    @property
    def base_url(self) -> str:
        return self.config.base_url

    async def __aenter__(self) -> "OpenRouterClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        if not self.http_client.is_closed:
            await self.http_client.aclose()

    async def complete(
        self,
        messages: List[Dict[str, str]],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs,
    ) -> Dict[str, Any]:
        """
        Send a single chat completion request.

        Args:
            messages: List of message dicts with "role" and "content"
            temperature: Sampling temperature (0-2)
            max_tokens: Maximum tokens in response
            **kwargs: Additional parameters to pass to the API

        Returns:
            The decoded JSON response body

        Raises:
            HTTPError subclass for non-2xx responses
            TransportError subclass when no usable response arrived
            (a 2xx body without completion content raises one of the two)
        """
        payload = {
            "model": self.config.model,
            "messages": messages,
            "temperature": temperature
            if temperature is not None
            else self.config.temperature,
            "max_tokens": max_tokens
            if max_tokens is not None
            else self.config.max_tokens,
            **kwargs,
        }

        if self.config.log_requests:
            logger.info(
                f"OpenRouter request: model={self.config.model}, messages={len(messages)}"
            )

        try:
            response = await self.http_client.post(COMPLETIONS_PATH, json=payload)
        except httpx.TimeoutException:
            raise OpenRouterTimeoutError(self.config.timeout.read_timeout)
        except httpx.TransportError as e:
            raise OpenRouterConnectionError(f"Connection failed: {e}")

        if not response.is_success:
            raise http_error_from_response(response)

        try:
            data = response.json()
        except ValueError:
            raise TransportError("Malformed JSON in OpenRouter response")

        if not extract_content(data):
            raise error_from_completion_body(data)

        if self.config.log_responses:
            logger.info(
                f"OpenRouter response: model={self.config.model}, "
                f"length={len(extract_content(data))}"
            )

        return data

    async def execute_with_retry(
        self,
        messages: List[Dict[str, str]],
        deadline: Optional[float] = None,
        **kwargs,
    ) -> Dict[str, Any]:
        """
        Run complete() under the retry policy.

        Args:
            messages: Chat messages to send
            deadline: Optional budget in seconds for the whole sequence,
                backoff waits included

        Raises:
            The last error once retries are exhausted, the first
            non-retryable error, or FetchCancelledError when the deadline
            passes.
        """
        op = RetryableOperation(self.config.retry, f"complete_{self.config.model}")

        try:
            return await asyncio.wait_for(
                op.execute(self.complete, messages, **kwargs), timeout=deadline
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"OpenRouter call cancelled after {op.attempts} attempt(s): "
                f"deadline of {deadline}s exceeded"
            )
            raise FetchCancelledError(f"Deadline of {deadline}s exceeded")

    async def fetch_quote(self, tag: str, deadline: Optional[float] = None) -> Quote:
        """
        Fetch a quote for a tag.

        The tag is not validated here; preset and custom tags are both
        accepted and the quote's source records which one it was.
        """
        start_time = time.perf_counter()

        try:
            data = await self.execute_with_retry(build_messages(tag), deadline=deadline)
        except FetchCancelledError:
            raise
        except Exception:
            self._record_outcome(tag, success=False, latency=time.perf_counter() - start_time)
            raise

        latency = time.perf_counter() - start_time
        self._record_outcome(tag, success=True, latency=latency)

        text, author = split_author(extract_content(data))

        return Quote(
            tag=tag,
            text=text,
            author=author,
            source=get_tag_source(tag),
            model=(data.get("model") if isinstance(data, dict) else None) or self.config.model,
            latency_ms=int(latency * 1000),
            raw=data,
        )

    def _record_outcome(self, tag: str, success: bool, latency: float) -> None:
        self.metrics.record_latency(latency)
        self.metrics.set_openrouter_status(success)
        if success:
            self.metrics.record_quote_fetched(tag)
        else:
            self.metrics.record_quote_error()
