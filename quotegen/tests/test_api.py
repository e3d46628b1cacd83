"""Tests for the HTTP front end."""

import httpx
import pytest
from fastapi.testclient import TestClient

from quotegen.main import MAX_TAG_LENGTH, app, get_client
from quotegen.metrics import get_metrics
from quotegen.tags import VALID_TAGS

from .fixtures import sample


@pytest.fixture
def configured_env(clean_env):
    clean_env.setenv("OPENROUTER_API_KEY", "test-key")
    clean_env.setenv("OPENROUTER_MODEL", "test/model")
    return clean_env


@pytest.fixture
def use_upstream(make_client):
    """Route the quote endpoint through a scripted upstream."""
    def _use(steps):
        client, transport = make_client(steps)
        app.dependency_overrides[get_client] = lambda: client
        return transport

    yield _use
    app.dependency_overrides.clear()


@pytest.fixture
def test_client(configured_env, metrics):
    app.dependency_overrides[get_metrics] = lambda: metrics
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


class TestRootAndHealth:
    """Tests for service endpoints."""

    def test_root(self, test_client):
        response = test_client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_health(self, test_client):
        response = test_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_ready_when_configured(self, test_client):
        response = test_client.get("/health/ready")
        assert response.status_code == 200
        assert response.json()["checks"]["openrouter_configured"] is True
        assert response.json()["checks"]["openrouter_up"] is True

    def test_not_ready_after_failed_fetch(self, test_client, use_upstream):
        """A terminal upstream failure flips readiness until a fetch succeeds."""
        use_upstream([404])
        assert test_client.post("/api/v1/quote", json={"tag": "joy"}).status_code == 502

        response = test_client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["detail"]["checks"]["openrouter_up"] is False

    def test_ready_again_after_success(self, test_client, use_upstream):
        use_upstream([404])
        test_client.post("/api/v1/quote", json={"tag": "joy"})

        use_upstream([200])
        test_client.post("/api/v1/quote", json={"tag": "joy"})

        assert test_client.get("/health/ready").status_code == 200

    def test_not_ready_without_key(self, clean_env):
        with TestClient(app) as client:
            response = client.get("/health/ready")
        assert response.status_code == 503

    def test_request_id_header(self, test_client):
        response = test_client.get("/health")
        assert response.headers.get("x-request-id")

    def test_metrics_endpoint(self, test_client):
        response = test_client.get("/metrics")
        assert response.status_code == 200
        assert "quotes_fetched_total" in response.text
        assert "openrouter_up" in response.text


class TestTags:
    """Tests for the tag listing."""

    def test_list_tags(self, test_client):
        response = test_client.get("/api/v1/tags")
        assert response.status_code == 200
        assert response.json()["tags"] == list(VALID_TAGS)


class TestQuote:
    """Tests for quote generation."""

    def test_preset_tag(self, test_client, use_upstream, registry):
        transport = use_upstream([200])

        response = test_client.post("/api/v1/quote", json={"tag": "joy"})

        assert response.status_code == 200
        data = response.json()
        assert data["tag"] == "joy"
        assert data["source"] == "preset"
        assert data["author"] == "Mark Twain"
        assert data["latency_ms"] >= 0
        assert transport.attempts == 1
        assert sample(registry, "quotes_by_tag_total", {"tag": "joy"}) == 1

    def test_custom_tag(self, test_client, use_upstream):
        use_upstream([200])

        response = test_client.post("/api/v1/quote", json={"tag": "wanderlust"})

        assert response.status_code == 200
        assert response.json()["source"] == "custom"

    def test_empty_tag_rejected(self, test_client, use_upstream):
        transport = use_upstream([200])

        response = test_client.post("/api/v1/quote", json={"tag": ""})

        assert response.status_code == 422
        assert transport.attempts == 0

    def test_tag_length_limit(self, test_client, use_upstream):
        transport = use_upstream([200])

        too_long = test_client.post("/api/v1/quote", json={"tag": "x" * (MAX_TAG_LENGTH + 1)})
        at_limit = test_client.post("/api/v1/quote", json={"tag": "x" * MAX_TAG_LENGTH})

        assert MAX_TAG_LENGTH == 50
        assert too_long.status_code == 422
        assert at_limit.status_code == 200
        assert transport.attempts == 1

    def test_upstream_error_is_bad_gateway(self, test_client, use_upstream):
        use_upstream([404])

        response = test_client.post("/api/v1/quote", json={"tag": "joy"})

        assert response.status_code == 502
        assert response.json()["detail"] == "HTTP 404: Model not found"

    def test_transport_error_is_bad_gateway(self, test_client, use_upstream):
        use_upstream([httpx.ConnectError("refused")])

        response = test_client.post("/api/v1/quote", json={"tag": "joy"})

        assert response.status_code == 502

    def test_unconfigured_returns_503(self, clean_env):
        with TestClient(app) as client:
            response = client.post("/api/v1/quote", json={"tag": "joy"})
        assert response.status_code == 503
