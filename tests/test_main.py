"""Integration tests for the main application."""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock

from src.main import app
from src.bfhl.ai import OpenRouterAnswerProvider
from src.dependencies import get_answer_provider

IDENTITY = "test@example.com"

# The lifespan does not run without a context manager; set its state by hand
@pytest.fixture(scope="module", autouse=True)
def mock_lifespan():
    app.state.http_client = AsyncMock()
    yield
    if hasattr(app.state, "http_client"):
        del app.state.http_client

@pytest.fixture
def fake_provider():
    provider = AsyncMock()
    provider.ask.return_value = "Mumbai."
    app.dependency_overrides[get_answer_provider] = lambda: provider
    try:
        yield provider
    finally:
        del app.dependency_overrides[get_answer_provider]

client = TestClient(app)


def post_raw(content: str):
    return client.post("/bfhl", content=content, headers={"Content-Type": "application/json"})


def test_health_check():
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"is_success": True, "official_email": IDENTITY}

@pytest.mark.parametrize(
    "body, expected",
    [
        ({"fibonacci": 1}, [0]),
        ({"fibonacci": 5}, [0, 1, 1, 2, 3]),
        ({"prime": [1, 2, 3, 4, 5, 6, 7]}, [2, 3, 5, 7]),
        ({"lcm": [4, 6]}, 12),
        ({"hcf": [12, 18]}, 6),
    ],
)
def test_math_operations(body, expected):
    response = client.post("/bfhl", json=body)
    assert response.status_code == 200
    assert response.json() == {"is_success": True, "official_email": IDENTITY, "data": expected}

def test_ai_operation(fake_provider):
    """Test the AI answer is reduced to one clean word."""
    response = client.post("/bfhl", json={"AI": "What is the capital city of Maharashtra?"})
    assert response.status_code == 200
    assert response.json()["data"] == "Mumbai"
    fake_provider.ask.assert_awaited_once()

def test_ai_missing_key_returns_400():
    """Test ConfigError collapses to 400 without an outbound call."""
    http_client = AsyncMock()
    app.dependency_overrides[get_answer_provider] = lambda: OpenRouterAnswerProvider(
        client=http_client, api_key=""
    )
    try:
        response = client.post("/bfhl", json={"AI": "Capital of France?"})
        assert response.status_code == 400
        assert response.json() == {
            "is_success": False,
            "official_email": IDENTITY,
            "message": "API key missing",
        }
        http_client.post.assert_not_called()
    finally:
        del app.dependency_overrides[get_answer_provider]

def test_ai_upstream_failure_returns_400():
    """Test upstream failures use the same 400 envelope."""
    upstream = MagicMock()
    upstream.status_code = 429
    upstream.json.return_value = {"error": {"message": "Rate limit exceeded"}}
    http_client = AsyncMock()
    http_client.post.return_value = upstream
    app.dependency_overrides[get_answer_provider] = lambda: OpenRouterAnswerProvider(
        client=http_client, api_key="key"
    )
    try:
        response = client.post("/bfhl", json={"AI": "Capital of France?"})
        assert response.status_code == 400
        assert response.json()["message"] == "Rate limit exceeded"
    finally:
        del app.dependency_overrides[get_answer_provider]

@pytest.mark.parametrize("body", [{}, {"fibonacci": 5, "hcf": [2, 4]}])
def test_key_count_rejected(body):
    response = client.post("/bfhl", json=body)
    assert response.status_code == 400
    assert response.json()["message"] == "Request must contain exactly one key"

def test_proto_key_rejected(fake_provider):
    response = post_raw('{"__proto__": {"isAdmin": true}}')
    assert response.status_code == 400
    assert response.json()["is_success"] is False
    assert "__proto__" in response.json()["message"]
    fake_provider.ask.assert_not_called()

def test_unknown_key_rejected():
    response = client.post("/bfhl", json={"factorial": 5})
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid key: factorial"

@pytest.mark.parametrize("content", ["[1, 2, 3]", "null", "42", '"fibonacci"'])
def test_non_object_body_rejected(content):
    response = post_raw(content)
    assert response.status_code == 400
    assert response.json()["message"] == "Request body must be a JSON object"

def test_invalid_input_rejected():
    response = client.post("/bfhl", json={"fibonacci": -1})
    assert response.status_code == 400
    assert response.json() == {
        "is_success": False,
        "official_email": IDENTITY,
        "message": "Input must be a positive integer",
    }

def test_malformed_json():
    response = post_raw('{"fibonacci": ')
    assert response.status_code == 400
    assert response.json() == {
        "is_success": False,
        "official_email": IDENTITY,
        "message": "Invalid JSON in request body",
    }

def test_unknown_route():
    response = client.get("/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {
        "is_success": False,
        "official_email": IDENTITY,
        "message": "Route not found",
    }

def test_wrong_method():
    response = client.get("/bfhl")
    assert response.status_code == 405
    assert response.json()["message"] == "Method not allowed"

def test_body_too_large():
    """Test the size cap rejects oversized bodies before dispatch."""
    response = post_raw('{"AI": "' + "x" * 20000 + '"}')
    assert response.status_code == 413
    assert response.json()["message"] == "Request body too large"

def test_cors_headers():
    response = client.get("/health", headers={"Origin": "http://example.org"})
    assert response.headers["access-control-allow-origin"] == "*"

def test_openapi_schema_generated():
    """Test that OpenAPI schema is generated successfully."""
    response = client.get("/openapi.json")
    assert response.status_code == 200
    assert "/bfhl" in response.json()["paths"]
