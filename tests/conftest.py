"""Shared pytest fixtures for the Unity Qdrant Indexer test suite.

Provides reusable fixtures for:
- Generator configurations (defaults and a fully customised one)
- Realistic Gemini ``generateContent`` responses
- A patched ``httpx.AsyncClient`` for advisor calls
- A clean environment without the advisor credential
"""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from unity_indexer.config import AdvisorSettings, DistanceMetric, GeneratorConfig


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def no_api_key_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make sure no real credential leaks into a test."""
    monkeypatch.delenv("API_KEY", raising=False)


# ---------------------------------------------------------------------------
# Configurations
# ---------------------------------------------------------------------------


@pytest.fixture
def default_config() -> GeneratorConfig:
    """A GeneratorConfig with every default."""
    return GeneratorConfig()


@pytest.fixture
def custom_config() -> GeneratorConfig:
    """A GeneratorConfig with every field changed from its default."""
    return GeneratorConfig(
        service_url="http://qdrant.internal:7000",
        collection_name="rpg_symbols",
        embedding_model="embedding-001",
        distance_metric=DistanceMetric.DOT,
        chunk_size=2048,
        api_key="AIza-test-key",
    )


@pytest.fixture
def advisor_settings() -> AdvisorSettings:
    """Advisor settings carrying a fake credential."""
    return AdvisorSettings(api_key="AIza-test-key")


# ---------------------------------------------------------------------------
# Mock Gemini
# ---------------------------------------------------------------------------

SAMPLE_SUGGESTIONS: list[dict[str, str]] = [
    {
        "title": "Index an 'asset_type' payload field",
        "reasoning": "Filtering Script vs Documentation points keeps code searches free of prose.",
    },
    {
        "title": "Store method signatures",
        "reasoning": "A 'method_signature' keyword field enables exact lookups next to semantic search.",
    },
    {
        "title": "Add a payload index on 'name'",
        "reasoning": "Class-name filters become constant time for large RPG codebases.",
    },
]


def make_gemini_response(body: Any) -> dict[str, Any]:
    """Build a realistic ``generateContent`` response whose text is *body*.

    Dicts and lists are JSON-encoded; strings are used as-is.
    """
    text = body if isinstance(body, str) else json.dumps(body)
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": text}]},
                "finishReason": "STOP",
                "index": 0,
            }
        ],
        "usageMetadata": {"promptTokenCount": 180, "candidatesTokenCount": 150},
        "modelVersion": "gemini-2.5-flash",
    }


def make_async_client(
    response_json: Any = None,
    side_effect: BaseException | None = None,
) -> AsyncMock:
    """Return an ``AsyncMock`` standing in for ``httpx.AsyncClient()``."""
    mock_client = AsyncMock()
    if side_effect is not None:
        mock_client.post = AsyncMock(side_effect=side_effect)
    else:
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.json.return_value = response_json
        mock_response.raise_for_status = MagicMock()
        mock_client.post = AsyncMock(return_value=mock_response)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


@pytest.fixture
def sample_suggestions() -> list[dict[str, str]]:
    return [dict(item) for item in SAMPLE_SUGGESTIONS]


@pytest.fixture
def mock_gemini(sample_suggestions):
    """Patch httpx.AsyncClient so advisor calls get three suggestions back.

    Usage:
        async def test_something(mock_gemini):
            with mock_gemini as client_cls:
                ...
    """
    mock_client = make_async_client(make_gemini_response({"suggestions": sample_suggestions}))
    return patch("httpx.AsyncClient", return_value=mock_client)


@pytest.fixture
def gemini_response():
    """Factory fixture: ``gemini_response(body)`` -> generateContent JSON."""
    return make_gemini_response


@pytest.fixture
def async_client():
    """Factory fixture: ``async_client(response_json=..., side_effect=...)``."""
    return make_async_client
