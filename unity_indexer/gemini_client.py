"""Async client for the Gemini schema advisor.

Wraps a single Gemini ``generateContent`` call that asks for Qdrant payload
schema and indexing optimizations for a Unity project.  The response is
requested as JSON and parsed into ``SuggestionRecord`` objects.

Typical usage::

    client = AdvisoryClient.from_env()
    suggestions = await client.analyze("A tactical RPG", "unity_code_graph")
    for s in suggestions:
        print(s.title, s.reasoning)
"""

from __future__ import annotations

import json
from typing import Any

import httpx
from pydantic import BaseModel, Field

from unity_indexer.config import AdvisorSettings, MissingCredentialError
from unity_indexer.utils import print_warning


# Fixed per-request timeout. Gemini JSON answers can take a while.
REQUEST_TIMEOUT = 60.0

ERROR_TITLE = "Error"
ERROR_REASONING = "Could not retrieve suggestions. Ensure API Key is valid."


class SuggestionRecord(BaseModel):
    """One optimization suggested by the advisor."""

    title: str = Field(default="", description="Short name of the suggestion")
    reasoning: str = Field(default="", description="Why the suggestion helps")


class AdvisoryRequest(BaseModel):
    """Input to a single advisor call. Not retained afterwards."""

    project_description: str
    collection_name: str
    existing_schema: str = ""


def fallback_suggestions() -> list[SuggestionRecord]:
    """The single placeholder entry returned on any advisor failure."""
    return [SuggestionRecord(title=ERROR_TITLE, reasoning=ERROR_REASONING)]


def build_prompt(request: AdvisoryRequest) -> str:
    """Build the natural-language prompt for *request*.

    The existing-schema lines are only included when a schema was given.
    """
    lines = [
        "You are an expert in Vector Database schemas and Unity Game Development.",
        "",
        "The user is building a semantic search tool for their Unity project "
        "using Qdrant and Gemini Embeddings.",
        "",
        f'Project Description: "{request.project_description}"',
        f'Current Qdrant Collection Name: "{request.collection_name}"',
    ]
    if request.existing_schema:
        lines.append(f'Existing Schema/Payload Structure: "{request.existing_schema}"')

    lines += [
        "",
        "Suggest exactly 3 optimizations for the Qdrant payload schema or indexing strategy.",
        "For example, should they filter by 'AssetType' (Script vs Markdown)? "
        "Should they include 'MethodSignature' in the payload?",
    ]
    if request.existing_schema:
        lines.append("Analyze the provided schema for potential improvements.")

    lines += [
        "",
        "Format the response as a JSON object with a 'suggestions' array, "
        "where each item has a 'title' and 'reasoning'.",
    ]
    return "\n".join(lines)


def parse_suggestions(data: Any) -> list[SuggestionRecord]:
    """Turn a decoded advisor payload into suggestion records.

    The payload is untrusted: non-object entries are dropped and missing
    fields default to empty strings.  A payload without a ``suggestions``
    list yields an empty list.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

    raw = data.get("suggestions")
    if not isinstance(raw, list):
        return []

    records: list[SuggestionRecord] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        records.append(
            SuggestionRecord(
                title=_as_text(item.get("title")),
                reasoning=_as_text(item.get("reasoning")),
            )
        )
    return records


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


class AdvisoryClient:
    """Async client for the Gemini ``generateContent`` endpoint.

    One :meth:`analyze` call issues exactly one HTTP request.  Nothing is
    cached and failed requests are not retried.
    """

    def __init__(self, settings: AdvisorSettings | None = None) -> None:
        self.settings = settings or AdvisorSettings()

    @classmethod
    def from_env(cls) -> AdvisoryClient:
        return cls(AdvisorSettings.from_env())

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our base URL and timeout."""
        return httpx.AsyncClient(
            base_url=self.settings.base_url.rstrip("/"),
            timeout=httpx.Timeout(REQUEST_TIMEOUT, connect=10.0),
        )

    @property
    def endpoint(self) -> str:
        return f"/models/{self.settings.model}:generateContent"

    def _build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"responseMimeType": "application/json"},
        }

    @staticmethod
    def _extract_text(data: dict) -> str:
        """Pull the generated text out of a ``generateContent`` response.

        Text lives in ``candidates[0].content.parts[*].text``; multiple parts
        are concatenated.
        """
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts if isinstance(part, dict))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def analyze(
        self,
        project_description: str,
        collection_name: str,
        existing_schema: str = "",
    ) -> list[SuggestionRecord]:
        """Ask Gemini for three schema/indexing optimizations.

        Args:
            project_description: Free-text description of the Unity project.
            collection_name: Current Qdrant collection name.
            existing_schema: Optional payload schema to critique.

        Returns:
            The parsed suggestions, ``[]`` when the response carries none, or
            a single ``"Error"`` entry when the request fails in any way.

        Raises:
            MissingCredentialError: if no API key is configured.  Raised
                before any network activity.
        """
        if not self.settings.has_credential:
            raise MissingCredentialError()

        request = AdvisoryRequest(
            project_description=project_description,
            collection_name=collection_name,
            existing_schema=existing_schema or "",
        )
        payload = self._build_payload(build_prompt(request))

        try:
            async with self._client() as client:
                response = await client.post(
                    self.endpoint,
                    json=payload,
                    headers={"x-goog-api-key": self.settings.api_key or ""},
                )
                response.raise_for_status()
                text = self._extract_text(response.json())
                return parse_suggestions(json.loads(text or '{"suggestions": []}'))
        except httpx.ConnectError:
            print_warning(f"Gemini analysis failed: cannot connect to {self.settings.base_url}")
        except httpx.TimeoutException:
            print_warning(f"Gemini analysis failed: request timed out after {REQUEST_TIMEOUT:.0f}s")
        except httpx.HTTPStatusError as exc:
            print_warning(
                f"Gemini analysis failed: HTTP {exc.response.status_code}: {exc.response.text[:500]}"
            )
        except Exception as exc:  # noqa: BLE001
            print_warning(f"Gemini analysis failed: {exc}")
        return fallback_suggestions()
