"""Unity Qdrant Indexer configuration.

Typed configuration for the artifact generators and the Gemini advisor. All
settings use Pydantic v2 models so they are validated at construction time
and every edit produces a fresh, fully validated record.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


API_KEY_ENV = "API_KEY"

DEFAULT_SERVICE_URL = "http://localhost:6333"
DEFAULT_COLLECTION_NAME = "unity_code_graph"
DEFAULT_EMBEDDING_MODEL = "text-embedding-004"
DEFAULT_CHUNK_SIZE = 1000

ADVISOR_MODEL = "gemini-2.5-flash"
GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"

EMBEDDING_MODELS: dict[str, str] = {
    "text-embedding-004": "text-embedding-004 (Recommended)",
    "embedding-001": "embedding-001 (Legacy)",
}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class UnityIndexerError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(UnityIndexerError):
    """Raised when the tool is misconfigured, before any I/O happens."""


class MissingCredentialError(ConfigurationError):
    """Raised when the advisor is invoked without an API key."""

    def __init__(self, env_var: str = API_KEY_ENV) -> None:
        self.env_var = env_var
        super().__init__(f"API Key not found in environment (set {env_var})")


class UnknownFieldError(ConfigurationError):
    """Raised when a partial update names a field GeneratorConfig does not have."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(f"Unknown configuration field(s): {', '.join(fields)}")


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class DistanceMetric(str, Enum):
    """Vector similarity functions, valued with Qdrant's wire names."""

    COSINE = "Cosine"
    EUCLID = "Euclid"
    DOT = "Dot"

    @property
    def label(self) -> str:
        return _METRIC_LABELS[self]

    @classmethod
    def _missing_(cls, value: object) -> DistanceMetric | None:
        if not isinstance(value, str):
            return None
        wanted = value.strip().lower()
        for member in cls:
            if wanted in (member.value.lower(), member.name.lower(), member.label.lower()):
                return member
        return None


_METRIC_LABELS: dict[DistanceMetric, str] = {
    DistanceMetric.COSINE: "Cosine",
    DistanceMetric.EUCLID: "Euclidean",
    DistanceMetric.DOT: "Dot Product",
}


class GeneratorConfig(BaseModel):
    """Everything the script and manifest generators read.

    Instances are never mutated: :meth:`apply_update` returns a new validated
    record.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    service_url: str = Field(default=DEFAULT_SERVICE_URL, description="Qdrant base URL")
    collection_name: str = Field(default=DEFAULT_COLLECTION_NAME)
    embedding_model: str = Field(default=DEFAULT_EMBEDDING_MODEL)
    distance_metric: DistanceMetric = Field(default=DistanceMetric.COSINE)
    chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE,
        gt=0,
        description="Processing chunk size in characters (emitted, not used)",
    )
    api_key: str = Field(default="", description="Gemini key baked into the Unity script")

    @field_validator("service_url", "collection_name", "embedding_model", "api_key", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, str):
            # Artifacts are written as UTF-8, so lone surrogates cannot pass.
            try:
                value.encode("utf-8")
            except UnicodeEncodeError as exc:
                raise ValueError(f"not encodable as UTF-8 at position {exc.start}") from exc
        return value

    @field_validator("distance_metric", mode="before")
    @classmethod
    def _coerce_metric(cls, value: Any) -> Any:
        # Accept labels such as "Euclidean" as well as Qdrant's "Euclid".
        if isinstance(value, str):
            return DistanceMetric(value)
        return value

    def apply_update(self, changes: Mapping[str, Any]) -> GeneratorConfig:
        """Return a copy with *changes* applied and re-validated.

        Raises:
            UnknownFieldError: if any key is not a ``GeneratorConfig`` field.
            pydantic.ValidationError: if a value cannot be coerced.
        """
        unknown = sorted(set(changes) - set(type(self).model_fields))
        if unknown:
            raise UnknownFieldError(unknown)
        return type(self).model_validate({**self.model_dump(), **changes})


class AdvisorSettings(BaseModel):
    """Settings for the Gemini schema advisor."""

    api_key: str | None = Field(default=None)
    model: str = Field(default=ADVISOR_MODEL)
    base_url: str = Field(default=GEMINI_API_BASE)

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls) -> AdvisorSettings:
        """Build settings from the environment.

        Only ``API_KEY`` is recognised; everything else is fixed.
        """
        return cls(api_key=os.environ.get(API_KEY_ENV) or None)
