"""Unity editor script generation.

Renders ``QdrantIndexerWindow.cs.j2`` into a single C# source file: an
``EditorWindow`` that creates the Qdrant collection, scans the project's
classes and text/markdown assets, embeds each item with Gemini and upserts
it as a point.  The generated file is output only; nothing here executes it.
"""

from __future__ import annotations

from typing import Any

from unity_indexer.config import GEMINI_API_BASE, GeneratorConfig

from .templates import TemplateRenderer


SCRIPT_FILENAME = "QdrantIndexerWindow.cs"

# Gemini text embeddings are 768-dimensional.
VECTOR_SIZE = 768
MAX_CONTENT_LENGTH = 8000

RESERVED_NAMESPACE = "Unity"
RESERVED_PACKAGE_PATH = "Packages/"


class UnityScriptGenerator:
    """Generates the Unity ``EditorWindow`` indexer script."""

    template_name = "QdrantIndexerWindow.cs.j2"

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or TemplateRenderer()

    def build_context(self, config: GeneratorConfig) -> dict[str, Any]:
        """Flatten *config* into the template context.

        Only plain scalars go into the context; the distance metric is passed
        as its Qdrant wire value.
        """
        return {
            "filename": SCRIPT_FILENAME,
            "service_url": config.service_url,
            "collection_name": config.collection_name,
            "embedding_model": config.embedding_model,
            "distance_metric": config.distance_metric.value,
            "chunk_size": config.chunk_size,
            "api_key": config.api_key,
            "embed_api_base": GEMINI_API_BASE,
            "vector_size": VECTOR_SIZE,
            "max_content_length": MAX_CONTENT_LENGTH,
            "reserved_namespace": RESERVED_NAMESPACE,
            "reserved_package_path": RESERVED_PACKAGE_PATH,
        }

    def generate(self, config: GeneratorConfig) -> str:
        return self.renderer.render(self.template_name, self.build_context(config))


def generate_unity_script(config: GeneratorConfig) -> str:
    """Module-level shortcut for :meth:`UnityScriptGenerator.generate`."""
    return UnityScriptGenerator().generate(config)
