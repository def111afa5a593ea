"""Artifact generation orchestrator.

Takes a ``GeneratorConfig`` and produces both downloadable artifacts: the
Unity indexer script and the Qdrant Docker Compose manifest.  Generation is
synchronous and pure, so the same configuration always yields byte-identical
artifacts.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from unity_indexer.config import GeneratorConfig

from .compose_gen import COMPOSE_FILENAME, ComposeGenerator, extract_port
from .script_gen import SCRIPT_FILENAME, UnityScriptGenerator
from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class ArtifactKind(str, Enum):
    """The two artifacts the tool produces."""

    SCRIPT = "script"
    MANIFEST = "manifest"


ARTIFACT_FILENAMES: dict[ArtifactKind, str] = {
    ArtifactKind.SCRIPT: SCRIPT_FILENAME,
    ArtifactKind.MANIFEST: COMPOSE_FILENAME,
}


class GeneratedArtifact(BaseModel):
    """A rendered text artifact and the fixed file name it downloads as."""

    model_config = ConfigDict(frozen=True)

    kind: ArtifactKind
    filename: str = Field(..., description="Fixed download file name")
    content: str = Field(default="", description="Exact generator output")

    def write_to(self, directory: str | Path) -> Path:
        """Write the content to ``<directory>/<filename>`` byte-for-byte.

        Returns:
            The path of the written file.
        """
        target = Path(directory) / self.filename
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(self.content.encode("utf-8"))
        return target


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ArtifactGenerator:
    """Builds every artifact from one configuration.

    Both sub-generators share a single ``TemplateRenderer`` so templates are
    loaded and cached once.
    """

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or TemplateRenderer()
        self.script_gen = UnityScriptGenerator(self.renderer)
        self.compose_gen = ComposeGenerator(self.renderer)

    def generate_script(self, config: GeneratorConfig) -> GeneratedArtifact:
        return GeneratedArtifact(
            kind=ArtifactKind.SCRIPT,
            filename=ARTIFACT_FILENAMES[ArtifactKind.SCRIPT],
            content=self.script_gen.generate(config),
        )

    def generate_manifest(self, config: GeneratorConfig) -> GeneratedArtifact:
        """Render the Compose manifest for the port in ``config.service_url``."""
        return GeneratedArtifact(
            kind=ArtifactKind.MANIFEST,
            filename=ARTIFACT_FILENAMES[ArtifactKind.MANIFEST],
            content=self.compose_gen.generate(extract_port(config.service_url)),
        )

    def generate(self, config: GeneratorConfig) -> dict[ArtifactKind, GeneratedArtifact]:
        """Generate all artifacts for *config*, keyed by kind."""
        return {
            ArtifactKind.SCRIPT: self.generate_script(config),
            ArtifactKind.MANIFEST: self.generate_manifest(config),
        }
