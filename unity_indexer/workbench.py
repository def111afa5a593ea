"""Unity Qdrant Indexer workbench.

Holds the in-memory state a front end needs: the current generator
configuration, the artifacts derived from it, the selected artifact, and the
latest advisor suggestions.  Every committed configuration change regenerates
both artifacts synchronously, so the artifact on display always matches the
most recent configuration.

Usage::

    python -m unity_indexer.workbench generate --url http://localhost:7000 -o ./out
    python -m unity_indexer.workbench advise "A tactical RPG with procedural generation"
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from rich.markup import escape

from unity_indexer.config import (
    EMBEDDING_MODELS,
    ConfigurationError,
    GeneratorConfig,
    MissingCredentialError,
)
from unity_indexer.gemini_client import AdvisoryClient, SuggestionRecord
from unity_indexer.scaffolder import ArtifactGenerator, ArtifactKind, GeneratedArtifact
from unity_indexer.utils import (
    console,
    print_error,
    print_success,
    print_suggestions,
    print_summary_table,
    print_warning,
)


class Workbench:
    """Configuration state plus the actions wired to it.

    The workbench owns exactly one ``GeneratorConfig`` and one suggestions
    list.  Neither the generators nor the advisory client keep state between
    calls.
    """

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        client: AdvisoryClient | None = None,
        generator: ArtifactGenerator | None = None,
    ) -> None:
        self.generator = generator or ArtifactGenerator()
        self.client = client or AdvisoryClient.from_env()
        self.active: ArtifactKind = ArtifactKind.SCRIPT
        self.suggestions: list[SuggestionRecord] = []
        self.loading = False
        self._config = config or GeneratorConfig()
        self._artifacts = self.generator.generate(self._config)

    # -- Configuration -----------------------------------------------------

    @property
    def config(self) -> GeneratorConfig:
        return self._config

    def update(self, **changes: Any) -> GeneratorConfig:
        """Apply a validated partial update and regenerate every artifact.

        Raises:
            UnknownFieldError: for keys that are not configuration fields.
            pydantic.ValidationError: for values that cannot be coerced.

        On error nothing changes.
        """
        new_config = self._config.apply_update(changes)
        artifacts = self.generator.generate(new_config)
        self._config = new_config
        self._artifacts = artifacts
        return new_config

    # -- Artifacts ---------------------------------------------------------

    @property
    def script(self) -> GeneratedArtifact:
        return self._artifacts[ArtifactKind.SCRIPT]

    @property
    def manifest(self) -> GeneratedArtifact:
        return self._artifacts[ArtifactKind.MANIFEST]

    def artifact(self, kind: ArtifactKind | str | None = None) -> GeneratedArtifact:
        """Return the artifact of *kind*, or the selected one."""
        return self._artifacts[ArtifactKind(kind) if kind is not None else self.active]

    @property
    def current_artifact(self) -> GeneratedArtifact:
        return self.artifact()

    def select(self, kind: ArtifactKind | str) -> GeneratedArtifact:
        self.active = ArtifactKind(kind)
        return self.current_artifact

    def copy(self, sink: Callable[[str], object]) -> str:
        """Hand the current artifact's text to *sink* unchanged."""
        content = self.current_artifact.content
        sink(content)
        return content

    def download(
        self,
        directory: str | Path,
        kind: ArtifactKind | str | None = None,
    ) -> Path:
        """Write an artifact (the selected one by default) under *directory*."""
        return self.artifact(kind).write_to(directory)

    # -- Advisor -----------------------------------------------------------

    async def analyze(
        self,
        description: str,
        existing_schema: str = "",
    ) -> list[SuggestionRecord]:
        """Run the advisor for the current collection name.

        Blank descriptions and calls made while a request is pending are
        ignored.  The suggestions list is replaced, never merged.
        """
        if not description.strip() or self.loading:
            return self.suggestions

        self.loading = True
        try:
            self.suggestions = await self.client.analyze(
                description,
                self._config.collection_name,
                existing_schema,
            )
        except MissingCredentialError as exc:
            print_error(str(exc))
            self.suggestions = []
        finally:
            self.loading = False
        return self.suggestions


# ---------------------------------------------------------------------------
# Command-line driver
# ---------------------------------------------------------------------------


_ARG_FIELDS = {
    "url": "service_url",
    "collection": "collection_name",
    "model": "embedding_model",
    "metric": "distance_metric",
    "chunk_size": "chunk_size",
    "api_key": "api_key",
}


def _config_from_args(args: Any) -> GeneratorConfig:
    changes = {
        field: getattr(args, arg)
        for arg, field in _ARG_FIELDS.items()
        if getattr(args, arg) is not None
    }
    return GeneratorConfig().apply_update(changes)


def _run_generate(args: Any) -> int:
    workbench = Workbench(config=_config_from_args(args))
    kinds = list(ArtifactKind) if args.artifact == "all" else [ArtifactKind(args.artifact)]

    if args.stdout:
        for kind in kinds:
            workbench.select(kind)
            workbench.copy(sys.stdout.write)
        return 0

    config = workbench.config
    print_summary_table(
        {
            "Qdrant URL": config.service_url,
            "Collection": config.collection_name,
            "Embedding model": config.embedding_model,
            "Distance metric": config.distance_metric.label,
            "Chunk size": str(config.chunk_size),
            "API key": "set" if config.api_key else "not set",
        },
        title="Generator Configuration",
    )
    if config.embedding_model not in EMBEDDING_MODELS:
        print_warning(f"Unknown embedding model '{config.embedding_model}'; using it as given.")

    for kind in kinds:
        path = workbench.download(args.output, kind)
        print_success(f"Wrote {path}")
    return 0


def _run_advise(args: Any) -> int:
    workbench = Workbench(config=GeneratorConfig(collection_name=args.collection))
    if not workbench.client.settings.has_credential:
        raise MissingCredentialError()

    with console.status("Analyzing with Gemini..."):
        suggestions = asyncio.run(workbench.analyze(args.description, args.schema))

    if not suggestions:
        print_warning("Gemini returned no suggestions.")
        return 0
    print_suggestions(suggestions)
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``python -m unity_indexer.workbench``."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Unity Qdrant Indexer -- generate the Unity indexer script and Qdrant setup",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  unity-indexer generate -o ./out\n"
            "  unity-indexer generate --url http://localhost:7000 --artifact manifest --stdout\n"
            "  unity-indexer advise 'A tactical RPG' --collection unity_code_graph\n"
        ),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    gen = subparsers.add_parser("generate", help="Render the Unity script and/or Compose file")
    gen.add_argument("--url", default=None, help="Qdrant URL (default: http://localhost:6333)")
    gen.add_argument("--collection", default=None, help="Collection name (default: unity_code_graph)")
    gen.add_argument("--model", default=None, help="Gemini embedding model (default: text-embedding-004)")
    gen.add_argument(
        "--metric",
        default=None,
        help="Distance metric: Cosine, Euclidean or Dot (default: Cosine)",
    )
    gen.add_argument("--chunk-size", type=int, default=None, help="Processing chunk size in characters")
    gen.add_argument("--api-key", default=None, help="Gemini key to embed in the Unity script")
    gen.add_argument(
        "--artifact",
        choices=["all", *(kind.value for kind in ArtifactKind)],
        default="all",
        help="Which artifact to render (default: all)",
    )
    gen.add_argument("--output", "-o", default=".", help="Output directory (default: .)")
    gen.add_argument(
        "--stdout",
        action="store_true",
        help="Print the raw artifact text instead of writing files",
    )

    adv = subparsers.add_parser("advise", help="Ask Gemini for Qdrant schema optimizations")
    adv.add_argument("description", help="Short description of the Unity project")
    adv.add_argument("--collection", default="unity_code_graph", help="Collection name")
    adv.add_argument("--schema", default="", help="Existing payload schema (optional)")

    args = parser.parse_args(argv)

    try:
        if args.command == "generate":
            return _run_generate(args)
        return _run_advise(args)
    except ValidationError as exc:
        print_error(f"Invalid configuration: {exc.error_count()} error(s)")
        for error in exc.errors():
            loc = ".".join(str(part) for part in error["loc"]) or "config"
            console.print(f"  [red]-[/red] {loc}: {escape(error['msg'])}", highlight=False)
        return 2
    except ConfigurationError as exc:
        print_error(str(exc))
        return 2


if __name__ == "__main__":
    sys.exit(main())
