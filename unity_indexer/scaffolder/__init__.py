"""Unity Qdrant Indexer scaffolder -- renders the downloadable artifacts.

Takes a ``GeneratorConfig`` and renders the Unity editor indexer script and
the Docker Compose manifest for a local Qdrant instance.

Quick usage::

    from unity_indexer.config import GeneratorConfig
    from unity_indexer.scaffolder import ArtifactGenerator

    artifacts = ArtifactGenerator().generate(GeneratorConfig())
    for artifact in artifacts.values():
        artifact.write_to("./out")
"""

from unity_indexer.scaffolder.compose_gen import (
    ComposeGenerator,
    extract_port,
    generate_docker_compose,
)
from unity_indexer.scaffolder.generator import (
    ArtifactGenerator,
    ArtifactKind,
    GeneratedArtifact,
)
from unity_indexer.scaffolder.script_gen import UnityScriptGenerator, generate_unity_script
from unity_indexer.scaffolder.templates import TemplateRenderer

__all__ = [
    "ArtifactGenerator",
    "ArtifactKind",
    "ComposeGenerator",
    "GeneratedArtifact",
    "TemplateRenderer",
    "UnityScriptGenerator",
    "extract_port",
    "generate_docker_compose",
    "generate_unity_script",
]
