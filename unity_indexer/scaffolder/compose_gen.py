"""Docker Compose manifest generation for a local Qdrant instance.

Uses the ``docker-compose.yml.j2`` template to produce a single-service
Compose file.  The host port is derived from the configured Qdrant URL; the
container side always listens on Qdrant's default ports.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from .templates import TemplateRenderer


QDRANT_HTTP_PORT = 6333
QDRANT_GRPC_PORT = 6334

COMPOSE_FILENAME = "docker-compose.yml"

# A port equal to the scheme default counts as no port at all.
_SCHEME_DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443}


def extract_port(service_url: str) -> int:
    """Return the explicit port of *service_url*, or 6333.

    Falls back to the default for URLs without a scheme or host, without an
    explicit port, with the scheme's default port (``:80`` for http, ``:443`` for
    https), or with a port that does not parse or is out of range.
    Never raises.
    """
    try:
        parts = urlsplit(str(service_url).strip())
        if not parts.scheme or not parts.hostname:
            return QDRANT_HTTP_PORT
        port = parts.port
    except ValueError:
        return QDRANT_HTTP_PORT
    if not port or port == _SCHEME_DEFAULT_PORTS.get(parts.scheme.lower()):
        return QDRANT_HTTP_PORT
    return port


def _coerce_port(port: int | str) -> int:
    try:
        value = int(port)
    except (TypeError, ValueError):
        return QDRANT_HTTP_PORT
    return value if 0 < value < 65536 else QDRANT_HTTP_PORT


class ComposeGenerator:
    """Generates the Qdrant ``docker-compose.yml`` manifest."""

    template_name = "docker-compose.yml.j2"

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or TemplateRenderer()

    def build_context(self, port: int | str = QDRANT_HTTP_PORT) -> dict[str, object]:
        return {
            "port": _coerce_port(port),
            "service_port": QDRANT_HTTP_PORT,
            "grpc_port": QDRANT_GRPC_PORT,
            "filename": COMPOSE_FILENAME,
        }

    def generate(self, port: int | str = QDRANT_HTTP_PORT) -> str:
        """Render the manifest with *port* mapped onto the container's 6333."""
        return self.renderer.render(self.template_name, self.build_context(port))

    def generate_for_url(self, service_url: str) -> str:
        """Render the manifest for the port found in *service_url*."""
        return self.generate(extract_port(service_url))


def generate_docker_compose(port: int | str = QDRANT_HTTP_PORT) -> str:
    """Module-level shortcut for :meth:`ComposeGenerator.generate`."""
    return ComposeGenerator().generate(port)
