"""Unity Qdrant Indexer -- generates a Unity editor indexer script and a
Qdrant Docker Compose file, with a Gemini-backed schema advisor."""

__version__ = "0.1.0"
