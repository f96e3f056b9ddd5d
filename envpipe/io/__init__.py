"""I/O adapters for reading and writing `.env` documents."""

from .storage import EnvFileStore

__all__ = ["EnvFileStore"]
