"""Document storage abstraction.

Responsibilities:
- Read and write `.env` documents relative to a root directory.
- Report a missing document as `None` instead of raising.
"""

from __future__ import annotations

from pathlib import Path


class EnvFileStore:
    """Filesystem-backed store for `.env` documents."""

    def __init__(self, root: Path | None = None) -> None:
        """Initialize the store with a root directory (the working directory by default)."""

        self.root = root

    def resolve(self, path: str | Path) -> Path:
        """Return `path` anchored at the store root unless it is absolute."""

        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        base = self.root if self.root is not None else Path.cwd()
        return base / candidate

    def read_text(self, path: str | Path, encoding: str = "utf-8") -> str | None:
        """Load document text, or return `None` when the file does not exist."""

        if not self.exists(path):
            return None
        return self.resolve(path).read_text(encoding=encoding)

    def write_text(self, path: str | Path, content: str, encoding: str = "utf-8") -> Path:
        """Save document text and return the final path."""

        resolved = self.resolve(path)
        resolved.parent.mkdir(parents=True, exist_ok=True)
        resolved.write_text(content, encoding=encoding)
        return resolved

    def exists(self, path: str | Path) -> bool:
        """Return whether the given document exists."""

        return self.resolve(path).is_file()
