"""Module entrypoint for running envpipe as ``python -m envpipe``."""

from __future__ import annotations

from envpipe.cli import main


if __name__ == "__main__":
    main()
