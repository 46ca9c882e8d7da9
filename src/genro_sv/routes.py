# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Route derivation - maps a root-relative file path to its URL path.

Rules:
    - ``"/" + relative_path`` with the platform separator normalized to ``/``.
      On POSIX a backslash is an ordinary file name character and is kept.
    - A file named exactly ``index.html`` is served at its directory:
      ``docs/index.html`` -> ``/docs/``, ``index.html`` -> ``/``.

Nothing else is aliased: ``/docs`` (no trailing slash) is not registered
for ``docs/index.html``.
"""

from __future__ import annotations

import os
from pathlib import PurePath

__all__ = ["INDEX_FILE", "derive_route", "normalize_relative_path"]

INDEX_FILE = "index.html"


def normalize_relative_path(relative_path: str | PurePath) -> str:
    """Return ``relative_path`` as a POSIX string without leading ``./`` or ``/``."""
    if isinstance(relative_path, PurePath):
        text = relative_path.as_posix()
    else:
        text = relative_path.replace(os.sep, "/")
    while text.startswith("./"):
        text = text[2:]
    return text.lstrip("/")


def derive_route(relative_path: str | PurePath) -> str:
    """Derive the URL path for a file path relative to the served root.

    Args:
        relative_path: Path of the file relative to the root directory.

    Returns:
        URL path starting with ``/``.
    """
    path = normalize_relative_path(relative_path)
    parent, _, name = path.rpartition("/")
    if name == INDEX_FILE:
        return f"/{parent}/" if parent else "/"
    return f"/{path}"


if __name__ == "__main__":
    pass
