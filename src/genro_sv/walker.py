# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Directory walker - discovers the files to serve.

``walk_directory(root, exclude)`` yields one FileEntry per regular file
under ``root``, skipping every file that lives below a directory whose name
matches ``exclude``.

Exclusion:
    The pattern is searched (not fully matched) independently in every
    directory segment between the root and the file's parent. With the
    default ``^\\.`` anything under ``.git/`` or ``a/.cache/b/`` is skipped.
    The file's own name is not tested, so ``.gitignore`` at any non-excluded
    level is still served.

Order:
    Sorted by name inside each directory, files before subdirectories.
    The same tree always yields the same sequence, which makes route
    registration (and its last-write-wins collisions) reproducible.

Failures:
    - root missing or not a directory: ConfigurationError
    - invalid pattern: ConfigurationError
    - any OSError listing a directory or stat-ing a file (permission
      denied, broken symlink): TraversalError, aborting the walk.
"""

from __future__ import annotations

import os
import re
import stat
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from .content_types import resolve_content_type
from .exceptions import ConfigurationError, TraversalError
from .routes import derive_route
from .server_config import compile_exclude

__all__ = ["FileEntry", "walk_directory"]


@dataclass(frozen=True)
class FileEntry:
    """A file discovered at startup.

    Attributes:
        path: Absolute filesystem path.
        relative_path: POSIX path relative to the served root.
        route: URL path the file is served at.
        content_type: Content-Type header value.
    """

    path: Path
    relative_path: str
    route: str
    content_type: str

    @property
    def name(self) -> str:
        """Base name of the file."""
        return self.path.name

    @classmethod
    def from_path(cls, root: Path, path: Path) -> FileEntry:
        relative_path = path.relative_to(root).as_posix()
        return cls(
            path=path,
            relative_path=relative_path,
            route=derive_route(relative_path),
            content_type=resolve_content_type(path.name),
        )


def walk_directory(root: str | Path, exclude: str | re.Pattern[str] = r"^\.") -> Iterator[FileEntry]:
    """Yield a FileEntry for every non-excluded regular file under ``root``.

    Root and pattern are validated before the first entry is produced, so
    errors surface even if the iterator is never consumed past the start.

    Args:
        root: Directory to walk.
        exclude: Regular expression tested against each directory name.

    Raises:
        ConfigurationError: Bad root or pattern.
        TraversalError: I/O error on any entry during the walk.
    """
    root_path = Path(root)
    if not root_path.exists():
        raise ConfigurationError(f"{root_path}: no such file or directory")
    if not root_path.is_dir():
        raise ConfigurationError(f"{root_path.name} is not a directory")
    pattern = compile_exclude(exclude)
    root_path = root_path.resolve()
    return _walk(root_path, root_path, pattern)


def _walk(root: Path, directory: Path, pattern: re.Pattern[str]) -> Iterator[FileEntry]:
    try:
        with os.scandir(directory) as it:
            children = sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        raise TraversalError(directory, e.strerror or str(e)) from e

    subdirs: list[Path] = []
    for child in children:
        child_path = Path(child.path)
        try:
            if child.is_dir(follow_symlinks=False):
                if not pattern.search(child.name):
                    subdirs.append(child_path)
                continue
            mode = child.stat(follow_symlinks=True).st_mode
        except OSError as e:
            raise TraversalError(child_path, e.strerror or str(e)) from e
        if stat.S_ISREG(mode):
            yield FileEntry.from_path(root, child_path)

    for subdir in subdirs:
        yield from _walk(root, subdir, pattern)


if __name__ == "__main__":
    import sys

    for entry in walk_directory(sys.argv[1] if len(sys.argv) > 1 else "."):
        print(f"{entry.route} -> {entry.relative_path} ({entry.content_type})")
