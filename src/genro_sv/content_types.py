# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Content-Type resolution from file names.

The table is fixed and deliberately small: it covers the usual web assets,
office documents, fonts, audio, images, video and plain-text sources. Anything
else is served as ``application/octet-stream``.

Rules:
    - The extension is what follows the last ``.`` of the base name.
    - No dot, or a name ending with a dot, means no extension.
    - Lookup is case-sensitive.
    - ``text/*`` results carry ``; charset=utf-8``.

Example::

    >>> resolve_content_type("style.css")
    'text/css; charset=utf-8'
    >>> resolve_content_type("archive.7z")
    'application/x-7z-compressed'
    >>> resolve_content_type("Makefile")
    'application/octet-stream'
"""

from __future__ import annotations

import os

__all__ = ["CONTENT_TYPES", "DEFAULT_CONTENT_TYPE", "TEXT_CHARSET", "resolve_content_type", "file_extension"]

DEFAULT_CONTENT_TYPE = "application/octet-stream"
TEXT_CHARSET = "utf-8"


def _same(prefix: str, *extensions: str) -> dict[str, str]:
    """Map each extension to ``prefix + extension``."""
    return {ext: f"{prefix}{ext}" for ext in extensions}


def _all(mime_type: str, *extensions: str) -> dict[str, str]:
    """Map every extension to the same MIME type."""
    return dict.fromkeys(extensions, mime_type)


CONTENT_TYPES: dict[str, str] = {
    # Web
    **_all("application/javascript", "js", "mjs"),
    **_same("text/", "css", "csv"),
    **_all("text/html", "html", "htm"),
    # Applications and archives
    "7z": "application/x-7z-compressed",
    **_same("application/", "zip", "rtf", "json", "xml", "pdf"),
    "gz": "application/gzip",
    "rar": "application/vnd.rar",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "ppt": "application/vnd.ms-powerpoint",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "xhtml": "application/xhtml+xml",
    **_same("application/x-", "sh", "csh"),
    # Fonts
    **_same("font/", "ttf", "otf", "woff", "woff2"),
    # Audio
    **_same("audio/", "wav", "aac", "opus"),
    "mp3": "audio/mpeg",
    # Images
    **_same("image/", "bmp", "gif", "png", "webp"),
    **_all("image/tiff", "tif", "tiff"),
    "svg": "image/svg+xml",
    **_all("image/jpeg", "jpg", "jpeg"),
    "ico": "image/x-icon",
    # Video
    "ts": "video/mp2t",
    "avi": "video/x-msvideo",
    **_same("video/", "mp4", "webm", "mpeg"),
    # Plain text: documents, program sources, build metadata
    **_all("text/plain", "txt", "dat", "md"),
    **_all("text/plain", "go", "h", "c", "py", "tex", "sty", "m"),
    **_all("text/plain", "sum", "mod", "lock"),
}


def file_extension(filename: str) -> str | None:
    """Return the extension of ``filename`` or None when it has none."""
    name = filename.replace(os.sep, "/").rsplit("/", 1)[-1]
    index = name.rfind(".")
    if index == -1 or index == len(name) - 1:
        return None
    return name[index + 1 :]


def resolve_content_type(filename: str) -> str:
    """Resolve the Content-Type header value for ``filename``.

    Args:
        filename: Base name or path of the file.

    Returns:
        MIME type string. Text types include the UTF-8 charset.
    """
    extension = file_extension(filename)
    content_type = CONTENT_TYPES.get(extension, DEFAULT_CONTENT_TYPE) if extension else DEFAULT_CONTENT_TYPE
    if content_type.startswith("text/") and "charset" not in content_type:
        content_type = f"{content_type}; charset={TEXT_CHARSET}"
    return content_type


if __name__ == "__main__":
    import sys

    for arg in sys.argv[1:]:
        print(f"{arg}: {resolve_content_type(arg)}")
