# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Exception classes for genro-sv.

Module Structure
----------------
Two families:

1. Startup errors, all deriving from GenroSvError. They abort the server
   before any socket is opened and make the CLI exit with status 1.

   - ConfigurationError: bad root directory, bad exclusion pattern,
     invalid option value, unavailable bind address.
   - FileSystemError: I/O failure while discovering or loading files.
   - TraversalError(FileSystemError): failure on a specific path during the
     startup walk. Carries ``path``.

2. HTTP errors, raised while handling a request and rendered by the
   ``errors`` middleware.

   - HTTPException: status code, detail and optional headers.
   - HTTPNotFound: 404 shortcut.

Per-request I/O errors in lazy mode are NOT raised: the endpoint maps them
to a status code itself and logs them.

Example:
    >>> raise ConfigurationError("site is not a directory")
    >>> raise TraversalError("/srv/site/secret", "permission denied")
    >>> raise HTTPException(404, detail="404 page not found")
"""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "GenroSvError",
    "ConfigurationError",
    "FileSystemError",
    "TraversalError",
    "HTTPException",
    "HTTPNotFound",
]


class GenroSvError(Exception):
    """Base class for startup errors."""


class ConfigurationError(GenroSvError):
    """Invalid configuration detected before serving."""


class FileSystemError(GenroSvError):
    """I/O failure while discovering or loading the served tree."""


class TraversalError(FileSystemError):
    """
    I/O failure on a specific path during the startup walk.

    Attributes:
        path: The file or directory that could not be read.
        reason: Human readable cause (usually the OSError text).
    """

    def __init__(self, path: str | Path, reason: str = "") -> None:
        self.path = Path(path)
        self.reason = reason
        message = f"{self.path}: {reason}" if reason else str(self.path)
        super().__init__(message)

    def __repr__(self) -> str:
        return f"TraversalError(path={str(self.path)!r}, reason={self.reason!r})"


class HTTPException(Exception):
    """
    HTTP exception with status code and detail.

    Raise this while handling a request to return an HTTP error response.
    The errors middleware catches it and sends status, detail and headers.

    Attributes:
        status_code: HTTP status code (expected 4xx or 5xx, not validated)
        detail: Error detail message
        headers: Response headers as list of tuples (supports duplicate names)
    """

    def __init__(
        self,
        status_code: int,
        detail: str = "",
        headers: dict[str, str] | list[tuple[str, str]] | None = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        if headers is None:
            self.headers: list[tuple[str, str]] | None = None
        elif isinstance(headers, dict):
            self.headers = list(headers.items())
        else:
            self.headers = list(headers)
        super().__init__(detail)

    def __repr__(self) -> str:
        """Return detailed string representation."""
        return f"HTTPException(status_code={self.status_code}, detail={self.detail!r})"


class HTTPNotFound(HTTPException):
    """HTTP 404 Not Found exception."""

    def __init__(self, detail: str = "404 page not found") -> None:
        super().__init__(404, detail=detail)


if __name__ == "__main__":
    pass
