# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
HTTP Response classes for genro-sv.

Classes
=======
Response
    Whole body held in memory. Used by eager endpoints and for the small
    error bodies (404, 500).

FileResponse
    Body streamed from an already opened binary file in fixed-size chunks.
    Used by lazy endpoints. Reads run in the default thread executor so a
    slow disk does not stall the event loop.

Both are ASGI applications: ``await response(scope, receive, send)``.

Headers are given as a dict or list of tuples and sent lowercased,
latin-1 encoded, as ASGI requires.

Example::

    response = Response(content=b"<h1>hi</h1>", media_type="text/html; charset=utf-8")
    await response(scope, receive, send)

    with open(path, "rb") as fh:
        response = FileResponse(fh, size=os.fstat(fh.fileno()).st_size,
                                media_type="application/pdf",
                                filename="report.pdf")
        await response(scope, receive, send)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import IO

from .types import Receive, Scope, Send

__all__ = ["Response", "FileResponse", "CHUNK_SIZE", "attachment_header"]

CHUNK_SIZE = 64 * 1024

# Type alias for headers input
HeadersInput = Mapping[str, str] | list[tuple[str, str]] | None


def _normalize_headers(
    headers: HeadersInput,
) -> list[tuple[str, str]]:
    """
    Normalize headers input to list of tuples.

    Args:
        headers: Headers as dict, list of tuples, or None.

    Returns:
        List of (name, value) tuples. Empty list if headers is None.
    """
    if headers is None:
        return []
    if isinstance(headers, list):
        return list(headers)
    return list(headers.items())


def attachment_header(filename: str) -> tuple[str, str]:
    """Return the content-disposition header marking a download."""
    quoted = filename.replace("\\", "\\\\").replace('"', '\\"')
    return ("content-disposition", f'attachment; filename="{quoted}"')


class Response:
    """
    HTTP response with an in-memory body.

    Attributes:
        body: Encoded response body as bytes.
        status_code: HTTP status code.
        media_type: Content-Type header value, sent as given.

    Example:
        >>> response = Response(content="Hello", media_type="text/plain; charset=utf-8")
        >>> await response(scope, receive, send)
    """

    __slots__ = ("body", "status_code", "media_type", "_headers")

    charset: str = "utf-8"

    def __init__(
        self,
        content: bytes | str | None = None,
        status_code: int = 200,
        headers: HeadersInput = None,
        media_type: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.media_type = media_type
        self._headers: list[tuple[str, str]] = _normalize_headers(headers)
        self.body = self._encode_content(content)

        header_names = {name.lower() for name, _ in self._headers}
        if media_type is not None and "content-type" not in header_names:
            self._headers.append(("content-type", media_type))
        if "content-length" not in header_names:
            self._headers.append(("content-length", str(len(self.body))))

    def _encode_content(self, content: bytes | str | None) -> bytes:
        """Encode content to bytes: None -> b"", str -> charset encoded."""
        if content is None:
            return b""
        if isinstance(content, bytes):
            return content
        return content.encode(self.charset)

    @property
    def headers(self) -> list[tuple[str, str]]:
        """Response headers as (name, value) tuples."""
        return list(self._headers)

    def _build_headers(self) -> list[tuple[bytes, bytes]]:
        """Build ASGI headers list (lowercased names, latin-1 encoded)."""
        return [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in self._headers
        ]

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Send http.response.start and a single http.response.body message."""
        await send(
            {
                "type": "http.response.start",
                "status": self.status_code,
                "headers": self._build_headers(),
            }
        )
        await send(
            {
                "type": "http.response.body",
                "body": self.body,
            }
        )


class FileResponse(Response):
    """
    HTTP response streaming an open binary file.

    The caller opens (and closes) the file and supplies its size, so that
    open/stat failures can be mapped to status codes before anything is
    sent. Once the start message is out, the status can no longer change:
    a read failure mid-stream is logged with the number of bytes already
    sent and the response is abandoned unfinished. Exactly ``size`` bytes are
    sent: a file that grows while streaming is cut at ``size``, one that
    shrinks is treated as a read failure.

    Attributes:
        file: Binary file object positioned at offset 0.
        size: Declared content length in bytes.
        chunk_size: Bytes read per chunk.
        sent: Bytes sent so far (for diagnostics).
    """

    __slots__ = ("file", "size", "chunk_size", "sent", "_logger")

    def __init__(
        self,
        file: IO[bytes],
        size: int,
        media_type: str | None = None,
        filename: str | None = None,
        headers: HeadersInput = None,
        chunk_size: int = CHUNK_SIZE,
    ) -> None:
        all_headers = _normalize_headers(headers)
        all_headers.append(("content-length", str(size)))
        if filename is not None:
            all_headers.append(attachment_header(filename))
        super().__init__(content=None, status_code=200, headers=all_headers, media_type=media_type)
        self.file = file
        self.size = size
        self.chunk_size = chunk_size
        self.sent = 0
        self._logger = logging.getLogger("genro_sv.endpoint")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Send the start message, then the file in chunks."""
        await send(
            {
                "type": "http.response.start",
                "status": self.status_code,
                "headers": self._build_headers(),
            }
        )
        loop = asyncio.get_running_loop()
        name = getattr(self.file, "name", "?")
        # Never send more than the declared content-length, even if the file grew.
        while self.sent < self.size:
            want = min(self.chunk_size, self.size - self.sent)
            try:
                chunk = await loop.run_in_executor(None, self.file.read, want)
            except OSError as e:
                self._logger.error(f"Copy of {name} failed after {self.sent} bytes: {e}")
                return
            if not chunk:
                self._logger.error(
                    f"Copy of {name} failed after {self.sent} bytes: file shrank below {self.size} bytes"
                )
                return
            self.sent += len(chunk)
            await send({"type": "http.response.body", "body": chunk, "more_body": True})
        await send({"type": "http.response.body", "body": b"", "more_body": False})


if __name__ == "__main__":
    pass
