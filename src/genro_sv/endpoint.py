# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""FileEndpoint - serves one discovered file at its route.

Two strategies, chosen once from the configuration:

Eager:
    Bytes are read in the constructor, during the startup phase, before the
    route table is published. Each request sends content-type, the payload
    and nothing else touches the filesystem.

Lazy:
    Each request opens the file again and streams it. open, fstat and every
    read run in the default thread executor.

        open fails  -> 404, logged
        fstat fails -> 500, logged
        otherwise   -> 200, content-type, content-length and, when the size
                       exceeds the threshold, content-disposition: attachment

    Streaming is done by FileResponse; a failure after the headers went out
    is logged with the byte count and cannot be reported to the client.

Endpoints hold no mutable state shared between requests, so any number of
requests can run concurrently against the same endpoint.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from .exceptions import TraversalError
from .response import FileResponse, Response
from .types import Receive, Scope, Send
from .walker import FileEntry

__all__ = ["FileEndpoint"]

logger = logging.getLogger("genro_sv.endpoint")


class FileEndpoint:
    """
    ASGI application serving a single file.

    Attributes:
        entry: The FileEntry discovered at startup.
        lazy: True for per-request reads, False for the preloaded payload.
        threshold_bytes: Lazy mode attachment threshold.
        content: Preloaded payload (eager mode), None in lazy mode.
    """

    __slots__ = ("entry", "lazy", "threshold_bytes", "content")

    def __init__(self, entry: FileEntry, lazy: bool = False, threshold_bytes: int = 0) -> None:
        """
        Create the endpoint, loading the payload now in eager mode.

        Raises:
            TraversalError: Eager mode only, if the file cannot be read.
        """
        self.entry = entry
        self.lazy = lazy
        self.threshold_bytes = threshold_bytes
        self.content: bytes | None = None
        if not lazy:
            try:
                self.content = entry.path.read_bytes()
            except OSError as e:
                raise TraversalError(entry.path, e.strerror or str(e)) from e

    @property
    def path(self) -> Path:
        return self.entry.path

    @property
    def content_type(self) -> str:
        return self.entry.content_type

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if self.content is not None:
            await Response(content=self.content, media_type=self.content_type)(scope, receive, send)
            return
        await self._serve_lazy(scope, receive, send)

    async def _serve_lazy(self, scope: Scope, receive: Receive, send: Send) -> None:
        loop = asyncio.get_running_loop()
        try:
            fh = await loop.run_in_executor(None, open, self.path, "rb")
        except OSError as e:
            logger.error(f"Cannot open {self.path}: {e}")
            await Response("404 page not found", 404, media_type="text/plain; charset=utf-8")(
                scope, receive, send
            )
            return

        with fh:
            try:
                size = (await loop.run_in_executor(None, os.fstat, fh.fileno())).st_size
            except OSError as e:
                logger.error(f"Cannot stat {self.path}: {e}")
                await Response("500 internal server error", 500, media_type="text/plain; charset=utf-8")(
                    scope, receive, send
                )
                return

            filename = self.entry.name if size > self.threshold_bytes else None
            response = FileResponse(fh, size, media_type=self.content_type, filename=filename)
            await response(scope, receive, send)

    def __repr__(self) -> str:
        return f"FileEndpoint(route={self.entry.route!r}, mode={'lazy' if self.lazy else 'eager'})"


if __name__ == "__main__":
    pass
