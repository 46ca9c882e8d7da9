# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Error handling middleware.

Catches exceptions raised while handling a request and converts them to
HTTP responses.

Exception handling:
    - HTTPException: status code with detail message (e.g. unknown route 404)
    - Exception: 500 Internal Server Error, logged

If the response has already started (an endpoint failed mid-stream), nothing
more can be sent: the error is logged and the response is left as is.

Config:
    debug (bool): If True, include traceback in 500 responses. Default: False.

Note:
    Enabled by default (middleware_default=True), outermost
    (middleware_order=100) so that it sees every error.
"""

from __future__ import annotations

import logging
import traceback
from typing import TYPE_CHECKING, Any, MutableMapping

from . import BaseMiddleware
from ..exceptions import HTTPException

if TYPE_CHECKING:
    from ..types import ASGIApp, Receive, Scope, Send


class ErrorMiddleware(BaseMiddleware):
    """Error handling middleware for HTTP requests.

    Attributes:
        debug: If True, include stack traces in 500 error responses.
        logger: Logger for unexpected errors ("genro_sv").
    """

    middleware_name = "errors"
    middleware_order = 100
    middleware_default = True

    __slots__ = ("debug", "logger")

    def __init__(
        self,
        app: ASGIApp,
        debug: bool = False,
        **kwargs: Any,
    ) -> None:
        super().__init__(app, **kwargs)
        self.debug = debug
        self.logger = logging.getLogger("genro_sv")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Process request with error handling. Non-HTTP scopes pass through."""
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = False

        async def send_tracking(message: MutableMapping[str, Any]) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await self.app(scope, receive, send_tracking)
        except HTTPException as e:
            if started:
                self.logger.error(f"{scope.get('path')}: {e.status_code} after response start")
                return
            await self._send_http_error(send, e)
        except Exception as e:
            self.logger.exception(f"Error serving {scope.get('path')}: {e}")
            if started:
                return
            await self._send_server_error(send)

    async def _send_http_error(self, send: Send, exc: HTTPException) -> None:
        """Send text/plain error response from HTTPException."""
        body_bytes = (exc.detail or "").encode("utf-8")

        headers: list[tuple[bytes, bytes]] = [
            (b"content-type", b"text/plain; charset=utf-8"),
            (b"content-length", str(len(body_bytes)).encode()),
        ]
        if exc.headers:
            headers.extend((k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in exc.headers)

        await send(
            {"type": "http.response.start", "status": exc.status_code, "headers": headers}
        )
        await send({"type": "http.response.body", "body": body_bytes})

    async def _send_server_error(self, send: Send) -> None:
        """Send 500 Internal Server Error, with traceback when debug is on."""
        if self.debug:
            body = f"Internal Server Error\n\n{traceback.format_exc()}"
        else:
            body = "Internal Server Error"

        body_bytes = body.encode("utf-8")

        await send(
            {
                "type": "http.response.start",
                "status": 500,
                "headers": [
                    (b"content-type", b"text/plain; charset=utf-8"),
                    (b"content-length", str(len(body_bytes)).encode()),
                ],
            }
        )
        await send({"type": "http.response.body", "body": body_bytes})


if __name__ == "__main__":
    pass
