# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Logging Middleware - HTTP access logging.

Log format:
    Response: "GET /docs/ 200 1532B (0.4ms) from 192.168.1.1"
    Error:    "GET /big.bin ERROR: ... (12.5ms)"

Config:
    logger_name (str): Logger name. Default: "genro_sv.access".
    level (str): Log level (DEBUG, INFO, WARNING, ERROR). Default: "INFO".

Enabled with ``genro-sv --access-log``.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, MutableMapping

from . import BaseMiddleware

if TYPE_CHECKING:
    from ..types import ASGIApp, Receive, Scope, Send


class LoggingMiddleware(BaseMiddleware):
    """Access logging middleware for HTTP requests.

    Attributes:
        logger: Python Logger instance for access logs.
        level: Numeric log level (from logging module).
    """

    middleware_name = "logging"
    middleware_order = 200
    middleware_default = False

    __slots__ = ("logger", "level")

    def __init__(
        self,
        app: ASGIApp,
        logger_name: str = "genro_sv.access",
        level: str = "INFO",
        **kwargs: Any,
    ) -> None:
        super().__init__(app, **kwargs)
        self.logger = logging.getLogger(logger_name)
        self.level = getattr(logging, level.upper(), logging.INFO)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Log one line per completed request, with status, size and timing."""
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start_time = time.perf_counter()
        request_info = f"{scope.get('method', '?')} {scope.get('path', '/')}"
        client = scope.get("client")
        client_ip = client[0] if client else "unknown"

        status_code: int = 0
        body_size: int = 0

        async def send_with_logging(message: MutableMapping[str, Any]) -> None:
            nonlocal status_code, body_size
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
            elif message["type"] == "http.response.body":
                body_size += len(message.get("body", b""))
            await send(message)

        try:
            await self.app(scope, receive, send_with_logging)
        except Exception as e:
            duration = (time.perf_counter() - start_time) * 1000
            self.logger.error(f"{request_info} ERROR: {e} ({duration:.1f}ms)")
            raise

        duration = (time.perf_counter() - start_time) * 1000
        self.logger.log(
            self.level, f"{request_info} {status_code} {body_size}B ({duration:.1f}ms) from {client_ip}"
        )


if __name__ == "__main__":
    pass
