# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""StaticServer - main entry point for genro-sv.

StaticServer is the coordinator that:
- Takes a resolved ServerConfig
- Walks the root directory and registers one endpoint per file
- Freezes the route table and builds the middleware chain (errors, logging)
- Handles ASGI lifespan protocol
- Runs under uvicorn

Everything up to the frozen table happens in ``__init__``, synchronously.
When ``run()`` hands the server to uvicorn, the route table is complete and
will not change again.

Usage:
    from genro_sv import StaticServer, load_config

    server = StaticServer(load_config(["-d", "./site", "--lazy"]))
    server.run()

Architecture:
    StaticServer
        ├── config: ServerConfig
        ├── table: RouteTable (frozen)
        ├── dispatcher: Middleware chain → Dispatcher
        └── lifespan: ServerLifespan

Request flow:
    uvicorn → StaticServer.__call__
        → Middleware chain (errors → logging)
        → Dispatcher → table.get(path)
        → FileEndpoint (eager payload or lazy stream)
"""

from __future__ import annotations

import logging

from .dispatcher import Dispatcher
from .exceptions import ConfigurationError
from .lifespan import ServerLifespan
from .middleware import middleware_chain
from .registry import EndpointRegistry, RouteTable
from .server_config import ServerConfig
from .types import ASGIApp, Receive, Scope, Send
from .walker import walk_directory

__all__ = ["StaticServer"]


class StaticServer:
    """
    ASGI static file server over a fixed route table.

    Attributes:
        config: ServerConfig for configuration.
        table: Frozen RouteTable built at construction.
        dispatcher: Middleware-wrapped Dispatcher.
        lifespan: ServerLifespan for startup/shutdown.
        logger: Server logger instance.
    """

    __slots__ = ("config", "table", "dispatcher", "lifespan", "logger")

    def __init__(self, config: ServerConfig | None = None) -> None:
        """
        Build the route table and the ASGI chain.

        Raises:
            ConfigurationError: Bad root directory or exclusion pattern.
            TraversalError: I/O error while walking or loading files.
        """
        self.config = config if config is not None else ServerConfig()
        self.logger = logging.getLogger("genro_sv")
        entries = walk_directory(self.config.directory, self.config.exclude)
        self.table: RouteTable = EndpointRegistry(self.config).build(entries)
        self.dispatcher: ASGIApp = middleware_chain(Dispatcher(self.table), self.config)
        self.lifespan = ServerLifespan(self)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """
        Handle ASGI request. Lifespan events go to self.lifespan.

        Args:
            scope: ASGI scope dict.
            receive: ASGI receive callable.
            send: ASGI send callable.
        """
        if scope["type"] == "lifespan":
            await self.lifespan(scope, receive, send)
        else:
            await self.dispatcher(scope, receive, send)

    def run(self) -> None:
        """Run the server using Uvicorn.

        Raises:
            ConfigurationError: If the listening socket cannot be bound.
        """
        import uvicorn

        host = self.config.host
        port = self.config.port

        self.logger.info(f"Starting server on {host}:{port}")
        try:
            uvicorn.run(self, host=host, port=port, log_level="warning", lifespan="on")
        except OSError as e:
            raise ConfigurationError(f"Cannot listen on {host}:{port}: {e}") from e
        except SystemExit as e:
            # uvicorn exits with status 1 when the bind fails
            if e.code:
                raise ConfigurationError(f"Cannot listen on {host}:{port}") from e

    def __repr__(self) -> str:
        """Return string representation."""
        return f"StaticServer(directory={str(self.config.directory)!r}, routes={len(self.table)})"


if __name__ == "__main__":
    server = StaticServer()
    server.run()
