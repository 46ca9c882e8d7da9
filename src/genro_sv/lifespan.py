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
ASGI Lifespan handling for StaticServer.

All the real startup work (walking, loading, registering) happens when the
StaticServer is constructed, before uvicorn opens its socket. The lifespan
handler only acknowledges the protocol and reports readiness, so there is
nothing that can fail here apart from the route table not being frozen.

Definition::

    class ServerLifespan:
        __slots__ = ("server", "_logger", "_started")

        def __init__(self, server: StaticServer)
        async def __call__(self, scope, receive, send) -> None
        async def startup(self) -> None
        async def shutdown(self) -> None
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .types import Receive, Scope, Send

if TYPE_CHECKING:
    from .server import StaticServer

__all__ = ["ServerLifespan"]


class ServerLifespan:
    """
    ASGI Lifespan handler for StaticServer.

    Attributes:
        server: The StaticServer instance this lifespan manages.
    """

    __slots__ = ("server", "_logger", "_started")

    def __init__(self, server: StaticServer) -> None:
        self.server = server
        self._logger = logging.getLogger("genro_sv.lifespan")
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    async def __call__(
        self, scope: Scope, receive: Receive, send: Send  # noqa: ARG002
    ) -> None:
        """
        Handle ASGI lifespan protocol.

        Args:
            scope: ASGI scope dict (type="lifespan").
            receive: ASGI receive callable.
            send: ASGI send callable.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.startup()
                    await send({"type": "lifespan.startup.complete"})
                except Exception as e:
                    self._logger.exception("Startup failed")
                    await send({
                        "type": "lifespan.startup.failed",
                        "message": str(e),
                    })
                    return

            elif msg_type == "lifespan.shutdown":
                try:
                    await self.shutdown()
                finally:
                    await send({"type": "lifespan.shutdown.complete"})
                return

    async def startup(self) -> None:
        """Check the route table is published and report readiness."""
        table = self.server.table
        if not table.frozen:
            raise RuntimeError("Route table was not frozen before serving")
        self._started = True
        self._logger.info(
            f"done. {len(table)} routes, {self.server.config.mode} mode. listening and serving..."
        )

    async def shutdown(self) -> None:
        self._started = False
        self._logger.info("Shutdown.")
