# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Dispatcher - routes requests to FileEndpoints via the frozen RouteTable."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .exceptions import HTTPNotFound

if TYPE_CHECKING:
    from .registry import RouteTable
    from .types import Receive, Scope, Send


class Dispatcher:
    """Exact-path lookup in the route table. Any HTTP method is accepted."""

    __slots__ = ("table",)

    def __init__(self, table: RouteTable) -> None:
        self.table = table

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI interface - dispatch request to its endpoint.

        Raises:
            HTTPNotFound: Path not registered (rendered by the errors middleware).
        """
        if scope["type"] != "http":
            return
        endpoint = self.table.get(scope.get("path", "/"))
        if endpoint is None:
            raise HTTPNotFound()
        await endpoint(scope, receive, send)


if __name__ == "__main__":
    pass
