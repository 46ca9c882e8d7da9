# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Endpoint registry - binds discovered files to routes.

RouteTable
    route -> FileEndpoint mapping. Written only during startup, then frozen:
    after ``freeze()`` it is read-only, which is what lets every request
    read it concurrently without locks.

EndpointRegistry
    Builds a FileEndpoint per FileEntry (eager payloads are loaded right
    here) and registers it. Registration order is traversal order and a
    later registration for the same route replaces the earlier one. A single
    walk yields distinct routes; the policy matters when entries from several
    sources are fed to ``build``. ``RouteTable.register`` returns the
    replaced endpoint and the registry logs the replacement at DEBUG.

Usage::

    registry = EndpointRegistry(config)
    table = registry.build(walk_directory(config.directory, config.exclude))
    endpoint = table.get("/docs/")
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from .endpoint import FileEndpoint
from .server_config import ServerConfig
from .walker import FileEntry

__all__ = ["RouteTable", "EndpointRegistry"]


class RouteTable:
    """Mapping from URL path to FileEndpoint, frozen before serving."""

    __slots__ = ("_routes", "_frozen")

    def __init__(self) -> None:
        self._routes: dict[str, FileEndpoint] = {}
        self._frozen = False

    def register(self, route: str, endpoint: FileEndpoint) -> FileEndpoint | None:
        """Bind ``endpoint`` to ``route``; last registration wins.

        Returns:
            The endpoint previously bound to ``route``, or None.

        Raises:
            RuntimeError: If the table is frozen.
        """
        if self._frozen:
            raise RuntimeError(f"Route table is frozen, cannot register {route!r}")
        previous = self._routes.get(route)
        self._routes[route] = endpoint
        return previous

    def freeze(self) -> RouteTable:
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def routes(self) -> Mapping[str, FileEndpoint]:
        """Read-only view of the table."""
        return MappingProxyType(self._routes)

    def get(self, route: str) -> FileEndpoint | None:
        return self._routes.get(route)

    def __contains__(self, route: object) -> bool:
        return route in self._routes

    def __iter__(self) -> Iterator[str]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return f"RouteTable({len(self._routes)} routes, {state})"


class EndpointRegistry:
    """
    Creates endpoints for walked files and registers them in a RouteTable.

    Attributes:
        config: The resolved ServerConfig.
        table: The RouteTable being filled.
        logger: Registration logger ("genro_sv").
    """

    __slots__ = ("config", "table", "logger")

    def __init__(self, config: ServerConfig, table: RouteTable | None = None) -> None:
        self.config = config
        self.table = table if table is not None else RouteTable()
        self.logger = logging.getLogger("genro_sv")

    def register(self, entry: FileEntry) -> FileEndpoint:
        """Create the endpoint for ``entry`` and bind it at its route.

        Raises:
            TraversalError: Eager mode, if the file cannot be loaded.
        """
        endpoint = FileEndpoint(entry, lazy=self.config.lazy, threshold_bytes=self.config.threshold_bytes)
        previous = self.table.register(entry.route, endpoint)
        if previous is not None:
            self.logger.debug(
                f"{entry.route} now served by {entry.relative_path} (was {previous.entry.relative_path})"
            )
        if not self.config.quiet:
            self.logger.info(f"{entry.name} accessible on {self.config.host}:{self.config.port}{entry.route}")
        return endpoint

    def build(self, entries: Iterable[FileEntry]) -> RouteTable:
        """Register every entry in order and return the frozen table."""
        for entry in entries:
            self.register(entry)
        return self.table.freeze()


if __name__ == "__main__":
    pass
