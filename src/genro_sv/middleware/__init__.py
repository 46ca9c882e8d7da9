# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Middleware package - ASGI middleware for genro-sv."""

from __future__ import annotations

import importlib
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..server_config import ServerConfig
    from ..types import ASGIApp, Receive, Scope, Send

MIDDLEWARE_REGISTRY: dict[str, type["BaseMiddleware"]] = {}


class BaseMiddleware(ABC):
    """Base class for all middleware. Subclasses auto-register via __init_subclass__.

    Class attributes:
        middleware_name: Registry key (default: class name).
        middleware_order: Order in chain (lower = earlier). Ranges:
            100: Core (errors)
            200: Logging
        middleware_default: Default on/off state. Default: False.
    """

    middleware_name: str = ""
    middleware_order: int = 500
    middleware_default: bool = False

    __slots__ = ("app",)

    def __init__(self, app: ASGIApp, **kwargs: Any) -> None:
        """Initialize middleware with wrapped app.

        Args:
            app: The ASGI app to wrap (next in chain).
            **kwargs: Middleware-specific options from ServerConfig.
        """
        self.app = app

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        name = cls.middleware_name or cls.__name__
        if name in MIDDLEWARE_REGISTRY:
            raise ValueError(f"Middleware name '{name}' already registered")
        cls.middleware_name = name
        MIDDLEWARE_REGISTRY[name] = cls

    @abstractmethod
    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None: ...


def _autodiscover() -> None:
    """Import all middleware modules in this package to trigger registration."""
    package_dir = Path(__file__).parent
    for py_file in package_dir.glob("*.py"):
        if py_file.name.startswith("_"):
            continue
        importlib.import_module(f".{py_file.stem}", __package__)


def middleware_chain(app: ASGIApp, config: ServerConfig | None = None) -> ASGIApp:
    """Wrap ``app`` with the enabled middleware, ordered by middleware_order.

    A middleware is enabled by ``config.middleware[name]`` when present,
    otherwise by its class ``middleware_default``. Keyword arguments come
    from ``config.middleware_options(name)``.

    Args:
        app: The innermost ASGI app (the Dispatcher).
        config: Resolved server configuration. None uses class defaults.

    Returns:
        Wrapped ASGI app, lowest order outermost.
    """
    switches: dict[str, bool] = config.middleware if config is not None else {}

    enabled: list[tuple[int, str, type[BaseMiddleware]]] = []
    for name, cls in MIDDLEWARE_REGISTRY.items():
        is_enabled = switches.get(name, cls.middleware_default)
        if is_enabled:
            enabled.append((cls.middleware_order, name, cls))

    enabled.sort(key=lambda x: x[0])

    for _order, name, cls in reversed(enabled):
        options = config.middleware_options(name) if config is not None else {}
        app = cls(app, **options)

    return app


_autodiscover()
globals().update(MIDDLEWARE_REGISTRY)

__all__ = [
    "BaseMiddleware",
    "MIDDLEWARE_REGISTRY",
    "middleware_chain",
    *MIDDLEWARE_REGISTRY.keys(),
]
