# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""ASGI type definitions for genro-sv.

Every serving component (dispatcher, endpoints, middleware, lifespan) is a
plain ASGI callable; these aliases document that contract.

Scope : MutableMapping[str, Any]
    Connection metadata. For HTTP: type="http", method, path, headers.

Message : MutableMapping[str, Any]
    ``http.response.start`` / ``http.response.body`` / ``lifespan.*``.

Receive : Callable[[], Awaitable[Message]]
Send : Callable[[Message], Awaitable[None]]
ASGIApp : Callable[[Scope, Receive, Send], Awaitable[None]]

MutableMapping is used instead of TypedDict: uvicorn adds server-specific
keys to the scope and a rigid TypedDict would only get in the way.
"""

from typing import Any, Awaitable, Callable, MutableMapping

__all__ = ["Scope", "Message", "Receive", "Send", "ASGIApp"]

# ASGI Scope - connection metadata
Scope = MutableMapping[str, Any]

# ASGI Message - sent/received data
Message = MutableMapping[str, Any]

# ASGI Receive - callable to receive messages
Receive = Callable[[], Awaitable[Message]]

# ASGI Send - callable to send messages
Send = Callable[[Message], Awaitable[None]]

# ASGI Application - the main callable
ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]
