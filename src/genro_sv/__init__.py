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

"""genro-sv - Static file server on ASGI, served by uvicorn.

Main components:
    StaticServer: ASGI entry point, walks the root and freezes the routes
    ServerConfig: Immutable resolved options (load_config builds it)
    EndpointRegistry / RouteTable: route -> FileEndpoint binding
    FileEndpoint: Eager (preloaded) or lazy (streamed) file serving

Pure helpers:
    walk_directory: FileEntry discovery with directory exclusion
    derive_route: relative path -> URL path
    resolve_content_type: file name -> Content-Type

Usage:
    from genro_sv import StaticServer, load_config

    server = StaticServer(load_config(["-d", "./public"]))
    server.run()  # Starts uvicorn
"""

__version__ = "0.1.0"

from .content_types import CONTENT_TYPES, DEFAULT_CONTENT_TYPE, resolve_content_type
from .dispatcher import Dispatcher
from .endpoint import FileEndpoint
from .exceptions import (
    ConfigurationError,
    FileSystemError,
    GenroSvError,
    HTTPException,
    HTTPNotFound,
    TraversalError,
)
from .lifespan import ServerLifespan
from .registry import EndpointRegistry, RouteTable
from .response import FileResponse, Response
from .routes import derive_route
from .server import StaticServer
from .server_config import ServerConfig, load_config
from .types import ASGIApp, Message, Receive, Scope, Send
from .walker import FileEntry, walk_directory

__all__ = [
    # Server
    "StaticServer",
    "ServerConfig",
    "ServerLifespan",
    "load_config",
    "Dispatcher",
    # Routing and serving
    "EndpointRegistry",
    "RouteTable",
    "FileEndpoint",
    "FileEntry",
    "walk_directory",
    "derive_route",
    "resolve_content_type",
    "CONTENT_TYPES",
    "DEFAULT_CONTENT_TYPE",
    # Responses
    "Response",
    "FileResponse",
    # Exceptions
    "GenroSvError",
    "ConfigurationError",
    "FileSystemError",
    "TraversalError",
    "HTTPException",
    "HTTPNotFound",
    # ASGI types
    "ASGIApp",
    "Message",
    "Receive",
    "Scope",
    "Send",
]
