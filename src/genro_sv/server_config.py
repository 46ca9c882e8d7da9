# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Server configuration - resolves options once into an immutable ServerConfig.

Config precedence (later overrides earlier):
    1. Built-in DEFAULTS
    2. Environment variables: GENRO_SV_*
    3. Command line arguments (see ``build_parser``)
    4. Explicit keyword overrides passed to ``load_config``

The result is a frozen ServerConfig that the walker, the registry and every
endpoint receive explicitly. Nothing reads process-wide state after startup.
"""

from __future__ import annotations

import argparse
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from genro_toolbox import SmartOptions  # type: ignore[import-untyped]

from .exceptions import ConfigurationError

__all__ = ["ServerConfig", "DEFAULTS", "MEGABYTE", "build_parser", "load_config"]

MEGABYTE = 1_000_000

DEFAULTS: dict[str, Any] = {
    "directory": ".",
    "host": "127.0.0.1",
    "port": 8080,
    "exclude": r"^\.",
    "lazy": False,
    "threshold": 24,
    "quiet": False,
    "access_log": False,
    "debug": False,
}


def _server_opts_spec(
    directory: str = ".",
    host: str = "127.0.0.1",
    port: int = 8080,
    exclude: str = r"^\.",
    lazy: bool = False,
    threshold: int = 24,
    quiet: bool = False,
    access_log: bool = False,
    debug: bool = False,
) -> None:
    """Reference function for SmartOptions type extraction."""


@dataclass(frozen=True)
class ServerConfig:
    """Resolved server options. Immutable for the process lifetime.

    Attributes:
        directory: Root directory to serve (resolved, absolute).
        host: Bind host.
        port: Bind port.
        exclude: Regular expression matched against each directory name.
        lazy: Read files per request instead of loading them at startup.
        threshold: Size in megabytes above which lazy responses are
            sent as attachments.
        quiet: Suppress the per-route registration log lines.
        access_log: Enable the access logging middleware.
        debug: Include tracebacks in 500 responses.
    """

    directory: Path = field(default_factory=lambda: Path(".").resolve())
    host: str = "127.0.0.1"
    port: int = 8080
    exclude: str = r"^\."
    lazy: bool = False
    threshold: int = 24
    quiet: bool = False
    access_log: bool = False
    debug: bool = False

    @property
    def mode(self) -> str:
        """Loading mode: "lazy" or "eager"."""
        return "lazy" if self.lazy else "eager"

    @property
    def threshold_bytes(self) -> int:
        """Attachment threshold in bytes."""
        return self.threshold * MEGABYTE

    @property
    def exclude_pattern(self) -> re.Pattern[str]:
        """Compiled exclusion pattern."""
        return compile_exclude(self.exclude)

    @property
    def middleware(self) -> dict[str, bool]:
        """Middleware on/off map for ``middleware_chain``."""
        return {"logging": self.access_log}

    def middleware_options(self, name: str) -> dict[str, Any]:
        """Per-middleware keyword arguments."""
        if name == "errors":
            return {"debug": self.debug}
        return {}

    @classmethod
    def from_options(cls, opts: SmartOptions | dict[str, Any]) -> ServerConfig:
        """Validate raw options and build a ServerConfig.

        Raises:
            ConfigurationError: On any invalid value.
        """
        directory = Path(str(opts["directory"] or ".")).expanduser()
        try:
            directory = directory.resolve()
        except OSError as e:
            raise ConfigurationError(f"{directory}: {e}") from e
        if not directory.exists():
            raise ConfigurationError(f"{directory}: no such file or directory")
        if not directory.is_dir():
            raise ConfigurationError(f"{directory.name} is not a directory")

        port = _as_int(opts["port"], "port")
        if not 0 <= port <= 65535:
            raise ConfigurationError(f"Invalid port: {port}")
        threshold = _as_int(opts["threshold"], "threshold")
        if threshold < 0:
            raise ConfigurationError(f"Invalid threshold: {threshold}")

        exclude = str(opts["exclude"]) if opts["exclude"] is not None else DEFAULTS["exclude"]
        compile_exclude(exclude)

        return cls(
            directory=directory,
            host=str(opts["host"] or DEFAULTS["host"]),
            port=port,
            exclude=exclude,
            lazy=_as_bool(opts["lazy"]),
            threshold=threshold,
            quiet=_as_bool(opts["quiet"]),
            access_log=_as_bool(opts["access_log"]),
            debug=_as_bool(opts["debug"]),
        )


def compile_exclude(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    """Compile the exclusion pattern, raising ConfigurationError if invalid."""
    if isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConfigurationError(f"Invalid exclude pattern {pattern!r}: {e}") from e


def _as_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid {name}: {value!r}") from e


def _as_bool(value: Any) -> bool:
    """Parse on/off/true/false value to bool."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in ("on", "true", "yes", "1")
    return bool(value)


def build_parser(prog: str = "genro-sv") -> argparse.ArgumentParser:
    """Build the command line parser.

    Every option defaults to None so that unset flags do not override
    environment or built-in values.
    """
    from . import __version__

    parser = argparse.ArgumentParser(
        prog=prog,
        description="genro-sv is a tool to run an http server easy-peasy.",
    )
    parser.add_argument("-d", "--dir", dest="directory", default=None, help="Folder to be broadcast (default: .)")
    parser.add_argument("-H", "--host", default=None, help="Host on which server is broadcasted (default: 127.0.0.1)")
    parser.add_argument("-p", "--port", type=int, default=None, help="Port on which server is broadcasted (default: 8080)")
    parser.add_argument(
        "-x",
        "--exclude",
        default=None,
        help="Exclude directories with matching regexp pattern (default: ^\\.)",
    )
    parser.add_argument("-l", "--lazy", action="store_true", default=None, help="Enables lazy loading of files")
    parser.add_argument(
        "-t",
        "--threshold",
        type=int,
        default=None,
        help="Lazy mode: serve files larger than this many megabytes as attachments (default: 24)",
    )
    parser.add_argument("-q", "--quiet", action="store_true", default=None, help="Do not log registered routes")
    parser.add_argument("--access-log", dest="access_log", action="store_true", default=None, help="Log every request")
    parser.add_argument("--debug", action="store_true", default=None, help="Show tracebacks in 500 responses")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_config(argv: list[str] | None = None, env: bool = True, **overrides: Any) -> ServerConfig:
    """Build the server configuration from multiple sources.

    Args:
        argv: Command line arguments (without program name). None means none.
        env: Read GENRO_SV_* environment variables.
        **overrides: Explicit values, highest precedence. None is ignored.

    Returns:
        Frozen ServerConfig.

    Raises:
        ConfigurationError: If a resolved value is invalid.
        SystemExit: On ``--help``/``--version`` or unparsable arguments
            (raised by argparse).
    """
    cli_args = vars(build_parser().parse_args(argv or []))

    # argv=[] keeps SmartOptions away from sys.argv; argparse owns the command line
    if env:
        try:
            env_opts = SmartOptions(_server_opts_spec, env="GENRO_SV", argv=[])
        except ValueError as e:
            raise ConfigurationError(f"Invalid GENRO_SV_* environment value: {e}") from e
    else:
        env_opts = SmartOptions({})
    cli_opts = SmartOptions(cli_args, ignore_none=True)
    caller_opts = SmartOptions(overrides, ignore_none=True)

    opts = SmartOptions(DEFAULTS) + env_opts + cli_opts + caller_opts
    return ServerConfig.from_options(opts)


if __name__ == "__main__":
    config = load_config(None)
    print(f"Serving {config.directory} on {config.host}:{config.port} ({config.mode})")
