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
genro-sv CLI entry point.

Usage:
    genro-sv                          # Serve . on 127.0.0.1:8080
    genro-sv -d ./site -p 9000        # Serve ./site on port 9000
    genro-sv -d ./big --lazy -t 100   # Lazy mode, attachments above 100 MB
    genro-sv -x '^(\\.|node_modules$)' # Custom directory exclusion

Exit codes:
    0  graceful shutdown, --help, --version
    1  startup error (bad directory, bad pattern, unreadable file, bind failure)
"""

from __future__ import annotations

import logging
import sys

from .exceptions import GenroSvError

LOG_FORMAT = "[%(levelname).3s] %(message)s"


def configure_logging(quiet: bool = False) -> None:
    """Install the console log handler once."""
    logging.basicConfig(level=logging.WARNING if quiet else logging.INFO, format=LOG_FORMAT)


def main(argv: list[str] | None = None) -> int:
    """Main entry point. Returns the process exit code."""
    from .server import StaticServer
    from .server_config import load_config

    if argv is None:
        argv = sys.argv[1:]

    try:
        config = load_config(argv)
    except SystemExit as e:
        # argparse: --help/--version exit 0, usage errors exit 2
        return 0 if not e.code else 1
    except GenroSvError as e:
        print(f"[err] {e}", file=sys.stderr)
        return 1

    configure_logging(config.quiet)

    try:
        server = StaticServer(config)
        server.run()
    except GenroSvError as e:
        print(f"[err] {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nShutdown.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
