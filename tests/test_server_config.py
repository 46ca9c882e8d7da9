# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Tests for ServerConfig, load_config and the CLI entry point."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any

import pytest

from genro_sv.__main__ import main
from genro_sv.exceptions import ConfigurationError
from genro_sv.server_config import DEFAULTS, MEGABYTE, ServerConfig, build_parser, load_config


def options(**kwargs: Any) -> dict[str, Any]:
    return {**DEFAULTS, **kwargs}


class TestServerConfig:
    def test_defaults(self) -> None:
        config = ServerConfig()
        assert config.host == "127.0.0.1"
        assert config.port == 8080
        assert config.exclude == r"^\."
        assert config.lazy is False
        assert config.threshold == 24
        assert config.quiet is False

    def test_is_immutable(self) -> None:
        config = ServerConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.port = 1  # type: ignore[misc]

    def test_mode(self) -> None:
        assert ServerConfig().mode == "eager"
        assert ServerConfig(lazy=True).mode == "lazy"

    def test_threshold_bytes(self) -> None:
        assert ServerConfig(threshold=3).threshold_bytes == 3 * MEGABYTE == 3_000_000

    def test_exclude_pattern(self) -> None:
        assert ServerConfig().exclude_pattern.search(".git")
        assert not ServerConfig().exclude_pattern.search("src")

    def test_middleware_switches(self) -> None:
        assert ServerConfig().middleware == {"logging": False}
        assert ServerConfig(access_log=True).middleware == {"logging": True}
        assert ServerConfig(debug=True).middleware_options("errors") == {"debug": True}
        assert ServerConfig().middleware_options("logging") == {}


class TestFromOptions:
    def test_valid(self, tmp_path: Path) -> None:
        config = ServerConfig.from_options(options(directory=str(tmp_path), port="9000", lazy="true"))
        assert config.directory == tmp_path.resolve()
        assert config.port == 9000
        assert config.lazy is True

    def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="no such file or directory"):
            ServerConfig.from_options(options(directory=str(tmp_path / "missing")))

    def test_directory_is_file(self, tmp_path: Path) -> None:
        target = tmp_path / "file.txt"
        target.write_text("x")
        with pytest.raises(ConfigurationError, match="file.txt is not a directory"):
            ServerConfig.from_options(options(directory=str(target)))

    def test_bad_port(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="Invalid port"):
            ServerConfig.from_options(options(directory=str(tmp_path), port=70000))
        with pytest.raises(ConfigurationError, match="Invalid port"):
            ServerConfig.from_options(options(directory=str(tmp_path), port="http"))

    def test_negative_threshold(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="Invalid threshold"):
            ServerConfig.from_options(options(directory=str(tmp_path), threshold=-1))

    def test_bad_pattern(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="Invalid exclude pattern"):
            ServerConfig.from_options(options(directory=str(tmp_path), exclude="(?P<"))


class TestLoadConfig:
    def test_cli_arguments(self, tmp_path: Path) -> None:
        config = load_config(
            ["-d", str(tmp_path), "-p", "9001", "-H", "0.0.0.0", "-l", "-t", "5", "-q", "-x", "^_"],
            env=False,
        )
        assert config.directory == tmp_path.resolve()
        assert config.port == 9001
        assert config.host == "0.0.0.0"
        assert config.lazy is True
        assert config.threshold == 5
        assert config.quiet is True
        assert config.exclude == "^_"

    def test_unset_flags_keep_defaults(self, tmp_path: Path) -> None:
        config = load_config(["--dir", str(tmp_path)], env=False)
        assert config.port == 8080
        assert config.lazy is False
        assert config.threshold == 24
        assert config.exclude == r"^\."

    def test_overrides_win(self, tmp_path: Path) -> None:
        config = load_config(["-d", str(tmp_path), "-p", "9001"], env=False, port=9500)
        assert config.port == 9500

    def test_none_override_ignored(self, tmp_path: Path) -> None:
        config = load_config(["-d", str(tmp_path), "-p", "9001"], env=False, port=None)
        assert config.port == 9001

    def test_help_exits(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            load_config(["--help"], env=False)
        assert exc_info.value.code == 0

    def test_parser_long_options(self) -> None:
        args = build_parser().parse_args(["--lazy", "--threshold", "7", "--access-log"])
        assert args.lazy is True
        assert args.threshold == 7
        assert args.access_log is True
        assert args.port is None


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove any GENRO_SV_* variable inherited from the test process."""
    for key in list(os.environ):
        if key.startswith("GENRO_SV_"):
            monkeypatch.delenv(key)
    return monkeypatch


class TestEnvironmentLayer:
    def test_env_port(self, tmp_path: Path, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("GENRO_SV_PORT", "9100")
        config = load_config(["-d", str(tmp_path)])
        assert config.port == 9100

    def test_env_bool(self, tmp_path: Path, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("GENRO_SV_LAZY", "true")
        clean_env.setenv("GENRO_SV_QUIET", "off")
        config = load_config(["-d", str(tmp_path)])
        assert config.lazy is True
        assert config.quiet is False

    def test_env_directory_and_threshold(self, tmp_path: Path, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("GENRO_SV_DIRECTORY", str(tmp_path))
        clean_env.setenv("GENRO_SV_THRESHOLD", "3")
        config = load_config([])
        assert config.directory == tmp_path.resolve()
        assert config.threshold_bytes == 3_000_000

    def test_cli_beats_env(self, tmp_path: Path, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("GENRO_SV_PORT", "9100")
        config = load_config(["-d", str(tmp_path), "-p", "9200"])
        assert config.port == 9200

    def test_override_beats_env(self, tmp_path: Path, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("GENRO_SV_HOST", "0.0.0.0")
        config = load_config(["-d", str(tmp_path)], host="localhost")
        assert config.host == "localhost"

    def test_env_ignored_when_disabled(self, tmp_path: Path, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("GENRO_SV_PORT", "9100")
        config = load_config(["-d", str(tmp_path)], env=False)
        assert config.port == 8080

    def test_invalid_env_value(self, tmp_path: Path, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("GENRO_SV_PORT", "http")
        with pytest.raises(ConfigurationError, match="GENRO_SV"):
            load_config(["-d", str(tmp_path)])

    def test_process_argv_not_read(self, tmp_path: Path, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setattr(sys, "argv", ["genro-sv", "--port", "1234", "--lazy"])
        config = load_config(["-d", str(tmp_path)])
        assert config.port == 8080
        assert config.lazy is False

    def test_main_reads_env(self, tmp_path: Path, clean_env: pytest.MonkeyPatch) -> None:
        from genro_sv.server import StaticServer

        served: list[StaticServer] = []
        clean_env.setattr(StaticServer, "run", lambda self: served.append(self))
        clean_env.setenv("GENRO_SV_PORT", "9300")
        assert main(["-d", str(tmp_path), "-q"]) == 0
        assert served[0].config.port == 9300


class TestMain:
    def test_help_returns_zero(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--help"]) == 0
        assert "--lazy" in capsys.readouterr().out

    def test_version_returns_zero(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--version"]) == 0
        assert "0.1.0" in capsys.readouterr().out

    def test_bad_directory_returns_one(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["-d", str(tmp_path / "missing")]) == 1
        assert capsys.readouterr().err.startswith("[err] ")

    def test_bad_pattern_returns_one(self, tmp_path: Path) -> None:
        assert main(["-d", str(tmp_path), "-x", "("]) == 1

    def test_unknown_flag_returns_one(self) -> None:
        assert main(["--no-such-flag"]) == 1

    def test_bind_failure_returns_one(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        from genro_sv.server import StaticServer

        def failing_run(self: StaticServer) -> None:
            raise ConfigurationError("Cannot listen on 127.0.0.1:8080")

        monkeypatch.setattr(StaticServer, "run", failing_run)
        assert main(["-d", str(tmp_path), "-q"]) == 1

    def test_graceful_run_returns_zero(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        from genro_sv.server import StaticServer

        served: list[StaticServer] = []
        monkeypatch.setattr(StaticServer, "run", lambda self: served.append(self))
        (tmp_path / "index.html").write_text("<html></html>")
        assert main(["-d", str(tmp_path), "-q"]) == 0
        assert "/" in served[0].table

    def test_keyboard_interrupt_returns_zero(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        from genro_sv.server import StaticServer

        def interrupted(self: StaticServer) -> None:
            raise KeyboardInterrupt

        monkeypatch.setattr(StaticServer, "run", interrupted)
        assert main(["-d", str(tmp_path), "-q"]) == 0
