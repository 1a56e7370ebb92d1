"""
Unit tests for configuration and the command-line interface.
"""

import pytest

from tinyhttpd.__main__ import build_parser, config_from_args, main
from tinyhttpd.config import ServerConfig


ENV_VARS = [
    "HTTP_HOST", "HTTP_PORT", "HTTP_TIMEOUT", "HTTP_CONTENT_ROOT",
    "HTTP_CONTENT_TYPES", "HTTP_MAX_CONNECTIONS", "HTTP_STRICT_ERRORS",
    "HTTP_FAULT_EVERY", "HTTP_FAULT_PROBABILITY", "HTTP_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestServerConfig:
    """Tests for ServerConfig."""

    def test_defaults(self):
        config = ServerConfig()

        assert config.port == 8080
        assert config.content_root == "./content"
        assert config.content_types == "extended"
        assert config.max_connections is None
        assert config.strict_errors is False
        assert config.fault_every is None
        assert config.fault_probability == 0.0
        assert config.fault_status == 418

    def test_valid_config_passes(self, config):
        config.validate()

    @pytest.mark.parametrize("field, value", [
        ("port", -1),
        ("port", 70000),
        ("backlog", 0),
        ("timeout", 0),
        ("max_line_size", 0),
        ("content_types", "everything"),
        ("max_connections", 0),
        ("fault_status", 302),
        ("fault_every", 0),
        ("fault_probability", 2.0),
    ])
    def test_invalid_values_are_rejected(self, config, field, value):
        setattr(config, field, value)

        with pytest.raises(ValueError):
            config.validate()

    def test_missing_content_root_is_rejected(self, config, tmp_path):
        config.content_root = str(tmp_path / "nope")

        with pytest.raises(ValueError, match="Content root"):
            config.validate()

    def test_from_env(self, clean_env, tmp_path):
        clean_env.setenv("HTTP_PORT", "9000")
        clean_env.setenv("HTTP_CONTENT_ROOT", str(tmp_path))
        clean_env.setenv("HTTP_CONTENT_TYPES", "basic")
        clean_env.setenv("HTTP_MAX_CONNECTIONS", "11")
        clean_env.setenv("HTTP_STRICT_ERRORS", "true")
        clean_env.setenv("HTTP_FAULT_EVERY", "100")

        config = ServerConfig.from_env()

        assert config.port == 9000
        assert config.content_root == str(tmp_path)
        assert config.content_types == "basic"
        assert config.max_connections == 11
        assert config.strict_errors is True
        assert config.fault_every == 100

    def test_from_env_defaults(self, clean_env):
        assert ServerConfig.from_env() == ServerConfig()


class TestCommandLine:
    """Tests for the CLI argument handling."""

    def test_flags_map_to_config(self, clean_env):
        args = build_parser().parse_args([
            "--port", "3000",
            "--root", "./public",
            "--content-types", "basic",
            "--max-connections", "11",
            "--strict",
            "--teapot-every", "100",
            "--teapot-probability", "0.01",
            "--fault-seed", "7",
            "--log-level", "DEBUG",
        ])

        config = config_from_args(args)

        assert config.port == 3000
        assert config.content_root == "./public"
        assert config.content_types == "basic"
        assert config.max_connections == 11
        assert config.strict_errors is True
        assert config.fault_every == 100
        assert config.fault_probability == 0.01
        assert config.fault_seed == 7
        assert config.log_level == "DEBUG"

    def test_flags_override_environment(self, clean_env):
        clean_env.setenv("HTTP_PORT", "9000")
        clean_env.setenv("HTTP_HOST", "0.0.0.0")

        config = config_from_args(build_parser().parse_args(["--port", "3000"]))

        assert config.port == 3000
        assert config.host == "0.0.0.0"

    def test_unset_flags_keep_defaults(self, clean_env):
        config = config_from_args(build_parser().parse_args([]))

        assert config == ServerConfig()

    def test_invalid_config_exits_with_error(self, clean_env, tmp_path, capsys):
        assert main(["--root", str(tmp_path / "nope")]) == 1
        assert "Content root" in capsys.readouterr().err
