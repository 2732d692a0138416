from __future__ import annotations

from pathlib import Path
from typing import Any, Dict
from unittest.mock import patch

import pytest

from depbump.config import (
    DepbumpConfig,
    discover_config_file,
    load_config,
    _parse_section,
    _pyproject_has_depbump_section,
    _read_toml,
)
from depbump.exceptions import ConfigError


@pytest.mark.unit
class TestDepbumpConfig:
    """Tests for DepbumpConfig dataclass."""

    def test_default_initialization(self) -> None:
        """Test DepbumpConfig initializes with correct defaults."""
        config = DepbumpConfig()

        assert config.exclude == []
        assert config.concurrency == 10
        assert config.registry is None
        assert config.cache is True
        assert config.cache_ttl == 900
        assert config.timeout == 30
        assert config.source_path is None

    def test_to_log_dict(self) -> None:
        """Test to_log_dict returns configuration without metadata."""
        config = DepbumpConfig(
            exclude=["react"],
            concurrency=4,
            source_path=Path("/test/depbump.toml"),
        )

        result = config.to_log_dict()

        assert result == {
            "exclude": ["react"],
            "concurrency": 4,
            "registry": None,
            "cache": True,
            "cache_ttl": 900,
            "timeout": 30,
        }
        assert "source_path" not in result


@pytest.mark.unit
class TestDiscoverConfigFile:
    """Tests for discover_config_file function."""

    def test_explicit_path_priority(self, tmp_path: Path) -> None:
        """Test explicit path is used when provided and exists."""
        config_file = tmp_path / "custom.toml"
        config_file.write_text("[depbump]\n", encoding="utf-8")
        (tmp_path / "depbump.toml").write_text("[depbump]\n", encoding="utf-8")

        with patch("depbump.config.Path.cwd", return_value=tmp_path):
            result = discover_config_file(config_file)

        assert result == config_file.resolve()

    def test_explicit_path_not_found_raises_error(self, tmp_path: Path) -> None:
        non_existent = tmp_path / "nonexistent.toml"

        with pytest.raises(ConfigError) as exc_info:
            discover_config_file(non_existent)

        assert "not found" in str(exc_info.value).lower()
        assert exc_info.value.config_path == str(non_existent)

    def test_discovers_depbump_toml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "depbump.toml"
        config_file.write_text("[depbump]\n", encoding="utf-8")

        with patch("depbump.config.Path.cwd", return_value=tmp_path):
            result = discover_config_file()

        assert result == config_file

    def test_discovers_pyproject_toml_with_section(self, tmp_path: Path) -> None:
        config_file = tmp_path / "pyproject.toml"
        config_file.write_text("[tool.depbump]\ncache = false\n", encoding="utf-8")

        with patch("depbump.config.Path.cwd", return_value=tmp_path):
            result = discover_config_file()

        assert result == config_file

    def test_ignores_pyproject_toml_without_section(self, tmp_path: Path) -> None:
        config_file = tmp_path / "pyproject.toml"
        config_file.write_text("[tool.other]\nkey = 'value'\n", encoding="utf-8")

        with patch("depbump.config.Path.cwd", return_value=tmp_path):
            result = discover_config_file()

        assert result is None

    def test_returns_none_when_no_config_found(self, tmp_path: Path) -> None:
        with patch("depbump.config.Path.cwd", return_value=tmp_path):
            result = discover_config_file()

        assert result is None

    def test_precedence_order(self, tmp_path: Path) -> None:
        """Test discovery precedence: depbump.toml before pyproject.toml."""
        depbump_toml = tmp_path / "depbump.toml"
        depbump_toml.write_text("[depbump]\n", encoding="utf-8")
        (tmp_path / "pyproject.toml").write_text("[tool.depbump]\n", encoding="utf-8")

        with patch("depbump.config.Path.cwd", return_value=tmp_path):
            result = discover_config_file()

        assert result == depbump_toml


@pytest.mark.unit
class TestPyprojectHasDepbumpSection:
    """Tests for _pyproject_has_depbump_section helper."""

    def test_returns_true_when_section_exists(self, tmp_path: Path) -> None:
        config_file = tmp_path / "pyproject.toml"
        config_file.write_text("[tool.depbump]\nconcurrency = 4\n", encoding="utf-8")

        assert _pyproject_has_depbump_section(config_file) is True

    def test_returns_false_when_section_missing(self, tmp_path: Path) -> None:
        config_file = tmp_path / "pyproject.toml"
        config_file.write_text("[tool.other]\nkey = 'value'\n", encoding="utf-8")

        assert _pyproject_has_depbump_section(config_file) is False

    def test_returns_false_on_errors(self, tmp_path: Path) -> None:
        """Test returns False gracefully on parse errors or missing files."""
        config_file = tmp_path / "pyproject.toml"
        config_file.write_text("invalid ][[", encoding="utf-8")
        assert _pyproject_has_depbump_section(config_file) is False

        assert _pyproject_has_depbump_section(tmp_path / "nonexistent.toml") is False


@pytest.mark.unit
class TestReadToml:
    """Tests for _read_toml helper."""

    def test_reads_valid_toml(self, tmp_path: Path) -> None:
        toml_file = tmp_path / "test.toml"
        toml_file.write_text("[tool.depbump]\ncache = true\n", encoding="utf-8")

        result = _read_toml(toml_file)

        assert result["tool"]["depbump"]["cache"] is True

    def test_raises_error_on_invalid_toml(self, tmp_path: Path) -> None:
        toml_file = tmp_path / "invalid.toml"
        toml_file.write_text("invalid ][[ toml", encoding="utf-8")

        with pytest.raises(ConfigError) as exc_info:
            _read_toml(toml_file)

        assert "Invalid TOML" in str(exc_info.value)

    def test_raises_error_when_file_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            _read_toml(tmp_path / "nonexistent.toml")

        assert "Cannot read" in str(exc_info.value)


@pytest.mark.unit
class TestParseSection:
    """Tests for _parse_section configuration validator."""

    def test_parses_empty_section(self) -> None:
        result = _parse_section({}, config_path="test.toml")

        assert result == DepbumpConfig()

    def test_parses_all_options(self) -> None:
        section = {
            "exclude": ["react", "react-dom"],
            "concurrency": 4,
            "registry": "https://npm.example.com",
            "cache": False,
            "cache_ttl": 0,
            "timeout": 5,
        }

        result = _parse_section(section, config_path="test.toml")

        assert result.exclude == ["react", "react-dom"]
        assert result.concurrency == 4
        assert result.registry == "https://npm.example.com"
        assert result.cache is False
        assert result.cache_ttl == 0
        assert result.timeout == 5

    def test_raises_error_on_unknown_keys(self) -> None:
        section = {"unknown_key": "value", "another_unknown": True}

        with pytest.raises(ConfigError) as exc_info:
            _parse_section(section, config_path="test.toml")

        assert "Unknown configuration keys" in str(exc_info.value)
        assert "another_unknown, unknown_key" in str(exc_info.value)

    @pytest.mark.parametrize(
        "section,option,message",
        [
            ({"exclude": "react"}, "exclude", "exclude must be a list"),
            ({"exclude": ["react", 1]}, "exclude", "exclude must be a list"),
            ({"concurrency": "8"}, "concurrency", "concurrency must be an integer"),
            ({"concurrency": True}, "concurrency", "concurrency must be an integer"),
            ({"concurrency": 0}, "concurrency", "concurrency must be >= 1"),
            ({"cache_ttl": -1}, "cache_ttl", "cache_ttl must be >= 0"),
            ({"timeout": 0}, "timeout", "timeout must be >= 1"),
            ({"cache": "yes"}, "cache", "cache must be a boolean"),
            ({"registry": "npm.example.com"}, "registry", "registry must be an http(s) URL"),
            ({"registry": 42}, "registry", "registry must be an http(s) URL"),
        ],
    )
    def test_invalid_values(
        self, section: Dict[str, Any], option: str, message: str
    ) -> None:
        with pytest.raises(ConfigError) as exc_info:
            _parse_section(section, config_path="test.toml")

        assert message in str(exc_info.value)
        assert exc_info.value.option == option
        assert exc_info.value.config_path == "test.toml"


@pytest.mark.unit
class TestLoadConfig:
    """Tests for load_config main function."""

    def test_returns_defaults_when_no_config_found(self, tmp_path: Path) -> None:
        with patch("depbump.config.Path.cwd", return_value=tmp_path):
            result = load_config()

        assert result == DepbumpConfig()
        assert result.source_path is None

    def test_loads_depbump_toml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "depbump.toml"
        config_file.write_text(
            '[depbump]\nexclude = ["react"]\nconcurrency = 8\n', encoding="utf-8"
        )

        with patch("depbump.config.Path.cwd", return_value=tmp_path):
            result = load_config()

        assert result.exclude == ["react"]
        assert result.concurrency == 8
        assert result.source_path == config_file

    def test_loads_pyproject_toml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "pyproject.toml"
        config_file.write_text("[tool.depbump]\ncache_ttl = 60\n", encoding="utf-8")

        with patch("depbump.config.Path.cwd", return_value=tmp_path):
            result = load_config()

        assert result.cache_ttl == 60
        assert result.source_path == config_file

    def test_loads_explicit_config_path(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text("[depbump]\ncache = false\n", encoding="utf-8")

        result = load_config(config_file)

        assert result.cache is False
        assert result.source_path == config_file.resolve()

    def test_explicit_pyproject_uses_tool_table(self, tmp_path: Path) -> None:
        config_file = tmp_path / "pyproject.toml"
        config_file.write_text(
            "[depbump]\ntimeout = 99\n[tool.depbump]\ntimeout = 7\n", encoding="utf-8"
        )

        result = load_config(config_file)

        assert result.timeout == 7

    def test_raises_error_when_section_not_a_table(self, tmp_path: Path) -> None:
        config_file = tmp_path / "depbump.toml"
        config_file.write_text("depbump = 5\n", encoding="utf-8")

        with patch("depbump.config.Path.cwd", return_value=tmp_path):
            with pytest.raises(ConfigError, match=r"\[depbump\] must be a table") as exc:
                load_config()

        assert exc.value.config_path == str(config_file)

    def test_raises_error_when_falsy_section_not_a_table(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text('depbump = ""\n', encoding="utf-8")

        with pytest.raises(ConfigError, match="got str"):
            load_config(config_file)

    def test_raises_error_when_tool_depbump_not_a_table(self, tmp_path: Path) -> None:
        config_file = tmp_path / "pyproject.toml"
        config_file.write_text('[tool]\ndepbump = "yes"\n', encoding="utf-8")

        with pytest.raises(ConfigError, match=r"\[tool.depbump\] must be a table"):
            load_config(config_file)

    def test_raises_error_when_tool_not_a_table(self, tmp_path: Path) -> None:
        config_file = tmp_path / "pyproject.toml"
        config_file.write_text("tool = 5\n", encoding="utf-8")

        with pytest.raises(ConfigError, match=r"\[tool\] must be a table, got int"):
            load_config(config_file)

    def test_raises_error_on_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "depbump.toml").write_text("invalid ][[ toml", encoding="utf-8")

        with patch("depbump.config.Path.cwd", return_value=tmp_path):
            with pytest.raises(ConfigError):
                load_config()

    def test_raises_error_on_unknown_keys(self, tmp_path: Path) -> None:
        (tmp_path / "depbump.toml").write_text(
            "[depbump]\nunknown_option = true\n", encoding="utf-8"
        )

        with patch("depbump.config.Path.cwd", return_value=tmp_path):
            with pytest.raises(ConfigError) as exc_info:
                load_config()

        assert "Unknown configuration keys" in str(exc_info.value)

    def test_handles_empty_depbump_section(self, tmp_path: Path) -> None:
        config_file = tmp_path / "depbump.toml"
        config_file.write_text("[depbump]\n", encoding="utf-8")

        with patch("depbump.config.Path.cwd", return_value=tmp_path):
            result = load_config()

        assert result.concurrency == 10
        assert result.source_path == config_file
