"""Tests for host config keys, YAML loading and settings_from_config."""

from collections.abc import Callable
from pathlib import Path

import pytest  # type: ignore[import-not-found]

from jdbc_sink.core import sink_config
from jdbc_sink.core.settings import ConfigError, ErrorPolicy
from jdbc_sink.core.settings_aggregator import settings_from_config


def _quiet(_msg: str) -> None:
    pass


def _minimal_config(**extra: object) -> dict[str, object]:
    config: dict[str, object] = {
        sink_config.DATABASE_CONNECTION_URI: "jdbc:sqlite:sink.db",
        sink_config.EXPORT_MAPPINGS: "INSERT INTO t SELECT * FROM s",
    }
    config.update(extra)
    return config


class TestLoadSinkConfig:
    """Tests for load_sink_config."""

    def test_loads_mapping(self, make_config_file: Callable[..., Path]) -> None:
        config = sink_config.load_sink_config(make_config_file())
        assert config[sink_config.DATABASE_CONNECTION_URI] == "jdbc:postgresql://db:5432/shop"
        assert config[sink_config.MAX_RETRIES] == 5
        mappings = config[sink_config.EXPORT_MAPPINGS]
        assert isinstance(mappings, str)
        assert mappings.count(";") == 1

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            sink_config.load_sink_config(tmp_path / "missing.yaml")

    def test_top_level_list_rejected(self, make_config_file: Callable[..., Path]) -> None:
        with pytest.raises(ValueError, match="mapping at top level"):
            sink_config.load_sink_config(make_config_file("- a\n- b\n"))

    def test_malformed_yaml(self, make_config_file: Callable[..., Path]) -> None:
        with pytest.raises(ValueError, match="is not valid YAML") as exc_info:
            sink_config.load_sink_config(make_config_file("a: [unclosed\n"))
        assert exc_info.value.__cause__ is not None

    def test_duplicate_keys(self, make_config_file: Callable[..., Path]) -> None:
        with pytest.raises(ValueError, match="is not valid YAML"):
            sink_config.load_sink_config(make_config_file("a: 1\na: 2\n"))

    def test_empty_file(self, make_config_file: Callable[..., Path]) -> None:
        assert sink_config.load_sink_config(make_config_file("")) == {}


class TestSettingsFromConfig:
    """Tests for settings_from_config."""

    def test_from_yaml(self, make_config_file: Callable[..., Path]) -> None:
        config = sink_config.load_sink_config(make_config_file())
        settings = settings_from_config(config, log=_quiet)
        assert settings.user == "sink"
        assert settings.password == "secret"
        assert settings.error_policy is ErrorPolicy.RETRY
        assert settings.max_retries == 5
        assert settings.batch_size == 500
        assert settings.retry_delay == 2000
        assert settings.table_names == frozenset({"orders", "customers"})
        customers = settings.mappings[1]
        assert customers.mappings["name"].name == "full_name"
        assert customers.primary_keys == ["id"]

    def test_defaults(self) -> None:
        settings = settings_from_config(_minimal_config(), log=_quiet)
        assert settings.user is None
        assert settings.password is None
        assert settings.error_policy is ErrorPolicy.THROW
        assert settings.max_retries == sink_config.MAX_RETRIES_DEFAULT
        assert settings.batch_size == sink_config.BATCH_SIZE_DEFAULT
        assert settings.retry_delay == sink_config.RETRY_INTERVAL_DEFAULT

    def test_string_integers(self) -> None:
        settings = settings_from_config(
            _minimal_config(**{sink_config.BATCH_SIZE: " 25 ", sink_config.MAX_RETRIES: "3"}),
            log=_quiet,
        )
        assert settings.batch_size == 25
        assert settings.max_retries == 3

    @pytest.mark.parametrize("value", ["many", True, "1.5"])
    def test_bad_integer(self, value: object) -> None:
        with pytest.raises(ConfigError, match=sink_config.BATCH_SIZE):
            settings_from_config(_minimal_config(**{sink_config.BATCH_SIZE: value}), log=_quiet)

    def test_missing_mappings(self) -> None:
        config = _minimal_config()
        del config[sink_config.EXPORT_MAPPINGS]
        with pytest.raises(ConfigError, match="is not set"):
            settings_from_config(config, log=_quiet)

    def test_missing_connection(self) -> None:
        config = _minimal_config()
        del config[sink_config.DATABASE_CONNECTION_URI]
        with pytest.raises(ConfigError, match=sink_config.DATABASE_CONNECTION_URI):
            settings_from_config(config, log=_quiet)

    def test_unknown_key_warns(self, capsys: pytest.CaptureFixture[str]) -> None:
        settings_from_config(_minimal_config(**{"connect.jdbc.sink.typo": 1}), log=_quiet)
        assert "Ignoring unknown sink config key 'connect.jdbc.sink.typo'" in (
            capsys.readouterr().out
        )

    def test_unknown_keys_sorted(self) -> None:
        config = _minimal_config(b=1, a=2)
        assert sink_config.unknown_keys(config) == ["a", "b"]
