"""Tests for the JdbcSinkSettings aggregate and error policies."""

import copy
import pickle
from dataclasses import FrozenInstanceError

import pytest  # type: ignore[import-not-found]

from jdbc_sink.core.field_mapping import FieldAlias, FieldsMapping
from jdbc_sink.core.settings import (
    ConfigError,
    ErrorPolicy,
    JdbcSinkSettings,
    SettingsArgumentError,
    parse_error_policy,
)


def _settings(**overrides: object) -> JdbcSinkSettings:
    values: dict[str, object] = {
        "connection": "jdbc:postgresql://db:5432/shop",
        "user": "sink",
        "password": "s3cret",
        "mappings": (
            FieldsMapping(table_name="orders", source="orders_topic"),
            FieldsMapping(table_name="orders", source="orders_backfill"),
            FieldsMapping(table_name="customers", source="customers_topic"),
        ),
        "error_policy": ErrorPolicy.THROW,
        "max_retries": 10,
        "batch_size": 3000,
        "retry_delay": 60000,
    }
    values.update(overrides)
    return JdbcSinkSettings(**values)  # type: ignore[arg-type]


class TestParseErrorPolicy:
    """Tests for parse_error_policy."""

    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("noop", ErrorPolicy.NOOP),
            ("THROW", ErrorPolicy.THROW),
            ("Retry", ErrorPolicy.RETRY),
            (" retry ", ErrorPolicy.RETRY),
        ],
    )
    def test_known_tokens(self, token: str, expected: ErrorPolicy) -> None:
        assert parse_error_policy(token) is expected

    @pytest.mark.parametrize("token", ["ignore", "", None, "THROW_ALL"])
    def test_unknown_tokens(self, token: str | None) -> None:
        with pytest.raises(ConfigError, match="Must be one of: NOOP, THROW, RETRY"):
            parse_error_policy(token)


class TestJdbcSinkSettings:
    """Tests for direct JdbcSinkSettings construction."""

    def test_table_names_are_distinct(self) -> None:
        settings = _settings()
        assert settings.table_names == frozenset({"orders", "customers"})

    def test_table_names_empty_without_mappings(self) -> None:
        assert _settings(mappings=()).table_names == frozenset()

    def test_mappings_stored_as_tuple(self) -> None:
        mappings = [FieldsMapping(table_name="a", source="ta")]
        settings = _settings(mappings=mappings)
        mappings.append(FieldsMapping(table_name="b", source="tb"))
        assert isinstance(settings.mappings, tuple)
        assert len(settings.mappings) == 1

    def test_password_not_in_repr(self) -> None:
        assert "s3cret" not in repr(_settings())

    def test_frozen(self) -> None:
        settings = _settings()
        with pytest.raises(FrozenInstanceError):
            settings.batch_size = 1  # type: ignore[misc]

    @pytest.mark.parametrize("connection", ["", None])
    def test_missing_connection(self, connection: str | None) -> None:
        with pytest.raises(SettingsArgumentError, match="connection"):
            _settings(connection=connection)

    @pytest.mark.parametrize("batch_size", [0, -1])
    def test_non_positive_batch_size(self, batch_size: int) -> None:
        with pytest.raises(SettingsArgumentError, match="batchSize"):
            _settings(batch_size=batch_size)

    @pytest.mark.parametrize("retry_delay", [0, -5])
    def test_non_positive_retry_delay(self, retry_delay: int) -> None:
        with pytest.raises(SettingsArgumentError, match="retryDelay"):
            _settings(retry_delay=retry_delay)

    def test_argument_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            _settings(batch_size=0)

    def test_max_retries_not_range_checked(self) -> None:
        assert _settings(max_retries=0).max_retries == 0

    def test_hash_deepcopy_and_pickle(self) -> None:
        settings = _settings(
            mappings=(
                FieldsMapping(
                    table_name="orders",
                    source="orders_topic",
                    mappings={"id": FieldAlias("id", True)},
                ),
            ),
        )
        copied = copy.deepcopy(settings)
        restored = pickle.loads(pickle.dumps(settings))
        assert copied == settings
        assert restored == settings
        assert hash(restored) == hash(settings)
        assert restored.mappings[0].mappings["id"] == FieldAlias("id", True)
