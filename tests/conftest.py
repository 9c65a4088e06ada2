"""Shared fixtures for the sink settings test suite.

Provides a ``make_config_file`` factory that writes a sink YAML config into
``tmp_path`` so loader and CLI tests don't each build their own files.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

VALID_CONFIG = """\
connect.jdbc.connection.uri: jdbc:postgresql://db:5432/shop
connect.jdbc.connection.user: sink
connect.jdbc.connection.password: secret
connect.jdbc.sink.export.mappings: >-
  INSERT INTO orders SELECT id, amount FROM orders_topic PK id;
  UPSERT INTO customers SELECT id, name AS full_name FROM customers_topic PK id AUTOCREATE
connect.jdbc.sink.error.policy: retry
connect.jdbc.sink.max.retries: 5
connect.jdbc.sink.batch.size: 500
connect.jdbc.sink.retry.interval: 2000
"""


@pytest.fixture()
def make_config_file(tmp_path: Path) -> Callable[[str], Path]:
    """Factory writing YAML content to ``tmp_path/sink.yaml``."""

    def _make(content: str = VALID_CONFIG) -> Path:
        path = tmp_path / "sink.yaml"
        path.write_text(content, encoding="utf-8")
        return path

    return _make
