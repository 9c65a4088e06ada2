"""Immutable settings aggregate for one JDBC sink instance."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from jdbc_sink.core.field_mapping import FieldsMapping


class ConfigError(Exception):
    """Raised when sink configuration is missing or violates a rule."""

    pass


class SettingsArgumentError(ValueError):
    """Raised when JdbcSinkSettings is constructed with invalid arguments."""

    pass


class ErrorPolicy(Enum):
    """What the sink engine does when a write fails."""

    NOOP = "noop"
    THROW = "throw"
    RETRY = "retry"


# Explicit token table; lookups are done on the lower-cased token.
ERROR_POLICY_TOKENS: dict[str, ErrorPolicy] = {
    "noop": ErrorPolicy.NOOP,
    "throw": ErrorPolicy.THROW,
    "retry": ErrorPolicy.RETRY,
}


def parse_error_policy(token: str | None) -> ErrorPolicy:
    """Resolve an error policy name (case-insensitive).

    Args:
        token: Policy name such as ``"throw"`` or ``"RETRY"``.

    Returns:
        Matching ErrorPolicy.

    Raises:
        ConfigError: If the token is not a known policy.
    """
    policy = ERROR_POLICY_TOKENS.get((token or "").strip().lower())
    if policy is None:
        raise ConfigError(
            f"Invalid error policy '{token}'. "
            + f"Must be one of: {', '.join(p.name for p in ErrorPolicy)}"
        )
    return policy


@dataclass(frozen=True)
class JdbcSinkSettings:
    """Everything the sink engine needs to run.

    Attributes:
        connection: Database connection URI.
        user: Database user.
        password: Database password (kept out of repr).
        mappings: One FieldsMapping per statement, in statement order.
        error_policy: Reaction to write failures.
        max_retries: Retry budget for the RETRY policy.
        batch_size: Records written per batch.
        retry_delay: Milliseconds to wait before a retry.
    """

    connection: str
    user: str | None
    password: str | None = field(repr=False)
    mappings: tuple[FieldsMapping, ...]
    error_policy: ErrorPolicy
    max_retries: int
    batch_size: int
    retry_delay: int

    def __post_init__(self) -> None:
        if not self.connection:
            raise SettingsArgumentError("Invalid connection value. Cannot be null or empty")
        if self.retry_delay <= 0:
            raise SettingsArgumentError(
                "Invalid retryDelay value. Needs to be greater than zero"
            )
        if self.batch_size <= 0:
            raise SettingsArgumentError(
                "Invalid batchSize value. Needs to be greater than zero"
            )
        object.__setattr__(self, "mappings", tuple(self.mappings))

    @property
    def table_names(self) -> frozenset[str]:
        """Distinct destination tables across all mappings."""
        return frozenset(mapping.table_name for mapping in self.mappings)
