#!/usr/bin/env python3
"""JDBC sink settings CLI.

Usage:
    jdbc-sink <command> [options]

Commands:
    check      Validate a sink config file and summarize the resulting settings
    describe   Parse one mapping statement and show its field mapping
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from jdbc_sink.core.mapping_builder import build_fields_mapping
from jdbc_sink.core.settings import ConfigError
from jdbc_sink.core.settings_aggregator import settings_from_config
from jdbc_sink.core.sink_config import load_sink_config
from jdbc_sink.helpers.helpers_logging import (
    print_error,
    print_header,
    print_info,
    print_success,
    silent,
)
from jdbc_sink.validators.mapping_validator import validate_fields_mapping
from jdbc_sink.validators.statement_parser import (
    StatementSyntaxError,
    parse_statement,
)


@click.group(name="jdbc-sink", invoke_without_command=False)
def _click_cli() -> None:
    """Validate JDBC sink export mappings."""


@_click_cli.command("check")
@click.argument(
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("--quiet", "-q", is_flag=True, help="Do not print each built mapping.")
def check_cmd(config_file: Path, quiet: bool) -> int:
    """Validate CONFIG_FILE and summarize the resulting settings."""
    try:
        config = load_sink_config(config_file)
        settings = settings_from_config(config, log=silent if quiet else print_info)
    except (ConfigError, ValueError) as e:
        print_error(str(e))
        return 1

    print_header(f"Sink settings: {config_file}")
    print_info(f"  Connection:   {settings.connection}")
    print_info(f"  Mappings:     {len(settings.mappings)}")
    print_info(f"  Tables:       {', '.join(sorted(settings.table_names))}")
    print_info(f"  Error policy: {settings.error_policy.name}")
    print_info(
        f"  Batch size:   {settings.batch_size}  "
        + f"(retries: {settings.max_retries}, delay: {settings.retry_delay}ms)"
    )
    print_success("Configuration is valid")
    return 0


@_click_cli.command("describe")
@click.argument("statement")
def describe_cmd(statement: str) -> int:
    """Parse STATEMENT and show the field mapping it produces."""
    parsed = parse_statement(statement)
    if isinstance(parsed, StatementSyntaxError):
        print_error(f"Syntax error: {parsed.reason}")
        return 1

    mapping = build_fields_mapping(parsed, log=silent)
    print_header(f"{mapping.source} → {mapping.table_name} ({mapping.write_mode.name})")
    if mapping.include_all_fields:
        print_info("  * (all fields)")
    for field_name, alias in mapping.mappings.items():
        marker = "  [pk]" if alias.is_primary_key else ""
        print_info(f"  {field_name} → {alias.name}{marker}")

    flags = [
        name
        for name, enabled in (
            ("AUTOCREATE", mapping.auto_create_table),
            ("AUTOEVOLVE", mapping.auto_evolve_table),
            ("CAPITALIZE", mapping.capitalize_names),
        )
        if enabled
    ]
    if flags:
        print_info(f"  Flags: {', '.join(flags)}")
    if mapping.ignored_fields:
        print_info(f"  Ignored: {', '.join(mapping.ignored_fields)}")

    error = validate_fields_mapping(mapping)
    if error is not None:
        print_error(error)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    try:
        result = _click_cli.main(
            args=sys.argv[1:] if argv is None else argv,
            prog_name="jdbc-sink",
            standalone_mode=False,
        )
    except click.Abort:
        print("\n⚠️  Cancelled by user")
        return 130
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    return 0 if result is None else int(result)


if __name__ == "__main__":
    sys.exit(main())
