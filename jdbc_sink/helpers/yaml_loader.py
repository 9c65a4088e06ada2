"""
Type-safe YAML loader for sink configuration files.
Provides a validated ruamel.yaml instance with proper type hints.
"""

from pathlib import Path
from typing import Protocol, TextIO, Union, cast

from ruamel.yaml import YAML

# Recursive type for nested YAML structures
ConfigValue = Union[str, int, float, bool, None, 'ConfigDict', list['ConfigValue']]
ConfigDict = dict[str, ConfigValue]


class YAMLLoader(Protocol):
    """Protocol for the YAML loader we rely on."""

    def load(self, stream: TextIO) -> ConfigValue:
        """Load YAML from stream."""
        ...


def _validate_yaml_loader(obj: object) -> None:
    """Runtime validation: Ensure YAML object has expected interface.

    Raises:
        AttributeError: If load is missing
        TypeError: If load is not callable
    """
    if not hasattr(obj, 'load'):
        raise AttributeError("YAML object missing required attribute: load")

    if not callable(obj.load):  # type: ignore[attr-defined]
        raise TypeError("YAML.load is not callable")


def _create_yaml_loader() -> YAMLLoader:
    """Create and validate the YAML loader instance.

    The safe loader builds plain dicts/lists and never executes code from
    YAML content.
    """
    yaml_obj = YAML(typ="safe", pure=True)

    _validate_yaml_loader(yaml_obj)

    return cast(YAMLLoader, yaml_obj)


# Singleton validated YAML loader instance
yaml: YAMLLoader = _create_yaml_loader()


def load_yaml_file(file_path: Path) -> ConfigValue:
    """Load YAML file with type safety.

    Args:
        file_path: Path to YAML file to load

    Returns:
        Parsed YAML content. An empty file yields ``{}``.

    Raises:
        FileNotFoundError: If file does not exist
    """
    if not file_path.exists():
        raise FileNotFoundError(f"YAML file not found: {file_path}")

    with file_path.open(encoding='utf-8') as f:
        raw: ConfigValue = yaml.load(f)
        if raw is None:
            return {}
        return raw
