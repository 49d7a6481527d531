"""Configuration loading and management."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

from .constants import DEFAULT_INDENT_SIZE, DEFAULT_MAX_FILE_SIZE
from .models import FormatOptions

TOOL_NAME = "razor-indent"
MAX_FILE_SIZE_ENV_VAR = "RAZOR_INDENT_MAX_FILE_SIZE"


@dataclass
class FormatterConfig:
    """Configuration for reindenting Razor documents.

    Attributes:
        indent_size: Columns per indent unit. Non-positive or non-finite
            values are accepted here and coerced to 2 by the formatter.
        adjust_text_blocks: Whether lines inside ``<text>``, ``<script>`` and
            ``<style>`` blocks are reindented.
        max_file_size: Maximum file size in bytes that will be processed.

    Examples:
        FormatterConfig(indent_size=4, adjust_text_blocks=False)
    """

    # Formatting
    indent_size: int = DEFAULT_INDENT_SIZE
    adjust_text_blocks: bool = True

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE

    def to_options(self) -> FormatOptions:
        return FormatOptions(
            indent_size=self.indent_size, adjust_text_blocks=self.adjust_text_blocks
        )


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Attributes:
        args: Arguments provided to the underlying `ValueError`.

    Examples:
        raise ConfigError("`adjust_text_blocks` must be a boolean")
    """


def load_config(search_path: Path) -> FormatterConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.razor-indent]`` table from `pyproject.toml` and the
    ``[razor-indent]`` or ``[tool.razor-indent]`` table from
    `.razor-indent.toml` when present. Returns default values when no
    configuration is found. TOML files that cannot be read or decoded are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        FormatterConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("Views"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", TOOL_NAME)]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / f".{TOOL_NAME}.toml",
            table_paths=[(TOOL_NAME,), ("tool", TOOL_NAME)],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return FormatterConfig()


_MISSING = object()


def _load_from_file(
    config_file: Path, table_paths: list[tuple[str, ...]]
) -> FormatterConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> FormatterConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return FormatterConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return FormatterConfig()

    # TOML keys may use dashes, e.g. `indent-size = 4`.
    normalized = {key.replace("-", "_"): value for key, value in raw_config.items()}
    try:
        return FormatterConfig(**normalized)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def validate_config(config: FormatterConfig) -> None:
    """Validate a `FormatterConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If `indent_size` is not a number, `adjust_text_blocks`
            is not a boolean, or `max_file_size` is not a positive integer.

    Examples:
        validate_config(FormatterConfig(indent_size=4))
    """
    if isinstance(config.indent_size, bool) or not isinstance(config.indent_size, (int, float)):
        raise ConfigError("`indent_size` must be a number")
    if not isinstance(config.adjust_text_blocks, bool):
        raise ConfigError("`adjust_text_blocks` must be a boolean")

    _ensure_integers({"max_file_size": config.max_file_size})
    _ensure_positive({"max_file_size": config.max_file_size})


def apply_overrides(config: FormatterConfig, **overrides: object) -> FormatterConfig:
    """Apply override values to a `FormatterConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        FormatterConfig: New configuration with the provided overrides applied.
        The original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `FormatterConfig`.

    Examples:
        updated = apply_overrides(config, indent_size=4)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def apply_environment(config: FormatterConfig) -> FormatterConfig:
    """Apply the ``RAZOR_INDENT_MAX_FILE_SIZE`` environment override.

    Args:
        config: Configuration loaded from files and command-line overrides.

    Returns:
        FormatterConfig: `config` with `max_file_size` taken from the
        environment when the variable is set.

    Raises:
        ConfigError: If the variable is set but is not a positive integer.

    Examples:
        os.environ["RAZOR_INDENT_MAX_FILE_SIZE"] = "204800"
        apply_environment(FormatterConfig()).max_file_size  # 204800
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return config

    try:
        max_size = int(env_value)
    except ValueError as error:
        raise ConfigError(
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {env_value} (expected positive integer)"
        ) from error
    if max_size <= 0:
        raise ConfigError(f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {max_size}.")

    return replace(config, max_file_size=max_size)


def build_config(search_path: Path, **overrides: object) -> FormatterConfig:
    """Load, override, and validate configuration.

    `RAZOR_INDENT_MAX_FILE_SIZE`, when set, replaces the configured size limit.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        FormatterConfig: Validated configuration ready for formatting.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), indent_size=4)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = apply_environment(config)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
