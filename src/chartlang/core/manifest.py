import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ConfigError

CONFIG_FILENAME = "chartlang.toml"
OUTPUT_FORMATS = ("json", "yaml")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ParserConfig:
    """Parser configuration."""

    root_id: str = "machine"  # id of the synthetic root for several top-level states


@dataclass
class OutputConfig:
    """Serialization of parse results."""

    format: str = "json"  # "json" | "yaml"
    indent: int = 2


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class ChartlangConfig:
    """Contents of a chartlang.toml file."""

    parser: ParserConfig = field(default_factory=ParserConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    path: Path | None = None


def find_config(start: Path) -> Path | None:
    """
    Look for chartlang.toml in ``start`` and its parent directories.

    Returns:
        Path to the nearest config file, or None if there is none
    """
    start = start.resolve()
    directory = start if start.is_dir() else start.parent
    for candidate in (directory, *directory.parents):
        config_path = candidate / CONFIG_FILENAME
        if config_path.is_file():
            return config_path
    return None


def load_config(path: Path | None) -> ChartlangConfig:
    """
    Load a chartlang.toml file.

    A missing path (None) or missing sections fall back to defaults.

    Raises:
        ConfigError: If the file is not valid TOML or holds unusable values
    """
    if path is None:
        return ChartlangConfig()

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    parser_data = data.get("parser", {})
    output_data = data.get("output", {})
    logging_data = data.get("logging", {})

    output_format = str(output_data.get("format", "json")).lower()
    if output_format not in OUTPUT_FORMATS:
        raise ConfigError(
            f"Unknown output format {output_format!r} in {path} "
            f"(expected one of: {', '.join(OUTPUT_FORMATS)})"
        )

    indent = output_data.get("indent", 2)
    if not isinstance(indent, int) or isinstance(indent, bool) or indent < 0:
        raise ConfigError(f"Output indent must be a non-negative integer in {path}, got {indent!r}")

    level = str(logging_data.get("level", "WARNING")).upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"Unknown log level {level!r} in {path}")

    root_id = parser_data.get("root_id", "machine")
    if not isinstance(root_id, str) or not root_id:
        raise ConfigError(f"Parser root_id must be a non-empty string in {path}")

    return ChartlangConfig(
        parser=ParserConfig(root_id=root_id),
        output=OutputConfig(format=output_format, indent=indent),
        logging=LoggingConfig(level=level),
        path=path,
    )
