"""Loading of the colour threshold configuration file."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import json5

from proctop.thresholds import (
    DEFAULT_FOREGROUND,
    DEFAULT_RULES,
    Color,
    ColorRule,
    normalize_rules,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config.json")


class ConfigError(ValueError):
    """Raised when configuration content is malformed."""


@dataclass(slots=True, frozen=True)
class MonitorConfig:
    """Effective colour configuration. Rule tuples are sorted descending."""

    cpu_rules: tuple[ColorRule, ...] = DEFAULT_RULES
    memory_rules: tuple[ColorRule, ...] = DEFAULT_RULES
    default_foreground: Color = DEFAULT_FOREGROUND


def _normalize_key(key: str) -> str:
    return key.replace("_", "").lower()


def _require(data: dict[str, Any], key: str) -> Any:
    try:
        return data[_normalize_key(key)]
    except KeyError:
        raise ConfigError(f"missing required field {key!r}") from None


def _lowered(obj: Any, what: str) -> dict[str, Any]:
    if not isinstance(obj, dict):
        raise ConfigError(f"{what} must be an object")
    return {_normalize_key(str(key)): value for key, value in obj.items()}


def _parse_color(value: Any, what: str) -> Color:
    if not isinstance(value, str):
        raise ConfigError(f"{what} must be a color name")
    try:
        return Color.parse(value)
    except ValueError as exc:
        raise ConfigError(f"{what}: {exc}") from None


def _parse_rules(value: Any, what: str) -> tuple[ColorRule, ...]:
    if not isinstance(value, list):
        raise ConfigError(f"{what} must be a list")

    rules = []
    for index, item in enumerate(value):
        entry = _lowered(item, f"{what}[{index}]")
        threshold = _require(entry, "Percentage")
        # bool is an int subclass; reject it explicitly
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
            raise ConfigError(f"{what}[{index}].Percentage must be a number")
        rules.append(
            ColorRule(
                threshold=threshold,
                background=_parse_color(
                    _require(entry, "BackgroundColor"), f"{what}[{index}].BackgroundColor"
                ),
                foreground=_parse_color(
                    _require(entry, "ForegroundColor"), f"{what}[{index}].ForegroundColor"
                ),
            )
        )
    return normalize_rules(rules)


def parse_config(data: Any) -> MonitorConfig:
    """
    Build a MonitorConfig from decoded JSON.

    Keys match case-insensitively and ignore underscores, so both
    "CpuThresholds" and "cpu_thresholds" are accepted.

    Raises:
        ConfigError: If a field is missing or has the wrong shape.
    """
    root = _lowered(data, "configuration")
    return MonitorConfig(
        cpu_rules=_parse_rules(_require(root, "CpuThresholds"), "CpuThresholds"),
        memory_rules=_parse_rules(_require(root, "MemoryThresholds"), "MemoryThresholds"),
        default_foreground=_parse_color(
            _require(root, "DefaultForegroundColor"), "DefaultForegroundColor"
        ),
    )


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> tuple[MonitorConfig, str | None]:
    """
    Load the configuration file, falling back to built-in defaults.

    The file is JSON5, so comments and trailing commas are allowed.

    Never raises for a bad file. The second element of the result is a
    one-line diagnostic describing why the defaults were used, or None.
    """
    path = Path(path)
    diagnostic = None

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        diagnostic = f"{path.name} not found. Using default values."
    except OSError as exc:
        diagnostic = f"Error reading {path.name}: {exc.strerror or exc}. Using default values."
    except UnicodeDecodeError as exc:
        diagnostic = f"Error reading {path.name}: {exc.reason}. Using default values."
    else:
        try:
            data = json5.loads(text)
        except ValueError as exc:
            diagnostic = f"Error reading {path.name}: {exc}. Using default values."
        else:
            try:
                return parse_config(data), None
            except ConfigError as exc:
                diagnostic = f"Invalid {path.name}: {exc}. Using default values."

    logger.warning(diagnostic)
    return MonitorConfig(), diagnostic
