from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from ratatype.core.history import default_history_path
from ratatype.core.texts import MAX_WORD_LENGTH, MIN_WORD_LENGTH, TextSource

logger = logging.getLogger(__name__)

DEFAULT_DURATION = 30
DEFAULT_MAX_WORD_LENGTH = 7
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(ValueError):
    """An option value that must be rejected before a session is created."""


def config_dir() -> Path:
    return Path.home() / ".ratatype"


def default_config_path() -> Path:
    return config_dir() / "config.yaml"


def default_log_path() -> Path:
    return config_dir() / "ratatype.log"


@dataclass(frozen=True)
class Settings:
    duration: int = DEFAULT_DURATION
    require_correction: bool = False
    text_source: TextSource = TextSource.GOOGLE
    max_word_length: int = DEFAULT_MAX_WORD_LENGTH
    history_file: Path = field(default_factory=default_history_path)
    log_level: str = "INFO"

    def merged(self, values: Mapping[str, Any]) -> "Settings":
        """Return a copy with the recognised, non-None ``values`` validated and applied."""
        changes: Dict[str, Any] = {}
        for key, value in values.items():
            if value is None or key not in _VALIDATORS:
                continue
            changes[key] = _VALIDATORS[key](value)
        return replace(self, **changes)


def _parse_int(value: Any, message: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(message)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise ConfigError(message) from None


def validate_duration(value: Any) -> int:
    duration = _parse_int(value, f"Duration must be a positive integer, got {value!r}")
    if duration <= 0:
        raise ConfigError(f"Duration must be a positive integer, got {value!r}")
    return duration


def validate_max_word_length(value: Any) -> int:
    length = _parse_int(value, "Must be a positive integer")
    if length < MIN_WORD_LENGTH:
        raise ConfigError(f"Word length must be at least {MIN_WORD_LENGTH}")
    if length > MAX_WORD_LENGTH:
        raise ConfigError(f"Word length must be {MAX_WORD_LENGTH} or less")
    return length


def validate_text_source(value: Any) -> TextSource:
    if isinstance(value, TextSource):
        return value
    try:
        return TextSource.parse(str(value))
    except ValueError as e:
        raise ConfigError(str(e)) from None


def validate_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("true", "yes", "on", "1"):
        return True
    if text in ("false", "no", "off", "0"):
        return False
    raise ConfigError(f"Expected a boolean, got {value!r}")


def validate_log_level(value: Any) -> str:
    level = str(value).strip().upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"Invalid log level '{value}'. Valid options: {', '.join(LOG_LEVELS)}")
    return level


def validate_path(value: Any) -> Path:
    return Path(str(value)).expanduser()


_VALIDATORS = {
    "duration": validate_duration,
    "require_correction": validate_bool,
    "text_source": validate_text_source,
    "max_word_length": validate_max_word_length,
    "history_file": validate_path,
    "log_level": validate_log_level,
}


def load_config_file(path: Optional[Path] = None) -> Dict[str, Any]:
    """Read option values from a YAML file.

    A missing file yields no values. An unreadable or malformed file is
    logged and ignored; value validation happens in :meth:`Settings.merged`.
    """
    path = path or default_config_path()
    if not path.exists():
        return {}
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, OSError) as e:
        logger.warning("Could not load config from %s: %s", path, e)
        return {}
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        logger.warning("Ignoring config %s: expected a mapping at the top level", path)
        return {}
    unknown = sorted(str(key) for key in raw if key not in _VALIDATORS)
    if unknown:
        logger.warning("Ignoring unknown config keys in %s: %s", path, ", ".join(unknown))
    return {key: value for key, value in raw.items() if key in _VALIDATORS}
