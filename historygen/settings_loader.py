import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
from pydantic import ValidationError
from historygen.constants import DEFAULT_SETTINGS
from historygen.exceptions import ConfigurationError
from historygen.schemas import GenerationSettings

logger = logging.getLogger(__name__)

# Flat override key -> (settings field, index inside a (min, max) pair or None)
OVERRIDE_FIELDS = {
    "start": ("date_range", 0),
    "end": ("date_range", 1),
    "commits_min": ("commit_range", 0),
    "commits_max": ("commit_range", 1),
    "skip_days_min": ("monthly_skip_range", 0),
    "skip_days_max": ("monthly_skip_range", 1),
    "message_file": ("message_file", None),
    "uniqueness": ("uniqueness", None),
    "skip_dates": ("skip_dates", None),
    "weekday_chances": ("weekday_skip_chance", None),
}


def _deep_merge(base: Dict[str, Any], extra: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in extra.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _format_error(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = error.get("msg", "").removeprefix("Value error, ")
    return f"{location}: {message}" if location else message


def read_config_file(config_path: str | Path) -> Dict[str, Any]:
    """Reads a JSON settings file; every failure is a ConfigurationError."""
    path = Path(config_path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError([f"Config file '{path}' not found."]) from e
    except UnicodeDecodeError as e:
        raise ConfigurationError([f"Config file '{path}' is not valid UTF-8."]) from e
    except json.JSONDecodeError as e:
        raise ConfigurationError([f"Invalid JSON in '{path.name}': {e}"]) from e
    except OSError as e:
        raise ConfigurationError([f"Failed to read '{path}': {e}"]) from e

    if not isinstance(data, dict):
        raise ConfigurationError([f"Config file '{path.name}' must hold a JSON object."])
    return data


def apply_overrides(
    data: Dict[str, Any], overrides: Optional[Dict[str, Any]]
) -> Dict[str, Any]:
    """Applies flat overrides (CLI flags, editor changes); None values are ignored."""
    result = copy.deepcopy(data)
    for key, value in (overrides or {}).items():
        if value is None:
            continue
        if key not in OVERRIDE_FIELDS:
            raise ConfigurationError([f"Unknown setting '{key}'."])
        field, index = OVERRIDE_FIELDS[key]
        if index is None:
            result[field] = value
        else:
            pair = list(result.get(field) or [None, None])
            pair[index] = value
            result[field] = pair
    return result


def validate_settings(data: Dict[str, Any]) -> GenerationSettings:
    try:
        return GenerationSettings.model_validate(data)
    except ValidationError as e:
        errors: List[str] = [_format_error(err) for err in e.errors()]
        logger.error(f"Settings validation failed: {errors}")
        raise ConfigurationError(errors) from e


def load_generation_settings(
    config_path: str | Path | None = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> GenerationSettings:
    """
    Defaults, deep-merged with an optional JSON config file, then flat
    overrides on top, validated as one GenerationSettings instance.
    """
    data = copy.deepcopy(DEFAULT_SETTINGS)
    if config_path:
        data = _deep_merge(data, read_config_file(config_path))
        logger.info(f"Loaded settings file '{config_path}'")
    return validate_settings(apply_overrides(data, overrides))


def settings_to_dict(settings: GenerationSettings) -> Dict[str, Any]:
    data = settings.model_dump(mode="json")
    data["skip_dates"] = sorted(data["skip_dates"])
    return data


def update_setting(settings: GenerationSettings, key: str, value: Any) -> GenerationSettings:
    """Returns a re-validated copy of ``settings`` with one field changed."""
    return validate_settings(apply_overrides(settings_to_dict(settings), {key: value}))
