import json
from datetime import date
from pathlib import Path

import pytest

from historygen.exceptions import ConfigurationError
from historygen.settings_loader import (
    apply_overrides,
    load_generation_settings,
    read_config_file,
    settings_to_dict,
    update_setting,
    validate_settings,
)

# --- load_generation_settings ---


def test_defaults_are_valid():
    settings = load_generation_settings()

    assert settings.date_range == (date(2020, 1, 1), date(2020, 1, 31))
    assert settings.commit_range == (0, 10)
    assert settings.monthly_skip_range == (4, 10)
    assert settings.message_file == Path("commits.txt")
    assert settings.uniqueness == 0.7
    assert settings.weekday_skip_chance["Sunday"] == 90


def test_config_file_is_deep_merged(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"commit_range": [2, 3], "weekday_skip_chance": {"Sunday": 0}}),
        encoding="utf-8",
    )

    settings = load_generation_settings(path)

    assert settings.commit_range == (2, 3)
    assert settings.weekday_skip_chance["Sunday"] == 0
    # Untouched weekdays keep their defaults
    assert settings.weekday_skip_chance["Saturday"] == 80


def test_overrides_win_over_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"date_range": ["2021-01-01", "2021-12-31"]}), encoding="utf-8")

    settings = load_generation_settings(
        path, {"end": "2021-06-30", "commits_max": 4, "uniqueness": None}
    )

    assert settings.date_range == (date(2021, 1, 1), date(2021, 6, 30))
    assert settings.commit_range == (0, 4)
    assert settings.uniqueness == 0.7


def test_skip_dates_and_weekday_overrides():
    settings = load_generation_settings(
        overrides={"skip_dates": ["2020-01-10"], "weekday_chances": {"friday": 50}}
    )

    assert settings.skip_dates == frozenset({date(2020, 1, 10)})
    assert settings.weekday_skip_chance == {"Friday": 50}


def test_empty_message_file_means_synthetic():
    settings = load_generation_settings(overrides={"message_file": ""})

    assert settings.message_file is None


# --- Validation errors ---


@pytest.mark.parametrize(
    "overrides, fragment",
    [
        ({"start": "2020-02-01", "end": "2020-01-01"}, "Start date"),
        ({"commits_min": 5, "commits_max": 2}, "Minimum commits"),
        ({"commits_min": -1}, "commit_range"),
        ({"skip_days_min": 9, "skip_days_max": 1}, "skipped days"),
        ({"uniqueness": 1.5}, "uniqueness"),
        ({"weekday_chances": {"Funday": 10}}, "Funday"),
        ({"weekday_chances": {"Monday": 101}}, "weekday_skip_chance"),
        ({"start": "not-a-date"}, "date_range"),
    ],
)
def test_invalid_settings_raise_configuration_error(overrides, fragment):
    with pytest.raises(ConfigurationError) as exc_info:
        load_generation_settings(overrides=overrides)

    assert any(fragment in error for error in exc_info.value.errors)


def test_unknown_override_key():
    with pytest.raises(ConfigurationError, match="Unknown setting"):
        apply_overrides({}, {"colour": "blue"})


def test_read_config_file_missing(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        read_config_file(tmp_path / "missing.json")


def test_read_config_file_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Invalid JSON"):
        read_config_file(path)


def test_read_config_file_invalid_utf8(tmp_path):
    path = tmp_path / "settings.json"
    path.write_bytes(b'{"uniqueness": "\xff"}')

    with pytest.raises(ConfigurationError, match="not valid UTF-8"):
        load_generation_settings(path)


def test_read_config_file_requires_object(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="JSON object"):
        read_config_file(path)


# --- Editing ---


def test_update_setting_returns_new_instance():
    original = load_generation_settings()

    updated = update_setting(original, "commits_min", 3)

    assert updated.commit_range == (3, 10)
    assert original.commit_range == (0, 10)


def test_update_setting_invalid_leaves_original():
    original = load_generation_settings()

    with pytest.raises(ConfigurationError):
        update_setting(original, "commits_min", 99)

    assert original.commit_range == (0, 10)


def test_settings_round_trip_through_dict():
    settings = load_generation_settings(overrides={"skip_dates": ["2020-01-09", "2020-01-02"]})

    data = settings_to_dict(settings)

    assert data["skip_dates"] == ["2020-01-02", "2020-01-09"]
    assert validate_settings(data) == settings
