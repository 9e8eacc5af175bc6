# historygen/tui.py

"""
Terminal User Interface (TUI) components for user interaction.
"""

import json
import os
from datetime import date
from typing import Any

import questionary

from historygen.constants import (
    EDITABLE_FIELDS,
    OPT_DONE_EDITING,
    OPT_EDIT,
    OPT_EXIT,
    OPT_START,
)

DATE_KEYS = {"start", "end"}
INT_KEYS = {"commits_min", "commits_max", "skip_days_min", "skip_days_max"}


def get_repository_path(saved_paths):
    """Interactively asks user to select or input a repo path."""
    selected_path = None

    if saved_paths:
        choices = saved_paths + ["-- Enter a New Path --"]
        choice = questionary.select("Select a repository:", choices=choices).ask()
        if choice != "-- Enter a New Path --":
            selected_path = choice

    if not selected_path:
        selected_path = questionary.path(
            "Enter path to local git repository:",
            default=".",
            only_directories=True,
            validate=lambda p: os.path.isdir(p.strip("\"'")) or "Directory not found.",
        ).ask()
        if selected_path:
            selected_path = selected_path.strip("\"'")

    return selected_path


def get_dashboard_action():
    """Returns 'start', 'edit' or 'exit' (None if the prompt was aborted)."""
    return questionary.select(
        "What do you want to do?",
        choices=[
            questionary.Choice(OPT_START, value="start"),
            questionary.Choice(OPT_EDIT, value="edit"),
            questionary.Separator(),
            questionary.Choice(OPT_EXIT, value="exit"),
        ],
    ).ask()


def get_setting_to_edit():
    """Returns the override key of the chosen parameter, or None when done."""
    choices = [questionary.Choice(label, value=key) for label, key in EDITABLE_FIELDS.items()]
    choices.append(questionary.Separator())
    choices.append(questionary.Choice(OPT_DONE_EDITING, value="done"))
    key = questionary.select("Select a parameter to change:", choices=choices).ask()
    return None if key == "done" else key


def _is_valid_date(text: str):
    try:
        date.fromisoformat(text.strip())
        return True
    except ValueError:
        return "Invalid date, use YYYY-MM-DD."


def _is_non_negative_int(text: str):
    return text.strip().isdigit() or "Enter a whole number of zero or more."


def _is_fraction(text: str):
    try:
        value = float(text)
    except ValueError:
        return "Enter a number between 0 and 1."
    return 0.0 <= value <= 1.0 or "Enter a number between 0 and 1."


def _is_json(expected_type):
    def _validate(text: str):
        try:
            value = json.loads(text)
        except json.JSONDecodeError:
            return "Invalid JSON."
        return isinstance(value, expected_type) or f"Expected a JSON {expected_type.__name__}."

    return _validate


def prompt_setting_value(key: str, current: Any):
    """
    Asks for a new value of one parameter and returns it parsed,
    or None if the user aborted the prompt.
    """
    if key in DATE_KEYS:
        answer = questionary.text(
            "New date (YYYY-MM-DD):", default=str(current), validate=_is_valid_date
        ).ask()
        return answer.strip() if answer else None

    if key in INT_KEYS:
        answer = questionary.text(
            "New value:", default=str(current), validate=_is_non_negative_int
        ).ask()
        return int(answer) if answer else None

    if key == "uniqueness":
        answer = questionary.text(
            "New uniqueness (0-1):", default=str(current), validate=_is_fraction
        ).ask()
        return float(answer) if answer else None

    if key == "message_file":
        # An empty answer switches to generated messages
        answer = questionary.text(
            "Message file path (empty for auto-generated):", default=str(current or "")
        ).ask()
        return answer.strip() if answer is not None else None

    if key == "skip_dates":
        answer = questionary.text(
            "Fixed skip dates (JSON array):",
            default=json.dumps(current),
            validate=_is_json(list),
        ).ask()
        return json.loads(answer) if answer else None

    if key == "weekday_chances":
        answer = questionary.text(
            "Weekday skip chances (JSON object):",
            default=json.dumps(current),
            validate=_is_json(dict),
        ).ask()
        return json.loads(answer) if answer else None

    raise ValueError(f"Unknown setting '{key}'")


def confirm_synthetic_fallback(path):
    return questionary.confirm(
        f"Message file '{path}' not found. Use auto-generated messages?",
        default=True,
    ).ask()


def confirm_push():
    return questionary.confirm("Push the new commits?", default=True).ask()
