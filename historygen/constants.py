# historygen/constants.py

"""
Central configuration for application constants, defaults, and UI strings.
Avoids circular imports and keeps menu labels in one place.
"""

# --- File System Constants ---
LOG_FILE_NAME = "history_generation.log"
SCRATCH_FILE_NAME = "data.json"
MAX_SAVED_PATHS = 10

# --- Commit Emission ---
# Noon keeps the forced timestamp away from timezone day boundaries.
COMMIT_HOUR = 12
SYNTHETIC_MESSAGE_PREFIX = "chore: update"
SYNTHETIC_TOKEN_LENGTH = 5

# --- Calendar ---
WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

# --- Default Generation Settings ---
DEFAULT_SETTINGS = {
    "date_range": ["2020-01-01", "2020-01-31"],
    "commit_range": [0, 10],
    "monthly_skip_range": [4, 10],
    "message_file": "commits.txt",
    "uniqueness": 0.7,
    "skip_dates": [],
    "weekday_skip_chance": {
        "Sunday": 90,
        "Monday": 10,
        "Tuesday": 5,
        "Wednesday": 5,
        "Thursday": 10,
        "Friday": 20,
        "Saturday": 80,
    },
}

# --- Menu Options (Single Source of Truth) ---
OPT_START = "🚀 Start Generation"
OPT_EDIT = "✏️  Edit Settings"
OPT_EXIT = "❌ Exit"

# Maps the user-facing label in the settings editor to the override key
# understood by settings_loader.update_setting().
EDITABLE_FIELDS = {
    "📅 Start Date": "start",
    "📅 End Date": "end",
    "🔢 Min Commits per Day": "commits_min",
    "🔢 Max Commits per Day": "commits_max",
    "⏭️  Min Skipped Days per Month": "skip_days_min",
    "⏭️  Max Skipped Days per Month": "skip_days_max",
    "📝 Message File": "message_file",
    "🎲 Uniqueness": "uniqueness",
    "📌 Fixed Skip Dates": "skip_dates",
    "📆 Weekday Skip Chances": "weekday_chances",
}
OPT_DONE_EDITING = "✅ Done Editing"
