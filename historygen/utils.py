import json
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List

from appdirs import AppDirs

from historygen.constants import LOG_FILE_NAME, MAX_SAVED_PATHS

# Saved repositories live in the per-user config directory
dirs = AppDirs("historygen", "historygen")
CONFIG_DIR = Path(dirs.user_config_dir)
CONFIG_FILE = CONFIG_DIR / "repo_config.json"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_MAX_BYTES = 5 * 1024 * 1024  # 5 MB

logger = logging.getLogger(__name__)


def setup_logging(level: int | str = logging.INFO, log_file: str | Path = LOG_FILE_NAME):
    """
    Sends every historygen log record to a rotating UTF-8 file.
    Console output belongs to rich, so no stream handler is installed.
    """
    handler = RotatingFileHandler(
        log_file, maxBytes=LOG_MAX_BYTES, backupCount=1, encoding="utf-8"
    )
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[handler])
    # GitPython logs every spawned git command at DEBUG
    logging.getLogger("git").setLevel(logging.WARNING)
    return logging.getLogger("HistoryGen")


def _empty_config() -> dict:
    return {"saved_paths": []}


def load_config() -> dict:
    """
    Reads the saved repository list, most recent first.
    A missing, unreadable or malformed file yields an empty list.
    """
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    if not CONFIG_FILE.is_file():
        return _empty_config()
    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            config = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
        logger.error(f"Failed to load config file: {e}", exc_info=True)
        return _empty_config()

    paths = config.get("saved_paths") if isinstance(config, dict) else None
    if not isinstance(paths, list):
        logger.warning(f"Ignoring malformed config file '{CONFIG_FILE}'")
        return _empty_config()
    config["saved_paths"] = [p for p in paths if isinstance(p, str)]
    return config


def save_path_to_config(path: str):
    """Moves ``path`` to the front of the saved list, keeping MAX_SAVED_PATHS entries."""
    config = load_config()
    clean_path = os.path.normpath(path)
    saved: List[str] = config["saved_paths"]
    if saved[:1] == [clean_path]:
        return

    others = [p for p in saved if p != clean_path]
    config["saved_paths"] = [clean_path] + others[: MAX_SAVED_PATHS - 1]
    try:
        with open(CONFIG_FILE, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=4)
    except OSError as e:
        logger.error(f"Failed to save config file: {e}", exc_info=True)
