"""Pre-DB bootstrap configuration. Zero imports from the rest of the app.

Stores preferences that must be known before opening the DB (db_folder,
the last email used at the login dialog, log level).
Config lives in ~/.controle_facil/config.json to avoid a bootstrapping problem.
"""
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

CONFIG_DIR = Path.home() / ".controle_facil"
CONFIG_FILE = CONFIG_DIR / "config.json"
LOG_FILE = CONFIG_DIR / "controle_facil.log"

logger = logging.getLogger(__name__)


def load_config() -> dict:
    """Returns {} on missing or corrupt file, never raises."""
    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError):
        logger.warning("Ignoring unreadable config file %s", CONFIG_FILE)
        return {}


def save_config(config: dict) -> None:
    """Creates the config dir if needed; atomic write via .tmp + os.replace()."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    tmp = CONFIG_FILE.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, CONFIG_FILE)
    except OSError:
        logger.exception("Could not save config to %s", CONFIG_FILE)
        tmp.unlink(missing_ok=True)


def _set(key: str, value) -> None:
    config = load_config()
    if value is None:
        config.pop(key, None)
    else:
        config[key] = value
    save_config(config)


def get_db_folder() -> str | None:
    """Return config["db_folder"] or None if not set."""
    return load_config().get("db_folder")


def set_db_folder(path: str | None) -> None:
    _set("db_folder", path)


def get_last_email() -> str:
    return load_config().get("last_email", "")


def set_last_email(email: str | None) -> None:
    _set("last_email", email)


def configure_logging(level: str | None = None) -> None:
    """Rotating log file next to the config plus stderr."""
    level_name = (level or load_config().get("log_level") or "INFO").upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.INFO))
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(fmt)
    root.addHandler(stream)

    try:
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            LOG_FILE, maxBytes=512 * 1024, backupCount=3, encoding="utf-8"
        )
    except OSError:
        logger.warning("File logging disabled; cannot write %s", LOG_FILE)
        return
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)
