from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

import yaml
from yaml.loader import SafeLoader


BASE_DIR = Path(__file__).resolve().parent.parent
APP_DATA_DIR = BASE_DIR / "app_data"
SETTINGS_PATH = APP_DATA_DIR / "settings.yaml"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def default_settings() -> Dict:
    return {
        "page_title": "ThyroidAI Diagnosis",
        "submit_delay_seconds": 1.5,
        "log_level": "INFO",
    }


def _normalize_settings(config: Dict) -> Dict:
    defaults = default_settings()

    if not isinstance(config, dict):
        logger.warning("Settings file does not hold a mapping, using defaults.")
        return defaults

    settings = dict(defaults)
    for key in config:
        if key not in defaults:
            logger.warning("Ignoring unknown setting '%s'.", key)

    title = config.get("page_title")
    if isinstance(title, str) and title.strip():
        settings["page_title"] = title.strip()
    elif title is not None:
        logger.warning("Invalid page_title %r, using default.", title)

    delay = config.get("submit_delay_seconds")
    if delay is not None:
        try:
            delay = float(delay)
        except (TypeError, ValueError):
            delay = -1.0
        if delay >= 0:
            settings["submit_delay_seconds"] = delay
        else:
            logger.warning("Invalid submit_delay_seconds %r, using default.", config.get("submit_delay_seconds"))

    level = config.get("log_level")
    if level is not None:
        name = str(level).strip().upper()
        if isinstance(logging.getLevelName(name), int):
            settings["log_level"] = name
        else:
            logger.warning("Invalid log_level %r, using default.", level)

    return settings


def load_settings(path: Optional[Path] = None) -> Dict:
    path = Path(path) if path is not None else SETTINGS_PATH
    if not path.exists():
        return default_settings()
    try:
        with path.open("r", encoding="utf-8") as file_obj:
            config = yaml.load(file_obj, Loader=SafeLoader)
    except yaml.YAMLError as exc:
        logger.warning("Could not parse %s: %s", path, exc)
        return default_settings()
    if config is None:
        return default_settings()
    return _normalize_settings(config)


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("screening").setLevel(level)
