"""
Persistent settings: display toggles, last opened document and log level.
"""

import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

from .log import get_logger

logger = get_logger(__name__)


# Configuration
CONFIG_DIR = Path(os.environ.get("FOUNTAINNAV_HOME", Path.home() / ".fountainnav"))
CONFIG_FILE = CONFIG_DIR / "config.json"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass
class DisplayOptions:
    """Which per-scene facts the outline shows. Preview on, the rest off."""

    preview: bool = True
    scene_numbers: bool = False
    characters: bool = False
    tasks: bool = False

    def toggle(self, name: str) -> bool:
        """Flip one option and return its new value."""
        value = not getattr(self, name)
        setattr(self, name, value)
        return value

    @classmethod
    def from_dict(cls, data: dict) -> "DisplayOptions":
        known = {f.name for f in fields(cls)}
        return cls(**{k: bool(v) for k, v in data.items() if k in known})


def default_config() -> dict:
    return {
        "display": asdict(DisplayOptions()),
        "last_document": None,
        "log_level": DEFAULT_LOG_LEVEL,
    }


class ConfigManager:
    """Reads and writes the JSON settings file."""

    @staticmethod
    def load_config() -> dict:
        """Load configuration, falling back to defaults."""
        config = default_config()
        if CONFIG_FILE.exists():
            try:
                stored = json.loads(CONFIG_FILE.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError) as e:
                logger.warning("Ignoring unreadable config %s: %s", CONFIG_FILE, e)
                return config
            if isinstance(stored, dict):
                display = stored.get("display")
                if isinstance(display, dict):
                    merged = {**config["display"], **display}
                    config["display"] = asdict(DisplayOptions.from_dict(merged))
                for key in ("last_document", "log_level"):
                    if key in stored:
                        config[key] = stored[key]
        return config

    @staticmethod
    def save_config(config: dict):
        """Save configuration."""
        CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_FILE.write_text(json.dumps(config, indent=2), encoding="utf-8")

    @staticmethod
    def get_display_options() -> DisplayOptions:
        return DisplayOptions.from_dict(ConfigManager.load_config()["display"])

    @staticmethod
    def save_display_options(options: DisplayOptions):
        config = ConfigManager.load_config()
        config["display"] = asdict(options)
        ConfigManager.save_config(config)

    @staticmethod
    def get_last_document() -> Optional[str]:
        return ConfigManager.load_config().get("last_document")

    @staticmethod
    def set_last_document(path: str):
        """Remember the document opened most recently."""
        config = ConfigManager.load_config()
        config["last_document"] = str(Path(path).resolve())
        ConfigManager.save_config(config)

    @staticmethod
    def get_log_level() -> str:
        return str(ConfigManager.load_config().get("log_level") or DEFAULT_LOG_LEVEL)
