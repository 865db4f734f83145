"""Configuration management for DevLog."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .categories import DEFAULT_CATEGORIES
from .core.sprints import SPRINT_DURATIONS

logger = logging.getLogger(__name__)

DEVLOG_HOME = Path(os.environ.get("DEVLOG_HOME", Path.home() / "devlog"))
CONFIG_FILE = DEVLOG_HOME / "config" / "devlog.conf"
DATA_DIR = DEVLOG_HOME / "data"
DB_FILE_NAME = "daily-updates.sqlite"


@dataclass
class Config:
    """DevLog configuration."""

    data_dir: str = ""
    db_path: str = ""
    reports_dir: str = ""
    # None = sprints are open-ended unless a duration is given
    default_duration_days: int | None = None
    default_categories: list[str] = field(default_factory=lambda: list(DEFAULT_CATEGORIES))

    @property
    def data_path(self) -> Path:
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return DATA_DIR

    @property
    def db_file(self) -> Path:
        if self.db_path:
            return Path(self.db_path).expanduser()
        return self.data_path / DB_FILE_NAME

    @property
    def reports_path(self) -> Path:
        if self.reports_dir:
            return Path(self.reports_dir).expanduser()
        return self.data_path / "reports"


def _unquote(value: str) -> str:
    """Strip surrounding quotes, or an inline comment from unquoted values."""
    if value.startswith(('"', "'")):
        quote = value[0]
        end_quote = value.find(quote, 1)
        if end_quote != -1:
            return value[1:end_quote]
        return value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def _parse_duration(value: str) -> int | None:
    if not value:
        return None
    try:
        days = int(value)
    except ValueError:
        logger.warning(f"Ignoring DEFAULT_DURATION_DAYS={value!r}: not a number")
        return None
    if days not in SPRINT_DURATIONS:
        logger.warning(f"Ignoring DEFAULT_DURATION_DAYS={days}: must be 7 or 14")
        return None
    return days


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from devlog.conf, then apply environment overrides."""
    config = Config()
    config_file = config_file or CONFIG_FILE

    if config_file.exists():
        for line in config_file.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip().lower()
            value = _unquote(value.strip())

            match key:
                case "data_dir":
                    config.data_dir = value
                case "db_path":
                    config.db_path = value
                case "reports_dir":
                    config.reports_dir = value
                case "default_duration_days":
                    config.default_duration_days = _parse_duration(value)
                case "default_categories":
                    config.default_categories = [c.strip() for c in value.split(",") if c.strip()]
                case _:
                    logger.warning(f"Unknown config key in {config_file}: {key}")

    # Environment wins over the config file
    data_dir = os.environ.get("DEVLOG_DATA_DIR", "").strip()
    if data_dir:
        config.data_dir = data_dir
    db_path = os.environ.get("DEVLOG_DB_PATH", "").strip()
    if db_path:
        config.db_path = db_path

    return config
