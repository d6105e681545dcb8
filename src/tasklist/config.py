"""Configuration management for tasklist."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .core.tasks import DEFAULT_TIMESTAMP_FORMAT

logger = logging.getLogger(__name__)

TASKLIST_HOME = Path(os.environ.get("TASKLIST_HOME", Path.home() / ".tasklist"))
CONFIG_FILE = TASKLIST_HOME / "config" / "tasklist.conf"
DATA_DIR = TASKLIST_HOME / "data"


@dataclass
class Config:
    """tasklist configuration."""

    storage_file: str = field(default_factory=lambda: str(DATA_DIR / "storage.json"))
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT

    @property
    def storage_path(self) -> Path:
        return Path(self.storage_file).expanduser()


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    # Handle quoted values with inline comments: "value" # comment
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from tasklist.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "storage_file":
                config.storage_file = value
            case "timestamp_format":
                config.timestamp_format = value
            case _:
                logger.debug(f"Ignoring unknown config key: {key}")

    return config
