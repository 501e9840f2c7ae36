"""Settings read from the environment (entry points load .env first)."""

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DATA_PATH = Path("data") / "addressbook.json"


@dataclass(frozen=True)
class Settings:
    data_path: Path = DEFAULT_DATA_PATH
    default_region: str | None = None
    log_level: str = "INFO"


def load_settings() -> Settings:
    data_path = os.environ.get("EPOCH_DATA_PATH", "").strip()
    region = os.environ.get("EPOCH_DEFAULT_REGION", "").strip().upper()
    log_level = os.environ.get("EPOCH_LOG_LEVEL", "INFO").strip().upper() or "INFO"
    return Settings(
        data_path=Path(data_path) if data_path else DEFAULT_DATA_PATH,
        default_region=region or None,
        log_level=log_level,
    )
