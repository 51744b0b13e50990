from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parents[2] / "config" / "aspect_ratios.json"


@dataclass(frozen=True, slots=True)
class AppSettings:
    image_base_path: Path
    aspect_ratios_path: Path
    use_mongo: bool = False
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "ImageDB"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> AppSettings:
        return cls(
            image_base_path=Path(os.getenv("IMAGE_BASE_PATH", "images")),
            aspect_ratios_path=Path(os.getenv("ASPECT_RATIOS_PATH", str(DEFAULT_CATALOG_PATH))),
            use_mongo=os.getenv("USE_MONGO", "0") == "1",
            mongo_uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
            mongo_db=os.getenv("MONGO_DB", "ImageDB"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings.from_env()
