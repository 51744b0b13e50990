import json
import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path so 'src' is importable during tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("USE_MONGO", "0")
os.environ.setdefault("IMAGE_BASE_PATH", ".local_images")

from tests.helpers import DEFAULT_CATALOG  # noqa: E402


@pytest.fixture()
def base_path(tmp_path) -> Path:
    path = tmp_path / "images"
    path.mkdir()
    return path


@pytest.fixture()
def catalog_path(tmp_path) -> Path:
    path = tmp_path / "aspect_ratios.json"
    path.write_text(
        json.dumps(
            {
                "AspectRatios": {
                    "16:9": [
                        {"Width": 1920, "Height": 1080},
                        {"Width": 1600, "Height": 900},
                        {"Width": 1280, "Height": 720},
                        {"Width": 854, "Height": 480},
                        {"Width": 640, "Height": 360},
                    ],
                    "4:3": [
                        {"Width": 1024, "Height": 768},
                        {"Width": 640, "Height": 480},
                    ],
                }
            }
        )
    )
    return path


@pytest.fixture()
def repo(base_path):
    from src.infrastructure.database.repositories.json_image_repository import JsonImageRepository

    return JsonImageRepository(base_path)


@pytest.fixture()
def client(base_path):
    # lazy import after env configured
    from src.application.keyed_lock import KeyedLock
    from src.infrastructure.api import dependencies
    from src.infrastructure.config import AppSettings, get_settings
    from src.infrastructure.database.repositories.json_image_repository import JsonImageRepository
    from src.main import create_app

    settings = AppSettings(image_base_path=base_path, aspect_ratios_path=DEFAULT_CATALOG)
    repo = JsonImageRepository(base_path)
    locks = KeyedLock()

    app = create_app()
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[dependencies.get_image_repo] = lambda: repo
    app.dependency_overrides[dependencies.get_variation_locks] = lambda: locks
    with TestClient(app) as test_client:
        yield test_client
