from __future__ import annotations

import json
from pathlib import Path

import pydantic
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter

from src.domain.errors import ConfigError

_WRAPPER_KEYS = ("aspectratios", "aspect_ratios")


class Resolution(BaseModel):
    """A candidate output size listed under an aspect-ratio label."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(..., validation_alias=AliasChoices("width", "Width"), gt=0)
    height: int = Field(..., validation_alias=AliasChoices("height", "Height"), gt=0)


AspectRatioCatalog = dict[str, list[Resolution]]

_catalog_adapter = TypeAdapter(AspectRatioCatalog)


def load_catalog(path: str | Path) -> AspectRatioCatalog:
    """Read the aspect-ratio catalog at ``path``.

    The file is read on every call so edits are picked up by the next upload.
    Both the wrapped form ``{"AspectRatios": {...}}`` and a bare
    ``{label: [{width, height}, ...]}`` mapping are accepted.

    Raises:
        ConfigError: If the file is missing, unreadable, or does not validate.
    """
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigError(f"Aspect ratio catalog not found: {path}") from exc
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Aspect ratio catalog unreadable: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("Aspect ratio catalog must be a JSON object")
    for key, value in raw.items():
        if isinstance(key, str) and key.lower() in _WRAPPER_KEYS:
            raw = value
            break

    try:
        return _catalog_adapter.validate_python(raw)
    except pydantic.ValidationError as exc:
        raise ConfigError(f"Aspect ratio catalog is malformed: {exc.error_count()} error(s)") from exc


def catalog_heights(catalog: AspectRatioCatalog) -> list[int]:
    """Flatten ``catalog`` to candidate heights in document order."""
    return [res.height for resolutions in catalog.values() for res in resolutions]
