"""
JSON-backed catalog of pharmacy sources.

Each entry maps a stable source id to its search URL template, the CSS
selectors used to pull product names/prices/links from the result page,
and an enabled flag. The catalog is read once per process and never
mutated afterwards.

A missing or malformed file does not raise: the catalog degrades to
"no sources" and the failure is kept for the caller to surface.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from pharmaprice.config import settings
from pharmaprice.schemas.search import SourceConfig

logger = logging.getLogger(__name__)

# Packaged catalog location
_CATALOG_PATH = Path(__file__).parent / "pharmacy_sources.json"

_catalog: dict[str, SourceConfig] | None = None
_catalog_error: str | None = None


def _catalog_path() -> Path:
    if settings.catalog_path:
        return Path(settings.catalog_path)
    return _CATALOG_PATH


def parse_catalog(data: object) -> dict[str, SourceConfig]:
    """
    Validate a decoded catalog document.

    Expects {source_id: {urlTemplate, nameClass, priceClass, ...}}.
    Raises ValueError on any structural problem.
    """
    if not isinstance(data, dict):
        raise ValueError("catalog must be a JSON object keyed by source id")

    catalog: dict[str, SourceConfig] = {}
    for source_id, entry in data.items():
        if not isinstance(entry, dict):
            raise ValueError(f"catalog entry '{source_id}' must be an object")
        try:
            catalog[source_id] = SourceConfig(**{**entry, "id": source_id})
        except ValidationError as e:
            raise ValueError(f"invalid catalog entry '{source_id}': {e.error_count()} error(s)") from e
    return catalog


def load_catalog(path: Path | str | None = None) -> dict[str, SourceConfig]:
    """
    Return the source catalog, loading it on first use.

    Never raises. On failure returns {} and records the reason,
    available from get_catalog_error().
    """
    global _catalog, _catalog_error
    if _catalog is not None:
        return _catalog

    catalog_file = Path(path) if path else _catalog_path()
    try:
        with open(catalog_file, encoding="utf-8") as f:
            data = json.load(f)
        _catalog = parse_catalog(data)
        _catalog_error = None
        logger.info(f"Loaded {len(_catalog)} pharmacy sources from {catalog_file}")
    except (OSError, json.JSONDecodeError, ValueError) as e:
        _catalog = {}
        _catalog_error = f"Could not load source catalog {catalog_file}: {e}"
        logger.error(_catalog_error)
    return _catalog


def reload_catalog(path: Path | str | None = None) -> dict[str, SourceConfig]:
    """Drop the loaded catalog and read it again."""
    global _catalog, _catalog_error
    _catalog = None
    _catalog_error = None
    return load_catalog(path)


def get_catalog_error() -> str | None:
    """Reason the last load failed, or None."""
    return _catalog_error


def get_enabled_sources() -> list[SourceConfig]:
    """Enabled sources in catalog order."""
    return [config for config in load_catalog().values() if config.enabled]
