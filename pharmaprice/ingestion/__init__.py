"""
Connector registry for pharmacy sources.

Connectors are built from the source catalog, one per enabled source, and
rebuilt whenever the catalog is reloaded.
The aggregator uses get_all_connectors() to fan out searches.
"""
from typing import Dict, List

from pharmaprice.data.source_catalog import load_catalog
from pharmaprice.ingestion.base import BaseConnector
from pharmaprice.ingestion.pharmacy import PharmacyConnector
from pharmaprice.schemas.search import SourceConfig

_registry: Dict[str, BaseConnector] = {}
# Catalog the registry was built from; a reload yields a new dict
_built_from: Dict[str, SourceConfig] | None = None


def register_connector(connector: BaseConnector) -> None:
    """Register a connector instance by its source_name."""
    _registry[connector.source_name] = connector


def get_all_connectors() -> List[BaseConnector]:
    """Return connectors for the current catalog, rebuilding after a reload."""
    catalog = load_catalog()
    if catalog is not _built_from:
        _register_all(catalog)
    return list(_registry.values())


def get_connector(name: str) -> BaseConnector | None:
    """Return a specific connector by name."""
    return _registry.get(name)


def reset_registry() -> None:
    """Forget registered connectors."""
    global _built_from
    _registry.clear()
    _built_from = None


def _register_all(catalog: Dict[str, SourceConfig]) -> None:
    """Build a connector for every enabled catalog source."""
    global _built_from
    _registry.clear()
    for config in catalog.values():
        if config.enabled:
            register_connector(PharmacyConnector(config))
    _built_from = catalog
