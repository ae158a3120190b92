"""
Read-only API for the pharmacy source catalog.
"""

from fastapi import APIRouter, HTTPException

from pharmaprice.data.source_catalog import get_catalog_error, load_catalog

router = APIRouter(prefix="/sources", tags=["sources"])


@router.get("")
async def list_sources(enabled: bool | None = None):
    """List catalog sources, optionally only enabled or disabled ones."""
    sources = [config.model_dump() for config in load_catalog().values()]
    if enabled is not None:
        sources = [s for s in sources if s["enabled"] == enabled]
    return {"sources": sources, "count": len(sources), "error": get_catalog_error()}


@router.get("/{source_id}")
async def get_source_detail(source_id: str):
    """Get one source by id."""
    config = load_catalog().get(source_id)
    if config is None:
        raise HTTPException(status_code=404, detail=f"Source '{source_id}' not found")
    return config.model_dump()
