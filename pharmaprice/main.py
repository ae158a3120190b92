"""
PharmaPrice FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pharmaprice.api.routes import search, sources
from pharmaprice.config import settings
from pharmaprice.data.source_catalog import get_catalog_error, get_enabled_sources

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("Starting PharmaPrice API...")
    enabled = get_enabled_sources()
    if get_catalog_error():
        logger.warning(f"Source catalog unavailable, searches will fail: {get_catalog_error()}")
    else:
        logger.info(f"{len(enabled)} pharmacy sources enabled")

    yield

    logger.info("Shutting down PharmaPrice API...")


# Create FastAPI app
app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    debug=settings.debug,
    lifespan=lifespan,
)

# CORS middleware for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(search.router)
app.include_router(sources.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "PharmaPrice API",
        "version": settings.api_version,
        "endpoints": {
            "search": "/search?query=...",
            "sources": "/sources",
            "docs": "/docs",
        },
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
