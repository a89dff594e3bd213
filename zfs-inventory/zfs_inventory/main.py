"""
ZFS Inventory - FastAPI Application Entry Point

Serves the dataset inventory over HTTP. The zfs/zpool preflight runs at
startup and a failure stops the process.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from zfs_inventory import __version__
from zfs_inventory.config import settings
from zfs_inventory.exceptions import (
    PreflightError,
    ZFSCommandError,
    ZFSError,
    ZFSNotFoundError,
    ZFSParseError,
    ZFSPostCreateError,
    ZFSValidationError,
)
from zfs_inventory.preflight import run_preflight
from zfs_inventory.routers import datasets, health

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"ZFS Inventory v{__version__} starting...")

    try:
        run_preflight()
    except PreflightError as e:
        logger.critical(f"ZFS preflight failed: {e}")
        raise SystemExit(1) from e

    yield

    logger.info("ZFS Inventory shutting down...")


# Create FastAPI app
app = FastAPI(
    title="ZFS Inventory API",
    description="Filesystem and snapshot inventory and provisioning for a ZFS pool",
    version=__version__,
    lifespan=lifespan,
)

# most specific first; the first matching class wins
_STATUS_CODES = [
    (ZFSNotFoundError, 404),
    (ZFSValidationError, 400),
    (ZFSPostCreateError, 502),
    (ZFSCommandError, 409),
    (ZFSParseError, 500),
]


@app.exception_handler(ZFSError)
async def zfs_exception_handler(request: Request, exc: ZFSError):
    status_code = 500
    for exc_type, code in _STATUS_CODES:
        if isinstance(exc, exc_type):
            status_code = code
            break
    if status_code >= 500:
        logger.error(f"ZFS error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "dataset": exc.dataset, "error": str(exc)}
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "error": str(exc)}
    )


# Include routers
app.include_router(health.router)
app.include_router(datasets.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "ZFS Inventory",
        "version": __version__,
        "docs": "/docs",
        "health": "/v1/health"
    }


def run():
    """Run the application with uvicorn."""
    import uvicorn

    uvicorn.run(
        "zfs_inventory.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower()
    )


if __name__ == "__main__":
    run()
