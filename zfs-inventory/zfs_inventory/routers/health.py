"""
Health endpoint.
"""

import time
from typing import List

from fastapi import APIRouter
from pydantic import BaseModel

from zfs_inventory import __version__
from zfs_inventory.preflight import preflight_result

router = APIRouter(tags=["health"])

# Track startup time
_startup_time = time.time()


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    uptime_seconds: int
    version: str
    zfs_version: List[str] = []
    zpool_version: List[str] = []


@router.get("/v1/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Reports whether the zfs/zpool preflight has passed and the tool versions it saw.
    """
    uptime = int(time.time() - _startup_time)
    result = preflight_result()
    if result is None:
        return HealthResponse(status="unchecked", uptime_seconds=uptime, version=__version__)

    return HealthResponse(
        status="healthy",
        uptime_seconds=uptime,
        version=__version__,
        zfs_version=result.zfs_version,
        zpool_version=result.zpool_version,
    )
