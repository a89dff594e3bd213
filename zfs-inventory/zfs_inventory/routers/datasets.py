"""
Filesystem and snapshot endpoints.

ZFS errors raised here are turned into HTTP responses by the handlers
registered in main.py.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from zfs_inventory.models.dataset import Filesystem, Snapshot
from zfs_inventory.models.requests import (
    CreateFilesystemRequest,
    CreateSnapshotRequest,
    ExistsResponse,
    FilesystemListResponse,
    SnapshotListResponse,
)
from zfs_inventory.services.runner import CommandRunner
from zfs_inventory.services.zpool import Zpool

router = APIRouter(prefix="/v1/pools/{pool_name}", tags=["datasets"])


def get_runner() -> CommandRunner:
    return CommandRunner()


def get_pool(pool_name: str, runner: CommandRunner = Depends(get_runner)) -> Zpool:
    """Resolve the path's pool name to a validated Zpool handle."""
    return Zpool(pool_name, runner=runner)


@router.get("/filesystems", response_model=FilesystemListResponse)
def list_filesystems(pool: Zpool = Depends(get_pool)):
    """
    List all filesystems on the pool.
    """
    filesystems = list(pool.list_filesystems().values())
    return FilesystemListResponse(filesystems=filesystems, count=len(filesystems))


@router.post("/filesystems", response_model=Filesystem, status_code=201)
def create_filesystem(request: CreateFilesystemRequest, pool: Zpool = Depends(get_pool)):
    """
    Create a filesystem, or a clone of `origin` when given.

    Returns the filesystem as reported by zfs after creation.
    """
    return pool.create_filesystem(Filesystem(name=request.name, origin=request.origin or ""))


@router.get("/filesystem", response_model=Filesystem)
def get_filesystem(
    name: str = Query(..., description="Full filesystem name"),
    pool: Zpool = Depends(get_pool),
):
    return pool.get_filesystem(name)


@router.get("/snapshots", response_model=SnapshotListResponse)
def list_snapshots(pool: Zpool = Depends(get_pool)):
    """
    List all snapshots on the pool.
    """
    snapshots = list(pool.list_snapshots().values())
    return SnapshotListResponse(snapshots=snapshots, count=len(snapshots))


@router.post("/snapshots", response_model=Snapshot, status_code=201)
def create_snapshot(request: CreateSnapshotRequest, pool: Zpool = Depends(get_pool)):
    """
    Create a snapshot.

    Returns the snapshot as reported by zfs after creation.
    """
    return pool.create_snapshot(request.name)


@router.get("/snapshot", response_model=Snapshot)
def get_snapshot(
    name: str = Query(..., description="Full snapshot name (pool/fs@snap)"),
    pool: Zpool = Depends(get_pool),
):
    return pool.get_snapshot(name)


@router.get("/clones", response_model=FilesystemListResponse)
def clones_of(
    snapshot: str = Query(..., description="Origin snapshot name"),
    pool: Zpool = Depends(get_pool),
):
    """
    List filesystems cloned from a snapshot.
    """
    clones = pool.clones_of(snapshot)
    return FilesystemListResponse(filesystems=clones, count=len(clones))


@router.get("/snapshots-of", response_model=SnapshotListResponse)
def snapshots_of(
    filesystem: str = Query(..., description="Filesystem name"),
    pool: Zpool = Depends(get_pool),
):
    """
    List snapshots taken of a filesystem.
    """
    snapshots = pool.snapshots_of(filesystem)
    return SnapshotListResponse(snapshots=snapshots, count=len(snapshots))


@router.get("/exists", response_model=ExistsResponse)
def exists(
    name: Optional[str] = Query(None, description="Dataset name"),
    guid: Optional[str] = Query(None, description="Dataset GUID"),
    pool: Zpool = Depends(get_pool),
):
    """
    Check whether a dataset exists, by name or by GUID.
    """
    if (name is None) == (guid is None):
        raise HTTPException(status_code=400, detail="Exactly one of 'name' or 'guid' is required")
    if name is not None:
        return ExistsResponse(exists=pool.exists_by_name(name))
    return ExistsResponse(exists=pool.exists_by_guid(guid))
