"""
Pydantic request/response models for the HTTP API.
"""

from typing import List, Optional

from pydantic import BaseModel

from zfs_inventory.models.dataset import Filesystem, Snapshot


class CreateFilesystemRequest(BaseModel):
    """Request to create a filesystem or clone."""
    name: str
    origin: Optional[str] = None  # snapshot to clone from


class CreateSnapshotRequest(BaseModel):
    """Request to create a snapshot."""
    name: str  # Full name: pool/dataset@snapname


class FilesystemListResponse(BaseModel):
    """Response for filesystem listing."""
    filesystems: List[Filesystem]
    count: int


class SnapshotListResponse(BaseModel):
    """Response for snapshot listing."""
    snapshots: List[Snapshot]
    count: int


class ExistsResponse(BaseModel):
    exists: bool
