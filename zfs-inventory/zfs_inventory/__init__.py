"""
ZFS Inventory - dataset inventory and provisioning over the zfs/zpool CLI.

Provides:
- Filesystem and snapshot listing for a pool
- Filesystem, clone and snapshot creation with confirmation fetch
- Clone and snapshot relationship queries
- Existence checks by name and GUID
- One-time preflight of the zfs/zpool binaries
"""

__version__ = "1.0.0"

from zfs_inventory.exceptions import (
    PreflightError,
    ZFSCommandError,
    ZFSError,
    ZFSNotFoundError,
    ZFSParseError,
    ZFSPoolNotFoundError,
    ZFSPostCreateError,
    ZFSValidationError,
)
from zfs_inventory.models.dataset import Filesystem, Filesystems, Snapshot, Snapshots
from zfs_inventory.preflight import PreflightResult, run_preflight
from zfs_inventory.services.runner import CommandResult, CommandRunner
from zfs_inventory.services.zpool import Zpool

__all__ = [
    "__version__",
    "CommandResult",
    "CommandRunner",
    "Filesystem",
    "Filesystems",
    "PreflightError",
    "PreflightResult",
    "Snapshot",
    "Snapshots",
    "ZFSCommandError",
    "ZFSError",
    "ZFSNotFoundError",
    "ZFSParseError",
    "ZFSPoolNotFoundError",
    "ZFSPostCreateError",
    "ZFSValidationError",
    "Zpool",
    "run_preflight",
]
