"""
ZFS pool handle.

Lists, fetches and creates filesystems and snapshots on one pool by running
zfs commands and parsing their output. Nothing is cached: every call goes
back to zfs.
"""

import logging
from typing import List, Optional, Union

from zfs_inventory.config import settings
from zfs_inventory.exceptions import (
    ZFSCommandError,
    ZFSError,
    ZFSNotFoundError,
    ZFSPoolNotFoundError,
    ZFSPostCreateError,
    ZFSValidationError,
)
from zfs_inventory.models.dataset import NO_ORIGIN, Filesystem, Filesystems, Snapshot, Snapshots
from zfs_inventory.services.parser import parse_property_record, parse_property_stream
from zfs_inventory.services.runner import CommandRunner

logger = logging.getLogger(__name__)

FILESYSTEM_LIST_PROPERTIES = "origin,guid,createtxg"
FILESYSTEM_GET_PROPERTIES = "name,guid,createtxg,origin"
SNAPSHOT_LIST_PROPERTIES = "guid,createtxg"
SNAPSHOT_GET_PROPERTIES = "name,guid,createtxg"


class Zpool:
    """Handle on an existing ZFS pool.

    Construction checks the pool exists and raises ZFSPoolNotFoundError
    otherwise.
    """

    def __init__(
        self,
        name: str,
        runner: Optional[CommandRunner] = None,
        zfs_binary: Optional[str] = None,
        zpool_binary: Optional[str] = None,
    ):
        self.name = name
        self.runner = runner or CommandRunner()
        self.zfs = zfs_binary or settings.zfs_binary
        self.zpool = zpool_binary or settings.zpool_binary

        if not name or not self._pool_exists():
            raise ZFSPoolNotFoundError(f"zpool '{name}' doesn't exist", dataset=name)

    def __repr__(self):
        return f"Zpool({self.name!r})"

    def _pool_exists(self) -> bool:
        result = self.runner.run([self.zpool, "get", "-H", "-o", "value", "name", self.name])
        return result.ok

    def _in_pool(self, name: str) -> bool:
        """True if `name` is the pool's root dataset or lives below it."""
        return (
            name == self.name
            or name.startswith(self.name + "/")
            or name.startswith(self.name + "@")
        )

    # =========================================================================
    # Listing
    # =========================================================================

    def _list(self, dataset_type: str, properties: str) -> bytes:
        cmd = [self.zfs, "get", "-t", dataset_type, "-Hro", "name,property,value", properties, self.name]
        result = self.runner.run(cmd)
        if not result.ok:
            raise ZFSCommandError(
                f"unable to list {dataset_type}s on zpool '{self.name}'",
                dataset=self.name,
                command=cmd,
                stderr=result.stderr,
                returncode=result.returncode,
            )
        return result.stdout

    def list_filesystems(self) -> Filesystems:
        """Return all filesystems on the pool keyed by name."""
        out = self._list("filesystem", FILESYSTEM_LIST_PROPERTIES)
        return parse_property_stream(out, Filesystem)

    def list_snapshots(self) -> Snapshots:
        """Return all snapshots on the pool keyed by name."""
        out = self._list("snapshot", SNAPSHOT_LIST_PROPERTIES)
        return parse_property_stream(out, Snapshot)

    # =========================================================================
    # Lookup
    # =========================================================================

    def _get(self, dataset_type: str, properties: str, name: str, record_type):
        if not self._in_pool(name):
            raise ZFSValidationError(
                f"bad request for {dataset_type} '{name}' on zpool '{self.name}'",
                dataset=name,
            )

        cmd = [self.zfs, "get", "-t", dataset_type, "-Ho", "property,value", properties, name]
        result = self.runner.run(cmd)
        if not result.ok:
            raise ZFSNotFoundError(
                f"{dataset_type} '{name}' not found",
                dataset=name,
                command=cmd,
                stderr=result.stderr,
                returncode=result.returncode,
            )

        record = parse_property_record(result.stdout, record_type)
        if not record.name:
            raise ZFSNotFoundError(f"{dataset_type} '{name}' not found", dataset=name, command=cmd)
        return record

    def get_filesystem(self, name: str) -> Filesystem:
        """Fetch one filesystem. Raises ZFSNotFoundError if zfs can't report it."""
        return self._get("filesystem", FILESYSTEM_GET_PROPERTIES, name, Filesystem)

    def get_snapshot(self, name: str) -> Snapshot:
        """Fetch one snapshot. Raises ZFSNotFoundError if zfs can't report it."""
        return self._get("snapshot", SNAPSHOT_GET_PROPERTIES, name, Snapshot)

    # =========================================================================
    # Creation
    # =========================================================================

    def create_filesystem(self, fs: Filesystem) -> Filesystem:
        """
        Create a filesystem, or a clone when `fs.origin` names a snapshot.

        The returned record is fetched from zfs after creation. `fs.createtxg`
        must be 0 since zfs assigns it.

        Raises:
            ZFSValidationError: name outside the pool or createtxg set
            ZFSCommandError: zfs create/clone failed (exists, missing parent, ...)
            ZFSPostCreateError: created, but the new filesystem couldn't be fetched
        """
        if not fs.name or fs.createtxg != 0 or not fs.name.startswith(self.name + "/"):
            raise ZFSValidationError(
                f"filesystem '{fs.name}' cannot be created on zpool '{self.name}'",
                dataset=fs.name,
            )

        if fs.origin in ("", NO_ORIGIN):
            cmd = [self.zfs, "create", fs.name]
        else:
            cmd = [self.zfs, "clone", fs.origin, fs.name]

        result = self.runner.run(cmd)
        if not result.ok:
            logger.error(f"Failed to create filesystem {fs.name}: {result.stderr.strip()}")
            raise ZFSCommandError(
                f"unable to create filesystem '{fs.name}'",
                dataset=fs.name,
                command=cmd,
                stderr=result.stderr,
                returncode=result.returncode,
            )

        try:
            created = self.get_filesystem(fs.name)
        except ZFSError as e:
            logger.error(f"Filesystem {fs.name} created but could not be retrieved: {e}")
            raise ZFSPostCreateError(
                f"filesystem '{fs.name}' was created but could not be retrieved",
                dataset=fs.name,
            ) from e

        logger.info(f"Created filesystem {created.name} (guid={created.guid}, createtxg={created.createtxg})")
        return created

    def create_snapshot(self, snapshot_name: str) -> Snapshot:
        """
        Create a snapshot named `<filesystem>@<suffix>`.

        Raises:
            ZFSValidationError: name outside the pool or not of the form fs@suffix
            ZFSCommandError: zfs snapshot failed (exists, missing filesystem, ...)
            ZFSPostCreateError: created, but the new snapshot couldn't be fetched
        """
        fs_name, _, suffix = snapshot_name.partition("@")
        if not snapshot_name or not snapshot_name.startswith(self.name + "/") or not fs_name or not suffix:
            raise ZFSValidationError(
                f"snapshot '{snapshot_name}' cannot be created on zpool '{self.name}'",
                dataset=snapshot_name,
            )

        cmd = [self.zfs, "snapshot", snapshot_name]
        result = self.runner.run(cmd)
        if not result.ok:
            logger.error(f"Failed to create snapshot {snapshot_name}: {result.stderr.strip()}")
            raise ZFSCommandError(
                f"unable to create snapshot '{snapshot_name}'",
                dataset=snapshot_name,
                command=cmd,
                stderr=result.stderr,
                returncode=result.returncode,
            )

        try:
            created = self.get_snapshot(snapshot_name)
        except ZFSError as e:
            logger.error(f"Snapshot {snapshot_name} created but could not be retrieved: {e}")
            raise ZFSPostCreateError(
                f"snapshot '{snapshot_name}' was created but could not be retrieved",
                dataset=snapshot_name,
            ) from e

        logger.info(f"Created snapshot {created.name} (guid={created.guid}, createtxg={created.createtxg})")
        return created

    # =========================================================================
    # Relationships
    # =========================================================================

    def clones_of(self, snapshot: Union[Snapshot, str]) -> List[Filesystem]:
        """Return filesystems whose origin is the given snapshot."""
        snap_name = snapshot.name if isinstance(snapshot, Snapshot) else snapshot
        return [fs for fs in self.list_filesystems().values() if fs.origin == snap_name]

    def snapshots_of(self, filesystem: Union[Filesystem, str]) -> List[Snapshot]:
        """Return snapshots taken directly of the given filesystem."""
        fs_name = filesystem.name if isinstance(filesystem, Filesystem) else filesystem
        return [snap for snap in self.list_snapshots().values() if snap.filesystem_name == fs_name]

    # =========================================================================
    # Existence
    # =========================================================================

    def exists_by_name(self, name: str) -> bool:
        """True if a dataset with this name exists on the pool.

        Any failure of the check counts as "doesn't exist".
        """
        if not name or not self._in_pool(name):
            return False
        result = self.runner.run([self.zfs, "get", "-Ho", "value", "name", name])
        return result.ok

    def exists_by_guid(self, guid: str) -> bool:
        """True if any dataset on the pool has this GUID.

        Scans every dataset's GUID; any failure counts as "doesn't exist".
        """
        if not guid:
            return False
        result = self.runner.run([self.zfs, "get", "-r", "-Ho", "value", "guid", self.name])
        if not result.ok:
            return False
        out = result.stdout.decode("utf-8", errors="replace")
        return any(line == guid for line in out.splitlines())
