"""
Pydantic models for ZFS filesystems and snapshots.
"""

from typing import Dict

from pydantic import BaseModel

# origin value zfs reports for a filesystem that isn't a clone
NO_ORIGIN = "-"


class Filesystem(BaseModel):
    """ZFS filesystem."""
    name: str = ""
    guid: str = ""
    origin: str = ""  # snapshot this filesystem was cloned from, "" or "-" if none
    createtxg: int = 0  # assigned by zfs at creation

    @property
    def is_clone(self) -> bool:
        return self.origin not in ("", NO_ORIGIN)


class Snapshot(BaseModel):
    """ZFS snapshot."""
    name: str = ""  # Full name: pool/dataset@snapname
    guid: str = ""
    createtxg: int = 0

    @property
    def filesystem_name(self) -> str:
        """Name of the filesystem this snapshot was taken of."""
        return self.name.split("@", 1)[0]

    @property
    def short_name(self) -> str:
        return self.name.split("@", 1)[1] if "@" in self.name else ""


Filesystems = Dict[str, Filesystem]
Snapshots = Dict[str, Snapshot]
