"""
ZFS inventory exceptions.

Errors are grouped by where they arise: before a command runs (validation),
while running it (command), while reading its output (parse) and after a
successful create (post-create confirmation).
"""

import shlex
from typing import List, Optional


class ZFSError(Exception):
    """Base exception for ZFS inventory operations"""

    def __init__(self, message: str, dataset: Optional[str] = None):
        self.message = message
        self.dataset = dataset
        super().__init__(self.message)


class ZFSValidationError(ZFSError):
    """Raised when a requested name or record is rejected before any command runs"""
    pass


class ZFSCommandError(ZFSError):
    """Raised when a zfs/zpool command exits non-zero or cannot be started"""

    def __init__(
        self,
        message: str,
        dataset: Optional[str] = None,
        command: Optional[List[str]] = None,
        stderr: Optional[str] = None,
        returncode: Optional[int] = None,
    ):
        super().__init__(message, dataset=dataset)
        self.command = command
        self.stderr = stderr
        self.returncode = returncode

    def __str__(self):
        details = []
        if self.command:
            details.append(f"Command: {shlex.join(self.command)}")
        if self.returncode is not None:
            details.append(f"Return Code: {self.returncode}")
        if self.stderr:
            stderr_short = self.stderr.strip()
            if len(stderr_short) > 300:
                stderr_short = stderr_short[:300] + "..."
            details.append(f"Stderr: {stderr_short}")
        details_str = " (" + ", ".join(details) + ")" if details else ""
        return f"{self.message}{details_str}"


class ZFSNotFoundError(ZFSCommandError):
    """Raised when a dataset lookup fails.

    A missing dataset and a failed lookup command are reported the same way.
    """
    pass


class ZFSPoolNotFoundError(ZFSNotFoundError):
    """Raised when a pool handle is requested for a pool that doesn't exist"""
    pass


class ZFSParseError(ZFSError):
    """Raised when zfs output can't be parsed"""

    def __init__(self, message: str, raw_line: Optional[str] = None, dataset: Optional[str] = None):
        super().__init__(message, dataset=dataset)
        self.raw_line = raw_line

    def __str__(self):
        if self.raw_line is None:
            return self.message
        line = self.raw_line[:100] + ("..." if len(self.raw_line) > 100 else "")
        return f"{self.message} (Problematic Line: '{line}')"


class ZFSPostCreateError(ZFSError):
    """Raised when a create command succeeded but the new dataset couldn't be fetched.

    The dataset may or may not exist; callers need to reconcile manually.
    """
    pass


class PreflightError(ZFSError):
    """Raised when the zfs/zpool binaries are missing or not responding"""

    def __init__(self, message: str, binary: Optional[str] = None):
        super().__init__(message)
        self.binary = binary
