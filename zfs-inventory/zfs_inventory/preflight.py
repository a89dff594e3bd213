"""
One-time startup check of the zfs and zpool binaries.

Each binary must exist and answer `version` successfully. The check runs once
per process; later calls return the cached result. Callers decide whether a
failure is fatal (the API server exits).
"""

import logging
import os
import shlex
import subprocess
import threading
from dataclasses import dataclass, field
from typing import IO, List, Optional

from zfs_inventory.config import settings
from zfs_inventory.exceptions import PreflightError

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_result: Optional["PreflightResult"] = None


@dataclass
class PreflightResult:
    """Version output reported by each tool."""
    zfs_binary: str
    zpool_binary: str
    zfs_version: List[str] = field(default_factory=list)
    zpool_version: List[str] = field(default_factory=list)


def _drain(stream: IO[bytes], prefix: str, lines: List[str]) -> None:
    """Log every line of `stream` until it closes."""
    with stream:
        for raw in stream:
            line = raw.decode("utf-8", errors="replace").rstrip("\n")
            logger.info(f"{prefix}: {line}")
            lines.append(line)


def _check_binary(binary: str) -> List[str]:
    """Run `<binary> version` and return its stdout lines."""
    if not os.path.isfile(binary):
        logger.error(f"{binary} not found")
        raise PreflightError(f"{binary} not found", binary=binary)

    cmd = [binary, "version"]
    cmd_str = f"{os.path.basename(binary)} {shlex.join(cmd[1:])}"
    try:
        process = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
    except OSError as e:
        logger.error(f"Unable to run {cmd_str}: {e}")
        raise PreflightError(f"unable to run {cmd_str}: {e}", binary=binary) from e

    out_lines: List[str] = []
    err_lines: List[str] = []
    readers = [
        threading.Thread(target=_drain, args=(process.stdout, f"{cmd_str} out", out_lines), daemon=True),
        threading.Thread(target=_drain, args=(process.stderr, f"{cmd_str} err", err_lines), daemon=True),
    ]
    for reader in readers:
        reader.start()
    # both streams must be fully drained before the process is reaped
    for reader in readers:
        reader.join()
    returncode = process.wait()

    if returncode != 0:
        logger.error(f"{cmd_str} exited with {returncode}")
        raise PreflightError(
            f"{cmd_str} exited with {returncode}: {' '.join(err_lines).strip()}",
            binary=binary,
        )
    return out_lines


def run_preflight(zfs_binary: Optional[str] = None, zpool_binary: Optional[str] = None) -> PreflightResult:
    """
    Check that the zfs and zpool binaries exist and respond.

    Only the first successful call does any work; later calls return the
    same PreflightResult.

    Raises:
        PreflightError: a binary is missing, can't be started, or fails `version`
    """
    global _result

    with _lock:
        if _result is not None:
            return _result

        zfs_binary = zfs_binary or settings.zfs_binary
        zpool_binary = zpool_binary or settings.zpool_binary

        zfs_version = _check_binary(zfs_binary)
        zpool_version = _check_binary(zpool_binary)

        _result = PreflightResult(
            zfs_binary=zfs_binary,
            zpool_binary=zpool_binary,
            zfs_version=zfs_version,
            zpool_version=zpool_version,
        )
        logger.info(f"Preflight passed for {zfs_binary} and {zpool_binary}")
        return _result


def preflight_result() -> Optional[PreflightResult]:
    """Cached result of a successful preflight, or None if it hasn't passed."""
    return _result


def reset_preflight() -> None:
    """Forget the cached result so the next run_preflight checks again."""
    global _result
    with _lock:
        _result = None
