"""
Subprocess runner for zfs/zpool commands.
"""

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import List

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Raw outcome of one command."""
    returncode: int
    stdout: bytes = b""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Runs a command to completion and captures its output.

    Commands are never retried and never time out; a hung zfs call blocks
    the caller.
    """

    def run(self, cmd: List[str]) -> CommandResult:
        """Execute a command and return its CommandResult."""
        cmd_str = shlex.join(cmd)
        logger.debug(f"Running command: {cmd_str}")
        try:
            result = subprocess.run(cmd, capture_output=True, check=False)
        except OSError as e:
            # binary missing, not executable, etc.
            logger.error(f"Command error: {cmd_str}: {e}")
            return CommandResult(returncode=-1, stderr=str(e))

        stderr = result.stderr.decode("utf-8", errors="replace") if result.stderr else ""
        if result.returncode != 0:
            logger.debug(f"Command failed (ret={result.returncode}): {cmd_str}: {stderr.strip()}")
        return CommandResult(returncode=result.returncode, stdout=result.stdout or b"", stderr=stderr)
