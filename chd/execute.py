"""Running shell commands."""

from __future__ import annotations

import subprocess

from .errors import ChdError, InvalidArgumentError

COMMAND_NOT_FOUND = 127


def execute_command(cmd: str) -> int:
    """Run ``cmd`` through ``sh -c`` and return its exit status.

    Returns 127 when no shell can be started; raises ChdError when the
    command is killed by a signal.
    """
    if cmd is None:
        raise InvalidArgumentError("Command string is NULL")
    try:
        completed = subprocess.run(["sh", "-c", cmd], check=False)
    except FileNotFoundError:
        return COMMAND_NOT_FOUND
    if completed.returncode < 0:
        raise ChdError(f"Command terminated by signal {-completed.returncode}")
    return completed.returncode