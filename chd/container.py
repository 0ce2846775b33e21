"""Installed containers: lookup, first-time setup and running under proot."""

from __future__ import annotations

import contextlib
import os
import sys
from pathlib import Path
from typing import TextIO

from .color import Foreground, printc
from .config import PATH_MAX
from .errors import ChdError, ChdIOError, InvalidArgumentError
from .execute import COMMAND_NOT_FOUND, execute_command

RESOLV_CONF = "nameserver 8.8.8.8\n"
TMP_DIR_NAME = ".tmp"
SHELLS = ("/bin/bash", "/bin/sh")
GUEST_PATH = (
    "/usr/local/sbin:/usr/local/bin:/bin:/sbin:/usr/sbin:/usr/games:/usr/local/games"
)


def fix_dns(directory: str | os.PathLike[str]) -> Path:
    """Replace the container's resolv.conf with a public name server."""
    path = f"{os.fspath(directory)}/etc/resolv.conf"
    if len(path) >= PATH_MAX:
        raise InvalidArgumentError("Path too long!")
    with contextlib.suppress(OSError):
        os.unlink(path)
    try:
        with open(path, "w", encoding="ascii") as handle:
            handle.write(RESOLV_CONF)
    except OSError as exc:
        raise ChdIOError(f"Error opening file {path}: {exc}") from exc
    printc("Fixed DNS file.\n", Foreground.GREEN)
    return Path(path)


def init_container(directory: str | os.PathLike[str]) -> None:
    """Prepare a freshly extracted rootfs for use."""
    fix_dns(directory)


def installed_containers(root: str | os.PathLike[str]) -> list[str]:
    """Return the names of the containers kept under ``root``, sorted."""
    try:
        with os.scandir(root) as entries:
            return sorted(entry.name for entry in entries if entry.name != TMP_DIR_NAME)
    except OSError as exc:
        raise ChdIOError(f"Unable to open containers directory at {root}") from exc


def list_installed_containers(
    root: str | os.PathLike[str], file: TextIO | None = None
) -> None:
    """Print the installed containers."""
    stream = sys.stdout if file is None else file
    names = installed_containers(root)
    print("Available containers:", file=stream)
    for name in names:
        print(f"  - {name}", file=stream)


def find_container_path(root: str | os.PathLike[str], name: str) -> Path | None:
    """Return the directory of container ``name``, or None if there is none."""
    path = Path(f"{os.fspath(root)}/{name}")
    return path if path.is_dir() else None


def select_shell(container_path: str | os.PathLike[str]) -> str:
    """Pick the login shell present in the container, preferring bash."""
    base = os.fspath(container_path)
    for shell in SHELLS:
        if os.path.lexists(f"{base}{shell}"):
            return shell
    raise ChdError("Unknown shell!")


def build_proot_command(container_path: str | os.PathLike[str], shell: str) -> str:
    """Return the shell command line that enters the container with proot."""
    path = os.fspath(container_path)
    return (
        f"proot --link2symlink -0 -r {path} -b /dev -b /proc -b {path}/root:/dev/shm "
        f"-w /root /usr/bin/env -i HOME=/root PATH={GUEST_PATH} "
        f"SHELL={shell} TERM=$TERM LANG=C.UTF-8 {shell} --login"
    )


def run_proot_container(
    root: str | os.PathLike[str], name: str | None = None
) -> int | None:
    """Start a login shell in container ``name`` and return its exit status.

    Without a name the installed containers are listed and None is returned.
    """
    if execute_command("proot >/dev/null 2>&1") == COMMAND_NOT_FOUND:
        raise ChdError("You have not install proot.")
    if not name:
        print("No container specified. Searching for installed containers...")
        list_installed_containers(root)
        return None
    container = find_container_path(root, name)
    if container is None:
        raise ChdError(f"Container '{name}' not found")
    shell = select_shell(container)
    command = build_proot_command(container, shell)
    print(command)
    return execute_command(command)