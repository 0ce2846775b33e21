"""Unpacking rootfs archives into a container directory."""

from __future__ import annotations

import os
import tarfile
from pathlib import Path

from .color import Foreground, printc
from .errors import ChdError, ChdIOError

_FILTER = {"filter": "fully_trusted"} if hasattr(tarfile, "fully_trusted_filter") else {}


class UnsafePathError(ChdError, ValueError):
    """An archive entry would land outside the destination directory."""


def safe_path(destdir: str | os.PathLike[str], path: str) -> str:
    """Resolve archive entry ``path`` under ``destdir``, refusing escapes."""
    try:
        root = os.path.realpath(destdir, strict=True)
    except OSError as exc:
        raise ChdIOError(f"realpath failed for destination directory {destdir}") from exc
    full = os.path.realpath(f"{root}/{path}")
    if os.path.commonpath([root, full]) != root:
        raise UnsafePathError(f"Potential attack: {path}")
    return full


def _warn(name: str, exc: Exception) -> None:
    printc(f"[Warning]: {name}: {exc}\n", Foreground.RED)


def extract(filename: str | os.PathLike[str], destdir: str | os.PathLike[str]) -> int:
    """Extract the (optionally compressed) tar archive into ``destdir``.

    Permissions and times are kept. Returns the number of entries written.
    """
    try:
        Path(destdir).mkdir(mode=0o755, exist_ok=True)
    except OSError as exc:
        raise ChdIOError(f"Cannot create {destdir}: {exc}") from exc
    try:
        archive = tarfile.open(filename, "r:*")
    except (OSError, tarfile.TarError) as exc:
        raise ChdIOError(f"Cannot open archive {filename}: {exc}") from exc

    root = os.path.realpath(destdir)
    directories: list[tarfile.TarInfo] = []
    count = 0
    with archive:
        for member in archive:
            member.name = os.path.relpath(safe_path(root, member.name), root)
            if member.islnk():
                member.linkname = os.path.relpath(safe_path(root, member.linkname), root)
            try:
                archive.extract(member, root, set_attrs=not member.isdir(), **_FILTER)
            except (OSError, tarfile.ExtractError) as exc:
                _warn(member.name, exc)
                continue
            if member.isdir():
                directories.append(member)
            count += 1

        for member in sorted(directories, key=lambda info: info.name, reverse=True):
            target = os.path.join(root, member.name)
            try:
                archive.chown(member, target, False)
                archive.utime(member, target)
                archive.chmod(member, target)
            except (OSError, tarfile.ExtractError) as exc:
                _warn(member.name, exc)
    return count