"""SHA-256 digests of downloaded files and checks against SHA256SUMS."""

from __future__ import annotations

import hashlib
import os
import sys

from .color import Foreground, printc

_CHUNK = 4096
_HEX_LEN = 64


def file_sha256(path: str | os.PathLike[str]) -> str:
    """Return the lower-case hex SHA-256 digest of the file at ``path``."""
    digest = hashlib.sha256()
    with open(path, "rb") as handle:
        for chunk in iter(lambda: handle.read(_CHUNK), b""):
            digest.update(chunk)
    return digest.hexdigest()


def check_sha256(
    rootfs_path: str | os.PathLike[str],
    sums_path: str | os.PathLike[str] = "./SHA256SUMS",
) -> bool:
    """Compare the digest of ``rootfs_path`` with the first line of ``sums_path``.

    Returns False when the sums file is missing, empty or does not match.
    """
    try:
        with open(sums_path, "rb") as handle:
            first_line = handle.readline(99)
    except FileNotFoundError:
        print("No SHA256SUMS file!", file=sys.stderr)
        return False
    if not first_line:
        return False

    digest = file_sha256(rootfs_path).encode("ascii")
    if first_line[:_HEX_LEN] == digest:
        return True
    printc("Check sha256 failed!", Foreground.RED)
    return False