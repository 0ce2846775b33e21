"""Detect the CPU architecture name used in image paths."""

from __future__ import annotations

import platform

_EXACT = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "x64": "x86_64",
    "i386": "x86",
    "i486": "x86",
    "i586": "x86",
    "i686": "x86",
    "x86": "x86",
    "aarch64": "arm64",
    "arm64": "arm64",
    "ppc64": "powerpc64",
    "ppc64le": "powerpc64",
    "powerpc64": "powerpc64",
    "powerpc64le": "powerpc64",
    "ppc": "powerpc",
    "powerpc": "powerpc",
}


def get_arch(machine: str | None = None) -> str:
    """Return the architecture name for ``machine`` (default: this host)."""
    name = (platform.machine() if machine is None else machine).lower()
    if name in _EXACT:
        return _EXACT[name]
    if name.startswith("arm"):
        return "arm"
    if name.startswith("mips"):
        return "mips"
    return "Unknown"