"""Locations of the container store and their creation."""

from __future__ import annotations

import os
from collections.abc import MutableMapping
from dataclasses import dataclass
from pathlib import Path

from .errors import ChdError, ChdIOError, InvalidArgumentError

PATH_MAX = 4096


def _checked(path: Path) -> Path:
    if len(os.fspath(path)) >= PATH_MAX:
        raise InvalidArgumentError(f"Path too long: {path}")
    return path


def ensure_config_dirs(*args: str | os.PathLike[str]) -> None:
    """Make sure every given path exists as a directory."""
    for entry in args:
        directory = Path(entry)
        _checked(directory)
        if directory.exists():
            if directory.is_dir():
                continue
            raise ChdIOError(f"{directory} is file")
        try:
            directory.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as exc:
            raise ChdIOError(f"creat failed: {directory}: {exc}") from exc


@dataclass(frozen=True)
class Config:
    """Where containers and temporary downloads are kept."""

    home: Path
    prefix: str = ""

    @property
    def root(self) -> Path:
        return _checked(self.home / ".chd")

    @property
    def tmp(self) -> Path:
        return _checked(self.root / ".tmp")

    def ensure_dirs(self) -> None:
        ensure_config_dirs(self.root, self.tmp)


def load_config(environ: MutableMapping[str, str] | None = None) -> Config:
    """Build the configuration from the environment and create its directories.

    HOME and PREFIX must both be set; LD_PRELOAD is removed from the
    environment so that child processes do not inherit it.
    """
    env = os.environ if environ is None else environ
    home = env.get("HOME")
    prefix = env.get("PREFIX")
    if not home or prefix is None:
        raise ChdError("necessary: HOME, PREFIX")
    env.pop("LD_PRELOAD", None)
    config = Config(home=Path(home), prefix=prefix)
    config.ensure_dirs()
    return config