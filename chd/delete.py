"""Recursive removal of a directory tree with parallel file deletion."""

from __future__ import annotations

import os
import stat
import sys
from concurrent.futures import ThreadPoolExecutor

from .errors import ChdIOError, InvalidArgumentError

MAX_WORKERS = 8


def _unlink(path: str) -> str | None:
    """Remove one non-directory entry; return the path if it could not be removed."""
    try:
        os.unlink(path)
    except FileNotFoundError:
        return None
    except OSError as exc:
        print(f"unlink: {path}: {exc.strerror}", file=sys.stderr)
        return path
    return None


def _rmdir(path: str) -> str | None:
    try:
        os.rmdir(path)
    except FileNotFoundError:
        return None
    except OSError as exc:
        print(f"rmdir: {path}: {exc.strerror}", file=sys.stderr)
        return path
    return None


def delete_path(path: str | os.PathLike[str], workers: int = MAX_WORKERS) -> None:
    """Delete ``path`` and, if it is a directory, everything below it.

    Symbolic links are removed, never followed. A path that does not exist
    is left alone. Raises ChdIOError naming every entry that survived.
    """
    if path is None or not os.fspath(path):
        raise InvalidArgumentError("Invalid path")
    if workers < 1:
        raise InvalidArgumentError(f"workers must be positive, got {workers}")
    root = os.fspath(path)

    try:
        info = os.lstat(root)
    except FileNotFoundError:
        return

    failed: list[str] = []
    if not stat.S_ISDIR(info.st_mode):
        leftover = _unlink(root)
        if leftover:
            failed.append(leftover)
    else:
        directories: list[str] = []
        files: list[str] = []

        def on_error(exc: OSError) -> None:
            if not isinstance(exc, FileNotFoundError):
                print(f"opendir: {exc.filename}: {exc.strerror}", file=sys.stderr)

        for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
            directories.append(dirpath)
            files.extend(os.path.join(dirpath, name) for name in filenames)
            links = [d for d in dirnames if os.path.islink(os.path.join(dirpath, d))]
            files.extend(os.path.join(dirpath, name) for name in links)
            dirnames[:] = [d for d in dirnames if d not in links]

        with ThreadPoolExecutor(max_workers=workers) as pool:
            failed.extend(p for p in pool.map(_unlink, files) if p)

        for directory in reversed(directories):
            leftover = _rmdir(directory)
            if leftover:
                failed.append(leftover)

    if failed:
        for entry in failed:
            print(f"Warning: Failed to delete {entry}", file=sys.stderr)
        raise ChdIOError(f"Failed to delete {len(failed)} entries: {', '.join(failed)}")