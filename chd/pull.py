"""Fetching, verifying and unpacking a rootfs image from the mirror."""

from __future__ import annotations

import contextlib
import os
import re
from dataclasses import dataclass
from pathlib import Path

from . import download
from .arch import get_arch
from .config import PATH_MAX, Config
from .container import init_container
from .errors import ChdError, ChdIOError, HashMismatchError, InvalidArgumentError
from .extract import extract
from .sha import check_sha256

MAX_NAME_LEN = 64
SHA_FILE = Path("SHA256SUMS")
INDEX_FILE_NAME = "default.htm"

_QUOTED = re.compile(r'[^"]+"([^"]+)')


def _tokens(text: str) -> list[str]:
    """Split an index page: first up to a slash, then on spaces."""
    stripped = text.lstrip("/")
    if not stripped:
        return []
    first, _sep, rest = stripped.partition("/")
    return [first, *(token for token in rest.split(" ") if token)]


def parse_index_html(text: str) -> str | None:
    """Return the build directory linked from a mirror index page.

    The link is the quoted value of the first ``href`` token that is
    directly followed by a ``title`` token. Returns None if there is none.
    """
    tokens = _tokens(text)
    for previous, token in zip(tokens, tokens[1:]):
        if "title" in token and "href" in previous:
            match = _QUOTED.match(previous)
            return match[1] if match else None
    return None


@dataclass(frozen=True)
class PullPaths:
    """Files and links used while installing one image."""

    index_file: Path
    sums_file: Path
    rootfs: Path
    extract_dir: Path
    default_link: str


def _checked(value: str) -> str:
    if len(value) >= PATH_MAX:
        raise InvalidArgumentError(f"Path too long: {value}")
    return value


def pull_paths(config: Config, name: str, version: str, arch: str) -> PullPaths:
    """Work out where image ``name``/``version`` for ``arch`` comes from and goes."""
    if name is None or version is None or arch is None:
        raise InvalidArgumentError("Invalid parameters!")
    if len(name) + len(version) + len(arch) > MAX_NAME_LEN:
        raise InvalidArgumentError("Image name, version and architecture are too long")
    tmp = os.fspath(config.tmp)
    root = os.fspath(config.root)
    rootfs = _checked(f"{tmp}/{name}_{version}+{arch}.tar.xz")
    index_file = _checked(f"{tmp}/{INDEX_FILE_NAME}")
    extract_dir = _checked(f"{root}/{name}_{version}")
    default_link = _checked(f"{download.SOURCE_LINK}{name}/{version}/{arch}/default/")
    return PullPaths(
        index_file=Path(index_file),
        sums_file=SHA_FILE,
        rootfs=Path(rootfs),
        extract_dir=Path(extract_dir),
        default_link=default_link,
    )


def _remove(*paths: Path) -> None:
    for path in paths:
        with contextlib.suppress(OSError):
            path.unlink()


def pull(config: Config, name: str, version: str) -> Path:
    """Download, verify and unpack image ``name``/``version``; return its directory.

    A rootfs archive already present in the temporary directory is reused.
    """
    paths = pull_paths(config, name, version, get_arch())

    try:
        download.downloader(paths.default_link, paths.index_file)
    except (ChdError, OSError) as exc:
        raise ChdError("Failed to get HTML file") from exc

    try:
        text = paths.index_file.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        _remove(paths.index_file)
        raise ChdIOError(f"Failed to open {paths.index_file}") from exc
    build = parse_index_html(text)
    if build is None:
        _remove(paths.index_file)
        raise ChdError("Failed to parse HTML file!")

    rootfs_url = f"{paths.default_link}{build}rootfs.tar.xz"
    sums_url = f"{paths.default_link}{build}SHA256SUMS"
    if len(rootfs_url) >= PATH_MAX or len(sums_url) >= PATH_MAX:
        _remove(paths.index_file)
        raise InvalidArgumentError("Path too long!")

    if not paths.rootfs.exists():
        try:
            download.downloader(rootfs_url, paths.rootfs)
        except (ChdError, OSError) as exc:
            _remove(paths.index_file)
            raise ChdError("Failed to get rootfs file!") from exc

    try:
        download.downloader(sums_url, paths.sums_file)
    except (ChdError, OSError) as exc:
        _remove(paths.index_file, paths.rootfs)
        raise ChdError("Failed to get SHA256 file!") from exc

    if not check_sha256(paths.rootfs, paths.sums_file):
        _remove(paths.index_file, paths.rootfs, paths.sums_file)
        raise HashMismatchError(f"Checksum of {paths.rootfs} does not match")

    try:
        paths.index_file.unlink()
        paths.sums_file.unlink()
    except OSError as exc:
        raise ChdIOError("Clear failed!") from exc

    extract(paths.rootfs, paths.extract_dir)
    init_container(paths.extract_dir)
    return paths.extract_dir