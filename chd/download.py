"""Segmented HTTP downloads with a terminal progress bar."""

from __future__ import annotations

import http.client
import os
import re
import sys
import threading
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TextIO

from .errors import ChdIOError, InvalidArgumentError

# Mirror serving the LXC image tree; override with CHD_MIRROR.
MIRROR = os.environ.get("CHD_MIRROR", "http://mirrors.example.com").rstrip("/")
SOURCE_LINK = f"{MIRROR}/lxc-images/images/"
LIST_LINK = f"{MIRROR}/lxc-images/meta/1.0/index-system"

BUFSIZE = 1024
MAX_THREADS = 4
DEFAULT_PORT = 80
USER_AGENT = "curl/8.6.0"
BAR_WIDTH = 40

CLEAR_LINE = "\033[2K\r"
HIDE_CURSOR = "\033[?25l"
SHOW_CURSOR = "\033[?25h"
COLOR_CYAN = "\033[36m"
COLOR_GREEN = "\033[32m"
COLOR_RESET = "\033[0m"

_MB = 1024 * 1024
_TIMEOUT = 60
_OK_STATUS = (200, 206)

_STATUS = re.compile(r"HTTP/\S*\s+(\d+)")
_CONTENT_TYPE = re.compile(r"Content-Type:\s*([^\s;]{1,127})", re.IGNORECASE)
_CONTENT_RANGE = re.compile(r"Content-Range:\s*bytes[^/]*/(\d+)", re.IGNORECASE)
_CONTENT_LENGTH = re.compile(r"Content-Length:\s*(\d+)", re.IGNORECASE)
_URL = re.compile(r"[^/]+//([^/]+)(/\S*)")


class DownloadError(ChdIOError):
    """A download could not be started or completed."""


@dataclass
class ResponseHeader:
    """The parts of an HTTP response header the downloader relies on."""

    status_code: int = 0
    content_type: str = ""
    content_length: int = 0


def parse_response_header(response: str) -> ResponseHeader:
    """Extract status, content type and total size from a raw header block.

    The total size comes from Content-Range when present, otherwise from
    Content-Length.
    """
    header = ResponseHeader()
    if match := _STATUS.search(response):
        header.status_code = int(match[1])
    if match := _CONTENT_TYPE.search(response):
        header.content_type = match[1]
    if match := _CONTENT_RANGE.search(response):
        header.content_length = int(match[1])
    elif match := _CONTENT_LENGTH.search(response):
        header.content_length = int(match[1])
    return header


def split_url(url: str) -> tuple[str, int, str]:
    """Split ``scheme://host[:port]/path`` into host, port and path."""
    match = _URL.match(url)
    if not match:
        raise InvalidArgumentError("Invalid URL format.")
    netloc, path = match.groups()
    host, sep, port_text = netloc.rpartition(":")
    if not sep:
        return netloc, DEFAULT_PORT, path
    if not host or not port_text.isdigit():
        raise InvalidArgumentError("Invalid URL format.")
    return host, int(port_text), path


def split_ranges(total: int, parts: int) -> list[tuple[int, int]]:
    """Divide ``total`` bytes into ``parts`` inclusive byte ranges.

    The last range takes the remainder; empty ranges are dropped.
    """
    if parts < 1:
        raise InvalidArgumentError(f"parts must be positive, got {parts}")
    if total < 0:
        raise InvalidArgumentError(f"total must not be negative, got {total}")
    size = total // parts
    ranges = []
    for index in range(parts):
        start = index * size
        end = total - 1 if index == parts - 1 else (index + 1) * size - 1
        if end >= start:
            ranges.append((start, end))
    return ranges


class ProgressBar:
    """A single-line percentage bar redrawn only when the percentage changes."""

    def __init__(self, width: int = BAR_WIDTH, file: TextIO | None = None) -> None:
        self.width = width
        self._file = file
        self._last_percent = -1
        self._lock = threading.Lock()

    def update(self, downloaded: int, total: int) -> str | None:
        """Redraw the bar; return the text written, or None if nothing changed."""
        if total <= 0 or downloaded < 0:
            return None
        percent = min(int(downloaded * 100.0 / total), 100)
        with self._lock:
            if percent == self._last_percent:
                return None
            self._last_percent = percent
            filled = percent * self.width // 100
            if filled < self.width:
                bar = "=" * filled + ">" + " " * (self.width - filled - 1)
            else:
                bar = "=" * self.width
            text = (
                f"{CLEAR_LINE}{COLOR_CYAN}[{percent:3d}%]{COLOR_RESET} {COLOR_GREEN}"
                f"|{bar}|{COLOR_RESET} ({downloaded // _MB}/{total // _MB} MB)"
            )
            if percent == 100:
                text += "\n" + SHOW_CURSOR
            stream = sys.stdout if self._file is None else self._file
            stream.write(text)
            stream.flush()
            return text


class _Counter:
    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    def add(self, amount: int) -> int:
        with self._lock:
            self._value += amount
            return self._value


def _header_text(response: http.client.HTTPResponse) -> str:
    version = f"{response.version // 10}.{response.version % 10}"
    return f"HTTP/{version} {response.status} {response.reason}\r\n{response.msg}"


@contextmanager
def _request(
    url: str, method: str, headers: dict[str, str] | None = None
) -> Iterator[tuple[ResponseHeader, http.client.HTTPResponse]]:
    host, port, path = split_url(url)
    connection = http.client.HTTPConnection(host, port, timeout=_TIMEOUT)
    try:
        try:
            connection.request(
                method,
                path,
                headers={"User-Agent": USER_AGENT, "Connection": "close", **(headers or {})},
            )
            response = connection.getresponse()
        except (OSError, http.client.HTTPException) as exc:
            raise DownloadError(f"Connection to {host} failed: {exc}") from exc
        yield parse_response_header(_header_text(response)), response
    finally:
        connection.close()


def _download_part(
    part_id: int,
    url: str,
    filename: str | os.PathLike[str],
    byte_range: tuple[int, int] | None,
    total: int,
    counter: _Counter,
    bar: ProgressBar,
) -> None:
    headers = {"Range": f"bytes={byte_range[0]}-{byte_range[1]}"} if byte_range else None
    with _request(url, "GET", headers) as (header, response):
        if header.status_code not in _OK_STATUS:
            raise DownloadError(
                f"Thread {part_id} failed to connect (status: {header.status_code})"
            )
        with open(filename, "r+b") as out:
            out.seek(byte_range[0] if byte_range else 0)
            try:
                for chunk in iter(lambda: response.read(BUFSIZE), b""):
                    out.write(chunk)
                    bar.update(counter.add(len(chunk)), total)
            except (OSError, http.client.HTTPException) as exc:
                raise DownloadError(f"Thread {part_id} failed: {exc}") from exc


def downloader(
    url: str, filename: str | os.PathLike[str], threads: int = MAX_THREADS
) -> None:
    """Download ``url`` into ``filename`` using ``threads`` parallel range requests."""
    print(f"{COLOR_GREEN}Url{COLOR_RESET} :  {url}")

    with _request(url, "HEAD") as (probe, _response):
        status = probe.status_code
        total = probe.content_length
    if status not in _OK_STATUS:
        raise DownloadError(f"Server does not support range requests (status: {status}).")

    with open(filename, "wb"):
        pass

    counter = _Counter()
    bar = ProgressBar()
    ranges: list[tuple[int, int] | None] = (
        list(split_ranges(total, threads)) if total > 0 else [None]
    )
    with ThreadPoolExecutor(max_workers=len(ranges) or 1) as pool:
        futures = [
            pool.submit(_download_part, part_id, url, filename, byte_range, total, counter, bar)
            for part_id, byte_range in enumerate(ranges)
        ]
    errors = [exc for exc in (future.exception() for future in futures) if exc]
    if errors:
        raise DownloadError("; ".join(str(exc) for exc in errors)) from errors[0]

    print("\nDownload complete.")