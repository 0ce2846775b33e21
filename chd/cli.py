"""Command-line entry point: install, run, delete containers."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .color import Foreground, printc
from .config import Config, load_config
from .container import find_container_path, list_installed_containers, run_proot_container
from .delete import delete_path
from .errors import ChdError
from .pull import pull

DEFAULT_PROG = "chd"


@dataclass(frozen=True)
class _Command:
    short: str
    long: str
    handler: Callable[[list[str], Config], int]
    description: str


def _install(argv: list[str], config: Config) -> int:
    if len(argv) >= 4:
        pull(config, argv[2], argv[3])
        return 0
    print("Error: insufficient arguments for install", file=sys.stderr)
    print(format_help(argv[0]), end="")
    return 1


def _help(argv: list[str], config: Config) -> int:
    print(format_help(argv[0]), end="")
    return 0


def _run(argv: list[str], config: Config) -> int:
    status = run_proot_container(config.root, argv[2] if len(argv) >= 3 else None)
    return 0 if status is None else status


def _delete(argv: list[str], config: Config) -> int:
    if len(argv) < 3:
        print("Error: missing container name", file=sys.stderr)
        list_installed_containers(config.root)
        print(f"Usage: {argv[0]} --del <container_name>", file=sys.stderr)
        return 1
    name = argv[2]
    path = find_container_path(config.root, name)
    if path is None:
        print(f"Error: container '{name}' not found", file=sys.stderr)
        return 1
    print(f"Deleting container: {name}")
    try:
        delete_path(path)
    except ChdError as exc:
        print(f"Failed to delete container: {name} ({exc})", file=sys.stderr)
        return 1
    print(f"Successfully deleted: {name}")
    return 0


_COMMANDS = (
    _Command("-i", "--install", _install, "Install rootfs."),
    _Command("-h", "--help", _help, "Show help information."),
    _Command("-r", "--run", _run, "Run container with proot."),
    _Command("-d", "--del", _delete, "Delete rootfs."),
)


def format_help(prog: str) -> str:
    """Return the usage text listing every option."""
    lines = [f"Usage: {prog} [options] program [arg...]", "Options:"]
    lines.extend(f"  {c.short}, {c.long}\t{c.description}" for c in _COMMANDS)
    return "\n".join(lines) + "\n"


def dispatch(argv: Sequence[str], config: Config) -> int:
    """Run the command named by ``argv[1]``; ``argv[0]`` is the program name."""
    args = list(argv) or [DEFAULT_PROG]
    if len(args) < 2:
        print(format_help(args[0]), end="")
        return 0
    option = args[1]
    for command in _COMMANDS:
        if option in (command.short, command.long):
            try:
                return command.handler(args, config)
            except ChdError as exc:
                printc(f"{exc}\n", Foreground.RED, file=sys.stderr)
                return 1
    print(f'Error: unknown option "{option}"', file=sys.stderr)
    print(format_help(args[0]), end="")
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    """Set up the container store and run the requested command."""
    if argv is None:
        prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else DEFAULT_PROG
        args = sys.argv[1:]
    else:
        prog = DEFAULT_PROG
        args = list(argv)
    try:
        config = load_config()
    except ChdError as exc:
        printc(f"{exc}\n", Foreground.RED, file=sys.stderr)
        return 1
    return dispatch([prog, *args], config)


if __name__ == "__main__":
    raise SystemExit(main())