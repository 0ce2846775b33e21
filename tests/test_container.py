import io
import subprocess
from unittest import mock

import pytest

from chd.container import (
    RESOLV_CONF,
    build_proot_command,
    find_container_path,
    fix_dns,
    init_container,
    installed_containers,
    list_installed_containers,
    run_proot_container,
    select_shell,
)
from chd.errors import ChdError, ChdIOError, InvalidArgumentError


@pytest.fixture
def store(tmp_path):
    root = tmp_path / ".chd"
    (root / ".tmp").mkdir(parents=True)
    for name in ("debian_bookworm", "alpine_3.19"):
        (root / name / "bin").mkdir(parents=True)
        (root / name / "etc").mkdir()
    (root / "debian_bookworm" / "bin" / "bash").write_text("")
    (root / "alpine_3.19" / "bin" / "sh").write_text("")
    return root


def test_fix_dns_writes_nameserver(tmp_path):
    (tmp_path / "etc").mkdir()
    path = fix_dns(tmp_path)
    assert path.read_text() == "nameserver 8.8.8.8\n"


def test_fix_dns_replaces_symlink(tmp_path):
    (tmp_path / "etc").mkdir()
    target = tmp_path / "host_resolv"
    target.write_text("keep")
    (tmp_path / "etc" / "resolv.conf").symlink_to(target)
    init_container(tmp_path)
    assert not (tmp_path / "etc" / "resolv.conf").is_symlink()
    assert (tmp_path / "etc" / "resolv.conf").read_text() == RESOLV_CONF
    assert target.read_text() == "keep"


def test_fix_dns_without_etc(tmp_path):
    with pytest.raises(ChdIOError):
        fix_dns(tmp_path)


def test_fix_dns_rejects_long_path():
    with pytest.raises(InvalidArgumentError):
        fix_dns("x" * 5000)


def test_installed_containers_skip_tmp(store):
    assert installed_containers(store) == ["alpine_3.19", "debian_bookworm"]


def test_installed_containers_missing_root(tmp_path):
    with pytest.raises(ChdIOError):
        installed_containers(tmp_path / "missing")


def test_list_installed_containers_output(store):
    stream = io.StringIO()
    list_installed_containers(store, stream)
    lines = stream.getvalue().splitlines()
    assert lines[0] == "Available containers:"
    assert lines[1:] == ["  - alpine_3.19", "  - debian_bookworm"]


def test_find_container_path(store):
    assert find_container_path(store, "alpine_3.19") == store / "alpine_3.19"
    assert find_container_path(store, "missing") is None


def test_find_container_path_ignores_files(store):
    (store / "plain").write_text("")
    assert find_container_path(store, "plain") is None


def test_select_shell_prefers_bash(store):
    assert select_shell(store / "debian_bookworm") == "/bin/bash"
    assert select_shell(store / "alpine_3.19") == "/bin/sh"


def test_select_shell_without_shell(tmp_path):
    with pytest.raises(ChdError):
        select_shell(tmp_path)


def test_build_proot_command_layout(store):
    path = store / "alpine_3.19"
    command = build_proot_command(path, "/bin/sh")
    assert command.startswith(f"proot --link2symlink -0 -r {path} -b /dev -b /proc ")
    assert f"-b {path}/root:/dev/shm -w /root /usr/bin/env -i HOME=/root " in command
    assert command.endswith("SHELL=/bin/sh TERM=$TERM LANG=C.UTF-8 /bin/sh --login")


def test_run_requires_proot(store):
    with mock.patch("subprocess.run", return_value=subprocess.CompletedProcess([], 127)):
        with pytest.raises(ChdError):
            run_proot_container(store, "alpine_3.19")


def test_run_unknown_container(store):
    with mock.patch("subprocess.run", return_value=subprocess.CompletedProcess([], 1)):
        with pytest.raises(ChdError):
            run_proot_container(store, "missing")


def test_run_without_name_lists(store, capsys):
    with mock.patch("subprocess.run", return_value=subprocess.CompletedProcess([], 1)):
        assert run_proot_container(store, None) is None
    out = capsys.readouterr().out
    assert "No container specified" in out
    assert "  - debian_bookworm" in out


def test_run_executes_proot_command(store):
    results = [subprocess.CompletedProcess([], 1), subprocess.CompletedProcess([], 3)]
    with mock.patch("subprocess.run", side_effect=results) as run:
        assert run_proot_container(store, "debian_bookworm") == 3
    expected = build_proot_command(store / "debian_bookworm", "/bin/bash")
    assert run.call_args.args[0] == ["sh", "-c", expected]