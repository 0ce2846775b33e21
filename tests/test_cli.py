import os

import pytest

from chd.cli import dispatch, format_help, main
from chd.config import Config


@pytest.fixture
def config(tmp_path):
    cfg = Config(home=tmp_path)
    cfg.ensure_dirs()
    return cfg


def test_format_help_lists_options():
    text = format_help("chd")
    assert text.startswith("Usage: chd [options] program [arg...]\nOptions:\n")
    assert "  -i, --install\tInstall rootfs.\n" in text
    assert "  -d, --del\tDelete rootfs.\n" in text
    assert text.count("\n") == 6


def test_dispatch_without_option_prints_help(config, capsys):
    assert dispatch(["chd"], config) == 0
    assert capsys.readouterr().out == format_help("chd")


def test_dispatch_help(config, capsys):
    assert dispatch(["prog", "--help"], config) == 0
    assert capsys.readouterr().out == format_help("prog")


def test_dispatch_unknown_option(config, capsys):
    assert dispatch(["chd", "--bogus"], config) == 1
    captured = capsys.readouterr()
    assert 'unknown option "--bogus"' in captured.err
    assert captured.out == format_help("chd")


def test_install_needs_name_and_version(config, capsys):
    assert dispatch(["chd", "-i", "debian"], config) == 1
    captured = capsys.readouterr()
    assert "insufficient arguments for install" in captured.err
    assert captured.out == format_help("chd")


def test_install_rejects_long_name(config, capsys):
    assert dispatch(["chd", "--install", "n" * 70, "1.0"], config) == 1
    assert capsys.readouterr().err


def test_delete_without_name_lists_containers(config, capsys):
    (config.root / "box").mkdir()
    assert dispatch(["chd", "--del"], config) == 1
    captured = capsys.readouterr()
    assert "missing container name" in captured.err
    assert "  - box\n" in captured.out


def test_delete_unknown_container(config, capsys):
    assert dispatch(["chd", "-d", "ghost"], config) == 1
    assert "container 'ghost' not found" in capsys.readouterr().err


def test_delete_container(config, capsys):
    box = config.root / "box"
    (box / "etc").mkdir(parents=True)
    (box / "etc" / "hostname").write_text("box\n")
    assert dispatch(["chd", "-d", "box"], config) == 0
    assert not box.exists()
    assert "Successfully deleted: box" in capsys.readouterr().out


def test_main_creates_store_and_shows_help(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("PREFIX", "")
    monkeypatch.setenv("LD_PRELOAD", "libfake.so")
    assert main(["-h"]) == 0
    assert capsys.readouterr().out == format_help("chd")
    assert (tmp_path / ".chd" / ".tmp").is_dir()
    assert "LD_PRELOAD" not in os.environ


def test_main_requires_prefix(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("PREFIX", raising=False)
    assert main([]) == 1
    assert "HOME, PREFIX" in capsys.readouterr().err
    assert not (tmp_path / ".chd").exists()