# chd

`chd` downloads Linux root filesystem images from an LXC image mirror,
verifies them against the published SHA-256 sums, unpacks them under
`~/.chd`, and starts them as unprivileged containers through `proot`.

It is meant for environments such as Termux on Android, where `HOME` and
`PREFIX` are both set and `proot` is available.

## Requirements

- Linux
- `proot` installed and on `PATH`
- the `HOME` and `PREFIX` environment variables set (the command stops
  with an error otherwise); `LD_PRELOAD` is removed from the environment
  before anything is run
- an LXC image mirror reachable over plain HTTP, named by the
  `CHD_MIRROR` environment variable (for example
  `CHD_MIRROR=http://mirror.example.com`); images are looked up under
  `$CHD_MIRROR/lxc-images/images/`

## Installation

```
pip install .
```

## Usage

```
chd --help
```

Options:

| Option            | Meaning                              |
|-------------------|--------------------------------------|
| `-i`, `--install` | Install a rootfs: `chd -i NAME VER`  |
| `-h`, `--help`    | Show help information                |
| `-r`, `--run`     | Run a container with proot           |
| `-d`, `--del`     | Delete an installed rootfs           |

On first use the directories `~/.chd` and `~/.chd/.tmp` are created.

Install a distribution:

```
chd --install debian bookworm
```

The mirror's index page for the image and the host architecture is
fetched and the newest build linked from it is chosen. The image is saved
as `~/.chd/.tmp/debian_bookworm+<arch>.tar.xz` (an already present
download is reused), checked against its `SHA256SUMS` (downloaded into
the current directory and removed afterwards), and unpacked into
`~/.chd/debian_bookworm`. The container's `/etc/resolv.conf` is then
replaced with a public nameserver. Downloads use four parallel range
requests and show a progress bar.

List installed containers, or start one:

```
chd --run
chd --run debian_bookworm
```

The container starts `/bin/bash` when it has one, `/bin/sh` otherwise,
with `/dev` and `/proc` bound in and `/root` as the working directory.
The command's exit status is that of the shell.

Remove a container:

```
chd --del debian_bookworm
```

Without a name, `--del` lists the installed containers.

## Using it from Python

The pieces are usable on their own:

```python
from chd.config import load_config
from chd.pull import pull
from chd.container import installed_containers, run_proot_container

config = load_config()
pull(config, "alpine", "3.19")
print(installed_containers(config.root))
run_proot_container(config.root, "alpine_3.19")
```

Other entry points:

- `chd.sha.file_sha256(path)` and `chd.sha.check_sha256(rootfs, sums)`
- `chd.extract.extract(archive, destdir)`, which refuses entries that
  would land outside `destdir` (`UnsafePathError`)
- `chd.delete.delete_path(path, workers=8)`, a parallel recursive delete
  that never follows symbolic links
- `chd.download.downloader(url, filename, threads=4)`
- `chd.cli.dispatch(argv, config)` and `chd.cli.format_help(prog)`

Errors are raised as subclasses of `chd.errors.ChdError`
(`InvalidArgumentError`, `ChdIOError`, `HashMismatchError`).

## What it does not do

- It cannot list the images a mirror offers; you must know the name and
  version to install.
- Downloads go over plain HTTP only; HTTPS mirrors are not supported.
- It does not update or upgrade an installed container.