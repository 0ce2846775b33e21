[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chd"
version = "0.1.0"
description = "Install LXC root filesystems and run them as unprivileged containers with proot"
requires-python = ">=3.10"
dependencies = []
keywords = ["proot", "container", "rootfs", "lxc", "termux"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
chd = "chd.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["chd"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
