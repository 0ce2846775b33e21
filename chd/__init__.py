"""Install LXC root filesystems and run them with proot."""

__version__ = "0.1.0"