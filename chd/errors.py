"""Exception hierarchy shared by the chd modules."""


class ChdError(Exception):
    """Base class for every error chd reports."""


class InvalidArgumentError(ChdError, ValueError):
    """An argument or path is malformed or out of range."""


class ChdIOError(ChdError, OSError):
    """A filesystem or network operation failed."""


class HashMismatchError(ChdError):
    """A downloaded file does not match its published checksum."""