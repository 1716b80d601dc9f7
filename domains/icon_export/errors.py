"""Exceptions raised across the icon export domain."""

import errno
from typing import Optional

# Windows sharing/lock violations (ERROR_SHARING_VIOLATION, ERROR_LOCK_VIOLATION)
_WINDOWS_LOCK_ERRORS = {32, 33}

_TRANSIENT_ERRNOS = {
    errno.EACCES,
    errno.EAGAIN,
    errno.EBUSY,
    errno.ETXTBSY,
}


class IconExportError(Exception):
    """Base class for icon export failures."""


class TransientAccessError(IconExportError):
    """A file is temporarily locked or in use by another writer."""


class ConversionError(IconExportError):
    """The converter failed for a reason that retrying will not fix."""


class AccessExhaustedError(IconExportError):
    """Every attempt hit a transient access failure."""

    def __init__(self, path: str, attempts: int):
        super().__init__(f"Could not access file: {path}")
        self.path = path
        self.attempts = attempts


class EnumerationError(IconExportError):
    """Listing the watch target failed."""


class WatchError(IconExportError):
    """The filesystem notification mechanism faulted."""


def is_transient_os_error(exc: BaseException) -> bool:
    """
    Check whether an OSError means "someone else holds the file".

    Args:
        exc: Exception raised while reading the source or writing the output

    Returns:
        True if the operation is worth retrying shortly
    """
    if isinstance(exc, (PermissionError, BlockingIOError)):
        return True
    if not isinstance(exc, OSError):
        return False

    winerror: Optional[int] = getattr(exc, "winerror", None)
    if winerror in _WINDOWS_LOCK_ERRORS:
        return True

    return exc.errno in _TRANSIENT_ERRNOS
