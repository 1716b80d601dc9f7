"""
Startup scanner.

Feeds source files that already exist when the exporter starts through the
same scheduling entry point as live events.
"""

from pathlib import Path
from typing import Callable, List

from loguru import logger

from domains.icon_export.errors import EnumerationError
from icowatch.utils.helpers import has_extension


def list_sources(folder: Path, extension: str) -> List[Path]:
    """
    List matching files directly inside ``folder``.

    Args:
        folder: Watch target
        extension: Source extension, matched case-insensitively

    Returns:
        Sorted list of matching file paths

    Raises:
        EnumerationError: the directory could not be listed
    """
    try:
        return sorted(
            entry for entry in Path(folder).iterdir()
            if entry.is_file() and has_extension(entry, extension)
        )
    except OSError as e:
        raise EnumerationError(str(e)) from e


def scan_existing(folder: Path, extension: str, schedule: Callable[[Path], object]) -> int:
    """
    Schedule a conversion for every pre-existing source file.

    Listing failures are reported and swallowed; live watching continues.

    Returns:
        Number of files scheduled
    """
    try:
        sources = list_sources(folder, extension)
    except EnumerationError as e:
        logger.error(f"Failed to enumerate existing {extension.lstrip('.').upper()}s: {e}")
        return 0

    for source in sources:
        schedule(source)

    if sources:
        logger.info(f"Queued {len(sources)} existing file(s) for export")

    return len(sources)
