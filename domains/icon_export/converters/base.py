"""Conversion port used by the scheduler."""

from pathlib import Path
from typing import Protocol


class IconConverter(Protocol):
    def convert(self, source: Path) -> Path:
        """Write the icon derived from ``source`` and return its path.

        Raises TransientAccessError when a file is locked by another writer
        and ConversionError for anything retrying will not fix. This is a
        blocking call; the scheduler runs it on the job's worker thread.
        """
