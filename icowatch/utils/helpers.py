"""
Helper utilities for the exporter.

Path handling shared by the watcher, the scanner and the converter.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Union

PathLike = Union[str, Path]


def normalise_path(path: PathLike) -> Path:
    """Return an absolute version of ``path`` without forcing existence."""
    path = Path(path).expanduser()
    try:
        return path.resolve()
    except (FileNotFoundError, RuntimeError):
        return path.absolute()


def has_extension(path: PathLike, extension: str) -> bool:
    """Case-insensitive check of the final suffix of ``path``."""
    suffix = Path(path).suffix
    if not suffix:
        return False
    return suffix.lower() == normalise_extension(extension)


def normalise_extension(extension: str) -> str:
    """Return ``extension`` lower-cased with a leading dot."""
    extension = extension.strip().lower()
    if extension and not extension.startswith('.'):
        extension = '.' + extension
    return extension


def derive_output_path(source: PathLike, output_extension: str) -> Path:
    """Output lives next to the source, same stem, extension swapped."""
    source = Path(source)
    return source.with_name(source.stem + normalise_extension(output_extension))


def now_utc() -> datetime:
    """Get current timestamp."""
    return datetime.now(timezone.utc)
