#!/usr/bin/env python3
"""
File system watcher for the icon export domain.

Monitors the watch target for source files being created, modified or renamed
into place and forwards them as TouchEvents.
Uses watchdog library for cross-platform file system event monitoring.
"""

from pathlib import Path
from typing import Callable, Optional

from loguru import logger
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from domains.icon_export.errors import WatchError
from icowatch.models.schemas import TouchEvent, TouchKind
from icowatch.utils.helpers import has_extension, normalise_path

TouchSink = Callable[[TouchEvent], None]


class IconSourceEventHandler(FileSystemEventHandler):
    """Normalizes watchdog notifications into TouchEvents."""

    def __init__(self, sink: TouchSink, extension: str = ".svg"):
        """
        Initialize event handler.

        Args:
            sink: Receives every admitted TouchEvent
            extension: Source file extension (matched case-insensitively)
        """
        super().__init__()
        self.sink = sink
        self.extension = extension

    def should_process(self, path: Optional[str]) -> bool:
        """
        Check if path should be processed.

        Args:
            path: File path

        Returns:
            True if should process, False otherwise
        """
        if not path:
            return False

        return has_extension(path, self.extension)

    def touch(self, kind: TouchKind, path: str):
        """
        Forward a touch to the sink.

        Sink failures are reported as watch errors so the observer thread
        keeps delivering events.

        Args:
            kind: Notification kind
            path: File path
        """
        event = TouchEvent(path=str(normalise_path(path)), kind=kind)

        try:
            self.sink(event)
        except Exception as e:
            logger.error(f"Watcher error: {e}")

    def on_created(self, event: FileSystemEvent):
        """Handle file creation."""
        if event.is_directory or not self.should_process(event.src_path):
            return

        logger.debug(f"Created: {event.src_path}")
        self.touch(TouchKind.CREATED, event.src_path)

    def on_modified(self, event: FileSystemEvent):
        """Handle file modification."""
        # Skip directory modifications (too noisy)
        if event.is_directory or not self.should_process(event.src_path):
            return

        logger.debug(f"Modified: {event.src_path}")
        self.touch(TouchKind.MODIFIED, event.src_path)

    def on_moved(self, event: FileSystemEvent):
        """Handle file rename; only the destination matters."""
        dest = getattr(event, "dest_path", None)
        if event.is_directory or not self.should_process(dest):
            return

        logger.debug(f"Renamed: {event.src_path} -> {dest}")
        self.touch(TouchKind.RENAMED_TO, dest)


class IconWatcher:
    """Watches a single directory, non-recursively."""

    def __init__(self, folder: Path, sink: TouchSink, extension: str = ".svg"):
        """
        Initialize watcher.

        Args:
            folder: Watch target; must already exist
            sink: Receives every admitted TouchEvent
            extension: Source file extension
        """
        self.folder = Path(folder)
        self.event_handler = IconSourceEventHandler(sink, extension)
        self.observer = Observer()
        self.observer.daemon = True
        self._fault_reported = False

    def start(self):
        """
        Start the observer.

        Raises:
            WatchError: the directory could not be scheduled or watched
        """
        try:
            self.observer.schedule(self.event_handler, str(self.folder), recursive=False)
            self.observer.start()
        except Exception as e:
            raise WatchError(f"Failed to watch {self.folder}: {e}") from e

        logger.success(f"Started watching: {self.folder}")

    def check_health(self) -> bool:
        """
        Report (once) if the observer thread has died.

        Returns:
            True while the observer is alive
        """
        if self.observer.is_alive():
            return True

        if not self._fault_reported:
            logger.error(f"Watcher error: observer for {self.folder} stopped unexpectedly")
            self._fault_reported = True

        return False

    def stop(self):
        """Stop watching."""
        if not self.observer.is_alive():
            return

        self.observer.stop()
        self.observer.join(timeout=5)
        logger.info("File system observer stopped")
