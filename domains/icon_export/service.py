"""
Icon export orchestrator.

Wires the watcher and the startup scanner into the conversion scheduler so
that files seen at boot and files changed live take the same path.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from domains.icon_export.converters.base import IconConverter
from domains.icon_export.errors import WatchError
from domains.icon_export.jobs.scheduler import ConversionScheduler, ReportCallback
from domains.icon_export.scanners.existing import scan_existing
from domains.icon_export.watchers.filesystem import IconWatcher
from icowatch.models.schemas import TouchEvent
from icowatch.utils.config import Settings, get_settings
from icowatch.utils.helpers import normalise_path


class IconExportService:
    """Runs the watch -> debounce -> convert pipeline for one folder."""

    def __init__(
        self,
        folder: Path,
        converter: IconConverter,
        settings: Optional[Settings] = None,
        on_report: Optional[ReportCallback] = None,
    ):
        """
        Initialize service.

        Args:
            folder: Watch target; validated by the caller
            converter: Conversion port
            settings: Application settings
            on_report: Optional callback for finished job reports
        """
        self.settings = settings or get_settings()
        self.folder = normalise_path(folder)
        self.scheduler = ConversionScheduler(
            converter,
            settings=self.settings,
            on_report=on_report,
        )
        self.watcher = IconWatcher(
            self.folder,
            self.handle_touch,
            extension=self.settings.source_extension,
        )
        self.watching = False

    def handle_touch(self, event: TouchEvent):
        """Sink for the watcher: every admitted touch schedules a job."""
        self.scheduler.schedule_conversion(event.path)

    def start(self) -> int:
        """
        Start live watching, then queue pre-existing files.

        Watch failures are reported and the service continues with whatever
        the startup scan found.

        Returns:
            Number of pre-existing files scheduled
        """
        try:
            self.watcher.start()
            self.watching = True
        except WatchError as e:
            logger.error(f"Watcher error: {e}")

        return scan_existing(
            self.folder,
            self.settings.source_extension,
            self.scheduler.schedule_conversion,
        )

    def check_health(self) -> bool:
        if not self.watching:
            return False
        return self.watcher.check_health()

    def stop(self):
        """Stop watching and cancel pending jobs without waiting for them."""
        if self.watching:
            self.watcher.stop()
            self.watching = False

        self.scheduler.shutdown()
