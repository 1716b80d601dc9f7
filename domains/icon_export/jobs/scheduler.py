"""
Debounced conversion scheduling.

Every touch of a source file becomes a job running on its own daemon thread.
A newer touch for the same path cancels the pending job, the job waits out
the debounce window, then calls the converter with a bounded retry on
transient access failures.
"""

import threading
from pathlib import Path
from typing import Callable, Optional, Union

from loguru import logger

from domains.icon_export.converters.base import IconConverter
from domains.icon_export.errors import AccessExhaustedError, TransientAccessError
from domains.icon_export.jobs.registry import DebounceRegistry, JobHandle
from icowatch.models.schemas import JobOutcome, JobReport
from icowatch.utils.config import Settings, get_settings
from icowatch.utils.helpers import normalise_path

ReportCallback = Callable[[JobReport], None]


class ConversionScheduler:
    """Creates, delays, supersedes and retries conversion jobs."""

    def __init__(
        self,
        converter: IconConverter,
        registry: Optional[DebounceRegistry] = None,
        settings: Optional[Settings] = None,
        on_report: Optional[ReportCallback] = None,
    ):
        """
        Initialize scheduler.

        Args:
            converter: Conversion port called once the debounce window passes
            registry: Debounce registry; a private one is created if omitted
            settings: Timing and retry settings (defaults to process settings)
            on_report: Optional callback receiving every finished job's report
        """
        settings = settings or get_settings()

        self.converter = converter
        self.registry = registry if registry is not None else DebounceRegistry()
        self.debounce_seconds = settings.debounce_seconds
        self.retry_delay_seconds = settings.retry_delay_seconds
        self.max_attempts = settings.max_attempts
        self.on_report = on_report

    def schedule_conversion(self, path: Union[str, Path]) -> JobHandle:
        """
        Schedule an export of ``path``, superseding any pending one.

        The registry swap happens before the worker starts, so the previous
        job is already cancelled when the new debounce wait begins.

        Args:
            path: Source file that was touched

        Returns:
            Handle of the newly scheduled job
        """
        key = str(normalise_path(path))
        handle = JobHandle(key)

        previous = self.registry.register_or_replace(key, handle)
        if previous is not None:
            previous.cancel()
            logger.debug(f"Superseded pending export: {key}")

        worker = threading.Thread(
            target=self._run_job,
            args=(handle,),
            name=f"export-{Path(key).name}",
            daemon=True,
        )
        worker.start()
        return handle

    def shutdown(self):
        """Cancel every pending job. In-flight conversions are not awaited."""
        handles = self.registry.pop_all()
        for handle in handles:
            handle.cancel()

        if handles:
            logger.info(f"Cancelled {len(handles)} pending export(s)")

    def _run_job(self, handle: JobHandle):
        """Worker thread body; registry cleanup runs on every exit path."""
        try:
            report = self._execute(handle)
        except Exception as e:
            logger.error(f"Failed to convert {handle.path}: {e}")
            report = JobReport(path=handle.path, outcome=JobOutcome.FAILED, detail=str(e))
        finally:
            self.registry.remove(handle.path, handle)
            handle.release()

        self._emit(report)

    def _execute(self, handle: JobHandle) -> JobReport:
        """Debounce, then attempt the conversion within the attempt budget."""
        path = Path(handle.path)

        if handle.wait(self.debounce_seconds):
            return self._silent(handle, JobOutcome.CANCELLED, 0)

        attempts = 0
        while attempts < self.max_attempts:
            if handle.cancelled:
                return self._silent(handle, JobOutcome.CANCELLED, attempts)

            if not path.exists():
                return self._silent(handle, JobOutcome.STALE, attempts)

            attempts += 1
            try:
                output = Path(self.converter.convert(path))

            except TransientAccessError as e:
                logger.debug(f"File busy ({attempts}/{self.max_attempts}): {path}: {e}")

                if attempts < self.max_attempts and handle.wait(self.retry_delay_seconds):
                    return self._silent(handle, JobOutcome.CANCELLED, attempts)
                continue

            except Exception as e:
                logger.error(f"Failed to convert {path}: {e}")
                return JobReport(
                    path=handle.path,
                    outcome=JobOutcome.FAILED,
                    attempts=attempts,
                    detail=str(e),
                )

            logger.success(f"Exported: {path.name} -> {output.name}")
            return JobReport(
                path=handle.path,
                outcome=JobOutcome.SUCCEEDED,
                attempts=attempts,
                output_path=str(output),
            )

        error = AccessExhaustedError(handle.path, attempts)
        logger.error(str(error))
        return JobReport(
            path=handle.path,
            outcome=JobOutcome.EXHAUSTED,
            attempts=attempts,
            detail=str(error),
        )

    def _silent(self, handle: JobHandle, outcome: JobOutcome, attempts: int) -> JobReport:
        logger.debug(f"Export {outcome.value}: {handle.path}")
        return JobReport(path=handle.path, outcome=outcome, attempts=attempts)

    def _emit(self, report: JobReport):
        if self.on_report is None:
            return

        try:
            self.on_report(report)
        except Exception as e:
            logger.warning(f"Report callback failed for {report.path}: {e}")
