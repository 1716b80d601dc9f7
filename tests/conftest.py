import threading
import time
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from icowatch.models.schemas import JobReport
from icowatch.utils.config import Settings
from icowatch.utils.helpers import derive_output_path


class RecordingConverter:
    """Fake conversion port that records calls and replays scripted failures."""

    def __init__(self, failures: Optional[List[BaseException]] = None, always: Optional[BaseException] = None):
        self.failures = list(failures or [])
        self.always = always
        self.calls: List[tuple[Path, float]] = []
        self.lock = threading.Lock()

    def convert(self, source: Path) -> Path:
        with self.lock:
            self.calls.append((Path(source), time.monotonic()))
            if self.always is not None:
                raise self.always
            if self.failures:
                raise self.failures.pop(0)

        output = derive_output_path(source, ".ico")
        output.write_bytes(b"ico")
        return output

    @property
    def call_count(self) -> int:
        with self.lock:
            return len(self.calls)


class ReportCollector:
    """Thread-safe sink for JobReports."""

    def __init__(self):
        self.reports: List[JobReport] = []
        self.lock = threading.Lock()

    def __call__(self, report: JobReport) -> None:
        with self.lock:
            self.reports.append(report)

    def wait_for(self, count: int, timeout: float = 5.0) -> List[JobReport]:
        wait_until(lambda: len(self.reports) >= count, timeout)
        with self.lock:
            return list(self.reports)


def wait_until(predicate: Callable[[], bool], timeout: float = 5.0, interval: float = 0.01) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def fast_settings() -> Settings:
    return Settings(debounce_seconds=0.2, retry_delay_seconds=0.05, max_attempts=5)


@pytest.fixture
def converter() -> RecordingConverter:
    return RecordingConverter()


@pytest.fixture
def reports() -> ReportCollector:
    return ReportCollector()


@pytest.fixture
def svg_file(tmp_path) -> Path:
    path = tmp_path / "logo.svg"
    path.write_text(
        '<svg xmlns="http://www.w3.org/2000/svg" width="10" height="20">'
        '<rect width="10" height="20" fill="red"/></svg>'
    )
    return path


@pytest.fixture
def make_converter() -> Callable[..., RecordingConverter]:
    return RecordingConverter


@pytest.fixture(name="wait_until")
def wait_until_fixture() -> Callable[..., bool]:
    return wait_until
