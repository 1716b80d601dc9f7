import errno

import pytest

from domains.icon_export.errors import AccessExhaustedError, is_transient_os_error
from icowatch.utils.config import Settings
from icowatch.utils.helpers import derive_output_path, has_extension, normalise_extension


@pytest.mark.parametrize(
    "exc",
    [
        PermissionError(errno.EACCES, "denied"),
        BlockingIOError(errno.EAGAIN, "would block"),
        OSError(errno.EBUSY, "busy"),
        OSError(errno.ETXTBSY, "text file busy"),
    ],
)
def test_lock_style_errors_are_transient(exc):
    assert is_transient_os_error(exc)


@pytest.mark.parametrize(
    "exc",
    [
        FileNotFoundError(errno.ENOENT, "missing"),
        IsADirectoryError(errno.EISDIR, "directory"),
        ValueError("not an os error"),
    ],
)
def test_other_errors_are_not_transient(exc):
    assert not is_transient_os_error(exc)


def test_windows_sharing_violation_is_transient():
    exc = OSError(errno.EINVAL, "sharing violation")
    exc.winerror = 32

    assert is_transient_os_error(exc)


def test_access_exhausted_message():
    error = AccessExhaustedError("/tmp/a.svg", 5)

    assert str(error) == "Could not access file: /tmp/a.svg"
    assert error.attempts == 5


def test_settings_defaults_match_exporter_behaviour():
    settings = Settings()

    assert settings.debounce_seconds == 0.5
    assert settings.retry_delay_seconds == 0.3
    assert settings.max_attempts == 5
    assert settings.get_icon_sizes() == [256, 128, 64, 48, 32, 16]


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("ICOWATCH_DEBOUNCE_SECONDS", "1.5")
    monkeypatch.setenv("ICOWATCH_ICON_SIZES", "16, 32,32")

    settings = Settings()

    assert settings.debounce_seconds == 1.5
    assert settings.get_icon_sizes() == [32, 16]


def test_extension_helpers(tmp_path):
    assert normalise_extension("SVG") == ".svg"
    assert has_extension("a/b/Icon.SvG", ".svg")
    assert not has_extension("a/b/svg", ".svg")
    assert derive_output_path(tmp_path / "x.svg", "ico") == tmp_path / "x.ico"
