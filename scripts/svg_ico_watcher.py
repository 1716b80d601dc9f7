#!/usr/bin/env python3
"""Realtime SVG -> ICO exporter.

Watches one folder and writes a multi-resolution ``.ico`` next to every SVG
that is created, modified or renamed into it. SVGs already present at
startup are exported too.
"""

from __future__ import annotations

import argparse
import signal
import sys
import threading
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from domains.icon_export.converters.base import IconConverter
from domains.icon_export.converters.svg_ico import SvgIcoConverter
from domains.icon_export.service import IconExportService
from icowatch.utils.config import Settings, get_settings
from icowatch.utils.helpers import normalise_path
from icowatch.utils.log import configure_logging

HEALTH_CHECK_INTERVAL = 1.0


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments."""

    parser = argparse.ArgumentParser(
        description="Export every SVG in a folder to a multi-size ICO as it changes.",
    )
    parser.add_argument(
        "folder",
        nargs="?",
        default=None,
        help="Folder to watch (prompted for when omitted).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: ICOWATCH_LOG_LEVEL or INFO).",
    )

    return parser.parse_args(argv)


def resolve_folder(raw: Optional[str], prompt: Callable[[str], str] = input) -> Optional[Path]:
    """Return the folder to watch, asking interactively when none was given.

    Existence is checked by the caller; blank input yields None.
    """

    if raw is None or not raw.strip():
        try:
            raw = prompt("Enter folder to watch: ")
        except EOFError:
            raw = ""

    raw = (raw or "").strip().strip('"')
    if not raw:
        return None

    return normalise_path(Path(raw))


def main(
    argv: Optional[list[str]] = None,
    converter: Optional[IconConverter] = None,
    settings: Optional[Settings] = None,
    stop_event: Optional[threading.Event] = None,
) -> int:
    """Entry point for the CLI script."""

    args = parse_args(argv)
    settings = settings or get_settings()

    configure_logging(args.log_level or settings.log_level)
    logger.info("SVG -> ICO realtime exporter")

    folder = resolve_folder(args.folder)
    if folder is None or not folder.is_dir():
        logger.error(f"Folder does not exist: {folder or ''}")
        return 1

    service = IconExportService(
        folder,
        converter or SvgIcoConverter(settings=settings),
        settings=settings,
    )

    stop_event = stop_event or threading.Event()

    def _signal_handler(signum, frame):  # noqa: D401
        logger.info(f"Received signal {signum}, shutting down.")
        stop_event.set()

    previous_handlers = {}
    if threading.current_thread() is threading.main_thread():
        for signum in (signal.SIGINT, signal.SIGTERM):
            previous_handlers[signum] = signal.signal(signum, _signal_handler)

    try:
        service.start()
        logger.info(f"Watching folder: {folder}")
        logger.info("Press Ctrl+C to exit.")

        while not stop_event.is_set():
            service.check_health()
            stop_event.wait(HEALTH_CHECK_INTERVAL)
    finally:
        service.stop()
        for signum, handler in previous_handlers.items():
            signal.signal(signum, handler)

    logger.info("Exporter stopped.")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI bridge
    sys.exit(main())
