# -*- coding: utf-8 -*-
"""Application entry point."""

from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path

from PyQt6.QtCore import QTimer
from PyQt6.QtWidgets import QApplication, QMessageBox

from infrasights.config import get_api_key, load_config
from infrasights.constants import APP_NAME, APP_SLUG
from infrasights.errors import ConfigurationError
from infrasights.gui.main_window import MainWindow
from infrasights.integrations.gemini_client import GeminiClient
from infrasights.utils.logger import setup_session_logging


def global_exception_handler(exc_type, exc_value, exc_traceback):
    """Log fatal errors to a dedicated crash report."""
    error_msg = "".join(traceback.format_exception(exc_type, exc_value, exc_traceback))
    logging.getLogger().critical("FATAL CRASH:\n%s", error_msg)

    crash_path = Path.cwd() / "logs" / "LAST_CRASH.log"
    crash_path.parent.mkdir(parents=True, exist_ok=True)
    crash_path.write_text(error_msg, encoding="utf-8")

    if QApplication.instance() is not None:
        QMessageBox.critical(None, "Application Crash", f"A fatal error occurred.\nDetails saved to: {crash_path}")

    sys.__excepthook__(exc_type, exc_value, exc_traceback)


def main() -> int:
    """Start the GUI application."""
    sys.excepthook = global_exception_handler
    session_log_path = setup_session_logging(Path.cwd(), APP_SLUG)
    logger = logging.getLogger(__name__)
    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    if session_log_path is not None:
        logger.info("Session log file: %s", session_log_path)

    try:
        settings = load_config(sys.argv[1] if len(sys.argv) > 1 else None)
    except ConfigurationError as exc:
        logger.error("Invalid settings: %s", exc)
        QMessageBox.critical(None, "Invalid Settings", str(exc))
        return 2

    api_key = get_api_key(settings)
    if not api_key:
        logger.warning("No Gemini API key configured; analysis requests will fail")
    elif not GeminiClient(api_key).validate_key():
        logger.warning("Gemini API key does not look like a Google API key")

    window = MainWindow(settings=settings)
    QTimer.singleShot(100, window.show)
    app.aboutToQuit.connect(window.controller.shutdown)
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
