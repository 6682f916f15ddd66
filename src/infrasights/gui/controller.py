# -*- coding: utf-8 -*-
"""Application controller bridging the session workflow and the Qt views."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from PyQt6.QtCore import QObject, QThread, pyqtSignal

from infrasights.core.cancellation import CancellationToken
from infrasights.core.session import SessionController
from infrasights.core.state import SessionState
from infrasights.errors import DecodeError
from infrasights.gui.workers import AnalysisWorker, EstimationWorker
from infrasights.pipeline.exporter import Exporter
from infrasights.pipeline.gateway import ModelGateway
from infrasights.pipeline.image_normalizer import ImageNormalizer

logger = logging.getLogger(__name__)


class AppController(QObject):
    """
    Central controller for application logic.
    Owns the session, starts model calls on worker threads and exports reports.
    """
    state_changed = pyqtSignal(object)
    image_error = pyqtSignal(str)
    export_finished = pyqtSignal(str)
    error_occurred = pyqtSignal(str)

    def __init__(
        self,
        settings: dict[str, Any],
        gateway: ModelGateway | None = None,
        normalizer: ImageNormalizer | None = None,
        exporter: Exporter | None = None,
    ) -> None:
        super().__init__()
        self.settings = settings
        self.gateway = gateway or ModelGateway.from_settings(settings)
        image_settings = settings.get("image", {})
        self.normalizer = normalizer or ImageNormalizer(
            default_width=int(image_settings.get("default_svg_width", 1200)),
            default_height=int(image_settings.get("default_svg_height", 900)),
        )
        export_dir = str(settings.get("export", {}).get("directory", "") or "")
        self.exporter = exporter or Exporter(output_dir=export_dir or None)
        self.session = SessionController(self.gateway, listener=self.state_changed.emit)

        # Thread Management
        self._active_threads: list[QThread] = []
        # Workers have no Qt parent; hold them until their thread finishes.
        self._active_workers: dict[QThread, QObject] = {}

    @property
    def state(self) -> SessionState:
        return self.session.state

    def _forget_thread(self, thread: QThread) -> None:
        """Drop a finished thread before Qt deletes it."""
        if thread in self._active_threads:
            self._active_threads.remove(thread)
        self._active_workers.pop(thread, None)

    def _start_thread(self, worker: QObject, on_finished, on_error) -> None:
        # Use child of self to ensure it's not garbage collected too early
        thread = QThread(self)
        worker.moveToThread(thread)

        thread.started.connect(worker.run)
        worker.finished.connect(on_finished)
        worker.error.connect(on_error)

        worker.finished.connect(thread.quit)
        worker.error.connect(thread.quit)
        thread.finished.connect(lambda: self._forget_thread(thread))
        thread.finished.connect(worker.deleteLater)
        thread.finished.connect(thread.deleteLater)

        self._active_threads.append(thread)
        self._active_workers[thread] = worker
        thread.start()

    # -- upload ----------------------------------------------------------

    def load_image(self, path: str | Path) -> bool:
        """Normalize a chosen file; decode errors are reported without touching the session."""
        try:
            image = self.normalizer.normalize_file(path)
        except DecodeError as exc:
            logger.warning("Image rejected: %s", exc)
            self.image_error.emit(f"{exc}. Please try a PNG or JPG file.")
            return False
        return self.session.select_image(image)

    def set_context(self, text: str) -> None:
        self.session.set_context(text)

    def add_context_tag(self, tag: str) -> str:
        return self.session.add_context_tag(tag)

    def set_answer(self, question_id: str, value: str) -> None:
        self.session.set_answer(question_id, value)

    # -- transitions -----------------------------------------------------

    def start_analysis(self) -> CancellationToken | None:
        token = self.session.begin_analysis()
        if token is None:
            return None
        worker = AnalysisWorker(self.gateway, self.state.image, self.state.context)
        self._start_thread(
            worker,
            lambda result: self.session.complete_analysis(token, result),
            lambda exc: self.session.fail_analysis(token, exc),
        )
        return token

    def start_estimation(self) -> CancellationToken | None:
        token = self.session.begin_estimation()
        if token is None:
            return None
        worker = EstimationWorker(self.gateway, self.state.analysis, self.state.answers)
        self._start_thread(
            worker,
            lambda report: self.session.complete_estimation(token, report),
            lambda exc: self.session.fail_estimation(token, exc),
        )
        return token

    def cancel(self) -> bool:
        return self.session.cancel()

    def reset(self) -> None:
        self.session.reset()

    # -- export ----------------------------------------------------------

    def export_markdown(self, target: str | Path | None = None) -> Path | None:
        if self.state.analysis is None or self.state.report is None:
            return None
        try:
            path = self.exporter.save_markdown(self.state.analysis, self.state.report, self.state.answers, target)
        except OSError as exc:
            logger.exception("Markdown export failed")
            self.error_occurred.emit(f"Export failed: {exc}")
            return None
        self.export_finished.emit(str(path))
        return path

    def export_pdf(self, target: str | Path | None = None) -> Path | None:
        if self.state.analysis is None or self.state.report is None:
            return None
        try:
            path = self.exporter.save_pdf(self.state.analysis, self.state.report, self.state.answers, target)
        except OSError as exc:
            logger.exception("PDF export failed")
            self.error_occurred.emit(f"Export failed: {exc}")
            return None
        self.export_finished.emit(str(path))
        return path

    def shutdown(self) -> None:
        """Wait for worker threads so Qt does not destroy running threads on exit."""
        self.session.cancel()
        for thread in list(self._active_threads):
            if thread.isRunning():
                thread.quit()
                thread.wait(2000)
