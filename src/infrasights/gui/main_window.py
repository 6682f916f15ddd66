# -*- coding: utf-8 -*-
"""Main window: one page per workflow stage."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from PyQt6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QScrollArea,
    QStackedWidget,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from infrasights.constants import APP_NAME, APP_VERSION
from infrasights.core.state import SessionState, Stage
from infrasights.gui.clarification_widget import ClarificationWidget
from infrasights.gui.controller import AppController
from infrasights.gui.report_widget import ReportWidget
from infrasights.gui.upload_widget import IMAGE_FILE_FILTER, UploadWidget
from infrasights.pipeline.exporter import build_filename

logger = logging.getLogger(__name__)

STAGE_TITLES = {
    Stage.UPLOAD: "1 · Upload",
    Stage.CLARIFICATION: "2 · Clarify",
    Stage.REPORT: "3 · Report",
}


class MainWindow(QMainWindow):
    """Upload -> Clarification -> Report, driven by ``AppController``."""

    def __init__(
        self,
        settings: dict[str, Any],
        controller: AppController | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.settings = settings
        self.controller = controller or AppController(settings)
        self._last_scroll_resets = 0

        self.setWindowTitle(f"{APP_NAME} v{APP_VERSION}")
        self.resize(1100, 860)

        self._build_ui()
        self._apply_styles()
        self._connect()
        self._on_state_changed(self.controller.state)

    def _build_ui(self) -> None:
        header = QWidget()
        header_layout = QHBoxLayout(header)
        header_layout.setContentsMargins(0, 0, 0, 0)
        header_layout.setSpacing(12)
        self.title_label = QLabel(APP_NAME)
        self.title_label.setObjectName("appTitle")
        self.stage_label = QLabel("")
        self.stage_label.setObjectName("statusBadge")
        self.busy_label = QLabel("")
        self.busy_label.setObjectName("mutedText")
        self.stop_button = QPushButton("Stop")
        self.stop_button.setObjectName("dangerButton")
        self.stop_button.hide()
        header_layout.addWidget(self.title_label)
        header_layout.addWidget(self.stage_label)
        header_layout.addStretch(1)
        header_layout.addWidget(self.busy_label)
        header_layout.addWidget(self.stop_button)

        self.upload_widget = UploadWidget()
        self.clarification_widget = ClarificationWidget()
        self.report_widget = ReportWidget()

        self.pages: dict[Stage, QScrollArea] = {}
        self.stack = QStackedWidget()
        for stage, page in (
            (Stage.UPLOAD, self.upload_widget),
            (Stage.CLARIFICATION, self.clarification_widget),
            (Stage.REPORT, self.report_widget),
        ):
            scroll = QScrollArea()
            scroll.setWidgetResizable(True)
            scroll.setWidget(page)
            self.pages[stage] = scroll
            self.stack.addWidget(scroll)

        self.message_label = QLabel("")
        self.message_label.setObjectName("mutedText")
        self.message_label.setWordWrap(True)

        central = QWidget()
        central_layout = QVBoxLayout(central)
        central_layout.setContentsMargins(14, 14, 14, 14)
        central_layout.setSpacing(12)
        central_layout.addWidget(header)
        central_layout.addWidget(self.message_label)
        central_layout.addWidget(self.stack, 1)
        self.setCentralWidget(central)
        self.setStatusBar(QStatusBar())

    def _connect(self) -> None:
        c = self.controller
        c.state_changed.connect(self._on_state_changed)
        c.image_error.connect(self.upload_widget.show_image_error)
        c.export_finished.connect(lambda path: self.statusBar().showMessage(f"Report saved: {path}", 8000))
        c.error_occurred.connect(lambda message: QMessageBox.warning(self, "Export failed", message))

        self.stop_button.clicked.connect(c.cancel)
        self.upload_widget.browse_requested.connect(self.choose_image)
        self.upload_widget.context_changed.connect(c.set_context)
        self.upload_widget.tag_requested.connect(c.add_context_tag)
        self.upload_widget.analyze_requested.connect(c.start_analysis)
        self.clarification_widget.answer_changed.connect(c.set_answer)
        self.clarification_widget.estimate_requested.connect(c.start_estimation)
        self.report_widget.export_markdown_requested.connect(self.export_markdown)
        self.report_widget.export_pdf_requested.connect(self.export_pdf)
        self.report_widget.new_analysis_requested.connect(c.reset)

    def _on_state_changed(self, state: SessionState) -> None:
        session = self.controller.session
        self.stage_label.setText(STAGE_TITLES[state.stage])
        self.stack.setCurrentWidget(self.pages[state.stage])

        self.upload_widget.update_state(state)
        self.clarification_widget.update_state(
            state, session.answered_count, session.total_questions, session.progress_percent
        )
        self.report_widget.set_report(state.report)
        self.report_widget.set_busy(state.busy)

        self.stop_button.setVisible(state.busy)
        self.busy_label.setText(state.status_message if state.busy else "")
        message = "" if state.busy else (state.error_message or state.status_message)
        self.message_label.setObjectName("errorText" if state.error_message else "mutedText")
        self.message_label.setText(message)
        self.message_label.setVisible(bool(message))
        self.message_label.style().unpolish(self.message_label)
        self.message_label.style().polish(self.message_label)

        if state.scroll_resets != self._last_scroll_resets:
            self._last_scroll_resets = state.scroll_resets
            self.pages[state.stage].verticalScrollBar().setValue(0)

    def choose_image(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Choose Architecture Diagram", str(Path.cwd()), IMAGE_FILE_FILTER)
        if path:
            logger.info("Diagram chosen: %s", path)
            self.controller.load_image(path)

    def _ask_save_path(self, extension: str, file_filter: str) -> str:
        default_dir = Path(self.controller.exporter.output_dir)
        suggested = default_dir / build_filename(datetime.now(), extension)
        path, _ = QFileDialog.getSaveFileName(self, "Export Report", str(suggested), file_filter)
        return path

    def export_markdown(self) -> None:
        path = self._ask_save_path("md", "Markdown (*.md)")
        if path:
            self.controller.export_markdown(path)

    def export_pdf(self) -> None:
        path = self._ask_save_path("pdf", "PDF (*.pdf)")
        if path:
            self.controller.export_pdf(path)

    def closeEvent(self, event) -> None:  # noqa: N802
        self.controller.shutdown()
        super().closeEvent(event)

    def _apply_styles(self) -> None:
        self.setStyleSheet(
            """
            QMainWindow, QWidget {
                background: #f3f5f8;
                color: #1f2937;
                font-family: "Segoe UI", "Noto Sans", sans-serif;
                font-size: 12px;
            }
            QLabel#appTitle {
                font-size: 20px;
                font-weight: 700;
                color: #0f172a;
            }
            QLabel#sectionTitle {
                font-size: 13px;
                font-weight: 700;
                color: #111827;
            }
            QLabel#routeTitle {
                font-size: 15px;
                font-weight: 700;
                color: #6d28d9;
            }
            QLabel#bigNumber {
                font-size: 28px;
                font-weight: 800;
                color: #0f172a;
            }
            QLabel#countLabel {
                font-family: monospace;
                font-size: 18px;
                font-weight: 700;
                color: #7c3aed;
            }
            QLabel#mutedText {
                color: #6b7280;
            }
            QLabel#errorText {
                color: #b91c1c;
                font-weight: 600;
            }
            QLabel#statusBadge {
                background: #ede9fe;
                color: #6d28d9;
                border: 1px solid #ddd6fe;
                border-radius: 8px;
                padding: 4px 10px;
                font-weight: 600;
            }
            QLabel#viewerSurface {
                background: white;
                border: 2px dashed #d1d9e6;
                border-radius: 12px;
                color: #64748b;
            }
            QFrame#panelCard, QLabel#panelCard {
                background: white;
                border: 1px solid #d0d7e2;
                border-radius: 10px;
            }
            QPushButton#primaryButton {
                background: #7c3aed;
                color: white;
                border: 1px solid #6d28d9;
                border-radius: 10px;
                padding: 8px 14px;
                font-weight: 700;
            }
            QPushButton#primaryButton:disabled {
                background: #c4b5fd;
                border-color: #c4b5fd;
            }
            QPushButton#dangerButton {
                background: #dc2626;
                color: white;
                border: 1px solid #b91c1c;
                border-radius: 10px;
                padding: 6px 12px;
                font-weight: 700;
            }
            QPushButton#secondaryButton, QPushButton#tagButton, QPushButton#optionButton {
                background: white;
                border: 1px solid #d0d7e2;
                border-radius: 10px;
                padding: 6px 10px;
            }
            QPushButton#optionButton:checked {
                background: #ede9fe;
                border-color: #8b5cf6;
                color: #5b21b6;
            }
            """
        )
