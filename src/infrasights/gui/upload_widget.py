# -*- coding: utf-8 -*-
"""Upload stage: diagram selection and business context."""

from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QPixmap
from PyQt6.QtWidgets import (
    QGridLayout,
    QLabel,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from infrasights.constants import CONTEXT_TAGS
from infrasights.core.state import SessionState

IMAGE_FILE_FILTER = "Images (*.png *.jpg *.jpeg *.webp *.gif *.bmp *.tif *.tiff *.svg);;All files (*)"


class UploadWidget(QWidget):
    """Pick a diagram, describe the workload and start the analysis."""

    browse_requested = pyqtSignal()
    context_changed = pyqtSignal(str)
    tag_requested = pyqtSignal(str)
    analyze_requested = pyqtSignal()

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._shown_image_id: int | None = None

        headline = QLabel("Predict your cloud bill before you build.")
        headline.setObjectName("appTitle")
        intro = QLabel(
            "Upload your architecture diagram. InfraSights analyzes every component, "
            "asks smart questions, and delivers a senior architect's cost assessment."
        )
        intro.setObjectName("mutedText")
        intro.setWordWrap(True)

        diagram_title = QLabel("1. Architecture Diagram")
        diagram_title.setObjectName("sectionTitle")
        self.preview_label = QLabel("Drop your diagram here\nSupports PNG, JPG, WEBP, SVG")
        self.preview_label.setObjectName("viewerSurface")
        self.preview_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.preview_label.setMinimumHeight(280)
        self.browse_button = QPushButton("Choose Diagram...")
        self.browse_button.setObjectName("secondaryButton")
        self.browse_button.clicked.connect(self.browse_requested.emit)
        self.image_error_label = QLabel("")
        self.image_error_label.setObjectName("errorText")
        self.image_error_label.setWordWrap(True)
        self.image_error_label.hide()

        context_title = QLabel("2. Business Context (optional)")
        context_title.setObjectName("sectionTitle")
        self.context_edit = QPlainTextEdit()
        self.context_edit.setPlaceholderText("e.g. B2B SaaS with 10k daily users, EU data residency...")
        self.context_edit.setMaximumHeight(90)
        self.context_edit.textChanged.connect(self._on_context_edited)

        tags = QWidget()
        tags_layout = QGridLayout(tags)
        tags_layout.setContentsMargins(0, 0, 0, 0)
        tags_layout.setSpacing(6)
        self.tag_buttons: list[QPushButton] = []
        for index, tag in enumerate(CONTEXT_TAGS):
            button = QPushButton(f"+ {tag}")
            button.setObjectName("tagButton")
            button.clicked.connect(lambda _checked=False, value=tag: self.tag_requested.emit(value))
            tags_layout.addWidget(button, index // 4, index % 4)
            self.tag_buttons.append(button)

        self.analyze_button = QPushButton("Analyze Architecture")
        self.analyze_button.setObjectName("primaryButton")
        self.analyze_button.clicked.connect(self.analyze_requested.emit)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(12)
        layout.addWidget(headline)
        layout.addWidget(intro)
        layout.addSpacing(8)
        layout.addWidget(diagram_title)
        layout.addWidget(self.preview_label, 1)
        layout.addWidget(self.browse_button, 0, Qt.AlignmentFlag.AlignLeft)
        layout.addWidget(self.image_error_label)
        layout.addWidget(context_title)
        layout.addWidget(self.context_edit)
        layout.addWidget(tags)
        layout.addSpacing(8)
        layout.addWidget(self.analyze_button)

    def _on_context_edited(self) -> None:
        self.context_changed.emit(self.context_edit.toPlainText())

    def show_image_error(self, message: str) -> None:
        self.image_error_label.setText(message)
        self.image_error_label.setVisible(bool(message))

    def update_state(self, state: SessionState) -> None:
        if self.context_edit.toPlainText() != state.context:
            self.context_edit.blockSignals(True)
            self.context_edit.setPlainText(state.context)
            self.context_edit.blockSignals(False)

        image = state.image
        if image is None:
            self._shown_image_id = None
            self.preview_label.setPixmap(QPixmap())
            self.preview_label.setText("Drop your diagram here\nSupports PNG, JPG, WEBP, SVG")
        elif id(image) != self._shown_image_id:
            self._shown_image_id = id(image)
            pixmap = QPixmap()
            if pixmap.loadFromData(image.data):
                self.preview_label.setPixmap(
                    pixmap.scaled(
                        560,
                        280,
                        Qt.AspectRatioMode.KeepAspectRatio,
                        Qt.TransformationMode.SmoothTransformation,
                    )
                )
            else:
                self.preview_label.setText(image.source_name or "Image selected")
            self.show_image_error("")

        busy = state.busy
        self.browse_button.setEnabled(not busy)
        self.context_edit.setReadOnly(busy)
        for button in self.tag_buttons:
            button.setEnabled(not busy)
        self.analyze_button.setEnabled(image is not None and not busy)
