# -*- coding: utf-8 -*-
"""Progress display for answered clarifying questions."""

from __future__ import annotations

from PyQt6.QtWidgets import QLabel, QProgressBar, QVBoxLayout, QWidget

from infrasights.utils.formatting import format_percent


class ProgressWidget(QWidget):
    """Show how many clarifying questions have an answer."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.title_label = QLabel("Answered")
        self.title_label.setObjectName("sectionTitle")
        self.count_label = QLabel("0/0 (0%)")
        self.count_label.setObjectName("countLabel")
        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 100)
        self.progress_bar.setValue(0)
        self.progress_bar.setTextVisible(False)
        self.status_label = QLabel("Unanswered questions are sent as \"Not specified\".")
        self.status_label.setObjectName("mutedText")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(6)
        layout.addWidget(self.title_label)
        layout.addWidget(self.count_label)
        layout.addWidget(self.progress_bar)
        layout.addWidget(self.status_label)

    def set_progress(self, answered: int, total: int, percent: int) -> None:
        self.count_label.setText(f"{max(0, int(answered))}/{max(0, int(total))} ({format_percent(percent)})")
        self.progress_bar.setValue(max(0, min(100, int(percent))))
