# -*- coding: utf-8 -*-
"""Clarification stage: detected components and clarifying questions."""

from __future__ import annotations

import html

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from infrasights.core.state import SessionState
from infrasights.gui.progress_widget import ProgressWidget
from infrasights.models.analysis_result import AnalysisResult, Question


class QuestionCard(QFrame):
    """One question with quick-pick options and a free-text answer."""

    answer_changed = pyqtSignal(str, str)

    def __init__(self, index: int, question: Question, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.question = question
        self.setObjectName("panelCard")

        title = QLabel(f"<b>Q{index}.</b> {html.escape(question.text)}")
        title.setWordWrap(True)
        title.setTextFormat(Qt.TextFormat.RichText)
        context = QLabel(question.context)
        context.setObjectName("mutedText")
        context.setWordWrap(True)
        context.setVisible(bool(question.context))

        self.option_buttons: list[QPushButton] = []
        options_row = QHBoxLayout()
        options_row.setSpacing(6)
        for option in question.options:
            button = QPushButton(option)
            button.setObjectName("optionButton")
            button.setCheckable(True)
            button.clicked.connect(lambda _checked=False, value=option: self._emit(value))
            options_row.addWidget(button)
            self.option_buttons.append(button)
        options_row.addStretch(1)

        self.answer_edit = QLineEdit()
        self.answer_edit.setPlaceholderText("Or type a custom answer..." if question.options else "Type your answer...")
        self.answer_edit.textEdited.connect(self._emit)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(6)
        layout.addWidget(title)
        layout.addWidget(context)
        if self.option_buttons:
            layout.addLayout(options_row)
        layout.addWidget(self.answer_edit)

    def _emit(self, value: str) -> None:
        self.answer_changed.emit(self.question.id, value)

    def set_answer(self, value: str) -> None:
        for button in self.option_buttons:
            button.setChecked(button.text() == value)
        if self.answer_edit.text() != value:
            self.answer_edit.setText(value)

    def set_enabled(self, enabled: bool) -> None:
        for button in self.option_buttons:
            button.setEnabled(enabled)
        self.answer_edit.setReadOnly(not enabled)


class ClarificationWidget(QWidget):
    """Show the analysis summary and collect answers before estimating."""

    answer_changed = pyqtSignal(str, str)
    estimate_requested = pyqtSignal()

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._analysis: AnalysisResult | None = None
        self.cards: dict[str, QuestionCard] = {}

        self.summary_label = QLabel("")
        self.summary_label.setObjectName("routeTitle")
        self.details_button = QPushButton("Show analysis details")
        self.details_button.setObjectName("secondaryButton")
        self.details_button.setCheckable(True)
        self.details_button.toggled.connect(self._toggle_details)
        self.details_label = QLabel("")
        self.details_label.setTextFormat(Qt.TextFormat.RichText)
        self.details_label.setWordWrap(True)
        self.details_label.setObjectName("panelCard")
        self.details_label.hide()

        self.progress_widget = ProgressWidget()

        self.questions_layout = QVBoxLayout()
        self.questions_layout.setSpacing(10)

        self.estimate_button = QPushButton("Generate Cost Report")
        self.estimate_button.setObjectName("primaryButton")
        self.estimate_button.clicked.connect(self.estimate_requested.emit)

        header_row = QHBoxLayout()
        header_row.addWidget(self.summary_label, 1)
        header_row.addWidget(self.details_button)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(12)
        layout.addLayout(header_row)
        layout.addWidget(self.details_label)
        layout.addWidget(self.progress_widget)
        layout.addLayout(self.questions_layout)
        layout.addStretch(1)
        layout.addWidget(self.estimate_button)

    def _toggle_details(self, checked: bool) -> None:
        self.details_label.setVisible(checked)
        self.details_button.setText("Hide analysis details" if checked else "Show analysis details")

    def _rebuild(self, analysis: AnalysisResult | None) -> None:
        self._analysis = analysis
        for card in self.cards.values():
            self.questions_layout.removeWidget(card)
            card.deleteLater()
        self.cards = {}
        if analysis is None:
            self.summary_label.setText("")
            self.details_label.setText("")
            return

        self.summary_label.setText(
            f"{analysis.cloud_provider} · {analysis.architecture_pattern} · {len(analysis.components)} components"
        )
        component_rows = "".join(
            f"<li><b>{html.escape(c.service)}</b> ({html.escape(c.type)}) - "
            f"{html.escape(c.count_estimate or 'N/A')}<br/><i>{html.escape(c.notes)}</i></li>"
            for c in analysis.components
        )
        observation_rows = "".join(f"<li>{html.escape(obs)}</li>" for obs in analysis.observations)
        self.details_label.setText(
            f"<p><b>Detected Components</b></p><ul>{component_rows}</ul>"
            f"<p><b>AI Observations</b></p><ul>{observation_rows}</ul>"
        )
        for index, question in enumerate(analysis.questions, start=1):
            card = QuestionCard(index, question)
            card.answer_changed.connect(self.answer_changed.emit)
            self.questions_layout.addWidget(card)
            self.cards[question.id] = card

    def update_state(self, state: SessionState, answered: int, total: int, percent: int) -> None:
        if state.analysis is not self._analysis:
            self._rebuild(state.analysis)
        for question_id, card in self.cards.items():
            card.set_answer(state.answers.get(question_id, ""))
            card.set_enabled(not state.busy)
        self.progress_widget.set_progress(answered, total, percent)
        self.estimate_button.setEnabled(state.analysis is not None and not state.busy)
