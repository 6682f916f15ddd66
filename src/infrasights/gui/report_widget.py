# -*- coding: utf-8 -*-
"""Report stage: totals, breakdown chart, summary and recommendations."""

from __future__ import annotations

import html

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from infrasights.gui.cost_chart_widget import CostChartWidget
from infrasights.models.cost_report import CostReport, Impact
from infrasights.pipeline.markup_formatter import markup_to_html
from infrasights.utils.formatting import format_currency


# Badge colors per level: (background, border, text).
IMPACT_STYLES: dict[Impact, tuple[str, str, str]] = {
    Impact.HIGH: ("#ede9fe", "#c4b5fd", "#6d28d9"),
    Impact.MEDIUM: ("#fef3c7", "#fcd34d", "#b45309"),
    Impact.LOW: ("#f4f4f5", "#d4d4d8", "#52525b"),
}
CONFIDENCE_STYLES: dict[Impact | None, tuple[str, str, str]] = {
    Impact.HIGH: ("#d1fae5", "#6ee7b7", "#047857"),
    Impact.MEDIUM: ("#fef3c7", "#fcd34d", "#b45309"),
    Impact.LOW: ("#fef3c7", "#fcd34d", "#b45309"),
    None: ("#fef3c7", "#fcd34d", "#b45309"),
}


def badge_style(colors: tuple[str, str, str]) -> str:
    background, border, text = colors
    return (
        f"background: {background}; border: 1px solid {border}; color: {text};"
        " border-radius: 8px; padding: 3px 8px; font-weight: 600;"
    )


class RecommendationCard(QFrame):
    def __init__(self, index: int, title: str, impact: Impact, savings: str, description: str) -> None:
        super().__init__()
        self.setObjectName("panelCard")
        title_label = QLabel(f"<b>{index}. {html.escape(title)}</b>")
        title_label.setTextFormat(Qt.TextFormat.RichText)
        title_label.setWordWrap(True)
        self.impact_label = QLabel(f"{impact.value} Impact")
        self.impact_label.setStyleSheet(badge_style(IMPACT_STYLES[impact]))
        savings_label = QLabel(f"Savings: {savings}" if savings else "")
        savings_label.setObjectName("mutedText")
        body = QLabel(markup_to_html(description))
        body.setTextFormat(Qt.TextFormat.RichText)
        body.setWordWrap(True)

        header = QHBoxLayout()
        header.addWidget(title_label, 1)
        header.addWidget(self.impact_label)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.addLayout(header)
        layout.addWidget(savings_label)
        layout.addWidget(body)


class ReportWidget(QWidget):
    """Render a ``CostReport`` and offer exports."""

    export_markdown_requested = pyqtSignal()
    export_pdf_requested = pyqtSignal()
    new_analysis_requested = pyqtSignal()

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._report: CostReport | None = None

        self.confidence_label = QLabel("")
        self.monthly_label = QLabel("")
        self.monthly_label.setObjectName("bigNumber")
        self.yearly_label = QLabel("")
        self.yearly_label.setObjectName("mutedText")
        self.optimistic_label = QLabel("")
        self.pessimistic_label = QLabel("")

        self.export_md_button = QPushButton("Export Markdown")
        self.export_md_button.setObjectName("secondaryButton")
        self.export_md_button.clicked.connect(self.export_markdown_requested.emit)
        self.export_pdf_button = QPushButton("Export PDF")
        self.export_pdf_button.setObjectName("secondaryButton")
        self.export_pdf_button.clicked.connect(self.export_pdf_requested.emit)
        self.new_button = QPushButton("New Analysis")
        self.new_button.setObjectName("primaryButton")
        self.new_button.clicked.connect(self.new_analysis_requested.emit)

        self.chart_widget = CostChartWidget()
        self.summary_label = QLabel("")
        self.summary_label.setTextFormat(Qt.TextFormat.RichText)
        self.summary_label.setWordWrap(True)
        self.recommendations_layout = QVBoxLayout()
        self.recommendations_layout.setSpacing(8)

        self.items_table = QTableWidget(0, 4)
        self.items_table.setHorizontalHeaderLabels(["Service", "Configuration", "Monthly Cost", "Notes"])
        self.items_table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
        self.items_table.verticalHeader().setVisible(False)
        self.items_table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self.items_table.setMinimumHeight(220)

        actions = QHBoxLayout()
        actions.addWidget(self.confidence_label)
        actions.addStretch(1)
        actions.addWidget(self.export_md_button)
        actions.addWidget(self.export_pdf_button)
        actions.addWidget(self.new_button)

        totals = QHBoxLayout()
        totals_left = QVBoxLayout()
        totals_left.addWidget(self.monthly_label)
        totals_left.addWidget(self.yearly_label)
        totals_right = QVBoxLayout()
        totals_right.addWidget(self.optimistic_label)
        totals_right.addWidget(self.pessimistic_label)
        totals.addLayout(totals_left, 1)
        totals.addLayout(totals_right, 1)

        summary_title = QLabel("Executive Summary")
        summary_title.setObjectName("sectionTitle")
        rec_title = QLabel("Optimization Recommendations")
        rec_title.setObjectName("sectionTitle")
        breakdown_title = QLabel("Service-by-Service Breakdown")
        breakdown_title.setObjectName("sectionTitle")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(12)
        layout.addLayout(actions)
        layout.addLayout(totals)
        layout.addWidget(self.chart_widget)
        layout.addWidget(summary_title)
        layout.addWidget(self.summary_label)
        layout.addWidget(rec_title)
        layout.addLayout(self.recommendations_layout)
        layout.addWidget(breakdown_title)
        layout.addWidget(self.items_table)
        layout.addStretch(1)

    def set_report(self, report: CostReport | None) -> None:
        if report is self._report:
            return
        self._report = report
        while self.recommendations_layout.count():
            child = self.recommendations_layout.takeAt(0)
            if child.widget() is not None:
                child.widget().deleteLater()
        self.items_table.setRowCount(0)
        if report is None:
            for label in (
                self.confidence_label,
                self.monthly_label,
                self.yearly_label,
                self.optimistic_label,
                self.pessimistic_label,
                self.summary_label,
            ):
                label.clear()
            self.chart_widget.set_items([])
            return

        self.confidence_label.setText(f"{report.confidence_score} Confidence")
        self.confidence_label.setStyleSheet(badge_style(CONFIDENCE_STYLES[report.confidence_level]))
        self.monthly_label.setText(f"{format_currency(report.total_monthly_cost)} / month")
        self.yearly_label.setText(f"~{format_currency(report.total_yearly_cost)} / year")
        self.optimistic_label.setText(f"Optimistic: {format_currency(report.ranges.optimistic)}")
        self.pessimistic_label.setText(f"Peak load: {format_currency(report.ranges.pessimistic)}")
        self.chart_widget.set_items(report.items)
        self.summary_label.setText(markup_to_html(report.executive_summary))

        for index, rec in enumerate(report.recommendations, start=1):
            self.recommendations_layout.addWidget(
                RecommendationCard(index, rec.title, rec.impact, rec.estimated_savings, rec.description)
            )

        self.items_table.setRowCount(len(report.items))
        for row, item in enumerate(report.items):
            cost_cell = QTableWidgetItem(format_currency(item.monthly_cost))
            cost_cell.setTextAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
            self.items_table.setItem(row, 0, QTableWidgetItem(item.service))
            self.items_table.setItem(row, 1, QTableWidgetItem(item.configuration))
            self.items_table.setItem(row, 2, cost_cell)
            self.items_table.setItem(row, 3, QTableWidgetItem(item.calculation_note or "-"))

    def set_busy(self, busy: bool) -> None:
        for button in (self.export_md_button, self.export_pdf_button, self.new_button):
            button.setEnabled(not busy)
