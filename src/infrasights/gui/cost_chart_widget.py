# -*- coding: utf-8 -*-
"""Donut chart of the monthly cost per service."""

from __future__ import annotations

import html
from dataclasses import dataclass

from PyQt6.QtCore import QRectF, Qt
from PyQt6.QtGui import QColor, QPainter, QPen
from PyQt6.QtWidgets import QHBoxLayout, QLabel, QVBoxLayout, QWidget

from infrasights.constants import CHART_COLORS
from infrasights.models.cost_report import CostItem
from infrasights.utils.formatting import format_currency


@dataclass(frozen=True)
class ChartSlice:
    name: str
    value: float
    color: str


def chart_slices(items: list[CostItem]) -> list[ChartSlice]:
    """Positive-cost items, most expensive first, colored from a fixed palette."""
    ranked = sorted((item for item in items if item.monthly_cost > 0), key=lambda item: item.monthly_cost, reverse=True)
    return [
        ChartSlice(name=item.service, value=item.monthly_cost, color=CHART_COLORS[index % len(CHART_COLORS)])
        for index, item in enumerate(ranked)
    ]


class _DonutCanvas(QWidget):
    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.slices: list[ChartSlice] = []
        self.setMinimumSize(200, 200)

    def paintEvent(self, event) -> None:  # noqa: N802
        del event
        total = sum(item.value for item in self.slices)
        if total <= 0:
            return
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        side = min(self.width(), self.height()) - 20
        outer = QRectF((self.width() - side) / 2, (self.height() - side) / 2, side, side)
        ring = max(12.0, side * 0.18)
        # Qt angles are in 1/16 degree, counter-clockwise from 3 o'clock.
        start = 90 * 16
        for item in self.slices:
            span = -int(round(item.value / total * 360 * 16))
            pen = QPen(QColor(item.color), ring)
            pen.setCapStyle(Qt.PenCapStyle.FlatCap)
            painter.setPen(pen)
            inset = ring / 2
            painter.drawArc(outer.adjusted(inset, inset, -inset, -inset), start, span)
            start += span
        painter.end()


class CostChartWidget(QWidget):
    """Donut chart with a legend listing each service and its monthly cost."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.canvas = _DonutCanvas()
        self.legend_layout = QVBoxLayout()
        self.legend_layout.setSpacing(4)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(16)
        layout.addWidget(self.canvas, 1)
        layout.addLayout(self.legend_layout, 1)

    def set_items(self, items: list[CostItem]) -> None:
        slices = chart_slices(items)
        self.canvas.slices = slices
        self.canvas.update()
        while self.legend_layout.count():
            child = self.legend_layout.takeAt(0)
            if child.widget() is not None:
                child.widget().deleteLater()
        for item in slices:
            label = QLabel(
                f'<span style="color:{item.color};">&#9679;</span>&nbsp;{html.escape(item.name)}'
                f"&nbsp;&nbsp;<b>{format_currency(item.value)}</b>"
            )
            label.setTextFormat(Qt.TextFormat.RichText)
            self.legend_layout.addWidget(label)
        self.legend_layout.addStretch(1)
        self.setVisible(bool(slices))

    def legend_count(self) -> int:
        return len(self.canvas.slices)
