# -*- coding: utf-8 -*-
"""Export the finished report as markdown or PDF."""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from infrasights.constants import (
    APP_NAME,
    EXPORT_FILENAME_PREFIX,
    MARKDOWN_MIME_TYPE,
    NOT_ANSWERED_ANSWER,
)
from infrasights.models.analysis_result import AnalysisResult
from infrasights.models.cost_report import CostReport
from infrasights.pipeline.markup_formatter import markup_to_html
from infrasights.utils.file_utils import ensure_dir, unique_path, write_bytes_file
from infrasights.utils.formatting import format_currency

logger = logging.getLogger(__name__)


DISCLAIMER = """This estimate is based on 2024 public cloud pricing and the information provided. Actual costs may vary based on:
- Enterprise agreements and volume discounts
- Spot instance pricing fluctuations
- Data egress and cross-region transfer costs
- Support plan tiers
- Reserved instance commitments
- Seasonal traffic variations

**Always validate with official cloud provider pricing calculators before making infrastructure decisions.**"""


@dataclass(frozen=True)
class ExportedDocument:
    content: bytes
    filename: str
    mime_type: str


def build_filename(generated_at: datetime, extension: str = "md") -> str:
    return f"{EXPORT_FILENAME_PREFIX}-{generated_at.strftime('%Y-%m-%d')}.{extension}"


def _cell(value: str) -> str:
    """Keep a value on one table row."""
    return value.replace("|", "\\|").replace("\n", " ").strip()


def _answer(answers: dict[str, str], question_id: str) -> str:
    return answers.get(question_id, "").strip() or NOT_ANSWERED_ANSWER


def render_markdown(
    analysis: AnalysisResult,
    report: CostReport,
    answers: dict[str, str],
    generated_at: datetime,
) -> str:
    lines = [
        f"# {APP_NAME} Cost Analysis Report",
        f"**Generated:** {generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
        "",
        "---",
        "",
        "## Architecture Overview",
        "",
        f"**Cloud Provider:** {analysis.cloud_provider}",
        f"**Architecture Pattern:** {analysis.architecture_pattern}",
        f"**Confidence Score:** {report.confidence_score}",
        "",
        "### Detected Components",
        "",
    ]
    for index, component in enumerate(analysis.components, start=1):
        count = component.count_estimate or "N/A"
        lines.append(f"{index}. **{component.service}** ({component.type}) - {count} instances")
        lines.append(f"   - {component.notes}")

    lines.extend(["", "### AI Observations", ""])
    lines.extend(f"- {observation}" for observation in analysis.observations)

    lines.extend(
        [
            "",
            "---",
            "",
            "## Cost Estimates",
            "",
            "### Summary",
            "",
            "| Metric | Amount |",
            "|--------|--------|",
            f"| **Monthly Cost** | **{format_currency(report.total_monthly_cost)}** |",
            f"| **Yearly Cost** | **{format_currency(report.total_yearly_cost)}** |",
            f"| **Optimistic Range** | {format_currency(report.ranges.optimistic)} |",
            f"| **Peak Load Range** | {format_currency(report.ranges.pessimistic)} |",
            "",
            "### Clarifying Questions & Answers",
            "",
        ]
    )
    qa_blocks = [
        f"**Q{index}:** {question.text}\n**A:** {_answer(answers, question.id)}"
        for index, question in enumerate(analysis.questions, start=1)
    ]
    lines.append("\n\n".join(qa_blocks))

    lines.extend(
        [
            "",
            "---",
            "",
            "## Service-by-Service Breakdown",
            "",
            "| Service | Configuration | Monthly Cost | Notes |",
            "|---------|--------------|--------------|-------|",
        ]
    )
    for item in report.items:
        lines.append(
            f"| {_cell(item.service)} | {_cell(item.configuration)} | "
            f"{format_currency(item.monthly_cost)} | {_cell(item.calculation_note) or '-'} |"
        )
    lines.extend(
        [
            "",
            f"**Total:** {format_currency(report.total_monthly_cost)}/month",
            "",
            "---",
            "",
            "## Executive Summary",
            "",
            report.executive_summary,
            "",
            "---",
            "",
            "## Optimization Recommendations",
            "",
        ]
    )
    for index, rec in enumerate(report.recommendations, start=1):
        lines.extend(
            [
                f"### {index}. {rec.title}",
                "",
                f"**Impact:** {rec.impact.value}",
                f"**Estimated Savings:** {rec.estimated_savings}",
                "",
                rec.description,
                "",
                "---",
            ]
        )
    lines.extend(
        [
            "",
            "## Disclaimer",
            "",
            DISCLAIMER,
            "",
            "---",
            "",
            f"*Report generated by {APP_NAME} - AI-Powered Cloud Cost Estimator*",
            "",
        ]
    )
    return "\n".join(lines)


def export_markdown(
    analysis: AnalysisResult,
    report: CostReport,
    answers: dict[str, str],
    generated_at: datetime | None = None,
) -> ExportedDocument:
    """Build the markdown document; no I/O, no hidden state beyond the clock default."""
    timestamp = generated_at or datetime.now()
    content = render_markdown(analysis, report, answers, timestamp)
    return ExportedDocument(
        content=content.encode("utf-8"),
        filename=build_filename(timestamp, "md"),
        mime_type=MARKDOWN_MIME_TYPE,
    )


def save_document(document: ExportedDocument, directory: str | Path) -> Path:
    """Write ``document`` under ``directory`` without overwriting an earlier export."""
    path = unique_path(ensure_dir(directory) / document.filename)
    write_bytes_file(path, document.content)
    return path


def render_report_html(
    analysis: AnalysisResult,
    report: CostReport,
    answers: dict[str, str],
    generated_at: datetime,
) -> str:
    """HTML version of the on-screen report, used for the PDF export."""
    esc = html.escape
    parts = [
        f"<h1>{esc(APP_NAME)} Cost Analysis Report</h1>",
        f"<p><b>Generated:</b> {generated_at.strftime('%Y-%m-%d %H:%M:%S')}</p>",
        "<h2>Architecture Overview</h2>",
        f"<p><b>Cloud Provider:</b> {esc(analysis.cloud_provider)}<br/>"
        f"<b>Architecture Pattern:</b> {esc(analysis.architecture_pattern)}<br/>"
        f"<b>Confidence Score:</b> {esc(report.confidence_score)}</p>",
        "<h2>Cost Summary</h2>",
        '<table border="1" cellspacing="0" cellpadding="4">',
        f"<tr><td>Monthly Cost</td><td><b>{format_currency(report.total_monthly_cost)}</b></td></tr>",
        f"<tr><td>Yearly Cost</td><td><b>{format_currency(report.total_yearly_cost)}</b></td></tr>",
        f"<tr><td>Optimistic Range</td><td>{format_currency(report.ranges.optimistic)}</td></tr>",
        f"<tr><td>Peak Load Range</td><td>{format_currency(report.ranges.pessimistic)}</td></tr>",
        "</table>",
        "<h2>Service-by-Service Breakdown</h2>",
        '<table border="1" cellspacing="0" cellpadding="4">',
        "<tr><th>Service</th><th>Configuration</th><th>Monthly Cost</th><th>Notes</th></tr>",
    ]
    for item in report.items:
        parts.append(
            f"<tr><td>{esc(item.service)}</td><td>{esc(item.configuration)}</td>"
            f"<td>{format_currency(item.monthly_cost)}</td><td>{esc(item.calculation_note or '-')}</td></tr>"
        )
    parts.append("</table>")
    parts.append("<h2>Clarifying Questions &amp; Answers</h2>")
    for index, question in enumerate(analysis.questions, start=1):
        parts.append(
            f"<p><b>Q{index}:</b> {esc(question.text)}<br/><b>A:</b> {esc(_answer(answers, question.id))}</p>"
        )
    parts.append("<h2>Executive Summary</h2>")
    parts.append(markup_to_html(report.executive_summary))
    parts.append("<h2>Optimization Recommendations</h2>")
    for index, rec in enumerate(report.recommendations, start=1):
        parts.append(f"<h3>{index}. {esc(rec.title)}</h3>")
        parts.append(
            f"<p><b>Impact:</b> {esc(rec.impact.value)}<br/><b>Estimated Savings:</b> {esc(rec.estimated_savings)}</p>"
        )
        parts.append(markup_to_html(rec.description))
    parts.append("<h2>Disclaimer</h2>")
    parts.append(markup_to_html(DISCLAIMER))
    return "\n".join(parts)


class Exporter:
    """Write exported documents to disk."""

    def __init__(self, output_dir: str | Path | None = None) -> None:
        self.output_dir = Path(output_dir) if output_dir else Path.cwd()

    def save_markdown(
        self,
        analysis: AnalysisResult,
        report: CostReport,
        answers: dict[str, str],
        target: str | Path | None = None,
    ) -> Path:
        document = export_markdown(analysis, report, answers)
        if target:
            path = write_bytes_file(target, document.content)
        else:
            path = save_document(document, self.output_dir)
        logger.info("Markdown report exported to %s (%d bytes)", path, len(document.content))
        return path

    def save_pdf(
        self,
        analysis: AnalysisResult,
        report: CostReport,
        answers: dict[str, str],
        target: str | Path | None = None,
    ) -> Path:
        """Render the report HTML through Qt's PDF writer."""
        from PyQt6.QtGui import QPageSize, QPdfWriter, QTextDocument

        generated_at = datetime.now()
        path = Path(target) if target else unique_path(
            ensure_dir(self.output_dir) / build_filename(generated_at, "pdf")
        )
        ensure_dir(path.parent)
        writer = QPdfWriter(str(path))
        writer.setPageSize(QPageSize(QPageSize.PageSizeId.A4))
        writer.setTitle(f"{APP_NAME} Cost Analysis Report")
        document = QTextDocument()
        document.setHtml(render_report_html(analysis, report, answers, generated_at))
        document.print(writer)
        logger.info("PDF report exported to %s", path)
        return path
