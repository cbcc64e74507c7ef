"""Monthly report generation.

Renders a label's MonthlyRollup as a paginated document:

- a header block (title, mode-specific totals, generation timestamp)
- one section per day, in ascending day order: a header line with the
  day's totals, then a table of that day's entries

Page breaks are decided between day sections only, by tracking a vertical
cursor (millimetres from the top of an A4 page) against a fixed threshold.
A day's table is never split on purpose; the cursor check happens after a
section is placed and before the next one starts.
"""

import os
import re
import tempfile
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import DecimalException
from io import BytesIO
from pathlib import Path
from typing import Optional, Union
from xml.sax.saxutils import escape

import structlog
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import (
    HRFlowable,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from .config import ReportConfig
from .exceptions import ReportGenerationError
from .formatting import generated_on, long_date, optional_km, optional_money, plain_number, two_places
from .models import DailyRollup, Entry, Label, MonthlyRollup

logger = structlog.get_logger()

DRIVER_COLUMNS = ["#", "Time", "Status", "Tankers", "KM", "Cash Taken", "Notes"]
TANKER_COLUMNS = ["#", "Time", "Tankers", "Cash Amount"]

# Widths in mm; each set fills the 182 mm between 14 mm margins on A4.
DRIVER_COLUMN_WIDTHS = [10, 18, 22, 20, 22, 30, 60]
TANKER_COLUMN_WIDTHS = [15, 40, 50, 77]

SUPPORTED_FORMATS = {"pdf": "application/pdf", "text": "text/plain"}
_EXTENSIONS = {"pdf": "pdf", "text": "txt"}


@dataclass
class DaySection:
    """One day's block of the report."""

    day: int
    header: str
    columns: list[str]
    rows: list[list[str]] = field(default_factory=list)

    def height(self, config: ReportConfig) -> float:
        """Estimated vertical space in mm: header, table with header row, gap."""
        table = config.table_row_height * (len(self.rows) + 1)
        return config.day_header_height + table + config.section_gap


@dataclass
class ReportDocument:
    """A rendered report ready to hand to a file-save collaborator."""

    filename: str
    content: bytes
    media_type: str
    page_count: int = 1


def report_filename(label: Label, rollup: MonthlyRollup, report_format: str = "pdf") -> str:
    """``<label_name>_<Month>_<year>_Summary.<ext>``; whitespace and slash runs become "_"."""
    name = re.sub(r"[\s/\\]+", "_", label.name)
    extension = _EXTENSIONS.get(report_format, report_format)
    return f"{name}_{rollup.month_name}_{rollup.year}_Summary.{extension}"


def plan_pages(
    sections: list[DaySection],
    config: ReportConfig,
    start_cursor: float,
) -> list[list[DaySection]]:
    """Assign day sections to pages.

    The cursor advances by each placed section's height. Once it passes
    ``page_content_threshold`` the next section opens a new page with the
    cursor reset to ``page_top``. No trailing empty page is produced.
    """
    pages: list[list[DaySection]] = [[]]
    cursor = start_cursor
    for index, section in enumerate(sections):
        pages[-1].append(section)
        cursor += section.height(config)
        if cursor > config.page_content_threshold and index < len(sections) - 1:
            pages.append([])
            cursor = config.page_top
    return pages


def save_report(document: ReportDocument, directory: Union[str, Path]) -> Path:
    """Write a finished report into ``directory``.

    The bytes go to a temporary file that is renamed into place, so a
    failed write never leaves a partial report behind.
    """
    directory = Path(directory)
    target = directory / document.filename
    try:
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".tmp-", suffix=target.suffix)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(document.content)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise ReportGenerationError(
            f"Could not save report: {e}",
            filename=document.filename,
        ) from e
    logger.info("report_saved", path=str(target), bytes=len(document.content))
    return target


class MonthlyReportGenerator:
    """
    Generate monthly summary reports for a label.

    Column schema and summary lines depend on the label mode:
    - driver status: status, km, cash taken, notes; present/absent counts
    - tanker count: tankers and cash amount
    """

    def __init__(self, config: Optional[ReportConfig] = None):
        self.config = config or ReportConfig()

    def generate(
        self,
        label: Label,
        rollup: MonthlyRollup,
        format: str = "pdf",
        generated_at: Optional[datetime] = None,
    ) -> ReportDocument:
        """
        Render a monthly report.

        Args:
            label: The label the rollup belongs to (selects the mode)
            rollup: Aggregated month
            format: "pdf" or "text"
            generated_at: Timestamp printed on the report (defaults to now)

        Returns:
            The rendered document

        Raises:
            ReportGenerationError: Unknown format or the backend failed;
                no partial output is returned
        """
        if format not in SUPPORTED_FORMATS:
            raise ReportGenerationError(
                f"Unsupported report format: {format}",
                report_format=format,
            )

        filename = report_filename(label, rollup, format)
        generated_at = generated_at or datetime.now()

        try:
            sections = self.day_sections(label, rollup)
            pages = plan_pages(sections, self.config, self.header_height(label, rollup))
            if format == "pdf":
                content, page_count = self._format_pdf(label, rollup, pages, generated_at)
            else:
                content = self._format_text(label, rollup, pages, generated_at)
                page_count = len(pages)
        except ReportGenerationError:
            raise
        except DecimalException as e:
            logger.error("report_generation_failed", filename=filename, format=format, error=repr(e))
            raise ReportGenerationError(
                "An amount is too large to render",
                report_format=format,
                filename=filename,
            ) from e
        except Exception as e:
            logger.error("report_generation_failed", filename=filename, format=format, error=str(e))
            raise ReportGenerationError(
                f"Document backend failed: {e}",
                report_format=format,
                filename=filename,
            ) from e

        logger.info(
            "report_generated",
            filename=filename,
            format=format,
            days=len(sections),
            pages=page_count,
        )
        return ReportDocument(
            filename=filename,
            content=content,
            media_type=SUPPORTED_FORMATS[format],
            page_count=page_count,
        )

    # -- content -----------------------------------------------------------

    def title(self, label: Label, rollup: MonthlyRollup) -> str:
        return f"{label.name} - {rollup.month_name} {rollup.year} Summary"

    def summary_lines(self, label: Label, rollup: MonthlyRollup) -> list[str]:
        """Header totals for the label's mode."""
        symbol = self.config.currency_symbol
        lines = [f"Total Tankers: {rollup.total_tankers}"]
        if label.is_driver_status:
            lines.append(f"Total KM: {two_places(rollup.total_km)}")
            lines.append(f"Total Cash Taken: {symbol}{two_places(rollup.total_cash_taken)}")
            lines.append(f"Present Days: {rollup.total_present_count}")
            lines.append(f"Absent Days: {rollup.total_absent_count}")
        else:
            lines.append(f"Total Cash: {symbol}{two_places(rollup.total_cash)}")
        return lines

    def header_height(self, label: Label, rollup: MonthlyRollup) -> float:
        """Cursor position once the header block is placed."""
        lines = len(self.summary_lines(label, rollup))
        return self.config.summary_top + self.config.summary_line_height * lines + self.config.section_gap

    def day_header(self, label: Label, rollup: MonthlyRollup, day: DailyRollup) -> str:
        symbol = self.config.currency_symbol
        text = f"{long_date(date(rollup.year, rollup.month, day.day))} - {day.total_tankers} Tankers"
        if label.is_driver_status:
            text += f" - {plain_number(day.total_km)} KM - {symbol}{two_places(day.total_cash_taken)} taken"
            if day.present_count > 0:
                text += " - Present"
            if day.absent_count > 0:
                text += " - Absent"
        else:
            text += f" - {symbol}{two_places(day.total_cash)}"
        return text

    def entry_row(self, label: Label, index: int, entry: Entry) -> list[str]:
        symbol = self.config.currency_symbol
        if label.is_driver_status:
            return [
                str(index),
                entry.time_label,
                entry.driver_status.value if entry.driver_status else "-",
                str(entry.derived_tankers),
                optional_km(entry.total_km),
                optional_money(entry.cash_taken, symbol),
                entry.notes or "-",
            ]
        return [
            str(index),
            entry.time_label,
            str(entry.derived_tankers),
            optional_money(entry.cash_amount, symbol),
        ]

    def day_sections(self, label: Label, rollup: MonthlyRollup) -> list[DaySection]:
        columns = DRIVER_COLUMNS if label.is_driver_status else TANKER_COLUMNS
        return [
            DaySection(
                day=day.day,
                header=self.day_header(label, rollup, day),
                columns=list(columns),
                rows=[self.entry_row(label, i, e) for i, e in enumerate(day.entries, 1)],
            )
            for day in rollup.sorted_days()
        ]

    # -- output ------------------------------------------------------------

    def _format_text(
        self,
        label: Label,
        rollup: MonthlyRollup,
        pages: list[list[DaySection]],
        generated_at: datetime,
    ) -> bytes:
        """Plain-text rendition; pages are separated by form feeds."""
        output = [self.title(label, rollup), ""]
        output.extend(self.summary_lines(label, rollup))
        output.append(f"Generated on: {generated_on(generated_at)}")
        output.append("=" * 72)

        rendered_pages = []
        for page in pages:
            lines: list[str] = []
            for section in page:
                lines.append("")
                lines.append(section.header)
                widths = [
                    max(len(cell) for cell in column)
                    for column in zip(section.columns, *section.rows)
                ]
                lines.append("  ".join(c.ljust(w) for c, w in zip(section.columns, widths)).rstrip())
                lines.append("  ".join("-" * w for w in widths))
                for row in section.rows:
                    lines.append("  ".join(c.ljust(w) for c, w in zip(row, widths)).rstrip())
            rendered_pages.append("\n".join(lines))

        if rollup.is_empty:
            rendered_pages = ["\nNo entries found for this month."]

        text = "\n".join(output) + "\f".join(rendered_pages) + "\n"
        return text.encode("utf-8")

    def _styles(self):
        styles = getSampleStyleSheet()
        styles.add(ParagraphStyle(
            name='ReportTitle',
            parent=styles['Heading1'],
            fontSize=self.config.title_font_size,
            leading=self.config.title_font_size + 4,
            alignment=TA_CENTER,
            spaceAfter=4 * mm,
        ))
        styles.add(ParagraphStyle(
            name='SummaryLine',
            parent=styles['Normal'],
            fontSize=12,
            leading=self.config.summary_line_height * mm,
        ))
        styles.add(ParagraphStyle(
            name='Timestamp',
            parent=styles['Normal'],
            fontSize=self.config.body_font_size,
            textColor=colors.grey,
        ))
        styles.add(ParagraphStyle(
            name='DayHeader',
            parent=styles['Normal'],
            fontName='Helvetica-Bold',
            fontSize=12,
            spaceAfter=2 * mm,
        ))
        styles.add(ParagraphStyle(
            name='Cell',
            parent=styles['Normal'],
            fontSize=self.config.body_font_size,
            leading=self.config.body_font_size + 2,
        ))
        return styles

    def _day_table(self, section: DaySection, styles) -> Table:
        driver_mode = len(section.columns) == len(DRIVER_COLUMNS)
        widths = DRIVER_COLUMN_WIDTHS if driver_mode else TANKER_COLUMN_WIDTHS
        body = []
        for row in section.rows:
            if driver_mode:
                # Notes wrap inside their column
                row = row[:-1] + [Paragraph(escape(row[-1]), styles['Cell'])]
            body.append(row)

        table = Table(
            [section.columns] + body,
            colWidths=[w * mm for w in widths],
            repeatRows=1,
        )
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor(self.config.header_color)),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), self.config.body_font_size),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ]))
        return table

    def _format_pdf(
        self,
        label: Label,
        rollup: MonthlyRollup,
        pages: list[list[DaySection]],
        generated_at: datetime,
    ) -> tuple[bytes, int]:
        """
        Format report as PDF using reportlab.

        Returns:
            PDF content as bytes and the number of pages written
        """
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=14 * mm,
            leftMargin=14 * mm,
            topMargin=10 * mm,
            bottomMargin=10 * mm,
            title=self.title(label, rollup),
        )
        styles = self._styles()

        elements = [Paragraph(escape(self.title(label, rollup)), styles['ReportTitle'])]
        for line in self.summary_lines(label, rollup):
            elements.append(Paragraph(escape(line), styles['SummaryLine']))
        elements.append(Paragraph(f"Generated on: {generated_on(generated_at)}", styles['Timestamp']))
        elements.append(HRFlowable(width="100%", thickness=0.5, color=colors.black, spaceBefore=2 * mm))
        elements.append(Spacer(1, 5 * mm))

        if rollup.is_empty:
            elements.append(Paragraph("No entries found for this month.", styles['Normal']))

        for page_number, page in enumerate(pages):
            if page_number > 0:
                elements.append(PageBreak())
            for section in page:
                elements.append(Paragraph(escape(section.header), styles['DayHeader']))
                elements.append(self._day_table(section, styles))
                elements.append(Spacer(1, self.config.section_gap * mm))

        doc.build(elements)
        return buffer.getvalue(), doc.page


__all__ = [
    "DRIVER_COLUMNS",
    "TANKER_COLUMNS",
    "DaySection",
    "ReportDocument",
    "MonthlyReportGenerator",
    "plan_pages",
    "report_filename",
    "save_report",
]
