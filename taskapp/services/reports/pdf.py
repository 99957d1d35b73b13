# Rev 0.2.0
"""
PDF export of a structured Report (reportlab platypus).

Layout: centered title + generation time, filter list, separator, one
subtitle per section with key/value, task and user tables, closing footer
sentence, and a "TaskApp - Strona N" line on every page.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from taskapp.services.errors import ReportExportError
from taskapp.utils.logging_setup import get_logger
from .model import (
    BulletList,
    KeyValue,
    Note,
    Report,
    ReportKind,
    StatsBlock,
    TaskTable,
    UserTable,
)
from .text import TIMESTAMP_FORMAT

log = get_logger("services.reports.pdf")

# Fonts with Polish glyphs; first hit wins, Helvetica otherwise
_UNICODE_FONT_CANDIDATES = (
    ("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf", "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"),
    ("/usr/share/fonts/dejavu/DejaVuSans.ttf", "/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf"),
    ("/usr/share/fonts/TTF/DejaVuSans.ttf", "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf"),
)

_fonts: Optional[tuple] = None


def _report_fonts() -> tuple:
    """(regular, bold) font names registered with reportlab."""
    global _fonts
    if _fonts is not None:
        return _fonts
    _fonts = ("Helvetica", "Helvetica-Bold")
    for regular, bold in _UNICODE_FONT_CANDIDATES:
        if not (Path(regular).exists() and Path(bold).exists()):
            continue
        try:
            pdfmetrics.registerFont(TTFont("TaskAppSans", regular))
            pdfmetrics.registerFont(TTFont("TaskAppSans-Bold", bold))
        except TTFError:
            log.warning("Could not register font %s", regular, exc_info=True)
            continue
        _fonts = ("TaskAppSans", "TaskAppSans-Bold")
        break
    log.debug("PDF fonts: %s", _fonts)
    return _fonts


@dataclass(frozen=True)
class ReportStyle:
    primary: str
    secondary: str
    light: str
    footer_text: str
    page_footer: str     # formatted with page=<n>


@dataclass(frozen=True)
class DefaultReportStyle(ReportStyle):
    primary: str = "#007BFF"
    secondary: str = "#1E1E2F"
    light: str = "#F0F0F5"
    footer_text: str = "Ten raport został wygenerowany automatycznie przez system TaskApp."
    page_footer: str = "TaskApp - Strona {page}"


def export_filename(kind: ReportKind, when: datetime) -> str:
    sanitized = re.sub(r"\s+", "_", kind.title).lower()
    return f"raport_{sanitized}_{when.strftime('%Y%m%d_%H%M%S')}.pdf"


def user_table_columns(table: UserTable) -> List[str]:
    cols = ["Użytkownik", "Email"]
    if table.show_teams:
        cols.append("Zespół")
    if table.show_group:
        cols.append("Grupa")
    return cols


class PdfReportRenderer:
    def __init__(self, style: Optional[ReportStyle] = None):
        self.style = style or DefaultReportStyle()

    # ---------- styles ----------

    def _styles(self) -> dict:
        regular, bold = _report_fonts()
        primary = colors.HexColor(self.style.primary)
        return {
            "title": ParagraphStyle("Title", fontName=bold, fontSize=18, leading=22,
                                    alignment=TA_CENTER, textColor=primary, spaceAfter=10),
            "date": ParagraphStyle("Date", fontName=regular, fontSize=10, leading=13,
                                   alignment=TA_CENTER, spaceAfter=15),
            "subtitle": ParagraphStyle("Subtitle", fontName=bold, fontSize=14, leading=18,
                                       textColor=primary, spaceBefore=10, spaceAfter=5),
            "section": ParagraphStyle("Section", fontName=bold, fontSize=12, leading=15,
                                      spaceBefore=5, spaceAfter=5),
            "normal": ParagraphStyle("Normal", fontName=regular, fontSize=10, leading=13, alignment=TA_LEFT),
            "filter": ParagraphStyle("Filter", fontName=regular, fontSize=10, leading=13, leftIndent=10,
                                     textColor=colors.HexColor("#646464")),
            "cell": ParagraphStyle("Cell", fontName=regular, fontSize=9, leading=11),
            "header_cell": ParagraphStyle("HeaderCell", fontName=bold, fontSize=10, leading=12,
                                          textColor=colors.white),
            "small": ParagraphStyle("Small", fontName=regular, fontSize=8, leading=10, alignment=TA_CENTER),
        }

    def _table(self, rows: List[list], widths: List[float], header: bool) -> Table:
        table = Table(rows, colWidths=widths, repeatRows=1 if header else 0)
        cmds = [
            ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor(self.style.light)),
            ("BOX", (0, 0), (-1, -1), 0.5, colors.HexColor(self.style.secondary)),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("TOPPADDING", (0, 0), (-1, -1), 4),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
        ]
        if header:
            cmds.append(("BACKGROUND", (0, 0), (-1, 0), colors.HexColor(self.style.primary)))
            cmds.append(("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor(self.style.light)]))
        else:
            cmds.append(("BACKGROUND", (0, 0), (0, -1), colors.HexColor(self.style.light)))
        table.setStyle(TableStyle(cmds))
        return table

    # ---------- blocks ----------

    def _flowables(self, block, st: dict, width: float) -> list:
        def p(text: str, style: str = "cell") -> Paragraph:
            return Paragraph(escape(text), st[style])

        if isinstance(block, KeyValue):
            return [self._table([[p(block.key), p(block.value)]], [width * 0.3, width * 0.7], header=False)]
        if isinstance(block, Note):
            return [Spacer(1, 6)] if not block.text else [p(block.text, "normal")]
        if isinstance(block, BulletList):
            if not block.items:
                return [p(block.empty_text, "normal")] if block.empty_text else []
            out = [p(block.heading + ":", "section")] if block.heading else []
            return out + [Paragraph("• " + escape(item), st["filter"]) for item in block.items]
        if isinstance(block, TaskTable):
            out = [p(block.heading + ":", "section")] if block.heading else []
            if not block.rows:
                return out + ([p(block.empty_text, "normal")] if block.empty_text else [])
            rows = [[p("Nazwa zadania", "header_cell"), p("Status i priorytet", "header_cell")]]
            for r in block.rows:
                title = r.title if not r.assignee else f"{r.title} ({r.assignee})"
                rows.append([p(title), p(f"{r.status} / {r.priority}")])
            return out + [self._table(rows, [width * 0.6, width * 0.4], header=True)]
        if isinstance(block, UserTable):
            headers = user_table_columns(block)
            rows = [[p(h, "header_cell") for h in headers]]
            for r in block.rows:
                cells = [p(r.name), p(r.email)]
                if block.show_teams:
                    cells.append(p(", ".join(r.teams)))
                if block.show_group:
                    cells.append(p(r.group or ""))
                rows.append(cells)
            n = len(headers)
            return [self._table(rows, [width / n] * n, header=True)]
        if isinstance(block, StatsBlock):
            out = [p(block.heading + ":", "section")]
            s = block.stats
            if s.total == 0 and block.empty_text:
                return out + [p(block.empty_text, "normal")]
            rows = [["Nowe", str(s.new)], ["W toku", str(s.in_progress)], ["Zakończone", str(s.done)]]
            if s.percentage_text() is not None:
                rows.append(["Procent ukończenia", s.percentage_text()])
            return out + [self._table([[p(k), p(v)] for k, v in rows], [width * 0.3, width * 0.7], header=False)]
        raise TypeError(f"Unknown report block: {type(block).__name__}")

    # ---------- public API ----------

    def render(self, report: Report, path: Path | str) -> Path:
        path = Path(path)
        st = self._styles()
        doc = SimpleDocTemplate(
            str(path), pagesize=A4,
            leftMargin=20 * mm, rightMargin=20 * mm, topMargin=20 * mm, bottomMargin=25 * mm,
            title=f"Raport: {report.title}", author="TaskApp",
        )
        width = doc.width
        primary = colors.HexColor(self.style.primary)

        elements = [
            Paragraph(escape(f"Raport: {report.title}"), st["title"]),
            Paragraph(escape("Wygenerowano: " + report.generated_at.strftime(TIMESTAMP_FORMAT)), st["date"]),
        ]
        if report.filters:
            elements.append(Paragraph("Zastosowane filtry:", st["section"]))
            elements.extend(Paragraph(escape(line), st["filter"]) for line in report.filters)
            elements.append(Spacer(1, 6))
        elements.append(HRFlowable(width="100%", thickness=0.5, color=primary, spaceBefore=4, spaceAfter=8))

        for block in report.preamble:
            elements.extend(self._flowables(block, st, width))
        if report.is_empty and report.empty_text:
            elements.append(Paragraph(escape(report.empty_text), st["normal"]))

        for section in report.sections:
            elements.append(Paragraph(escape(section.heading), st["subtitle"]))
            for block in section.blocks:
                elements.extend(self._flowables(block, st, width))
            elements.append(Spacer(1, 8))

        elements.append(HRFlowable(width="100%", thickness=0.5, color=primary, spaceBefore=8, spaceAfter=4))
        elements.append(Paragraph(escape(self.style.footer_text), st["small"]))

        def _on_page(canvas, doc_):
            canvas.saveState()
            canvas.setStrokeColor(primary)
            canvas.setLineWidth(0.5)
            y = doc_.bottomMargin - 5
            canvas.line(doc_.leftMargin, y, doc_.leftMargin + doc_.width, y)
            canvas.setFont(st["small"].fontName, 8)
            canvas.drawCentredString(
                doc_.leftMargin + doc_.width / 2, y - 12,
                self.style.page_footer.format(page=doc_.page),
            )
            canvas.restoreState()

        doc.build(elements, onFirstPage=_on_page, onLaterPages=_on_page)
        log.info("PDF written: %s", path)
        return path


class ReportExporter:
    """Writes a report to <directory>/raport_<type>_<stamp>.pdf and records it in `reports`."""

    def __init__(self, renderer: Optional[PdfReportRenderer] = None, reports=None,
                 clock: Optional[Callable[[], datetime]] = None):
        self._renderer = renderer or PdfReportRenderer()
        self._reports = reports
        self._clock = clock or datetime.now

    def export(self, report: Report, directory: Path | str, created_by: Optional[int] = None) -> Path:
        directory = Path(directory)
        path = directory / export_filename(report.kind, self._clock())
        try:
            if not directory.is_dir():
                raise FileNotFoundError(f"Katalog nie istnieje: {directory}")
            self._renderer.render(report, path)
        except OSError as e:
            # a partially written file stays where it is
            log.exception("PDF export failed: %s", path)
            raise ReportExportError(f"Nie udało się zapisać pliku PDF: {e}") from e

        if self._reports is not None:
            self._reports.insert_report(
                report_name=f"Raport: {report.title}",
                report_type=report.kind.name,
                report_scope="; ".join(report.filters),
                created_by=created_by,
                exported_file=str(path),
            )
        return path
