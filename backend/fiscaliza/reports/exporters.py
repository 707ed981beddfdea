"""
List report encoders: paginated PDF table, CSV, XLSX and a Word-openable HTML table.
Each returns an ExportArtifact ready to be served as a download.
"""
from __future__ import annotations
import csv
import html
import io
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..schemas import InspectionRecord
from .columns import COLUMNS, headers, rows

logger = logging.getLogger(__name__)

BASENAME = "relatorio_chamados"
LIST_TITLE = "Relatório de Chamados de Fiscalização"
HEADER_FILL = colors.Color(13 / 255, 71 / 255, 161 / 255)
BOM = "\ufeff"


class ExportFormat(str, Enum):
    PDF = "pdf"
    CSV = "csv"
    XLSX = "xlsx"
    DOC = "doc"


@dataclass
class ExportArtifact:
    filename: str
    media_type: str
    content: bytes


# ---------- CSV ----------

def export_csv(records: Sequence[InspectionRecord]) -> ExportArtifact:
    # QUOTE_MINIMAL quotes cells holding a comma, quote or newline and doubles embedded quotes
    buf = io.StringIO()
    writer = csv.writer(buf, delimiter=",", quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(headers())
    writer.writerows(rows(records))
    return ExportArtifact(f"{BASENAME}.csv", "text/csv; charset=utf-8", buf.getvalue().encode("utf-8"))


# ---------- XLSX ----------

def export_xlsx(records: Sequence[InspectionRecord]) -> ExportArtifact:
    wb = Workbook()
    ws = wb.active
    ws.title = "Chamados"

    ws.append(headers())
    for cell in ws[1]:
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = PatternFill(start_color="0D47A1", end_color="0D47A1", fill_type="solid")
        cell.alignment = Alignment(vertical="center", wrap_text=True)

    for row in rows(records):
        ws.append(row)

    for idx, col in enumerate(COLUMNS, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = col.width
    ws.freeze_panes = "A2"

    out = io.BytesIO()
    wb.save(out)
    return ExportArtifact(
        f"{BASENAME}.xlsx",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        out.getvalue(),
    )


# ---------- DOC (HTML table opened by the word processor) ----------

def export_doc(records: Sequence[InspectionRecord]) -> ExportArtifact:
    head = "".join(f"<th>{html.escape(h)}</th>" for h in headers())
    body = "".join(
        "<tr>" + "".join(f"<td>{html.escape(v)}</td>" for v in row) + "</tr>"
        for row in rows(records)
    )
    document = (
        "<html xmlns:o='urn:schemas-microsoft-com:office:office' "
        "xmlns:w='urn:schemas-microsoft-com:office:word' "
        "xmlns='http://www.w3.org/TR/REC-html40'>"
        "<head><meta charset='utf-8'><title>Relatório</title></head>"
        f"<body><table border=\"1\"><tr>{head}</tr>{body}</table></body></html>"
    )
    return ExportArtifact(f"{BASENAME}.doc", "application/msword", (BOM + document).encode("utf-8"))


# ---------- PDF ----------

def export_pdf(records: Sequence[InspectionRecord]) -> ExportArtifact:
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=landscape(A4),
        leftMargin=14 * mm,
        rightMargin=14 * mm,
        topMargin=14 * mm,
        bottomMargin=14 * mm,
        title=LIST_TITLE,
    )
    styles = getSampleStyleSheet()
    cell_style = ParagraphStyle("cell", parent=styles["BodyText"], fontSize=8, leading=10)
    head_style = ParagraphStyle("head", parent=cell_style, textColor=colors.white, fontName="Helvetica-Bold")

    # Column shares follow the spreadsheet widths; Paragraph cells wrap long values
    data = [[Paragraph(html.escape(h), head_style) for h in headers()]]
    data += [[Paragraph(html.escape(v), cell_style) for v in row] for row in rows(records)]

    total = sum(c.width for c in COLUMNS)
    table = Table(data, colWidths=[doc.width * c.width / total for c in COLUMNS], repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_FILL),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ]))

    story = [Paragraph(LIST_TITLE, styles["Title"]), Spacer(1, 4 * mm), table]
    doc.build(story)
    return ExportArtifact(f"{BASENAME}.pdf", "application/pdf", buf.getvalue())


_ENCODERS = {
    ExportFormat.PDF: export_pdf,
    ExportFormat.CSV: export_csv,
    ExportFormat.XLSX: export_xlsx,
    ExportFormat.DOC: export_doc,
}


def export(records: Sequence[InspectionRecord], fmt: ExportFormat) -> ExportArtifact:
    artifact = _ENCODERS[ExportFormat(fmt)](records)
    logger.info("Generated %s with %d records (%d bytes)", artifact.filename, len(records), len(artifact.content))
    return artifact
