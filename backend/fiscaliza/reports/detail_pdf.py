"""
Single-inspection detail report.

DetailReportLayout keeps a top-down cursor (`y`, in points from the top
edge) and draws onto a reportlab canvas. Every primitive checks the space
left on the page before drawing a block of known height and, when it does
not fit, starts a new page and re-emits the page header. Page numbers are
stamped once at the end by NumberedCanvas, when the total is known.
"""
from __future__ import annotations
import io
import logging
from typing import List, Optional, Sequence

from PIL import Image
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from ..errors import InvalidDataError
from ..lib.datauri import is_data_uri, parse_data_uri
from ..lib.dates import format_date, format_datetime
from ..schemas import InspectionRecord, Photo
from .columns import MISSING
from .exporters import ExportArtifact

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 15 * mm
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN
LINE_HEIGHT = 4 * mm
FOOTER_RESERVE = 20 * mm
PHOTO_GAP = 5 * mm
PHOTO_WIDTH = (CONTENT_WIDTH - PHOTO_GAP) / 2
SIGNATURE_GAP = 20 * mm
SIGNATURE_WIDTH = 100 * mm

MAIN_TITLE = "GERÊNCIA DE FISCALIZAÇÃO DE OBRAS"
SUB_TITLE = "RELATÓRIO DE FISCALIZAÇÃO"
SIGNATURE_CAPTION = "Fiscal de Obras e Urbanismo"

LABEL_GRAY = (107 / 255, 114 / 255, 128 / 255)
SECTION_FILL = (243 / 255, 244 / 255, 246 / 255)
SECTION_TEXT = (55 / 255, 65 / 255, 81 / 255)
RULE_GRAY = (200 / 255, 200 / 255, 200 / 255)
FOOTER_GRAY = (150 / 255, 150 / 255, 150 / 255)


class NumberedCanvas(canvas.Canvas):
    """Defers page output so the footer can print 'Página i de N'."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_page_states)
        for number, state in enumerate(self._saved_page_states, start=1):
            self.__dict__.update(state)
            self._draw_footer(number, total)
            super().showPage()
        super().save()

    def _draw_footer(self, number: int, total: int) -> None:
        self.setFont("Helvetica", 8)
        self.setFillColorRGB(*FOOTER_GRAY)
        self.drawRightString(PAGE_WIDTH - MARGIN, 10 * mm, f"Página {number} de {total}")


def wrap(text: str, width: float, font: str = "Helvetica", size: float = 10) -> List[str]:
    lines: List[str] = []
    for paragraph in (text or "").split("\n"):
        lines.extend(simpleSplit(paragraph, font, size, width) or [""])
    return lines


class DetailReportLayout:

    def __init__(self, c: canvas.Canvas):
        self.c = c
        self.y = 0.0
        self.pages = 0

    # ---------- Page management ----------

    def _draw_y(self, offset: float = 0.0) -> float:
        """Canvas coordinate for a point `offset` below the cursor."""
        return PAGE_HEIGHT - (self.y + offset)

    def start_page(self) -> None:
        if self.pages:
            self.c.showPage()
        self.pages += 1
        self.y = MARGIN
        self.page_header()

    def page_header(self) -> None:
        c = self.c
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 14)
        c.drawCentredString(PAGE_WIDTH / 2, self._draw_y(), MAIN_TITLE)
        self.y += 8 * mm
        c.setFont("Helvetica", 12)
        c.drawCentredString(PAGE_WIDTH / 2, self._draw_y(), SUB_TITLE)
        self.y += 8 * mm
        c.setStrokeColorRGB(*RULE_GRAY)
        c.line(MARGIN, self._draw_y(), PAGE_WIDTH - MARGIN, self._draw_y())
        self.y += 10 * mm

    def remaining(self) -> float:
        return PAGE_HEIGHT - FOOTER_RESERVE - self.y

    def check_page_break(self, needed: float) -> bool:
        """Start a new page when `needed` points do not fit; True if one was started."""
        if self.remaining() < needed:
            self.start_page()
            return True
        return False

    # ---------- Primitives ----------

    def section_header(self, title: str) -> None:
        self.check_page_break(15 * mm)
        self.y += 5 * mm
        c = self.c
        c.setFillColorRGB(*SECTION_FILL)
        c.rect(MARGIN, self._draw_y(8 * mm), CONTENT_WIDTH, 8 * mm, stroke=0, fill=1)
        c.setFillColorRGB(*SECTION_TEXT)
        c.setFont("Helvetica-Bold", 12)
        c.drawString(MARGIN + 3 * mm, self._draw_y(6 * mm), title)
        self.y += 12 * mm

    def field_label(self, label: str) -> None:
        self._label(label, MARGIN)
        self.y += LINE_HEIGHT

    def _label(self, label: str, x: float) -> None:
        if not label:
            return
        self.c.setFont("Helvetica", 8)
        self.c.setFillColorRGB(*LABEL_GRAY)
        self.c.drawString(x, self._draw_y(), label)

    def _lines(self, lines: Sequence[str], x: float, offset: float) -> None:
        self.c.setFont("Helvetica", 10)
        self.c.setFillColorRGB(0, 0, 0)
        for i, line in enumerate(lines):
            self.c.drawString(x, self._draw_y(offset + i * LINE_HEIGHT), line)

    def grid_field(self, label1: str, value1: str, label2: str = "", value2: str = "") -> None:
        self.check_page_break(15 * mm)
        col_width = CONTENT_WIDTH / 2 - 5 * mm
        col2_x = MARGIN + CONTENT_WIDTH / 2 + 5 * mm
        left = wrap(value1, col_width)
        right = wrap(value2, col_width) if value2 else []
        self._label(label1, MARGIN)
        self._label(label2, col2_x)
        self._lines(left, MARGIN, LINE_HEIGHT)
        self._lines(right, col2_x, LINE_HEIGHT)
        self.y += max(len(left), len(right)) * LINE_HEIGHT + LINE_HEIGHT

    def full_width_field(self, label: str, value: Optional[str]) -> None:
        if not value or not value.strip():
            return
        lines = wrap(value, CONTENT_WIDTH)
        self.check_page_break(15 * mm + len(lines) * LINE_HEIGHT)
        self._label(label, MARGIN)
        self._lines(lines, MARGIN, LINE_HEIGHT)
        self.y += len(lines) * LINE_HEIGHT + LINE_HEIGHT

    def bulleted_list(self, items: Sequence[str], fallback: str) -> None:
        for item in list(items) or [fallback]:
            lines = wrap(f"- {item}", CONTENT_WIDTH - 2 * mm)
            self.check_page_break(len(lines) * LINE_HEIGHT + 2 * mm)
            self._lines(lines, MARGIN + 2 * mm, 0)
            self.y += len(lines) * LINE_HEIGHT + 1 * mm
        self.y += 3 * mm

    def photo_grid(self, photos: Sequence[Photo]) -> int:
        """Two images per row, height from each image's own aspect ratio. Returns images placed."""
        column = 0
        row_height = 0.0
        placed = 0
        for photo in photos:
            image = _load_image(photo)
            if image is None:
                continue
            width, height = image.size
            draw_height = height * PHOTO_WIDTH / width
            if self.check_page_break(draw_height + PHOTO_GAP) and column == 1:
                column, row_height = 0, 0.0
            x = MARGIN + column * (PHOTO_WIDTH + PHOTO_GAP)
            self.c.drawImage(ImageReader(image), x, self._draw_y(draw_height), PHOTO_WIDTH, draw_height)
            placed += 1
            row_height = max(row_height, draw_height)
            if column == 1:
                self.y += row_height + PHOTO_GAP
                column, row_height = 0, 0.0
            else:
                column = 1
        if column == 1:
            self.y += row_height + PHOTO_GAP
        return placed

    def signature(self) -> None:
        self.y += SIGNATURE_GAP
        self.check_page_break(SIGNATURE_GAP)
        x = (PAGE_WIDTH - SIGNATURE_WIDTH) / 2
        self.c.setStrokeColorRGB(0, 0, 0)
        self.c.line(x, self._draw_y(), x + SIGNATURE_WIDTH, self._draw_y())
        self.y += 5 * mm
        self.c.setFont("Helvetica", 10)
        self.c.setFillColorRGB(0, 0, 0)
        self.c.drawCentredString(PAGE_WIDTH / 2, self._draw_y(), SIGNATURE_CAPTION)


def _load_image(photo: Photo) -> Optional[Image.Image]:
    if not is_data_uri(photo.url):
        logger.warning("Photo %s is not inline data; left out of the PDF", photo.name)
        return None
    try:
        _, data = parse_data_uri(photo.url)
        image = Image.open(io.BytesIO(data))
        image.load()
    except (InvalidDataError, OSError, Image.DecompressionBombError) as e:
        logger.warning("Could not read photo %s: %s", photo.name, e)
        return None
    return image


def report_filename(record: InspectionRecord) -> str:
    return f"Relatorio-Fiscalizacao-{record.protocol}.pdf"


def layout_record(layout: DetailReportLayout, record: InspectionRecord) -> None:
    layout.start_page()

    layout.section_header("Dados do Chamado")
    layout.grid_field("PROTOCOLO", record.protocol, "STATUS ATUAL", record.status.value)
    layout.grid_field(
        "DATA DE ABERTURA", format_datetime(record.created_at),
        "DATA DA RECLAMAÇÃO", format_date(record.complaint_date) or MISSING,
    )
    layout.grid_field("ORIGEM", record.source.value, "TIPO DE FISCALIZAÇÃO", record.type.value)
    layout.grid_field("FISCAL RESPONSÁVEL", record.inspector or MISSING)

    layout.section_header("Localização & Partes Envolvidas")
    layout.full_width_field("ENDEREÇO DO RECLAMADO", record.address)
    layout.full_width_field("PONTO DE REFERÊNCIA", record.reference_point)
    layout.grid_field(
        "RECLAMANTE", record.complainant_name or MISSING,
        "RECLAMADO", record.respondent_name or MISSING,
    )
    layout.grid_field(
        "ENDEREÇO DO RECLAMANTE", record.complainant_address or MISSING,
        "TELEFONE DE CONTATO", record.contact_phone or MISSING,
    )

    layout.section_header("Descrição Inicial da Ocorrência")
    layout.full_width_field("", record.description or "Nenhuma descrição fornecida.")

    layout.section_header("Constatação da Fiscalização")
    layout.full_width_field("RELATÓRIO DA CONSTATAÇÃO", record.report)
    layout.field_label("TIPOS DE INFRAÇÃO VERIFICADA")
    verified = [kind.value for kind, checked in record.verified_infractions.items() if checked]
    layout.bulleted_list(verified, "Nenhuma infração verificada.")
    layout.field_label("AÇÕES DA FISCALIZAÇÃO")
    layout.bulleted_list([a.value for a in record.actions], "Nenhuma ação registrada.")

    layout.section_header("Evidências Anexadas")
    if record.photos:
        layout.field_label("RELATÓRIO FOTOGRÁFICO")
        layout.y += 1 * mm
        layout.photo_grid(record.photos)
    if record.attachments:
        layout.field_label("DOCUMENTOS ANEXADOS NA ABERTURA")
        layout.bulleted_list([a.name for a in record.attachments], MISSING)

    if record.follow_ups:
        layout.section_header("Agendamentos de Retorno")
        for f in record.follow_ups:
            layout.grid_field(
                f"DATA: {format_date(f.date)}", f"Status: {'Concluído' if f.completed else 'Pendente'}",
                "OBSERVAÇÕES", f.notes,
            )

    layout.signature()


def render_detail_report(record: InspectionRecord) -> ExportArtifact:
    buf = io.BytesIO()
    c = NumberedCanvas(buf, pagesize=A4)
    c.setTitle(f"Relatório de Fiscalização {record.protocol}")
    layout = DetailReportLayout(c)
    layout_record(layout, record)
    c.showPage()
    c.save()
    logger.info("Rendered detail report for %s (%d pages)", record.protocol, layout.pages)
    return ExportArtifact(report_filename(record), "application/pdf", buf.getvalue())
