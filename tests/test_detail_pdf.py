"""Page layout of the single-inspection report."""
import io
from datetime import date

import pytest
from PIL import Image
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from fiscaliza.lib.datauri import to_data_uri
from fiscaliza.reports.detail_pdf import (
    CONTENT_WIDTH, FOOTER_RESERVE, LINE_HEIGHT, MARGIN, PAGE_HEIGHT, PHOTO_GAP, PHOTO_WIDTH,
    DetailReportLayout, NumberedCanvas, render_detail_report, wrap,
)
from fiscaliza.schemas import Attachment, FollowUp, InspectionAction, Photo

HEADER_HEIGHT = 26 * mm


def _png(width, height) -> str:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), (200, 30, 30)).save(buf, format="PNG")
    return to_data_uri(buf.getvalue(), "image/png")


def _photo(name, width=400, height=200, url=None):
    return Photo(id=name, url=url or _png(width, height), name=name, uploaded_at="2024-03-10T09:00:00Z")


@pytest.fixture
def layout():
    page = DetailReportLayout(canvas.Canvas(io.BytesIO()))
    page.start_page()
    return page


def test_first_page_starts_below_header(layout):
    assert layout.pages == 1
    assert layout.y == pytest.approx(MARGIN + HEADER_HEIGHT)


@pytest.mark.parametrize("value", ["", "   ", None])
def test_blank_full_width_field_takes_no_space(layout, value):
    before = layout.y
    layout.full_width_field("PONTO DE REFERÊNCIA", value)
    assert layout.y == before


def test_full_width_field_height_follows_wrapped_lines(layout):
    text = "palavra " * 80
    lines = wrap(text, CONTENT_WIDTH)
    before = layout.y
    layout.full_width_field("RELATÓRIO", text)
    assert len(lines) > 1
    assert layout.y - before == pytest.approx(len(lines) * LINE_HEIGHT + LINE_HEIGHT)


def test_grid_row_height_is_the_taller_column(layout):
    long_value = "texto longo " * 30
    before = layout.y
    layout.grid_field("A", "curto", "B", long_value)
    tall = len(wrap(long_value, CONTENT_WIDTH / 2 - 5 * mm))
    assert layout.y - before == pytest.approx(tall * LINE_HEIGHT + LINE_HEIGHT)


def test_page_break_reemits_header(layout):
    layout.y = PAGE_HEIGHT - FOOTER_RESERVE - 5 * mm
    assert layout.check_page_break(10 * mm) is True
    assert layout.pages == 2
    assert layout.y == pytest.approx(MARGIN + HEADER_HEIGHT)


def test_no_break_when_block_fits(layout):
    before = layout.y
    assert layout.check_page_break(10 * mm) is False
    assert layout.pages == 1 and layout.y == before


def test_empty_list_prints_fallback(layout):
    before = layout.y
    layout.bulleted_list([], "Nenhuma ação registrada.")
    assert layout.y - before == pytest.approx(LINE_HEIGHT + 1 * mm + 3 * mm)


def test_photo_height_follows_aspect_ratio(layout):
    before = layout.y
    assert layout.photo_grid([_photo("a", 400, 200)]) == 1
    assert layout.y - before == pytest.approx(PHOTO_WIDTH / 2 + PHOTO_GAP)


def test_photo_row_height_is_tallest_image(layout):
    before = layout.y
    layout.photo_grid([_photo("wide", 400, 200), _photo("square", 300, 300)])
    assert layout.y - before == pytest.approx(PHOTO_WIDTH + PHOTO_GAP)


def test_photo_grid_breaks_pages(layout):
    placed = layout.photo_grid([_photo(str(i), 300, 400) for i in range(6)])
    assert placed == 6
    assert layout.pages >= 2


def test_photo_without_inline_data_is_skipped(layout):
    before = layout.y
    placed = layout.photo_grid([_photo("remote", url="https://cdn.example.com/a.jpg")])
    assert placed == 0
    assert layout.y == before


def test_undecodable_image_is_skipped(layout, monkeypatch):
    photo = _photo("huge", 400, 200)
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
    before = layout.y
    assert layout.photo_grid([photo]) == 0
    assert layout.y == before


def test_signature_near_page_bottom_moves_to_next_page(layout):
    layout.y = PAGE_HEIGHT - FOOTER_RESERVE - 10 * mm
    layout.signature()
    assert layout.pages == 2
    assert layout.y == pytest.approx(MARGIN + HEADER_HEIGHT + 5 * mm)


def test_render_detail_report(make_record):
    record = make_record(
        protocol="2024-042",
        report="Constatada obra sem alvará.",
        inspector="João Silva",
        actions=[InspectionAction.EMBARGO],
        photos=[_photo("frente"), _photo("lateral", 200, 400), _photo("fundos")],
        attachments=[Attachment(name="denuncia.pdf", mime_type="application/pdf", data="data:application/pdf;base64,AA==")],
        follow_ups=[FollowUp(id="f1", date=date(2024, 4, 1), notes="Verificar embargo")],
    )
    artifact = render_detail_report(record)
    assert artifact.filename == "Relatorio-Fiscalizacao-2024-042.pdf"
    assert artifact.media_type == "application/pdf"
    assert artifact.content.startswith(b"%PDF")


def test_render_minimal_record(make_record):
    assert render_detail_report(make_record()).content.startswith(b"%PDF")


def test_every_page_gets_a_numbered_footer(make_record, monkeypatch):
    footers = []
    draw_footer = NumberedCanvas._draw_footer

    def record_footer(self, number, total):
        footers.append((number, total))
        draw_footer(self, number, total)

    monkeypatch.setattr(NumberedCanvas, "_draw_footer", record_footer)
    record = make_record(photos=[_photo(str(i), 300, 400) for i in range(6)])
    render_detail_report(record)

    total = len(footers)
    assert total >= 2
    assert footers == [(n, total) for n in range(1, total + 1)]
