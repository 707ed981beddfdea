"""List exports: one column list, four encodings."""
import csv
import html
import io
import re
from datetime import date, datetime, timezone

from openpyxl import load_workbook

from fiscaliza.reports.columns import COLUMNS, MISSING, headers, rows
from fiscaliza.reports.exporters import ExportFormat, export
from fiscaliza.reports.selection import filter_records, select_by_created_range
from fiscaliza.schemas import InspectionAction, InspectionStatus, InspectionType


def _records(make_record):
    return [
        make_record(
            id="r1",
            protocol="2024-001",
            address='Rua A, "Centro"',
            reference_point="Perto da\npraça",
            type=InspectionType.BOUNDARY_WALL,
            status=InspectionStatus.IN_PROGRESS,
            complaint_date=date(2024, 2, 28),
            inspector="João Silva",
            actions=[InspectionAction.NOTIFICATION, InspectionAction.FINE],
        ),
        make_record(id="r2", protocol="2024-002", address="Av. Brasil <10> & 12"),
    ]


def _csv_rows(content: bytes):
    return list(csv.reader(io.StringIO(content.decode("utf-8"))))


def _xlsx_rows(content: bytes):
    ws = load_workbook(io.BytesIO(content)).active
    return [list(r) for r in ws.iter_rows(values_only=True)]


def _doc_rows(content: bytes):
    text = content.decode("utf-8")
    out = []
    for tr in re.findall(r"<tr>(.*?)</tr>", text, re.S):
        out.append([html.unescape(c) for c in re.findall(r"<t[hd]>(.*?)</t[hd]>", tr, re.S)])
    return out


def test_nine_fixed_columns():
    assert headers() == [
        "Protocolo", "Endereço do Reclamado / Ocorrência", "Ponto de Referência", "Tipo", "Status",
        "Data da Reclamação", "Data de Abertura", "Fiscal Responsável", "Ações",
    ]
    assert len(COLUMNS) == 9


def test_missing_values_render_as_na(make_record):
    row = rows([make_record()])[0]
    assert row[2] == MISSING  # reference point
    assert row[5] == MISSING  # complaint date
    assert row[7] == MISSING  # inspector
    assert row[8] == MISSING  # actions
    assert row[6] == "10/03/2024"


def test_actions_joined(make_record):
    row = rows(_records(make_record))[0]
    assert row[8] == "Notificação, Autuação"
    assert row[5] == "28/02/2024"


def test_csv_escapes_commas_and_quotes(make_record):
    artifact = export(_records(make_record), ExportFormat.CSV)
    assert artifact.filename == "relatorio_chamados.csv"
    text = artifact.content.decode("utf-8")
    assert not text.startswith("\ufeff")
    assert '"Rua A, ""Centro"""' in text
    assert '"Perto da\npraça"' in text


def test_doc_is_bom_prefixed_html(make_record):
    artifact = export(_records(make_record), ExportFormat.DOC)
    assert artifact.filename == "relatorio_chamados.doc"
    assert artifact.media_type == "application/msword"
    text = artifact.content.decode("utf-8")
    assert text.startswith("\ufeff<html")
    assert "Av. Brasil &lt;10&gt; &amp; 12" in text


def test_all_tabular_formats_carry_identical_cells(make_record):
    records = _records(make_record)
    expected = [headers()] + rows(records)
    assert _csv_rows(export(records, ExportFormat.CSV).content) == expected
    assert _xlsx_rows(export(records, ExportFormat.XLSX).content) == expected
    assert _doc_rows(export(records, ExportFormat.DOC).content) == expected


def test_xlsx_single_sheet(make_record):
    wb = load_workbook(io.BytesIO(export(_records(make_record), "xlsx").content))
    assert wb.sheetnames == ["Chamados"]


def test_pdf_list_report(make_record):
    artifact = export(_records(make_record), ExportFormat.PDF)
    assert artifact.filename == "relatorio_chamados.pdf"
    assert artifact.media_type == "application/pdf"
    assert artifact.content.startswith(b"%PDF")


def test_empty_export_keeps_header(make_record):
    assert _csv_rows(export([], ExportFormat.CSV).content) == [headers()]
    assert export([], ExportFormat.PDF).content.startswith(b"%PDF")


def test_date_range_includes_whole_end_day(make_record):
    inside = make_record(id="in", created_at=datetime(2024, 1, 1, 23, 59, 59, tzinfo=timezone.utc))
    outside = make_record(id="out", created_at=datetime(2024, 1, 2, 0, 0, 1, tzinfo=timezone.utc))
    before = make_record(id="before", created_at=datetime(2023, 12, 31, 23, 59, 59, tzinfo=timezone.utc))
    picked = select_by_created_range([inside, outside, before], date(2024, 1, 1), date(2024, 1, 1))
    assert [r.id for r in picked] == ["in"]


def test_date_range_accepts_naive_timestamps(make_record):
    naive = make_record(created_at=datetime(2024, 1, 1, 12, 0))
    assert select_by_created_range([naive], date(2024, 1, 1), date(2024, 1, 1)) == [naive]


def test_filter_by_text_and_status(make_record):
    records = _records(make_record)
    assert [r.id for r in filter_records(records, "centro")] == ["r1"]
    assert [r.id for r in filter_records(records, "2024-002")] == ["r2"]
    assert [r.id for r in filter_records(records, "muro")] == ["r1"]
    assert [r.id for r in filter_records(records, None, InspectionStatus.OPEN)] == ["r2"]
    assert len(filter_records(records, "  ")) == 2


def test_control_characters_are_dropped_in_every_format(make_record):
    records = [make_record(address="Rua A\x0b123", reference_point="Bloco\x01 B")]
    expected = [headers()] + rows(records)
    assert expected[1][1] == "Rua A123"
    assert expected[1][2] == "Bloco B"
    assert _xlsx_rows(export(records, ExportFormat.XLSX).content) == expected
    assert _csv_rows(export(records, ExportFormat.CSV).content) == expected
    assert _doc_rows(export(records, ExportFormat.DOC).content) == expected
