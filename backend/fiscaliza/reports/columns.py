"""
Column layout shared by every list export (PDF, CSV, XLSX, DOC).

One descriptor list drives all four encoders, so a cell renders the same way
in each format. Missing optional values always render as "N/A".
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from ..lib.dates import as_utc, format_date
from ..schemas import InspectionRecord

MISSING = "N/A"
ACTIONS_SEPARATOR = ", "


@dataclass(frozen=True)
class Column:
    label: str
    extract: Callable[[InspectionRecord], Optional[str]]
    width: int = 20  # spreadsheet character width

    def cell(self, record: InspectionRecord) -> str:
        value = self.extract(record)
        if value is None:
            return MISSING
        # control characters are dropped so every format carries the same text
        text = ILLEGAL_CHARACTERS_RE.sub("", str(value))
        return text if text.strip() else MISSING


def _actions(r: InspectionRecord) -> Optional[str]:
    return ACTIONS_SEPARATOR.join(a.value for a in r.actions) if r.actions else None


COLUMNS: List[Column] = [
    Column("Protocolo", lambda r: r.protocol, 12),
    Column("Endereço do Reclamado / Ocorrência", lambda r: r.address, 40),
    Column("Ponto de Referência", lambda r: r.reference_point, 28),
    Column("Tipo", lambda r: r.type.value, 30),
    Column("Status", lambda r: r.status.value, 20),
    Column("Data da Reclamação", lambda r: format_date(r.complaint_date), 16),
    Column("Data de Abertura", lambda r: format_date(as_utc(r.created_at).date()), 16),
    Column("Fiscal Responsável", lambda r: r.inspector, 22),
    Column("Ações", _actions, 36),
]


def headers(columns: Sequence[Column] = COLUMNS) -> List[str]:
    return [c.label for c in columns]


def rows(records: Sequence[InspectionRecord], columns: Sequence[Column] = COLUMNS) -> List[List[str]]:
    return [[c.cell(r) for c in columns] for r in records]
