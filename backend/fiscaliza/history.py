"""
Audit log for inspection records.

Entries are synthesized from field diffs, never edited or removed, and the list
is kept newest-first. Entries produced by one mutation share one timestamp.
"""
from __future__ import annotations
from datetime import date, datetime
from typing import Iterable, List, Optional

from .lib.dates import as_utc, format_date
from .schemas import HistoryEntry, InspectionRecord, InspectionStatus


def entry(user: str, change: str, now: datetime) -> HistoryEntry:
    return HistoryEntry(timestamp=now, user=user, change=change)


# ---------- Sentence templates ----------

def created(inspector: Optional[str]) -> str:
    if inspector:
        return f"Chamado criado e atribuído para {inspector}."
    return "Chamado criado."


def status_changed(old: InspectionStatus, new: InspectionStatus) -> str:
    return f'Status alterado de "{old.value}" para "{new.value}".'


def status_forced(new: InspectionStatus) -> str:
    return f'Status alterado para "{new.value}".'


def inspector_changed(old: Optional[str], new: Optional[str]) -> str:
    if not new:
        return f"Fiscal {old} foi removido do chamado."
    if not old:
        return f"Fiscal {new} foi atribuído."
    return f"Fiscal responsável alterado de {old} para {new}."


def report_updated() -> str:
    return "Relatório da constatação foi atualizado."


def actions_updated() -> str:
    return "Ações da fiscalização foram atualizadas."


def infractions_updated() -> str:
    return "Tipos de infração verificada foram atualizados."


def photo_added(name: str) -> str:
    return f"Nova foto adicionada: {name}."


def follow_up_scheduled(when: date) -> str:
    return f"Agendamento de retorno criado para {format_date(when)}."


# ---------- Diff ----------

def _blank(value: Optional[str]) -> Optional[str]:
    return value if value and value.strip() else None


def diff(old: InspectionRecord, changes: dict, user: str, now: datetime) -> List[HistoryEntry]:
    """One entry per tracked field whose requested value differs from the stored one."""
    out: List[HistoryEntry] = []

    if "status" in changes and changes["status"] != old.status:
        out.append(entry(user, status_changed(old.status, changes["status"]), now))

    if "inspector" in changes and _blank(changes["inspector"]) != _blank(old.inspector):
        out.append(entry(user, inspector_changed(_blank(old.inspector), _blank(changes["inspector"])), now))

    if "report" in changes and (changes["report"] or "") != (old.report or ""):
        out.append(entry(user, report_updated(), now))

    # sets compare order-independently
    if "actions" in changes and set(changes["actions"]) != set(old.actions):
        out.append(entry(user, actions_updated(), now))

    if "verified_infractions" in changes and dict(changes["verified_infractions"]) != dict(old.verified_infractions):
        out.append(entry(user, infractions_updated(), now))

    return out


def merge(existing: Iterable[HistoryEntry], new: Iterable[HistoryEntry]) -> List[HistoryEntry]:
    """Prepend new entries and re-sort newest-first; ties keep insertion order."""
    combined = list(new) + list(existing)
    return sorted(combined, key=lambda e: as_utc(e.timestamp), reverse=True)
