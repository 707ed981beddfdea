"""
Single lookup table for how statuses and enforcement actions are shown.
Every view (list badges, dashboard cards, detail header) reads from here.
"""
from __future__ import annotations
from dataclasses import asdict, dataclass
from typing import Dict, Union

from .schemas import InspectionAction, InspectionStatus


@dataclass(frozen=True)
class Presentation:
    label: str
    icon: str
    color: str = "gray"
    badge: str = "bg-gray-100 text-gray-800"


PRESENTATION: Dict[Union[InspectionStatus, InspectionAction], Presentation] = {
    InspectionStatus.OPEN: Presentation("Abertos", "file", "blue", "bg-blue-100 text-blue-800"),
    InspectionStatus.UNDER_REVIEW: Presentation("Em Análise", "eye", "purple", "bg-purple-100 text-purple-800"),
    InspectionStatus.IN_PROGRESS: Presentation("Em Andamento", "clock", "yellow", "bg-yellow-100 text-yellow-800"),
    InspectionStatus.PENDING_FOLLOW_UP: Presentation("Pendentes", "arrowPath", "orange", "bg-orange-100 text-orange-800"),
    InspectionStatus.CLOSED: Presentation("Concluídos", "checkCircle", "green", "bg-green-100 text-green-800"),
    InspectionAction.ORIENTED: Presentation(InspectionAction.ORIENTED.value, "chatBubble"),
    InspectionAction.NOTIFICATION: Presentation(InspectionAction.NOTIFICATION.value, "documentText"),
    InspectionAction.FINE: Presentation(InspectionAction.FINE.value, "banknotes", "red", "bg-red-100 text-red-800"),
    InspectionAction.SEIZURE: Presentation(InspectionAction.SEIZURE.value, "archiveBox"),
    InspectionAction.EMBARGO: Presentation(InspectionAction.EMBARGO.value, "noSymbol", "red", "bg-red-100 text-red-800"),
    InspectionAction.INTERDICTION: Presentation(InspectionAction.INTERDICTION.value, "lockClosed", "red", "bg-red-100 text-red-800"),
    InspectionAction.DEMOLITION: Presentation(InspectionAction.DEMOLITION.value, "wrenchScrewdriver", "red", "bg-red-100 text-red-800"),
}


def present(key: Union[InspectionStatus, InspectionAction]) -> Presentation:
    return PRESENTATION[key]


def presentation_table() -> dict:
    """JSON-friendly view: {"status": {value: {...}}, "action": {value: {...}}}."""
    out: dict = {"status": {}, "action": {}}
    for key, p in PRESENTATION.items():
        group = "status" if isinstance(key, InspectionStatus) else "action"
        out[group][key.value] = asdict(p)
    return out
