# Pydantic schemas
from __future__ import annotations
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

# ---------- Base ----------

class ORMModel(BaseModel):
    """Base with orm_mode for SQLAlchemy compatibility."""
    model_config = {"from_attributes": True}


# ---------- Enums ----------
# Values are the labels staff see in the UI and in every export.

class InspectionStatus(str, Enum):
    OPEN = "Aberto"
    UNDER_REVIEW = "Em Análise"
    IN_PROGRESS = "Em Andamento"
    PENDING_FOLLOW_UP = "Pendente de Retorno"
    CLOSED = "Concluído"


class InspectionSource(str, Enum):
    INTERNAL = "Gerência"
    CITIZEN_IN_PERSON = "Contribuinte (Presencial)"
    CITIZEN_WHATSAPP = "Contribuinte (WhatsApp)"
    CITIZEN_EMAIL = "Contribuinte (Email)"
    PUBLIC_MINISTRY = "Ministério Público"
    OMBUDSMAN = "Ouvidoria Municipal"
    CIVIL_DEFENSE = "Defesa Civil"
    OTHER_DEPARTMENTS = "Outras Secretarias"


class InspectionType(str, Enum):
    CONSTRUCTION_PERMIT = "Alvará de Construção"
    APPROVED_PROJECT = "Projeto Aprovado"
    OCCUPANCY_PERMIT = "Habite-se / Ocupação"
    BUSINESS_PERMIT = "Alvará de Funcionamento"
    LAND_PARCELLING = "Parcelamento do Solo"
    WORK_IN_DISAGREEMENT_WITH_APPROVED_PROJECT = "Obra em desacordo com projeto aprovado"
    DEMOLITION_WITHOUT_PERMIT = "Demolição sem alvará de licença"
    EARTHMOVING_WITHOUT_PERMIT = "Movimentação de terra sem alvará de licença"
    ELEVATORS = "Elevadores"
    OPENING_ON_BOUNDARY = "Abertura na divisa"
    SIDEWALK_ACCESSIBILITY = "Acessibilidade em calçadas"
    INFILTRATION = "Infiltração"
    ACOUSTIC_INSULATION = "Isolamento acústico"
    MARQUEES_AND_ROOFS = "Marquise e coberturas"
    MATERIALS_ON_STREET = "Material e massa na rua"
    BOUNDARY_WALL = "Muro de vedação"
    PROPERTY_MAINTENANCE = "Zelar pelas boas condições do imóvel"
    OTHER = "Outro"


class InspectionAction(str, Enum):
    ORIENTED = "Contribuinte Orientado"
    NOTIFICATION = "Notificação"
    FINE = "Autuação"
    SEIZURE = "Apreensão"
    EMBARGO = "Embargo"
    INTERDICTION = "Interdição"
    DEMOLITION = "Demolição"


class UserRole(str, Enum):
    ADMIN = "Administrador"
    INSPECTOR = "Fiscal"


def _dedupe(values):
    seen = []
    for v in values:
        if v not in seen:
            seen.append(v)
    return seen


# ---------- Record parts ----------

class Photo(ORMModel):
    id: str
    url: str  # data URI or public storage URL
    name: str
    uploaded_at: datetime


class FollowUp(ORMModel):
    id: str
    date: date
    notes: str = ""
    completed: bool = False


class Attachment(ORMModel):
    name: str
    mime_type: str
    data: str  # base64 data URI


class HistoryEntry(ORMModel):
    timestamp: datetime
    user: str
    change: str


# ---------- Inspection ----------

class InspectionRecord(ORMModel):
    id: str
    protocol: str
    address: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    source: InspectionSource = InspectionSource.INTERNAL
    type: InspectionType = InspectionType.OTHER
    description: str = ""
    status: InspectionStatus = InspectionStatus.OPEN
    created_at: datetime
    updated_at: datetime
    inspector: Optional[str] = None
    report: Optional[str] = None
    report_summary: Optional[str] = None
    photos: List[Photo] = Field(default_factory=list)
    follow_ups: List[FollowUp] = Field(default_factory=list)
    actions: List[InspectionAction] = Field(default_factory=list)
    verified_infractions: Dict[InspectionType, bool] = Field(default_factory=dict)
    complainant_name: Optional[str] = None
    complainant_address: Optional[str] = None
    respondent_name: Optional[str] = None
    contact_phone: Optional[str] = None
    attachments: List[Attachment] = Field(default_factory=list)
    reference_point: Optional[str] = None
    complaint_date: Optional[date] = None
    history: List[HistoryEntry] = Field(default_factory=list)


class InspectionCreate(BaseModel):
    """Intake form. Status, protocol, timestamps and history are assigned by the store."""
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    source: InspectionSource = InspectionSource.INTERNAL
    type: InspectionType = InspectionType.OTHER
    description: str = ""
    inspector: Optional[str] = None
    complainant_name: Optional[str] = None
    complainant_address: Optional[str] = None
    respondent_name: Optional[str] = None
    contact_phone: Optional[str] = None
    attachments: List[Attachment] = Field(default_factory=list)
    reference_point: Optional[str] = None
    complaint_date: Optional[date] = None


class InspectionUpdate(BaseModel):
    """Partial update from the detail view; only fields explicitly sent are applied."""
    status: Optional[InspectionStatus] = None
    inspector: Optional[str] = None
    report: Optional[str] = None
    report_summary: Optional[str] = None
    actions: Optional[List[InspectionAction]] = None
    verified_infractions: Optional[Dict[InspectionType, bool]] = None
    address: Optional[str] = None
    reference_point: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    source: Optional[InspectionSource] = None
    type: Optional[InspectionType] = None
    complainant_name: Optional[str] = None
    complainant_address: Optional[str] = None
    respondent_name: Optional[str] = None
    contact_phone: Optional[str] = None
    complaint_date: Optional[date] = None

    @field_validator("actions")
    @classmethod
    def _actions_are_a_set(cls, v):
        return None if v is None else _dedupe(v)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class PhotoIn(BaseModel):
    url: str
    name: str


class FollowUpIn(BaseModel):
    date: date
    notes: str = Field(min_length=1)


class SummaryOut(BaseModel):
    report_summary: str


# ---------- Users ----------

class UserAccount(ORMModel):
    id: str
    name: str
    username: str
    role: UserRole = UserRole.INSPECTOR


class UserCreate(BaseModel):
    name: str = Field(min_length=1)
    username: str = Field(min_length=1)
    role: UserRole = UserRole.INSPECTOR
    password: Optional[str] = None


class UserUpdate(BaseModel):
    name: Optional[str] = None
    username: Optional[str] = None
    role: Optional[UserRole] = None
    password: Optional[str] = None


class LoginIn(BaseModel):
    username: str
    password: str


class AuthOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserAccount


# ---------- Dashboard ----------

class InspectionLite(ORMModel):
    id: str
    protocol: str
    address: str
    type: InspectionType
    status: InspectionStatus
    created_at: datetime


class DashboardOut(BaseModel):
    counts: Dict[InspectionStatus, int]
    total: int
    recent: List[InspectionLite]
    high_priority: List[InspectionLite]
