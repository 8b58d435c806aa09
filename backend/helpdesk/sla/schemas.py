"""
Schemas Pydantic para os dados que entram e saem do motor de SLA
"""
import enum
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .constants import SlaSeverity

_MS = timedelta(milliseconds=1)


# ==================== Entradas ====================
class StatusHistoryEntry(BaseModel):
    """Linha do histórico do chamado (status, prioridade, ...)"""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    change_type: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("change_type", "changeType"),
    )
    old_status: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("old_status", "oldStatus"),
    )
    new_status: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("new_status", "newStatus"),
    )
    created_at: datetime = Field(validation_alias=AliasChoices("created_at", "createdAt"))


class TicketSnapshot(BaseModel):
    """Dados do chamado necessários para o SLA"""
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    created_at: datetime
    current_status: str = "new"
    resolved_at: Optional[datetime] = None
    first_response_at: Optional[datetime] = None

    company_id: Optional[int] = None
    department_id: Optional[int] = None
    incident_type_id: Optional[int] = None
    priority: Optional[Union[int, str]] = None


# ==================== Linhas de configuração ====================
class DepartmentPriorityRow(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    department_id: int
    name: str
    weight: Optional[int] = None
    is_active: bool = True


class SlaConfigurationRow(BaseModel):
    """Configuração por empresa + departamento + tipo (+ prioridade)"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    department_id: int
    incident_type_id: int
    priority_id: Optional[int] = None
    response_time_hours: float = Field(..., ge=0)
    resolution_time_hours: float = Field(..., ge=0)
    is_active: bool = True


class SlaDefinitionRow(BaseModel):
    """Tabela padrão da empresa, por nome de prioridade"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    priority: str
    response_time_hours: float = Field(..., ge=0)
    resolution_time_hours: float = Field(..., ge=0)


# ==================== Saídas ====================
class SlaConfigSourceKind(str, enum.Enum):
    SPECIFIC = "specific"
    DEPARTMENT_DEFAULT = "department_default"
    COMPANY_DEFAULT = "company_default"


class ResolvedSLAConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    response_time_hours: float
    resolution_time_hours: float
    source: SlaConfigSourceKind
    config_id: Optional[Union[int, str]] = None


class SLAResult(BaseModel):
    """Resultado do SLA de um chamado num instante (nunca persistido)"""
    model_config = ConfigDict(frozen=True)

    time_elapsed: timedelta
    time_remaining: timedelta
    percent_consumed: int = Field(..., ge=0, le=100)
    is_breached: bool
    due_date: datetime
    severity: SlaSeverity
    is_paused: bool

    @property
    def time_elapsed_ms(self) -> int:
        return self.time_elapsed // _MS

    @property
    def time_remaining_ms(self) -> int:
        return self.time_remaining // _MS

    @property
    def hours_elapsed(self) -> float:
        return self.time_elapsed.total_seconds() / 3600


class TicketSlaReport(BaseModel):
    """SLA de resposta e de resolução de um chamado"""
    ticket_id: Optional[int] = None
    priority: Optional[Union[int, str]] = None
    config: ResolvedSLAConfig
    response: SLAResult
    resolution: SLAResult


# ==================== Métricas ====================
class PrioritySummary(BaseModel):
    """Métricas de SLA por prioridade"""
    priority: str
    total: int
    at_risk: int
    breached: int
    paused: int
    percent_at_risk: float
    percent_breached: float


class SlaDashboardSummary(BaseModel):
    """Métricas gerais de SLA"""
    total_tickets: int
    by_severity: Dict[str, int]
    tickets_at_risk: int
    tickets_breached: int
    tickets_paused: int
    percent_compliance: float
    percent_at_risk: float
    percent_breached: float
    average_percent_consumed: float
    average_hours_elapsed: float
    by_priority: List[PrioritySummary]
