"""Constantes e funções auxiliares para normalização de status e prioridades"""

import enum
import unicodedata
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Union


class TicketStatus(str, enum.Enum):
    """Status válidos do chamado"""
    NEW = "new"
    ONGOING = "ongoing"
    SUSPENDED = "suspended"
    WAITING_CUSTOMER = "waiting_customer"
    ESCALATED = "escalated"
    IN_ANALYSIS = "in_analysis"
    PENDING_DEPLOYMENT = "pending_deployment"
    REOPENED = "reopened"
    RESOLVED = "resolved"
    CLOSED = "closed"


class SlaClass(str, enum.Enum):
    """Classe semântica de um status para o SLA"""
    ACTIVE = "active"        # relógio rodando
    PAUSED = "paused"        # aguardando terceiros
    FINISHED = "finished"    # SLA encerrado


class SlaSeverity(str, enum.Enum):
    OK = "ok"
    WARNING = "warning"
    CRITICAL = "critical"
    BREACHED = "breached"


# Status inicial implícito de todo chamado
INITIAL_STATUS = TicketStatus.NEW.value

# Status que CONTAM no SLA
DEFAULT_ACTIVE_STATUSES: FrozenSet[str] = frozenset({
    "new",
    "ongoing",
    "in_analysis",
    "reopened",
})

# Status que PAUSAM o SLA
DEFAULT_PAUSED_STATUSES: FrozenSet[str] = frozenset({
    "suspended",
    "waiting_customer",
    "escalated",
    "pending_deployment",
})

# Status FINALIZADOS
DEFAULT_FINISHED_STATUSES: FrozenSet[str] = frozenset({
    "resolved",
    "closed",
})

# Faixas de severidade (percentual consumido)
WARNING_PERCENT = 75
CRITICAL_PERCENT = 90

# Rótulos exibidos na interface
_STATUS_LABELS = {
    "novo": "new",
    "em andamento": "ongoing",
    "em atendimento": "ongoing",
    "suspenso": "suspended",
    "aguardando cliente": "waiting_customer",
    "escalado": "escalated",
    "em analise": "in_analysis",
    "aguardando deploy": "pending_deployment",
    "reaberto": "reopened",
    "resolvido": "resolved",
    "encerrado": "closed",
    "fechado": "closed",
}


def _strip_accents(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def normalize_status(status: Union[str, TicketStatus, None]) -> str:
    """
    Normaliza o status para comparação consistente.

    Exemplos:
        TicketStatus.ONGOING -> "ongoing"
        "Waiting Customer" -> "waiting_customer"
        "Aguardando Cliente" -> "waiting_customer"
    """
    if status is None:
        return ""
    if isinstance(status, TicketStatus):
        return status.value

    value = _strip_accents(str(status).strip()).lower()
    if value in _STATUS_LABELS:
        return _STATUS_LABELS[value]

    return "_".join(value.replace("-", " ").split())


@dataclass(frozen=True)
class StatusPolicy:
    """Particiona os status nas três classes usadas pelo SLA"""

    active: FrozenSet[str] = DEFAULT_ACTIVE_STATUSES
    paused: FrozenSet[str] = DEFAULT_PAUSED_STATUSES
    finished: FrozenSet[str] = DEFAULT_FINISHED_STATUSES

    def __post_init__(self):
        for name in ("active", "paused", "finished"):
            normalized = frozenset(normalize_status(s) for s in getattr(self, name))
            object.__setattr__(self, name, normalized)

        overlap = (
            (self.active & self.paused)
            | (self.active & self.finished)
            | (self.paused & self.finished)
        )
        if overlap:
            raise ValueError(f"Status em mais de uma classe de SLA: {sorted(overlap)}")

    def classify(self, status) -> SlaClass:
        # Status desconhecido conta no SLA
        code = normalize_status(status)
        if code in self.finished:
            return SlaClass.FINISHED
        if code in self.paused:
            return SlaClass.PAUSED
        return SlaClass.ACTIVE


def _default_policy() -> StatusPolicy:
    from .config import get_status_policy
    return get_status_policy()


def classify(status, policy: Optional[StatusPolicy] = None) -> SlaClass:
    """Classifica o status em ativo, pausado ou finalizado"""
    return (policy or _default_policy()).classify(status)


def is_sla_active(status, policy: Optional[StatusPolicy] = None) -> bool:
    """Verifica se o status conta no SLA (relógio rodando)"""
    return classify(status, policy) is SlaClass.ACTIVE


def is_sla_paused(status, policy: Optional[StatusPolicy] = None) -> bool:
    """Verifica se o status pausa o SLA"""
    return classify(status, policy) is SlaClass.PAUSED


def is_sla_finished(status, policy: Optional[StatusPolicy] = None) -> bool:
    """Verifica se o status é finalizado"""
    return classify(status, policy) is SlaClass.FINISHED


def severity_for(percent_consumed: float, is_breached: bool) -> SlaSeverity:
    if is_breached:
        return SlaSeverity.BREACHED
    if percent_consumed >= CRITICAL_PERCENT:
        return SlaSeverity.CRITICAL
    if percent_consumed >= WARNING_PERCENT:
        return SlaSeverity.WARNING
    return SlaSeverity.OK


# ==================== Prioridades ====================

# Nomes legados (inglês) <-> nomes atuais (português)
LEGACY_PRIORITY_MAP = {
    "low": "Baixa",
    "medium": "Média",
    "high": "Alta",
    "critical": "Crítica",
    "baixa": "low",
    "média": "medium",
    "media": "medium",
    "alta": "high",
    "crítica": "critical",
    "critica": "critical",
}

# Peso -> nome, para prioridades informadas só pelo número
PRIORITY_WEIGHT_NAMES = {
    1: "Baixa",
    2: "Média",
    3: "Alta",
    4: "Crítica",
}


def priority_variants(name: str) -> List[str]:
    """
    Variações de uma prioridade, na ordem em que devem ser tentadas:
    exata, capitalizada, minúscula, maiúscula e nome legado.

    Exemplo:
        "high" -> ["high", "High", "HIGH", "Alta"]
    """
    name = name.strip()
    candidates = [name, name.capitalize(), name.lower(), name.upper()]
    legacy = LEGACY_PRIORITY_MAP.get(name.lower())
    if legacy:
        candidates.append(legacy)

    variants: List[str] = []
    for candidate in candidates:
        if candidate and candidate not in variants:
            variants.append(candidate)
    return variants


def display_priority(name: Optional[str]) -> str:
    """Nome de exibição (português) de uma prioridade, legada ou não"""
    if not name:
        return "Sem prioridade"
    key = name.strip().lower()
    if key in ("low", "medium", "high", "critical"):
        return LEGACY_PRIORITY_MAP[key]
    return name.strip().capitalize()
