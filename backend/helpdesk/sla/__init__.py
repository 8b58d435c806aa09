"""
Módulo SLA
- Horário comercial configurável (padrão 08:00-18:00, seg-sex)
- SLA conta: status ativos (new, ongoing, in_analysis, reopened)
- SLA pausa: suspended, waiting_customer, escalated, pending_deployment
- SLA para: resolved, closed
"""
from .calculator import (
    add_business_duration,
    business_duration,
    is_business_instant,
    next_business_instant,
)
from .config import BusinessHoursConfig, settings
from .constants import SlaClass, SlaSeverity, StatusPolicy, TicketStatus, classify
from .evaluator import evaluate_sla, format_time_remaining
from .metrics import summarize_reports
from .periods import StatusPeriod, reconstruct_status_periods
from .resolver import InMemorySlaConfigSource, SLAConfigResolver, SlaConfigSource
from .service import SlaService

__all__ = [
    "add_business_duration",
    "business_duration",
    "is_business_instant",
    "next_business_instant",
    "BusinessHoursConfig",
    "settings",
    "SlaClass",
    "SlaSeverity",
    "StatusPolicy",
    "TicketStatus",
    "classify",
    "evaluate_sla",
    "format_time_remaining",
    "summarize_reports",
    "StatusPeriod",
    "reconstruct_status_periods",
    "InMemorySlaConfigSource",
    "SLAConfigResolver",
    "SlaConfigSource",
    "SlaService",
]
__version__ = "1.0.0"
