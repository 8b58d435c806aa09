"""
Métricas agregadas de SLA para o dashboard
Calculadas a partir dos relatórios já avaliados (SLA de resolução)
"""
import logging
from typing import Dict, Iterable, List

from .constants import SlaSeverity, display_priority
from .schemas import PrioritySummary, SlaDashboardSummary, TicketSlaReport

logger = logging.getLogger("sla.metrics")


def format_hours(hours: float) -> str:
    """Formata horas para exibição: 2.5 -> "2h 30min" """
    if hours <= 0:
        return "-"
    h = int(hours)
    m = int(round((hours - h) * 60))
    if m == 60:
        h, m = h + 1, 0
    if h > 0 and m > 0:
        return f"{h}h {m}min"
    elif h > 0:
        return f"{h}h"
    return f"{m}min"


def _pct(part: int, total: int) -> float:
    return round(part / total * 100, 1) if total > 0 else 0


def summarize_reports(reports: Iterable[TicketSlaReport]) -> SlaDashboardSummary:
    """
    Consolida os relatórios de SLA em métricas gerais

    Chamado pausado conta só como pausado; entre os demais, vencido tem
    precedência sobre em risco (warning/critical).
    """
    reports = [r for r in reports if r is not None]

    by_severity: Dict[str, int] = {s.value: 0 for s in SlaSeverity}
    at_risk = breached = paused = 0
    sum_percent = 0
    sum_hours = 0.0
    prio_map: Dict[str, Dict[str, int]] = {}

    for report in reports:
        result = report.resolution
        by_severity[result.severity.value] += 1
        sum_percent += result.percent_consumed
        sum_hours += result.hours_elapsed

        name = display_priority(str(report.priority) if report.priority is not None else None)
        bucket = prio_map.setdefault(name, {"total": 0, "at_risk": 0, "breached": 0, "paused": 0})
        bucket["total"] += 1

        if result.is_paused:
            paused += 1
            bucket["paused"] += 1
        elif result.is_breached:
            breached += 1
            bucket["breached"] += 1
        elif result.severity in (SlaSeverity.WARNING, SlaSeverity.CRITICAL):
            at_risk += 1
            bucket["at_risk"] += 1

    total = len(reports)
    by_priority: List[PrioritySummary] = [
        PrioritySummary(
            priority=name,
            total=b["total"],
            at_risk=b["at_risk"],
            breached=b["breached"],
            paused=b["paused"],
            percent_at_risk=_pct(b["at_risk"], b["total"]),
            percent_breached=_pct(b["breached"], b["total"]),
        )
        for name, b in sorted(prio_map.items())
    ]

    summary = SlaDashboardSummary(
        total_tickets=total,
        by_severity=by_severity,
        tickets_at_risk=at_risk,
        tickets_breached=breached,
        tickets_paused=paused,
        percent_compliance=_pct(total - at_risk - breached, total),
        percent_at_risk=_pct(at_risk, total),
        percent_breached=_pct(breached, total),
        average_percent_consumed=round(sum_percent / total, 1) if total > 0 else 0,
        average_hours_elapsed=round(sum_hours / total, 2) if total > 0 else 0,
        by_priority=by_priority,
    )
    logger.debug(
        f"Métricas SLA: {total} chamados, {breached} vencidos, {at_risk} em risco, {paused} pausados"
    )
    return summary
