"""
Avaliação do SLA de um chamado
- Tempo conta apenas em horário comercial
- Tempo conta apenas nos períodos com status ativo
- Chamado finalizado tem resultado estável (não muda com o relógio)
"""
import logging
from datetime import datetime, timedelta
from typing import Optional, Sequence

from .calculator import HOUR, add_business_duration, business_duration
from .config import BusinessHoursConfig, get_business_hours_config
from .constants import SlaClass, StatusPolicy, classify, severity_for
from .periods import StatusPeriod
from .schemas import SLAResult

logger = logging.getLogger("sla.evaluator")


def _elapsed_over_periods(
    created_at: datetime,
    end: datetime,
    periods: Sequence[StatusPeriod],
    cfg: BusinessHoursConfig,
    policy: Optional[StatusPolicy],
) -> timedelta:
    total = timedelta(0)
    last_active_end = created_at

    for period in periods:
        if classify(period.status, policy) is not SlaClass.ACTIVE:
            continue

        effective_start = max(period.start_time, last_active_end)
        effective_end = min(period.end_time, end)
        if effective_start < effective_end:
            total += business_duration(effective_start, effective_end, cfg)
            last_active_end = effective_end

    # Período atual (do último status até o fim da avaliação)
    last = periods[-1]
    if classify(last.status, policy) is SlaClass.ACTIVE and last.end_time < end:
        total += business_duration(max(last.end_time, last_active_end), end, cfg)

    return total


def evaluate_sla(
    created_at: datetime,
    sla_hours: float,
    now: Optional[datetime] = None,
    resolved_at: Optional[datetime] = None,
    cfg: Optional[BusinessHoursConfig] = None,
    periods: Sequence[StatusPeriod] = (),
    current_status: str = "new",
    policy: Optional[StatusPolicy] = None,
) -> SLAResult:
    """
    Calcula o SLA de um chamado

    Args:
        created_at: Abertura do chamado
        sla_hours: Prazo do SLA em horas úteis
        now: Instante da avaliação (padrão: agora)
        resolved_at: Resolução do chamado, se houver
        periods: Períodos de status reconstruídos do histórico
        current_status: Status atual do chamado

    Returns:
        SLAResult com tempo consumido, restante, percentual, vencimento e severidade
    """
    cfg = cfg if cfg is not None else get_business_hours_config()
    if now is None:
        now = datetime.now(created_at.tzinfo)

    current_class = classify(current_status, policy)
    is_resolved = resolved_at is not None or current_class is SlaClass.FINISHED

    end = now
    if resolved_at is not None:
        end = resolved_at
    elif is_resolved and periods:
        end = periods[-1].end_time

    is_paused = not is_resolved and current_class is SlaClass.PAUSED

    logger.debug(
        f"Avaliando SLA: abertura={created_at.isoformat()} prazo={sla_hours}h "
        f"fim={end.isoformat()} status={current_status} periodos={len(periods)}"
    )

    if periods:
        elapsed = _elapsed_over_periods(created_at, end, periods, cfg, policy)
    else:
        elapsed = business_duration(created_at, end, cfg)

    total = timedelta(hours=sla_hours)
    if total > timedelta(0):
        time_remaining = max(timedelta(0), total - elapsed)
        ratio = elapsed / total * 100
        # arredondamento meio-para-cima
        percent = min(100, int(ratio + 0.5))
        is_breached = elapsed > total
    else:
        time_remaining = timedelta(0)
        percent = 100 if elapsed > timedelta(0) else 0
        is_breached = elapsed > timedelta(0)

    result = SLAResult(
        time_elapsed=elapsed,
        time_remaining=time_remaining,
        percent_consumed=percent,
        is_breached=is_breached,
        due_date=add_business_duration(created_at, sla_hours, cfg),
        severity=severity_for(percent, is_breached),
        is_paused=is_paused,
    )

    logger.debug(
        f"Resultado SLA: decorrido={elapsed / HOUR:.2f}h restante={time_remaining / HOUR:.2f}h "
        f"{percent}% severidade={result.severity.value} pausado={is_paused}"
    )
    return result


def format_time_remaining(remaining: timedelta, is_breached: bool = False) -> str:
    """Texto curto do tempo restante para os badges da interface"""
    if remaining <= timedelta(0):
        return "SLA excedido" if is_breached else "Vencido"

    total_minutes = int(remaining.total_seconds() // 60)
    hours, minutes = divmod(total_minutes, 60)

    if hours > 24:
        days, hours = divmod(hours, 24)
        return f"{days}d {hours}h"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
