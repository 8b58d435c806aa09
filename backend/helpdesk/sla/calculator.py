"""
Cálculo de horas úteis para SLA
- Considera horário comercial (padrão 08:00-18:00)
- Considera dias úteis (padrão seg-sex)
- Considera feriados, quando configurados no horário comercial
"""
from datetime import date, datetime, time, timedelta
from typing import Optional

from .config import BusinessHoursConfig, get_business_hours_config

HOUR = timedelta(hours=1)


def _config(cfg: Optional[BusinessHoursConfig]) -> BusinessHoursConfig:
    return cfg if cfg is not None else get_business_hours_config()


def _at_hour(day: date, hour: int, tzinfo) -> datetime:
    return datetime.combine(day, time(hour), tzinfo=tzinfo)


# ==================== Calendário ====================

def is_working_day(day: date, cfg: Optional[BusinessHoursConfig] = None) -> bool:
    """
    Verifica se é dia útil (dia da semana configurado e não é feriado)

    Args:
        day: Data para verificar
        cfg: Horário comercial (padrão global se omitido)
    """
    cfg = _config(cfg)
    return day.weekday() in cfg.work_days and day not in cfg.holidays


def _next_working_day(day: date, cfg: BusinessHoursConfig) -> date:
    day += timedelta(days=1)
    while not is_working_day(day, cfg):
        day += timedelta(days=1)
    return day


def is_business_instant(moment: datetime, cfg: Optional[BusinessHoursConfig] = None) -> bool:
    """Verifica se um instante está dentro do horário comercial"""
    cfg = _config(cfg)
    return (
        is_working_day(moment.date(), cfg)
        and cfg.start_hour <= moment.hour < cfg.end_hour
    )


def next_business_instant(moment: datetime, cfg: Optional[BusinessHoursConfig] = None) -> datetime:
    """
    Próximo instante em horário comercial a partir de `moment`

    Retorna o próprio instante se ele já está em horário comercial.
    Antes do expediente em dia útil, avança para o início do mesmo dia;
    depois do expediente ou em dia não útil, avança para o início do
    próximo dia útil.
    """
    cfg = _config(cfg)
    if is_business_instant(moment, cfg):
        return moment

    day = moment.date()
    if is_working_day(day, cfg) and moment.hour < cfg.start_hour:
        return _at_hour(day, cfg.start_hour, moment.tzinfo)

    return _at_hour(_next_working_day(day, cfg), cfg.start_hour, moment.tzinfo)


# ==================== Horas úteis ====================

def business_duration(
    start: datetime,
    end: datetime,
    cfg: Optional[BusinessHoursConfig] = None
) -> timedelta:
    """
    Tempo útil entre dois instantes (horário comercial e dias úteis)

    Args:
        start: Data/hora inicial
        end: Data/hora final

    Returns:
        Duração útil; zero se start >= end
    """
    if start >= end:
        return timedelta(0)

    cfg = _config(cfg)
    if start.tzinfo is not None and end.tzinfo is not None:
        end = end.astimezone(start.tzinfo)

    total = timedelta(0)
    current_date = start.date()

    while current_date <= end.date():
        if is_working_day(current_date, cfg):
            window_start = max(start, _at_hour(current_date, cfg.start_hour, start.tzinfo))
            window_end = min(end, _at_hour(current_date, cfg.end_hour, start.tzinfo))
            if window_start < window_end:
                total += window_end - window_start

        current_date += timedelta(days=1)

    return total


def add_business_duration(
    start: datetime,
    hours: float,
    cfg: Optional[BusinessHoursConfig] = None
) -> datetime:
    """
    Soma horas úteis a um instante (usado no vencimento do SLA)

    Args:
        start: Instante inicial; é levado ao próximo horário comercial
        hours: Horas úteis a consumir

    Returns:
        Instante em que as horas úteis se esgotam
    """
    cfg = _config(cfg)
    current = next_business_instant(start, cfg)
    remaining = timedelta(hours=hours)

    while remaining > timedelta(0):
        day_end = _at_hour(current.date(), cfg.end_hour, current.tzinfo)
        left_in_day = day_end - current

        if remaining <= left_in_day:
            return current + remaining

        remaining -= left_in_day
        current = _at_hour(_next_working_day(current.date(), cfg), cfg.start_hour, current.tzinfo)

    return current
