"""Configurações do módulo SLA"""

import logging
import os
from dataclasses import dataclass, field
from datetime import date
from typing import FrozenSet, List, Optional

from dotenv import load_dotenv

from .constants import (
    DEFAULT_ACTIVE_STATUSES,
    DEFAULT_FINISHED_STATUSES,
    DEFAULT_PAUSED_STATUSES,
    StatusPolicy,
)
from .exceptions import InvalidBusinessHoursError

load_dotenv()

ENV_PREFIX = "SLA_"


def _env_str(name: str, default: str) -> str:
    return os.getenv(ENV_PREFIX + name, default)


def _env_int(name: str, default: int) -> int:
    value = os.getenv(ENV_PREFIX + name)
    return int(value) if value not in (None, "") else default


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(ENV_PREFIX + name)
    if value in (None, ""):
        return default
    return value.strip().lower() in ("1", "true", "yes", "sim", "on")


def _env_list(name: str, default: List[str]) -> List[str]:
    value = os.getenv(ENV_PREFIX + name)
    if value in (None, ""):
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class SlaSettings:
    """Configurações gerais do SLA"""

    # Horário comercial
    BUSINESS_HOUR_START: int = 8          # Hora de início (08:00)
    BUSINESS_HOUR_END: int = 18           # Hora de término (18:00)
    BUSINESS_DAYS: List[int] = None       # Dias úteis (seg-sex): [0,1,2,3,4]
    CONSIDER_HOLIDAYS: bool = False       # Feriados nacionais contam como dia não útil
    HOLIDAY_YEARS: List[int] = None       # Anos para gerar feriados

    # Cache de configurações de SLA
    CACHE_TTL_MINUTES: int = 15
    POPULAR_CACHE_TTL_MINUTES: int = 30
    POPULAR_ACCESS_THRESHOLD: int = 10    # Acessos para uma chave ser "popular"
    PRELOAD_TOP_N: int = 50

    # Scheduler
    SCHEDULER_INTERVAL_MINUTES: int = 5   # Intervalo da manutenção do cache
    SCHEDULER_ENABLED: bool = True

    LOG_LEVEL: str = "INFO"

    # Classes de status
    ACTIVE_STATUSES: List[str] = None
    PAUSED_STATUSES: List[str] = None
    FINISHED_STATUSES: List[str] = None

    def __post_init__(self):
        if self.BUSINESS_DAYS is None:
            self.BUSINESS_DAYS = [0, 1, 2, 3, 4]  # Segunda a sexta
        if self.HOLIDAY_YEARS is None:
            this_year = date.today().year
            self.HOLIDAY_YEARS = [this_year - 1, this_year, this_year + 1]
        if self.ACTIVE_STATUSES is None:
            self.ACTIVE_STATUSES = sorted(DEFAULT_ACTIVE_STATUSES)
        if self.PAUSED_STATUSES is None:
            self.PAUSED_STATUSES = sorted(DEFAULT_PAUSED_STATUSES)
        if self.FINISHED_STATUSES is None:
            self.FINISHED_STATUSES = sorted(DEFAULT_FINISHED_STATUSES)

    @classmethod
    def from_env(cls) -> "SlaSettings":
        """Carrega configurações das variáveis de ambiente (prefixo SLA_)"""
        defaults = cls()
        return cls(
            BUSINESS_HOUR_START=_env_int("BUSINESS_HOUR_START", defaults.BUSINESS_HOUR_START),
            BUSINESS_HOUR_END=_env_int("BUSINESS_HOUR_END", defaults.BUSINESS_HOUR_END),
            BUSINESS_DAYS=[int(d) for d in _env_list("BUSINESS_DAYS", [str(d) for d in defaults.BUSINESS_DAYS])],
            CONSIDER_HOLIDAYS=_env_bool("CONSIDER_HOLIDAYS", defaults.CONSIDER_HOLIDAYS),
            HOLIDAY_YEARS=[int(y) for y in _env_list("HOLIDAY_YEARS", [str(y) for y in defaults.HOLIDAY_YEARS])],
            CACHE_TTL_MINUTES=_env_int("CACHE_TTL_MINUTES", defaults.CACHE_TTL_MINUTES),
            POPULAR_CACHE_TTL_MINUTES=_env_int("POPULAR_CACHE_TTL_MINUTES", defaults.POPULAR_CACHE_TTL_MINUTES),
            POPULAR_ACCESS_THRESHOLD=_env_int("POPULAR_ACCESS_THRESHOLD", defaults.POPULAR_ACCESS_THRESHOLD),
            PRELOAD_TOP_N=_env_int("PRELOAD_TOP_N", defaults.PRELOAD_TOP_N),
            SCHEDULER_INTERVAL_MINUTES=_env_int("SCHEDULER_INTERVAL_MINUTES", defaults.SCHEDULER_INTERVAL_MINUTES),
            SCHEDULER_ENABLED=_env_bool("SCHEDULER_ENABLED", defaults.SCHEDULER_ENABLED),
            LOG_LEVEL=_env_str("LOG_LEVEL", defaults.LOG_LEVEL),
            ACTIVE_STATUSES=_env_list("ACTIVE_STATUSES", defaults.ACTIVE_STATUSES),
            PAUSED_STATUSES=_env_list("PAUSED_STATUSES", defaults.PAUSED_STATUSES),
            FINISHED_STATUSES=_env_list("FINISHED_STATUSES", defaults.FINISHED_STATUSES),
        )


# Instância global
settings = SlaSettings.from_env()


@dataclass(frozen=True)
class BusinessHoursConfig:
    """Horário comercial usado em todo cálculo de SLA"""

    start_hour: int = 8
    end_hour: int = 18
    work_days: FrozenSet[int] = frozenset({0, 1, 2, 3, 4})
    holidays: FrozenSet[date] = field(default_factory=frozenset)

    def __post_init__(self):
        object.__setattr__(self, "work_days", frozenset(self.work_days))
        object.__setattr__(self, "holidays", frozenset(self.holidays))

        if not (0 <= self.start_hour <= 23 and 0 <= self.end_hour <= 23):
            raise InvalidBusinessHoursError(
                self.start_hour, self.end_hour,
                f"Horas fora do intervalo 0-23: {self.start_hour}-{self.end_hour}",
            )
        if self.start_hour >= self.end_hour:
            raise InvalidBusinessHoursError(self.start_hour, self.end_hour)
        if not self.work_days:
            raise InvalidBusinessHoursError(
                self.start_hour, self.end_hour, "Nenhum dia útil configurado"
            )
        if any(d not in range(7) for d in self.work_days):
            raise InvalidBusinessHoursError(
                self.start_hour, self.end_hour,
                f"Dias úteis inválidos: {sorted(self.work_days)}",
            )

    @property
    def daily_hours(self) -> int:
        return self.end_hour - self.start_hour


def build_business_hours(sla_settings: SlaSettings) -> BusinessHoursConfig:
    holidays: FrozenSet[date] = frozenset()
    if sla_settings.CONSIDER_HOLIDAYS:
        from .holidays import holiday_dates
        holidays = holiday_dates(sla_settings.HOLIDAY_YEARS)

    return BusinessHoursConfig(
        start_hour=sla_settings.BUSINESS_HOUR_START,
        end_hour=sla_settings.BUSINESS_HOUR_END,
        work_days=frozenset(sla_settings.BUSINESS_DAYS),
        holidays=holidays,
    )


def build_status_policy(sla_settings: SlaSettings) -> StatusPolicy:
    return StatusPolicy(
        active=frozenset(sla_settings.ACTIVE_STATUSES),
        paused=frozenset(sla_settings.PAUSED_STATUSES),
        finished=frozenset(sla_settings.FINISHED_STATUSES),
    )


_business_hours: Optional[BusinessHoursConfig] = None
_status_policy: Optional[StatusPolicy] = None


def get_business_hours_config() -> BusinessHoursConfig:
    """Obtém o horário comercial padrão (futuramente por empresa)"""
    global _business_hours
    if _business_hours is None:
        _business_hours = build_business_hours(settings)
    return _business_hours


def set_business_hours_config(config: Optional[BusinessHoursConfig]) -> None:
    """Substitui o horário comercial padrão; None volta ao das configurações"""
    global _business_hours
    _business_hours = config


def get_status_policy() -> StatusPolicy:
    """Obtém a classificação de status padrão"""
    global _status_policy
    if _status_policy is None:
        _status_policy = build_status_policy(settings)
    return _status_policy


def set_status_policy(policy: Optional[StatusPolicy]) -> None:
    global _status_policy
    _status_policy = policy


def configure_logging(level: Optional[str] = None) -> None:
    """Ajusta o nível do logger 'sla'"""
    logging.getLogger("sla").setLevel((level or settings.LOG_LEVEL).upper())
