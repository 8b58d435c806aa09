"""
Configuração do pytest e fixtures compartilhadas dos testes de SLA
"""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from helpdesk.sla.cache_service import MemoryCache, SlaConfigCache
from helpdesk.sla.config import BusinessHoursConfig, set_business_hours_config, set_status_policy
from helpdesk.sla.constants import StatusPolicy
from helpdesk.sla.models import Base
from helpdesk.sla.resolver import InMemorySlaConfigSource, SLAConfigResolver

# Segunda-feira
MONDAY = datetime(2024, 1, 8)


def at(day_offset: int, hour: int, minute: int = 0) -> datetime:
    """Instante relativo à segunda-feira de referência"""
    return MONDAY + timedelta(days=day_offset, hours=hour, minutes=minute)


class FakeClock:
    """Relógio controlado manualmente"""

    def __init__(self, start: datetime = None):
        self.now = start or datetime(2024, 1, 8, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture(autouse=True)
def default_calendar():
    """Horário comercial e classes de status padrão, sem depender do ambiente"""
    set_business_hours_config(BusinessHoursConfig())
    set_status_policy(StatusPolicy())
    yield
    set_business_hours_config(None)
    set_status_policy(None)


@pytest.fixture
def cfg():
    return BusinessHoursConfig()


@pytest.fixture
def clock():
    return FakeClock()


PRIORITIES = [
    {"id": 1, "company_id": 1, "department_id": 10, "name": "Baixa", "weight": 1},
    {"id": 2, "company_id": 1, "department_id": 10, "name": "Média", "weight": 2},
    {"id": 3, "company_id": 1, "department_id": 10, "name": "Alta", "weight": 3},
    {"id": 4, "company_id": 1, "department_id": 10, "name": "Crítica", "weight": 4},
]

CONFIGURATIONS = [
    # Específica: incidente 5 + Alta
    {"id": 100, "company_id": 1, "department_id": 10, "incident_type_id": 5,
     "priority_id": 3, "response_time_hours": 2, "resolution_time_hours": 8},
    # Padrão do departamento para o incidente 5
    {"id": 101, "company_id": 1, "department_id": 10, "incident_type_id": 5,
     "priority_id": None, "response_time_hours": 4, "resolution_time_hours": 24},
    # Inativa
    {"id": 102, "company_id": 1, "department_id": 10, "incident_type_id": 6,
     "priority_id": 2, "response_time_hours": 4, "resolution_time_hours": 16, "is_active": False},
]

DEFINITIONS = [
    {"id": 200, "company_id": 1, "priority": "Alta", "response_time_hours": 1, "resolution_time_hours": 4},
    {"id": 201, "company_id": 1, "priority": "Baixa", "response_time_hours": 8, "resolution_time_hours": 40},
]


@pytest.fixture
def source():
    return InMemorySlaConfigSource(PRIORITIES, CONFIGURATIONS, DEFINITIONS)


@pytest.fixture
def sla_cache(clock):
    return SlaConfigCache(
        MemoryCache(clock=clock),
        ttl_minutes=15,
        popular_ttl_minutes=30,
        popular_threshold=3,
    )


@pytest.fixture
def resolver(source, sla_cache):
    return SLAConfigResolver(source, cache=sla_cache)


@pytest.fixture
def db_session():
    """Sessão SQLite em memória com as tabelas de SLA"""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
