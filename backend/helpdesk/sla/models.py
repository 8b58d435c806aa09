"""
Modelos de banco de dados para o módulo SLA

O motor de SLA não consulta o banco: o repositório carrega estas linhas
e as entrega como schemas Pydantic.
"""
from datetime import datetime

from sqlalchemy import (
    Boolean, Column, DateTime, Float, Index, Integer, String, UniqueConstraint
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class DepartmentPriority(Base):
    """Prioridades configuradas por departamento (Baixa, Média, ...)"""
    __tablename__ = "sla_department_priority"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, nullable=False, index=True)
    department_id = Column(Integer, nullable=False, index=True)
    name = Column(String(50), nullable=False)
    weight = Column(Integer)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("company_id", "department_id", "name", name="uq_priority_department_name"),
    )


class SlaConfiguration(Base):
    """SLA por empresa + departamento + tipo de incidente (+ prioridade)"""
    __tablename__ = "sla_configuration"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, nullable=False, index=True)
    department_id = Column(Integer, nullable=False)
    incident_type_id = Column(Integer, nullable=False)
    # NULL = padrão do departamento para o tipo de incidente
    priority_id = Column(Integer, nullable=True)
    response_time_hours = Column(Float, nullable=False)
    resolution_time_hours = Column(Float, nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("ix_sla_configuration_lookup", "company_id", "department_id", "incident_type_id"),
    )


class SlaDefinition(Base):
    """Tabela padrão de SLA da empresa por nome de prioridade"""
    __tablename__ = "sla_definition"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, nullable=False, index=True)
    priority = Column(String(50), nullable=False)
    response_time_hours = Column(Float, nullable=False)
    resolution_time_hours = Column(Float, nullable=False)

    __table_args__ = (
        UniqueConstraint("company_id", "priority", name="uq_sla_definition_priority"),
    )


class TicketStatusHistory(Base):
    """Histórico de alterações do chamado (status, prioridade, atribuição...)"""
    __tablename__ = "ticket_status_history"

    id = Column(Integer, primary_key=True, index=True)
    ticket_id = Column(Integer, nullable=False, index=True)
    change_type = Column(String(30), nullable=False, default="status")
    old_status = Column(String(50))
    new_status = Column(String(50))
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
