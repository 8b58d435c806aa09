"""Repositório para acesso a dados de SLA"""

from typing import List, Optional

from sqlalchemy.orm import Session

from .models import DepartmentPriority, SlaConfiguration, SlaDefinition, TicketStatusHistory
from .resolver import InMemorySlaConfigSource
from .schemas import StatusHistoryEntry


class SlaRepository:
    """Repositório para operações de SLA"""

    def __init__(self, db: Session):
        self.db = db

    # ========== Configurações ==========

    def load_config_source(self, company_id: Optional[int] = None) -> InMemorySlaConfigSource:
        """
        Carrega prioridades, configurações e tabela padrão para o resolver

        Args:
            company_id: Restringe a uma empresa (None = todas)
        """
        priorities = self.db.query(DepartmentPriority)
        configurations = self.db.query(SlaConfiguration).filter(
            SlaConfiguration.is_active == True
        )
        definitions = self.db.query(SlaDefinition)

        if company_id is not None:
            priorities = priorities.filter(DepartmentPriority.company_id == company_id)
            configurations = configurations.filter(SlaConfiguration.company_id == company_id)
            definitions = definitions.filter(SlaDefinition.company_id == company_id)

        return InMemorySlaConfigSource(
            priorities=priorities.order_by(DepartmentPriority.id).all(),
            configurations=configurations.order_by(SlaConfiguration.id).all(),
            definitions=definitions.order_by(SlaDefinition.id).all(),
        )

    # ========== Histórico ==========

    def get_status_history(self, ticket_id: int) -> List[StatusHistoryEntry]:
        """Histórico do chamado em ordem cronológica"""
        rows = self.db.query(TicketStatusHistory).filter(
            TicketStatusHistory.ticket_id == ticket_id
        ).order_by(TicketStatusHistory.created_at, TicketStatusHistory.id).all()
        return [StatusHistoryEntry.model_validate(row) for row in rows]

    def add_status_change(self, ticket_id: int, old_status: Optional[str], new_status: str, created_at=None) -> TicketStatusHistory:
        """Registra uma mudança de status"""
        entry = TicketStatusHistory(
            ticket_id=ticket_id,
            change_type="status",
            old_status=old_status,
            new_status=new_status,
        )
        if created_at is not None:
            entry.created_at = created_at
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        return entry
