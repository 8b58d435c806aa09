"""Camada de negócio para SLA"""
import logging
from datetime import datetime
from typing import Any, Callable, Iterable, List, Optional

from .config import BusinessHoursConfig, get_business_hours_config
from .constants import StatusPolicy
from .evaluator import evaluate_sla
from .exceptions import SlaConfigurationNotFoundError
from .periods import StatusPeriod, reconstruct_status_periods
from .resolver import SLAConfigResolver
from .schemas import SLAResult, TicketSlaReport, TicketSnapshot

logger = logging.getLogger("sla.service")

RESPONSE = "response"
RESOLUTION = "resolution"


def _as_snapshot(ticket: Any) -> TicketSnapshot:
    if isinstance(ticket, TicketSnapshot):
        return ticket
    if isinstance(ticket, dict):
        return TicketSnapshot.model_validate(ticket)
    return TicketSnapshot.model_validate(ticket, from_attributes=True)


class SlaService:
    """Une resolução de configuração, reconstrução de períodos e avaliação"""

    def __init__(
        self,
        resolver: SLAConfigResolver,
        business_hours: Optional[BusinessHoursConfig] = None,
        policy: Optional[StatusPolicy] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.resolver = resolver
        self.business_hours = business_hours
        self.policy = policy
        self.clock = clock

    @property
    def calendar(self) -> BusinessHoursConfig:
        return self.business_hours or get_business_hours_config()

    def _now(self, snapshot: TicketSnapshot) -> datetime:
        if self.clock is not None:
            return self.clock()
        return datetime.now(snapshot.created_at.tzinfo)

    def _periods(self, snapshot: TicketSnapshot, history, now: datetime) -> List[StatusPeriod]:
        return reconstruct_status_periods(
            snapshot.created_at,
            snapshot.current_status,
            history or (),
            now=now,
            resolved_at=snapshot.resolved_at,
            policy=self.policy,
        )

    def _evaluate_milestone(
        self,
        snapshot: TicketSnapshot,
        periods: List[StatusPeriod],
        sla_hours: float,
        now: datetime,
        milestone: str,
    ) -> SLAResult:
        if milestone == RESPONSE:
            finished_at = snapshot.first_response_at or snapshot.resolved_at
        elif milestone == RESOLUTION:
            finished_at = snapshot.resolved_at
        else:
            raise ValueError(f"Marco de SLA desconhecido: {milestone}")

        return evaluate_sla(
            snapshot.created_at,
            sla_hours,
            now=now,
            resolved_at=finished_at,
            cfg=self.calendar,
            periods=periods,
            current_status=snapshot.current_status,
            policy=self.policy,
        )

    def evaluate(
        self,
        ticket: Any,
        history: Optional[Iterable[Any]],
        sla_hours: float,
        now: Optional[datetime] = None,
        milestone: str = RESOLUTION,
    ) -> SLAResult:
        """
        Avalia um único prazo de SLA já conhecido

        Args:
            ticket: TicketSnapshot, dict ou objeto ORM com os campos do chamado
            history: Histórico do chamado (qualquer ordem)
            sla_hours: Prazo em horas úteis
            milestone: "response" (termina na primeira resposta) ou "resolution"
        """
        snapshot = _as_snapshot(ticket)
        now = now or self._now(snapshot)
        periods = self._periods(snapshot, history, now)
        return self._evaluate_milestone(snapshot, periods, sla_hours, now, milestone)

    def evaluate_ticket(
        self,
        ticket: Any,
        history: Optional[Iterable[Any]],
        now: Optional[datetime] = None,
        strict: bool = False,
    ) -> Optional[TicketSlaReport]:
        """
        Resolve a configuração e avalia os SLAs de resposta e de resolução

        Returns:
            TicketSlaReport, ou None quando não há SLA configurado

        Raises:
            SlaConfigurationNotFoundError: sem configuração e strict=True
        """
        snapshot = _as_snapshot(ticket)
        config = self.resolver.resolve(
            snapshot.company_id,
            snapshot.department_id,
            snapshot.incident_type_id,
            snapshot.priority,
        )
        if config is None:
            if strict:
                raise SlaConfigurationNotFoundError(
                    snapshot.company_id,
                    snapshot.department_id,
                    snapshot.incident_type_id,
                    snapshot.priority,
                )
            logger.info(f"Chamado {snapshot.id} sem SLA configurado")
            return None

        now = now or self._now(snapshot)
        periods = self._periods(snapshot, history, now)

        return TicketSlaReport(
            ticket_id=snapshot.id,
            priority=snapshot.priority,
            config=config,
            response=self._evaluate_milestone(
                snapshot, periods, config.response_time_hours, now, RESPONSE
            ),
            resolution=self._evaluate_milestone(
                snapshot, periods, config.resolution_time_hours, now, RESOLUTION
            ),
        )
