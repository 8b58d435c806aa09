"""
Reconstrução dos períodos de status de um chamado a partir do histórico
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable, List, Optional

from .constants import INITIAL_STATUS, SlaClass, StatusPolicy, classify, normalize_status
from .schemas import StatusHistoryEntry

STATUS_CHANGE = "status"


@dataclass(frozen=True)
class StatusPeriod:
    """Chamado esteve em `status` durante [start_time, end_time)"""
    status: str
    start_time: datetime
    end_time: datetime

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time


def _as_entry(row: Any) -> StatusHistoryEntry:
    if isinstance(row, StatusHistoryEntry):
        return row
    if isinstance(row, dict):
        return StatusHistoryEntry.model_validate(row)
    return StatusHistoryEntry.model_validate(row, from_attributes=True)


def status_changes(history: Iterable[Any]) -> List[StatusHistoryEntry]:
    """Somente mudanças de status, em ordem cronológica"""
    entries = (_as_entry(row) for row in history)
    changes = [e for e in entries if e.change_type == STATUS_CHANGE]
    changes.sort(key=lambda e: e.created_at)
    return changes


def reconstruct_status_periods(
    created_at: datetime,
    current_status: str,
    history: Iterable[Any],
    now: Optional[datetime] = None,
    resolved_at: Optional[datetime] = None,
    policy: Optional[StatusPolicy] = None,
) -> List[StatusPeriod]:
    """
    Converte o histórico de status em períodos contíguos

    Args:
        created_at: Abertura do chamado (início do primeiro período)
        current_status: Status atual do chamado
        history: Linhas do histórico; só change_type == "status" participa
        now: Instante da avaliação (padrão: agora)
        resolved_at: Resolução do chamado, quando conhecida

    Returns:
        Períodos ordenados, cada um começando onde o anterior terminou

    Para chamado finalizado o último período termina em `resolved_at`,
    ou na última mudança de status se não houver resolução registrada,
    de modo que o resultado não muda com o passar do tempo.
    """
    changes = status_changes(history)
    finished = classify(current_status, policy) is SlaClass.FINISHED

    if finished and resolved_at is not None:
        boundary = resolved_at
    elif finished and changes:
        boundary = changes[-1].created_at
    else:
        boundary = now if now is not None else datetime.now(created_at.tzinfo)

    if not changes:
        # Sem histórico: todo o intervalo conta como ativo
        if created_at < boundary:
            return [StatusPeriod(INITIAL_STATUS, created_at, boundary)]
        return []

    periods: List[StatusPeriod] = []
    cursor = created_at
    status = INITIAL_STATUS

    for change in changes:
        if cursor < change.created_at:
            periods.append(StatusPeriod(status, cursor, change.created_at))
        cursor = max(cursor, change.created_at)
        status = normalize_status(change.new_status) or status

    if cursor < boundary:
        periods.append(StatusPeriod(status, cursor, boundary))

    return periods
