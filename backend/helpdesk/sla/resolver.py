"""
Resolução do SLA aplicável a um chamado, com hierarquia de fallback:
Específico > Padrão do departamento > Padrão da empresa > Sem SLA

Nunca devolve prazo "chutado": sem configuração, o resultado é None.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, NamedTuple, Optional, Union

from .cache_service import SlaCacheKey, SlaConfigCache
from .config import settings
from .constants import PRIORITY_WEIGHT_NAMES, priority_variants
from .schemas import (
    DepartmentPriorityRow,
    ResolvedSLAConfig,
    SlaConfigSourceKind,
    SlaConfigurationRow,
    SlaDefinitionRow,
)

logger = logging.getLogger("sla.resolver")


class PriorityRef(NamedTuple):
    """Prioridade resolvida uma única vez na entrada"""
    id: Optional[int]
    name: Optional[str]


class SlaConfigSource(ABC):
    """Consultas às configurações de SLA já carregadas pelo chamador"""

    @abstractmethod
    def find_priority_id(self, company_id: int, department_id: int, name: str) -> Optional[int]:
        pass

    @abstractmethod
    def priority_name(self, priority_id: int) -> Optional[str]:
        pass

    @abstractmethod
    def find_specific(
        self, company_id: int, department_id: int, incident_type_id: int, priority_id: int
    ) -> Optional[SlaConfigurationRow]:
        pass

    @abstractmethod
    def find_department_default(
        self, company_id: int, department_id: int, incident_type_id: int
    ) -> Optional[SlaConfigurationRow]:
        pass

    @abstractmethod
    def find_company_default(self, company_id: int, priority: str) -> Optional[SlaDefinitionRow]:
        pass


def _rows(model, rows: Iterable[Any]) -> List:
    return [r if isinstance(r, model) else model.model_validate(r, from_attributes=not isinstance(r, dict))
            for r in rows]


class InMemorySlaConfigSource(SlaConfigSource):
    """Fonte de configurações sobre linhas já buscadas no banco"""

    def __init__(
        self,
        priorities: Iterable[Any] = (),
        configurations: Iterable[Any] = (),
        definitions: Iterable[Any] = (),
    ):
        self.priorities: List[DepartmentPriorityRow] = _rows(DepartmentPriorityRow, priorities)
        self.configurations: List[SlaConfigurationRow] = _rows(SlaConfigurationRow, configurations)
        self.definitions: List[SlaDefinitionRow] = _rows(SlaDefinitionRow, definitions)

    def find_priority_id(self, company_id, department_id, name):
        for p in self.priorities:
            if (p.company_id == company_id and p.department_id == department_id
                    and p.name == name and p.is_active):
                return p.id
        return None

    def priority_name(self, priority_id):
        for p in self.priorities:
            if p.id == priority_id:
                return p.name
        return None

    def find_specific(self, company_id, department_id, incident_type_id, priority_id):
        for c in self.configurations:
            if (c.company_id == company_id and c.department_id == department_id
                    and c.incident_type_id == incident_type_id
                    and c.priority_id == priority_id and c.is_active):
                return c
        return None

    def find_department_default(self, company_id, department_id, incident_type_id):
        for c in self.configurations:
            if (c.company_id == company_id and c.department_id == department_id
                    and c.incident_type_id == incident_type_id
                    and c.priority_id is None and c.is_active):
                return c
        return None

    def find_company_default(self, company_id, priority):
        for d in self.definitions:
            if d.company_id == company_id and d.priority == priority:
                return d
        return None


class SLAConfigResolver:
    """Resolve o SLA (resposta/resolução) de um chamado com cache"""

    def __init__(self, source: SlaConfigSource, cache: Optional[SlaConfigCache] = None):
        self.source = source
        self.cache = cache or SlaConfigCache()

    def resolve(
        self,
        company_id: Optional[int],
        department_id: Optional[int],
        incident_type_id: Optional[int],
        priority: Optional[Union[int, str]] = None,
    ) -> Optional[ResolvedSLAConfig]:
        """
        Resolve o SLA seguindo a hierarquia de fallback

        Args:
            priority: ID da prioridade do departamento ou nome (aceita nomes legados)

        Returns:
            Configuração resolvida ou None se não há SLA configurado
        """
        key = self.cache.make_key(company_id, department_id, incident_type_id, priority)
        self.cache.record_access(key)

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"SLA em cache para {tuple(key)}: {cached.source.value}")
            return cached

        resolved = self._resolve_uncached(key)
        if resolved is None:
            logger.warning(f"Nenhuma configuração de SLA encontrada para {tuple(key)}")
            return None

        self.cache.set(key, resolved)
        logger.info(
            f"SLA resolvido para {tuple(key)}: {resolved.source.value} "
            f"(resposta {resolved.response_time_hours}h, resolução {resolved.resolution_time_hours}h)"
        )
        return resolved

    # ==================== Níveis ====================

    def _priority_ref(self, priority: Optional[Union[int, str]]) -> PriorityRef:
        if priority is None:
            return PriorityRef(None, None)
        if isinstance(priority, str) and not priority.strip().isdigit():
            return PriorityRef(None, priority.strip() or None)

        priority_id = int(priority)
        name = self.source.priority_name(priority_id) or PRIORITY_WEIGHT_NAMES.get(priority_id)
        return PriorityRef(priority_id, name)

    def _resolve_uncached(self, key: SlaCacheKey) -> Optional[ResolvedSLAConfig]:
        ref = self._priority_ref(key.priority)
        return (
            self._try_specific(key, ref)
            or self._try_department_default(key)
            or self._try_company_default(key, ref)
        )

    def _try_specific(self, key: SlaCacheKey, ref: PriorityRef) -> Optional[ResolvedSLAConfig]:
        """Nível 1: empresa + departamento + tipo + prioridade"""
        if None in (key.company_id, key.department_id, key.incident_type_id):
            return None

        candidates: List[int] = []
        if ref.id is not None:
            candidates.append(ref.id)
        if ref.name:
            for variant in priority_variants(ref.name):
                priority_id = self.source.find_priority_id(key.company_id, key.department_id, variant)
                if priority_id is not None and priority_id not in candidates:
                    candidates.append(priority_id)

        for priority_id in candidates:
            row = self.source.find_specific(
                key.company_id, key.department_id, key.incident_type_id, priority_id
            )
            if row:
                return ResolvedSLAConfig(
                    response_time_hours=row.response_time_hours,
                    resolution_time_hours=row.resolution_time_hours,
                    source=SlaConfigSourceKind.SPECIFIC,
                    config_id=row.id,
                )
        return None

    def _try_department_default(self, key: SlaCacheKey) -> Optional[ResolvedSLAConfig]:
        """Nível 2: configuração do departamento sem prioridade"""
        if None in (key.company_id, key.department_id, key.incident_type_id):
            return None

        row = self.source.find_department_default(
            key.company_id, key.department_id, key.incident_type_id
        )
        if not row:
            return None
        return ResolvedSLAConfig(
            response_time_hours=row.response_time_hours,
            resolution_time_hours=row.resolution_time_hours,
            source=SlaConfigSourceKind.DEPARTMENT_DEFAULT,
            config_id=row.id,
        )

    def _try_company_default(self, key: SlaCacheKey, ref: PriorityRef) -> Optional[ResolvedSLAConfig]:
        """Nível 3: tabela padrão da empresa por prioridade"""
        if key.company_id is None or not ref.name:
            return None

        for variant in priority_variants(ref.name):
            row = self.source.find_company_default(key.company_id, variant)
            if row:
                return ResolvedSLAConfig(
                    response_time_hours=row.response_time_hours,
                    resolution_time_hours=row.resolution_time_hours,
                    source=SlaConfigSourceKind.COMPANY_DEFAULT,
                    config_id=row.id,
                )
        return None

    # ==================== Manutenção do cache ====================

    def purge_expired(self) -> int:
        """Remove do cache as entradas com TTL vencido"""
        return self.cache.purge_expired()

    def preload_popular(self, limit: Optional[int] = None) -> int:
        """
        Recarrega no cache as chaves mais acessadas que não estão mais em cache

        Returns:
            Quantidade de configurações recarregadas
        """
        limit = limit or settings.PRELOAD_TOP_N
        loaded = 0
        for key in self.cache.popular_keys(limit):
            if self.cache.is_cached(key):
                continue
            resolved = self._resolve_uncached(key)
            if resolved is not None:
                self.cache.set(key, resolved, popular=True)
                loaded += 1

        if loaded:
            logger.info(f"Pré-carregadas {loaded} configurações de SLA populares")
        return loaded

    def invalidate(self, company_id, department_id, incident_type_id, priority=None):
        self.cache.invalidate(
            self.cache.make_key(company_id, department_id, incident_type_id, priority)
        )

    def clear_cache(self):
        self.cache.clear()

    def cache_stats(self):
        return self.cache.get_stats()
