"""
Serviço de cache em memória para configurações de SLA
TTL por entrada, contador de acessos para identificar chaves populares
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Hashable, List, NamedTuple, Optional, Union

from .config import settings

logger = logging.getLogger("sla.cache")

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CacheBackend(ABC):
    """Interface abstrata para backends de cache"""

    @abstractmethod
    def get(self, key: Hashable) -> Optional[Any]:
        pass

    @abstractmethod
    def set(self, key: Hashable, value: Any, ttl_seconds: int):
        pass

    @abstractmethod
    def delete(self, key: Hashable):
        pass

    @abstractmethod
    def clear(self):
        pass

    @abstractmethod
    def purge_expired(self) -> int:
        pass


class MemoryCache(CacheBackend):
    """Cache em memória com TTL"""

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or _utcnow
        self._storage: Dict[Hashable, Dict[str, Any]] = {}
        self._access: Dict[Hashable, int] = {}
        self._hits = 0
        self._misses = 0

    def _expired(self, entry: Dict[str, Any], now: datetime) -> bool:
        return entry["expires_at"] <= now

    def get(self, key: Hashable) -> Optional[Any]:
        """Obtém valor do cache se não expirou"""
        entry = self._storage.get(key)
        if entry is None:
            self._misses += 1
            return None

        now = self._clock()
        if self._expired(entry, now):
            self._storage.pop(key, None)
            self._misses += 1
            return None

        self._hits += 1
        entry["last_accessed"] = now
        return entry["value"]

    def set(self, key: Hashable, value: Any, ttl_seconds: int = 900):
        """Armazena valor com TTL (padrão 15 minutos)"""
        now = self._clock()
        self._storage[key] = {
            "value": value,
            "expires_at": now + timedelta(seconds=ttl_seconds),
            "created_at": now,
            "last_accessed": now,
            "ttl_seconds": ttl_seconds,
        }
        logger.debug(f"Cache set: {key} (TTL: {ttl_seconds}s)")

    def is_valid(self, key: Hashable) -> bool:
        """Verifica se a chave está em cache e não expirou (sem contar hit/miss)"""
        entry = self._storage.get(key)
        return entry is not None and not self._expired(entry, self._clock())

    def ttl_of(self, key: Hashable) -> Optional[int]:
        entry = self._storage.get(key)
        return entry["ttl_seconds"] if entry else None

    def delete(self, key: Hashable):
        """Deleta chave do cache"""
        self._storage.pop(key, None)

    def clear(self):
        """Limpa todo o cache e o contador de acessos"""
        self._storage.clear()
        self._access.clear()
        logger.info("Cache limpo completamente")

    def purge_expired(self) -> int:
        """Remove entradas vencidas; retorna quantas foram removidas"""
        now = self._clock()
        expired = [k for k, entry in list(self._storage.items()) if self._expired(entry, now)]
        for key in expired:
            self._storage.pop(key, None)
        return len(expired)

    # ==================== Contador de uso ====================

    def record_access(self, key: Hashable) -> int:
        count = self._access.get(key, 0) + 1
        self._access[key] = count
        return count

    def access_count(self, key: Hashable) -> int:
        return self._access.get(key, 0)

    def top_keys(self, limit: int) -> List[Hashable]:
        """Chaves mais acessadas, da mais para a menos usada"""
        ranked = sorted(list(self._access.items()), key=lambda item: item[1], reverse=True)
        return [key for key, _ in ranked[:limit]]

    def get_stats(self) -> Dict[str, Any]:
        """Retorna estatísticas do cache"""
        total = self._hits + self._misses
        hit_rate = (self._hits / total * 100) if total > 0 else 0

        return {
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(hit_rate, 2),
            "size": len(self._storage),
            "tracked_keys": len(self._access),
        }


class SlaCacheKey(NamedTuple):
    company_id: Optional[int]
    department_id: Optional[int]
    incident_type_id: Optional[int]
    priority: Optional[Union[int, str]]


class SlaConfigCache:
    """Cache das configurações de SLA resolvidas"""

    def __init__(
        self,
        backend: Optional[MemoryCache] = None,
        ttl_minutes: Optional[int] = None,
        popular_ttl_minutes: Optional[int] = None,
        popular_threshold: Optional[int] = None,
    ):
        self.backend = backend or MemoryCache()
        if ttl_minutes is None:
            ttl_minutes = settings.CACHE_TTL_MINUTES
        if popular_ttl_minutes is None:
            popular_ttl_minutes = settings.POPULAR_CACHE_TTL_MINUTES
        if popular_threshold is None:
            popular_threshold = settings.POPULAR_ACCESS_THRESHOLD

        self.ttl_seconds = ttl_minutes * 60
        self.popular_ttl_seconds = popular_ttl_minutes * 60
        self.popular_threshold = popular_threshold

    @staticmethod
    def make_key(company_id, department_id, incident_type_id, priority) -> SlaCacheKey:
        if isinstance(priority, str):
            priority = priority.strip()
        return SlaCacheKey(company_id, department_id, incident_type_id, priority)

    def get(self, key: SlaCacheKey):
        return self.backend.get(key)

    def set(self, key: SlaCacheKey, value, popular: Optional[bool] = None):
        if popular is None:
            popular = self.is_popular(key)
        ttl = self.popular_ttl_seconds if popular else self.ttl_seconds
        self.backend.set(key, value, ttl)

    def is_cached(self, key: SlaCacheKey) -> bool:
        return self.backend.is_valid(key)

    def record_access(self, key: SlaCacheKey) -> int:
        return self.backend.record_access(key)

    def is_popular(self, key: SlaCacheKey) -> bool:
        return self.backend.access_count(key) >= self.popular_threshold

    def popular_keys(self, limit: int) -> List[SlaCacheKey]:
        return self.backend.top_keys(limit)

    def purge_expired(self) -> int:
        removed = self.backend.purge_expired()
        if removed:
            logger.info(f"Cache de SLA: {removed} entradas vencidas removidas")
        return removed

    def invalidate(self, key: SlaCacheKey):
        self.backend.delete(key)

    def clear(self):
        """Invalida todo o cache"""
        self.backend.clear()
        logger.warning("Todo cache de SLA foi invalidado")

    def get_stats(self) -> Dict[str, Any]:
        stats = self.backend.get_stats()
        stats["popular_keys"] = [tuple(k) for k in self.popular_keys(10)]
        return stats
