"""
Scheduler de manutenção do cache de configurações de SLA
Remove entradas vencidas e pré-carrega as configurações mais usadas
Usa APScheduler para executar em background
"""
import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .config import settings
from .exceptions import SchedulerError
from .resolver import SLAConfigResolver

logger = logging.getLogger("sla.scheduler")


class SlaCacheScheduler:
    """Gerenciador do job periódico de manutenção do cache de SLA"""

    def __init__(self, resolver: SLAConfigResolver, interval_minutes: Optional[int] = None):
        self.resolver = resolver
        self.interval_minutes = interval_minutes or settings.SCHEDULER_INTERVAL_MINUTES
        self.scheduler: Optional[BackgroundScheduler] = None
        self.is_running = False
        self.job_id = "sla_cache_maintenance"
        self.last_execution: Optional[datetime] = None
        self.last_result: Optional[Dict[str, int]] = None

    def start(self):
        """Inicia o scheduler"""
        if self.is_running:
            raise SchedulerError("Scheduler SLA já está em execução")

        self.scheduler = BackgroundScheduler()
        self.scheduler.add_job(
            func=self._maintenance_job,
            trigger=IntervalTrigger(minutes=self.interval_minutes),
            id=self.job_id,
            name="Manutenção do cache de SLA",
            replace_existing=True,
        )
        self.scheduler.start()
        self.is_running = True
        logger.info(f"Scheduler SLA iniciado (intervalo: {self.interval_minutes}m)")

    def stop(self):
        """Para o scheduler"""
        if not self.is_running or self.scheduler is None:
            raise SchedulerError("Scheduler SLA não está em execução")

        self.scheduler.shutdown(wait=False)
        self.is_running = False
        logger.info("Scheduler SLA parado")

    def run_now(self) -> Dict[str, int]:
        """
        Executa a manutenção imediatamente

        Returns:
            Dict com quantidade de entradas removidas e pré-carregadas
        """
        purged = self.resolver.purge_expired()
        preloaded = self.resolver.preload_popular()
        self.last_execution = datetime.now(timezone.utc)
        self.last_result = {"purged": purged, "preloaded": preloaded}
        logger.info(f"Manutenção do cache de SLA: {purged} removidas, {preloaded} pré-carregadas")
        return self.last_result

    def _maintenance_job(self):
        try:
            self.run_now()
        except Exception as e:
            logger.error(f"Erro na manutenção do cache de SLA: {e}", exc_info=True)

    def get_status(self) -> dict:
        """Retorna status do scheduler"""
        status = {
            "running": self.is_running,
            "job_id": self.job_id,
            "interval_minutes": self.interval_minutes,
            "next_run": None,
            "last_execution": self.last_execution.isoformat() if self.last_execution else None,
            "last_result": self.last_result,
        }
        if self.scheduler is not None and self.is_running:
            job = self.scheduler.get_job(self.job_id)
            if job and job.next_run_time:
                status["next_run"] = job.next_run_time.isoformat()
        return status


# Instância global
_scheduler: Optional[SlaCacheScheduler] = None


def get_scheduler(resolver: Optional[SLAConfigResolver] = None) -> SlaCacheScheduler:
    """Obtém o scheduler global, criando-o na primeira chamada"""
    global _scheduler
    if _scheduler is None:
        if resolver is None:
            raise SchedulerError("Scheduler SLA ainda não foi criado: informe o resolver")
        _scheduler = SlaCacheScheduler(resolver)
    return _scheduler


def start_scheduler(resolver: SLAConfigResolver) -> SlaCacheScheduler:
    """Inicia o scheduler global, se habilitado nas configurações"""
    scheduler = get_scheduler(resolver)
    if not settings.SCHEDULER_ENABLED:
        logger.info("Scheduler SLA desabilitado (SLA_SCHEDULER_ENABLED)")
        return scheduler
    if not scheduler.is_running:
        scheduler.start()
    return scheduler


def reset_scheduler():
    """Descarta o scheduler global, parando-o se estiver rodando"""
    global _scheduler
    if _scheduler is not None and _scheduler.is_running:
        _scheduler.stop()
    _scheduler = None
