"""Exceções customizadas do módulo SLA"""


class SlaException(Exception):
    """Exceção base do módulo SLA"""
    pass


class InvalidBusinessHoursError(SlaException):
    """Erro quando horário comercial é inválido"""
    def __init__(self, start_hour: int, end_hour: int, reason: str = None):
        self.start_hour = start_hour
        self.end_hour = end_hour
        super().__init__(
            reason or f"Horário inválido: início ({start_hour}) deve ser menor que fim ({end_hour})"
        )


class SlaConfigurationNotFoundError(SlaException):
    """Erro quando nenhuma configuração de SLA se aplica ao chamado"""
    def __init__(self, company_id, department_id, incident_type_id, priority):
        self.company_id = company_id
        self.department_id = department_id
        self.incident_type_id = incident_type_id
        self.priority = priority
        super().__init__(
            f"Nenhuma configuração de SLA para empresa {company_id}, "
            f"departamento {department_id}, tipo {incident_type_id}, prioridade '{priority}'"
        )


class SchedulerError(SlaException):
    """Erro de uso do scheduler de manutenção do cache"""
    pass
