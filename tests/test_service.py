"""Testes da camada de negócio de SLA"""
from types import SimpleNamespace

import pytest

from helpdesk.sla.calculator import HOUR
from helpdesk.sla.config import BusinessHoursConfig
from helpdesk.sla.exceptions import SlaConfigurationNotFoundError
from helpdesk.sla.schemas import SlaConfigSourceKind
from helpdesk.sla.service import SlaService

from conftest import FakeClock, at


@pytest.fixture
def service(resolver):
    return SlaService(resolver)


def ticket(**overrides):
    data = {
        "id": 42,
        "created_at": at(0, 9),
        "current_status": "ongoing",
        "company_id": 1,
        "department_id": 10,
        "incident_type_id": 5,
        "priority": "Alta",
    }
    data.update(overrides)
    return data


HISTORY = [{"changeType": "status", "oldStatus": "new", "newStatus": "ongoing", "createdAt": at(0, 10)}]


class TestEvaluateTicket:
    def test_response_and_resolution(self, service):
        report = service.evaluate_ticket(ticket(first_response_at=at(0, 10)), HISTORY, now=at(0, 13))

        assert report.ticket_id == 42
        assert report.config.source is SlaConfigSourceKind.SPECIFIC
        assert report.response.time_elapsed == HOUR
        assert report.response.percent_consumed == 50
        assert report.resolution.time_elapsed == 4 * HOUR
        assert report.resolution.percent_consumed == 50
        assert report.resolution.due_date == at(0, 17)

    def test_response_without_first_response_keeps_running(self, service):
        report = service.evaluate_ticket(ticket(), HISTORY, now=at(0, 13))

        assert report.response.is_breached is True
        assert report.response.time_elapsed == 4 * HOUR

    def test_no_sla_returns_none(self, service):
        assert service.evaluate_ticket(ticket(company_id=2), HISTORY, now=at(0, 13)) is None

    def test_no_sla_strict_raises(self, service):
        with pytest.raises(SlaConfigurationNotFoundError) as exc:
            service.evaluate_ticket(ticket(company_id=2), HISTORY, now=at(0, 13), strict=True)
        assert exc.value.company_id == 2

    def test_accepts_orm_like_objects(self, service):
        report = service.evaluate_ticket(SimpleNamespace(**ticket(resolved_at=None, first_response_at=None)), [], now=at(0, 11))
        assert report.resolution.time_elapsed == 2 * HOUR

    def test_uses_injected_clock(self, resolver):
        service = SlaService(resolver, clock=FakeClock(at(0, 12)))
        report = service.evaluate_ticket(ticket(), HISTORY)
        assert report.resolution.time_elapsed == 3 * HOUR


class TestEvaluate:
    def test_paused_ticket(self, service):
        history = HISTORY + [
            {"changeType": "status", "newStatus": "waiting_customer", "createdAt": at(0, 11)},
        ]
        result = service.evaluate(ticket(current_status="waiting_customer"), history, 8, now=at(0, 16))

        assert result.is_paused is True
        assert result.time_elapsed == 2 * HOUR

    def test_custom_business_hours(self, resolver):
        service = SlaService(resolver, business_hours=BusinessHoursConfig(start_hour=9, end_hour=12))
        result = service.evaluate(ticket(), HISTORY, 6, now=at(1, 10))

        assert result.time_elapsed == 4 * HOUR
        assert result.due_date == at(1, 12)

    def test_unknown_milestone(self, service):
        with pytest.raises(ValueError):
            service.evaluate(ticket(), HISTORY, 8, now=at(0, 12), milestone="closure")
