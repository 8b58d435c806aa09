"""Testes da reconstrução de períodos de status"""
from types import SimpleNamespace

from helpdesk.sla.periods import StatusPeriod, reconstruct_status_periods, status_changes

from conftest import at


def change(new_status, when, old_status=None, change_type="status"):
    return {"changeType": change_type, "oldStatus": old_status, "newStatus": new_status, "createdAt": when}


class TestStatusChanges:
    def test_filters_other_change_types_and_sorts(self):
        history = [
            change("closed", at(0, 12)),
            change(None, at(0, 10), change_type="priority"),
            change("ongoing", at(0, 9)),
        ]
        result = status_changes(history)
        assert [c.new_status for c in result] == ["ongoing", "closed"]

    def test_accepts_snake_case_and_objects(self):
        history = [
            {"change_type": "status", "new_status": "ongoing", "created_at": at(0, 9)},
            SimpleNamespace(change_type="status", old_status="ongoing", new_status="closed", created_at=at(0, 11)),
        ]
        assert [c.new_status for c in status_changes(history)] == ["ongoing", "closed"]

    def test_rows_without_change_type_are_skipped(self):
        history = [
            {"newStatus": "waiting_customer", "createdAt": at(0, 10)},
            change("ongoing", at(0, 11)),
        ]
        assert [c.new_status for c in status_changes(history)] == ["ongoing"]


class TestReconstructStatusPeriods:
    def test_no_history_uses_initial_status(self):
        periods = reconstruct_status_periods(at(0, 9), "ongoing", [], now=at(0, 12))
        assert periods == [StatusPeriod("new", at(0, 9), at(0, 12))]

    def test_no_history_paused_ticket_counts_as_active(self):
        periods = reconstruct_status_periods(at(0, 9), "waiting_customer", [], now=at(0, 12))
        assert periods == [StatusPeriod("new", at(0, 9), at(0, 12))]

    def test_contiguous_periods(self):
        history = [
            change("ongoing", at(0, 10)),
            change("closed", at(0, 11)),
            change("reopened", at(0, 13)),
        ]
        periods = reconstruct_status_periods(at(0, 9), "reopened", history, now=at(0, 14))
        assert [(p.status, p.start_time.hour, p.end_time.hour) for p in periods] == [
            ("new", 9, 10),
            ("ongoing", 10, 11),
            ("closed", 11, 13),
            ("reopened", 13, 14),
        ]
        for previous, current in zip(periods, periods[1:]):
            assert previous.end_time == current.start_time

    def test_unsorted_history_is_sorted(self):
        history = [change("closed", at(0, 11)), change("ongoing", at(0, 10))]
        periods = reconstruct_status_periods(at(0, 9), "ongoing", history, now=at(0, 12))
        assert [p.status for p in periods] == ["new", "ongoing", "closed"]

    def test_status_labels_are_normalized(self):
        history = [change("Aguardando Cliente", at(0, 10))]
        periods = reconstruct_status_periods(at(0, 9), "Aguardando Cliente", history, now=at(0, 12))
        assert periods[-1].status == "waiting_customer"

    def test_finished_ticket_ends_at_resolved_at(self):
        history = [change("resolved", at(0, 11))]
        periods = reconstruct_status_periods(
            at(0, 9), "resolved", history, now=at(3, 10), resolved_at=at(0, 12)
        )
        assert periods[-1] == StatusPeriod("resolved", at(0, 11), at(0, 12))

    def test_finished_ticket_without_resolved_at_ends_at_last_change(self):
        history = [change("ongoing", at(0, 10)), change("closed", at(0, 11))]
        periods = reconstruct_status_periods(at(0, 9), "closed", history, now=at(3, 10))
        assert periods[-1].end_time == at(0, 11)
        assert periods[-1].status == "ongoing"

    def test_event_before_creation_is_clamped(self):
        history = [change("ongoing", at(0, 8))]
        periods = reconstruct_status_periods(at(0, 9), "ongoing", history, now=at(0, 10))
        assert periods == [StatusPeriod("ongoing", at(0, 9), at(0, 10))]

    def test_now_equal_to_creation_gives_no_periods(self):
        assert reconstruct_status_periods(at(0, 9), "new", [], now=at(0, 9)) == []

    def test_duration(self):
        assert StatusPeriod("new", at(0, 9), at(0, 11)).duration.total_seconds() == 7200
