"""Tests for match resolution and the confirmation workflow."""

from datetime import datetime

import pytest

from models.matching import (
    ConfirmationFailed,
    Confirmed,
    Rejected,
    StoreResult,
    UncertainMatch,
)
from services.confirmations import ConfirmationStoreError, InMemoryMatchConfirmationStore
from services.orchestrator import (
    MatchResolutionOrchestrator,
    StaticClientRoster,
    StaticEventSource,
)


class FailingWriteStore(InMemoryMatchConfirmationStore):
    """Store whose writes always fail."""

    def set(self, title, employee_id, client_name):
        return StoreResult.failure("disk full")


class RaisingWriteStore(InMemoryMatchConfirmationStore):
    def set(self, title, employee_id, client_name):
        raise RuntimeError("connection lost")


class UnreadableStore(InMemoryMatchConfirmationStore):
    def get_all(self, employee_id):
        raise ConfirmationStoreError("database is locked")


@pytest.fixture
def events(make_event):
    return [
        make_event("Ζωή Κουσουλού", day=3),
        make_event("Ζωή Κουσουλού", day=10),
        make_event("Γιάννης", day=4),
        make_event("Γιάννης", day=11),
        make_event("Κλειστό ιατρείο", day=5),
    ]


@pytest.fixture
def make_orchestrator(clients):
    def _make(events, store=None, supervision_config=None):
        return MatchResolutionOrchestrator(
            store=store if store is not None else InMemoryMatchConfirmationStore(),
            roster=StaticClientRoster(clients),
            events=StaticEventSource(events),
            supervision_config=supervision_config,
        )

    return _make


def entry_sessions(report):
    return {e.client_name: e.sessions_count for e in report.entries}


class TestCalculatePayroll:
    def test_confident_and_uncertain_events(self, make_orchestrator, events, employee, period):
        orchestrator = make_orchestrator(events)

        result = orchestrator.calculate_payroll(employee, *period)

        assert result.ok
        assert entry_sessions(result.report) == {"Ζωή Κουσουλού": 2}
        assert [m.event_title for m in result.uncertain_matches] == [
            "Γιάννης",
            "Γιάννης",
            "Κλειστό ιατρείο",
        ]
        assert orchestrator.pending == result.uncertain_matches

    def test_uncertain_match_carries_candidates(self, make_orchestrator, events, employee, period):
        result = make_orchestrator(events).calculate_payroll(employee, *period)

        first = result.uncertain_matches[0]
        assert first.normalized_title == "γιαννης"
        assert first.employee_id == "emp-1"
        assert first.suggested_match == "Γιάννης Δημητρίου"
        assert first.event_start == datetime(2025, 11, 4, 10, 0)
        assert result.uncertain_matches[2].candidates == ()
        assert result.uncertain_matches[2].suggested_match is None

    def test_other_employees_clients_are_not_candidates(
        self, make_orchestrator, make_event, employee, period
    ):
        result = make_orchestrator([make_event("Μαρία Παπαδοπούλου")]).calculate_payroll(
            employee, *period
        )

        assert result.report.entries == ()
        assert result.uncertain_matches[0].candidates == ()

    def test_events_outside_period_and_untitled_are_ignored(
        self, make_orchestrator, make_event, employee, period
    ):
        events = [
            make_event("Κλειστό", start=datetime(2025, 10, 30, 10, 0)),
            make_event("   "),
            make_event("Ζωή Κουσουλού", start=datetime(2025, 12, 2, 10, 0)),
        ]

        result = make_orchestrator(events).calculate_payroll(employee, *period)

        assert result.report.entries == ()
        assert result.uncertain_matches == ()

    def test_stored_decision_overrides_matcher(
        self, make_orchestrator, events, employee, period, store
    ):
        store.set("Γιάννης", "emp-1", "Ζωή Κουσουλού")

        result = make_orchestrator(events, store).calculate_payroll(employee, *period)

        assert entry_sessions(result.report) == {"Ζωή Κουσουλού": 4}
        assert [m.event_title for m in result.uncertain_matches] == ["Κλειστό ιατρείο"]

    def test_rejected_title_is_dropped(self, make_orchestrator, events, employee, period, store):
        store.set("Κλειστό Ιατρείο", "emp-1", "__REJECTED__")

        result = make_orchestrator(events, store).calculate_payroll(employee, *period)

        assert "Κλειστό ιατρείο" not in [m.event_title for m in result.uncertain_matches]
        assert result.report.summary.total_sessions == 2

    def test_stale_decision_falls_back_to_matcher(
        self, make_orchestrator, events, employee, period, store
    ):
        store.set("Ζωή Κουσουλού", "emp-1", "Former Client")

        result = make_orchestrator(events, store).calculate_payroll(employee, *period)

        assert entry_sessions(result.report) == {"Ζωή Κουσουλού": 2}

    def test_supervision_events(
        self, make_orchestrator, make_event, employee, period, supervision_config
    ):
        events = [make_event("Εποπτεία ομάδας", day=6), make_event("Ζωή Κουσουλού")]
        orchestrator = make_orchestrator(events, supervision_config=supervision_config)

        result = orchestrator.calculate_payroll(employee, *period)

        assert [e.client_name for e in result.report.supervision_entries] == ["Εποπτεία"]
        assert result.report.summary.supervision_revenue == 30.0
        assert result.uncertain_matches == ()

    def test_repeated_calculation_is_idempotent(self, make_orchestrator, events, employee, period):
        orchestrator = make_orchestrator(events)

        first = orchestrator.calculate_payroll(employee, *period)
        second = orchestrator.calculate_payroll(employee, *period)

        assert first == second

    def test_store_read_failure_is_reported(self, make_orchestrator, events, employee, period):
        result = make_orchestrator(events, UnreadableStore()).calculate_payroll(employee, *period)

        assert not result.ok
        assert result.report is None
        assert "database is locked" in result.error

    def test_recalculate_without_previous_run(self, make_orchestrator, events):
        result = make_orchestrator(events).recalculate()

        assert not result.ok


class TestConfirmationWorkflow:
    def test_confirm_clears_every_pending_event_with_that_title(
        self, make_orchestrator, events, employee, period
    ):
        orchestrator = make_orchestrator(events)
        result = orchestrator.calculate_payroll(employee, *period)

        outcome = orchestrator.confirm_match(result.uncertain_matches[0], "Γιάννης Δημητρίου")

        assert isinstance(outcome, Confirmed)
        assert outcome.ok
        assert outcome.client_name == "Γιάννης Δημητρίου"
        assert [m.event_title for m in outcome.remaining] == ["Κλειστό ιατρείο"]
        assert orchestrator.pending == outcome.remaining

    def test_confirm_then_recalculate_bills_the_sessions(
        self, make_orchestrator, events, employee, period
    ):
        orchestrator = make_orchestrator(events)
        result = orchestrator.calculate_payroll(employee, *period)
        orchestrator.confirm_match(result.uncertain_matches[0], "Γιάννης Δημητρίου")

        updated = orchestrator.recalculate()

        assert entry_sessions(updated.report) == {"Ζωή Κουσουλού": 2, "Γιάννης Δημητρίου": 2}
        assert updated.report.summary.total_revenue == 131.0
        assert [m.event_title for m in updated.uncertain_matches] == ["Κλειστό ιατρείο"]

    def test_reject_then_recalculate(self, make_orchestrator, events, employee, period, store):
        orchestrator = make_orchestrator(events, store)
        result = orchestrator.calculate_payroll(employee, *period)

        outcome = orchestrator.reject_match(result.uncertain_matches[2])
        updated = orchestrator.recalculate()

        assert isinstance(outcome, Rejected)
        assert [m.event_title for m in outcome.remaining] == ["Γιάννης", "Γιάννης"]
        assert store.get("κλειστο ιατρειο", "emp-1") == "__REJECTED__"
        assert [m.event_title for m in updated.uncertain_matches] == ["Γιάννης", "Γιάννης"]
        assert updated.report.summary.total_sessions == 2

    def test_unknown_client_is_refused(self, make_orchestrator, events, employee, period, store):
        orchestrator = make_orchestrator(events, store)
        result = orchestrator.calculate_payroll(employee, *period)

        outcome = orchestrator.confirm_match(result.uncertain_matches[0], "Μαρία Παπαδοπούλου")

        assert isinstance(outcome, ConfirmationFailed)
        assert "Unknown client" in outcome.reason
        assert store.get_all("emp-1") == {}
        assert len(orchestrator.pending) == 3

    def test_supervision_keyword_can_be_confirmed(
        self, make_orchestrator, make_event, employee, period, supervision_config
    ):
        orchestrator = make_orchestrator(
            [make_event("Ομάδα Τρίτης")], supervision_config=supervision_config
        )
        result = orchestrator.calculate_payroll(employee, *period)

        outcome = orchestrator.confirm_match(result.uncertain_matches[0], "Εποπτεία")
        updated = orchestrator.recalculate()

        assert outcome.ok
        assert updated.report.summary.supervision_sessions == 1

    @pytest.mark.parametrize("store_class", [FailingWriteStore, RaisingWriteStore])
    def test_store_failure_keeps_pending_list(
        self, make_orchestrator, events, employee, period, store_class
    ):
        orchestrator = make_orchestrator(events, store_class())
        result = orchestrator.calculate_payroll(employee, *period)

        confirm = orchestrator.confirm_match(result.uncertain_matches[0], "Γιάννης Δημητρίου")
        reject = orchestrator.reject_match(result.uncertain_matches[2])

        assert isinstance(confirm, ConfirmationFailed)
        assert isinstance(reject, ConfirmationFailed)
        assert not confirm.ok
        assert confirm.remaining == result.uncertain_matches
        assert orchestrator.pending == result.uncertain_matches

    def test_decision_applies_to_a_match_built_outside_a_calculation(
        self, make_orchestrator, events, employee, period, store
    ):
        orchestrator = make_orchestrator(events, store)
        match = UncertainMatch(
            event_id="",
            event_title="ΓΙΆΝΝΗΣ",
            normalized_title="γιαννης",
            employee_id="emp-1",
        )

        orchestrator.confirm_match(match, "Γιάννης Δημητρίου")
        result = orchestrator.calculate_payroll(employee, *period)

        assert entry_sessions(result.report)["Γιάννης Δημητρίου"] == 2

    def test_reset_confirmations(self, make_orchestrator, events, employee, period, store):
        store.set("Γιάννης", "emp-1", "Γιάννης Δημητρίου")
        orchestrator = make_orchestrator(events, store)

        assert orchestrator.reset_confirmations("emp-1").ok
        result = orchestrator.calculate_payroll(employee, *period)

        assert len(result.uncertain_matches) == 3
