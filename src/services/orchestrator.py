"""
Match resolution: ties the matcher, the confirmation store and the payroll
calculator together.

For each calendar event in the period:
- a stored rejection drops the event entirely (not billed, not re-surfaced)
- a stored client name overrides the matcher
- otherwise a sole strong candidate is accepted, anything else becomes an
  UncertainMatch returned to the caller for a human decision

Confirming or rejecting persists the decision; the caller then recalculates.
"""

import threading
from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from loguru import logger

from core.config import REJECTED_MATCH_MARKER
from core.normalize import normalize
from models.events import CalendarEvent
from models.matching import (
    Ambiguous,
    CalculationResult,
    Confident,
    ConfirmationFailed,
    ConfirmationResult,
    Confirmed,
    Rejected,
    StoreResult,
    UncertainMatch,
)
from models.payroll import Client, Employee, SupervisionConfig
from services.confirmations import MatchConfirmationStore, is_rejection
from services.matching import ClientMatcher
from services.payroll import PayrollCalculator, is_event_in_period


# =============================================================================
# COLLABORATORS
# =============================================================================


class ClientRoster(Protocol):
    def clients_for(self, employee_id: str) -> list[Client]: ...


class EventSource(Protocol):
    def events_for(
        self, employee: Employee, start: datetime, end: datetime
    ) -> list[CalendarEvent]: ...


class StaticClientRoster:
    """Roster held in memory (e.g. loaded from a JSON export)."""

    def __init__(self, clients: Sequence[Client]):
        self.clients = list(clients)

    def clients_for(self, employee_id: str) -> list[Client]:
        return [c for c in self.clients if c.employee_id == employee_id]


class StaticEventSource:
    """Events already fetched for one calendar."""

    def __init__(self, events: Sequence[CalendarEvent]):
        self.events = list(events)

    def events_for(self, employee: Employee, start: datetime, end: datetime) -> list[CalendarEvent]:
        return list(self.events)


# =============================================================================
# ORCHESTRATOR
# =============================================================================


class MatchResolutionOrchestrator:
    def __init__(
        self,
        store: MatchConfirmationStore,
        roster: ClientRoster,
        events: EventSource,
        supervision_config: SupervisionConfig | None = None,
        matcher: ClientMatcher | None = None,
        calculator: PayrollCalculator | None = None,
    ):
        self.store = store
        self.roster = roster
        self.events = events
        self.supervision_config = supervision_config
        self.matcher = matcher or ClientMatcher()
        self.calculator = calculator or PayrollCalculator()

        self._lock = threading.Lock()
        self._last_request: tuple[Employee, datetime, datetime] | None = None
        self._pending: tuple[UncertainMatch, ...] = ()

    @property
    def pending(self) -> tuple[UncertainMatch, ...]:
        """Uncertain matches from the latest calculation not yet resolved."""
        with self._lock:
            return self._pending

    @property
    def special_keywords(self) -> tuple[str, ...]:
        return self.supervision_config.keywords if self.supervision_config else ()

    def calculate_payroll(
        self, employee: Employee, start: datetime, end: datetime
    ) -> CalculationResult:
        """Match the period's events and build the report plus pending list."""
        logger.info(f"Calculating payroll for {employee.name} from {start} to {end}")
        try:
            clients = self.roster.clients_for(employee.id)
            events = self.events.events_for(employee, start, end)
            decisions = self.store.get_all(employee.id)
        except Exception as e:
            logger.exception(f"Could not load data for {employee.id}")
            return CalculationResult(error=f"Could not load payroll data: {e}")

        client_names = [c.name for c in clients]
        keywords = self.special_keywords
        known_names = set(client_names) | set(keywords)
        client_events: dict[str, list[CalendarEvent]] = {name: [] for name in known_names}
        uncertain: list[UncertainMatch] = []
        rejected = 0

        for event in events:
            if not is_event_in_period(event, start, end):
                continue
            if not event.title.strip():
                logger.debug(f"Skipping untitled event {event.id}")
                continue

            title_normalized = normalize(event.title)
            decision = decisions.get(title_normalized)

            if is_rejection(decision):
                rejected += 1
                continue
            if decision is not None:
                if decision in known_names:
                    client_events[decision].append(event)
                    continue
                logger.warning(
                    f"Stored match '{title_normalized}' -> '{decision}' refers to an unknown client"
                )

            candidate = self.matcher.match_event(event, client_names, keywords)
            confidence = candidate.confidence
            if isinstance(confidence, Confident):
                client_events[confidence.client_name].append(event)
            else:
                if isinstance(confidence, Ambiguous):
                    logger.debug(f"Ambiguous '{event.title}': {', '.join(confidence.client_names)}")
                uncertain.append(
                    UncertainMatch(
                        event_id=event.id,
                        event_title=event.title,
                        normalized_title=title_normalized,
                        employee_id=employee.id,
                        candidates=candidate.results,
                        event_start=event.start_time,
                    )
                )

        report = self.calculator.calculate(
            employee, clients, client_events, start, end, self.supervision_config
        )
        logger.info(
            f"{report.summary.total_sessions} session(s) billed, "
            f"{len(uncertain)} uncertain, {rejected} rejected"
        )

        with self._lock:
            self._last_request = (employee, start, end)
            self._pending = tuple(uncertain)
        return CalculationResult(report=report, uncertain_matches=tuple(uncertain))

    def recalculate(self) -> CalculationResult:
        """Re-run the most recent calculation against the current decisions."""
        with self._lock:
            last_request = self._last_request
        if last_request is None:
            return CalculationResult(error="No calculation to repeat")
        return self.calculate_payroll(*last_request)

    def confirm_match(self, match: UncertainMatch, client_name: str) -> ConfirmationResult:
        """Bind the event title to `client_name` for this employee."""
        try:
            valid_names = {c.name for c in self.roster.clients_for(match.employee_id)}
        except Exception as e:
            logger.exception(f"Could not load clients for {match.employee_id}")
            return ConfirmationFailed(match.event_title, self.pending, reason=str(e))

        valid_names |= set(self.special_keywords)
        if client_name not in valid_names:
            return ConfirmationFailed(
                match.event_title, self.pending, reason=f"Unknown client '{client_name}'"
            )

        logger.info(f"Confirming match: '{match.event_title}' -> '{client_name}'")
        result = self._persist(match, client_name)
        if not result.ok:
            return ConfirmationFailed(match.event_title, self.pending, reason=result.reason or "")
        return Confirmed(match.event_title, self._resolve(match), client_name=client_name)

    def reject_match(self, match: UncertainMatch) -> ConfirmationResult:
        """Exclude every event with this title from future calculations."""
        logger.info(f"Rejecting match: '{match.event_title}'")
        result = self._persist(match, REJECTED_MATCH_MARKER)
        if not result.ok:
            return ConfirmationFailed(match.event_title, self.pending, reason=result.reason or "")
        return Rejected(match.event_title, self._resolve(match))

    def reset_confirmations(self, employee_id: str) -> StoreResult:
        return self.store.delete_all(employee_id)

    def _persist(self, match: UncertainMatch, value: str) -> StoreResult:
        try:
            result = self.store.set(match.event_title, match.employee_id, value)
        except Exception as e:
            logger.exception(f"Confirmation store failed for '{match.event_title}'")
            return StoreResult.failure(str(e))
        if not result.ok:
            logger.error(f"Decision for '{match.event_title}' was not saved: {result.reason}")
        return result

    def _resolve(self, match: UncertainMatch) -> tuple[UncertainMatch, ...]:
        """Drop every pending match sharing the decided title; only after a successful save."""
        key = normalize(match.event_title)
        with self._lock:
            self._pending = tuple(
                m
                for m in self._pending
                if not (m.normalized_title == key and m.employee_id == match.employee_id)
            )
            return self._pending
