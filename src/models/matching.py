"""
Data models for event-to-client matching and the confirmation workflow.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import ClassVar, Union

from models.events import CalendarEvent
from models.payroll import PayrollReport


class MatchStrategy(str, Enum):
    """Rule that produced a candidate, in evaluation order."""

    SPECIAL_KEYWORD = "special_keyword"
    FULL_NAME = "full_name"
    SINGLE_NAME = "single_name"
    REVERSED_NAME = "reversed_name"
    SURNAME = "surname"
    FIRST_NAME = "first_name"
    DASH_SEGMENT = "dash_segment"


# A sole candidate from one of these is accepted without asking
STRONG_STRATEGIES = frozenset(
    {
        MatchStrategy.SPECIAL_KEYWORD,
        MatchStrategy.FULL_NAME,
        MatchStrategy.REVERSED_NAME,
        MatchStrategy.DASH_SEGMENT,
    }
)


@dataclass(frozen=True)
class MatchResult:
    """One candidate client for an event title."""

    client_name: str
    strategy: MatchStrategy
    matched_text: str

    @property
    def is_strong(self) -> bool:
        return self.strategy in STRONG_STRATEGIES


# =============================================================================
# CONFIDENCE VARIANTS
# =============================================================================


@dataclass(frozen=True)
class Confident:
    client_name: str


@dataclass(frozen=True)
class Ambiguous:
    client_names: tuple[str, ...]


@dataclass(frozen=True)
class Unmatched:
    pass


MatchConfidence = Union[Confident, Ambiguous, Unmatched]


def classify(results: tuple[MatchResult, ...] | list[MatchResult]) -> MatchConfidence:
    """
    Derive the confidence tier from matcher output.

    Confident only when there is exactly one candidate and it came from a
    strong strategy. A single weak candidate (first name only, surname only,
    single-word client name) still needs a human to confirm it.
    """
    if not results:
        return Unmatched()
    names = tuple(dict.fromkeys(r.client_name for r in results))
    if len(names) == 1 and results[0].is_strong:
        return Confident(names[0])
    return Ambiguous(names)


@dataclass(frozen=True)
class MatchCandidate:
    """An event together with its ranked candidate clients."""

    event: CalendarEvent
    results: tuple[MatchResult, ...]

    @property
    def confidence(self) -> MatchConfidence:
        return classify(self.results)

    @property
    def client_names(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(r.client_name for r in self.results))


@dataclass(frozen=True)
class UncertainMatch:
    """Event whose client could not be resolved automatically."""

    event_id: str
    event_title: str
    normalized_title: str
    employee_id: str
    candidates: tuple[MatchResult, ...] = ()
    event_start: datetime | None = None

    @property
    def suggested_match(self) -> str | None:
        return self.candidates[0].client_name if self.candidates else None

    @property
    def candidate_names(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(c.client_name for c in self.candidates))


@dataclass(frozen=True)
class Confirmation:
    """A stored human decision for a (normalized title, employee) pair."""

    normalized_title: str
    employee_id: str
    client_name: str
    created_at: datetime


# =============================================================================
# RESULT VALUES
# =============================================================================


@dataclass(frozen=True)
class StoreResult:
    ok: bool
    reason: str | None = None

    @classmethod
    def success(cls) -> "StoreResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, reason: str) -> "StoreResult":
        return cls(ok=False, reason=reason)


@dataclass(frozen=True)
class ConfirmationResult:
    """Outcome of confirm/reject; `remaining` is the still-pending list."""

    ok: ClassVar[bool] = True

    event_title: str
    remaining: tuple[UncertainMatch, ...] = ()


@dataclass(frozen=True)
class Confirmed(ConfirmationResult):
    client_name: str = ""


@dataclass(frozen=True)
class Rejected(ConfirmationResult):
    pass


@dataclass(frozen=True)
class ConfirmationFailed(ConfirmationResult):
    ok: ClassVar[bool] = False

    reason: str = ""


@dataclass(frozen=True)
class CalculationResult:
    report: PayrollReport | None = None
    uncertain_matches: tuple[UncertainMatch, ...] = field(default_factory=tuple)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
