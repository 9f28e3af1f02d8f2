"""
Client name matching for calendar event titles.

Strategies, evaluated per client in this order:
1. Special keyword (e.g. supervision) anywhere in the title - pre-empts everything
2. Full name (first two words of the client name) as a substring
3. Single-word client name as a substring
4. Reversed name ("Surname Firstname")
5. Surname as a whole word (longer than 3 chars)
6. First name as a whole word (longer than 3 chars)
7. Any part of a dash-separated name ("Latin Name - Greek Name")

All comparisons are case- and accent-insensitive. Every client satisfying a
rule is returned; ambiguity is left to the caller.
"""

import re
from collections.abc import Iterable, Sequence

from loguru import logger

from core.config import DEFAULT_MATCH_WORDS, MIN_PARTIAL_NAME_LENGTH
from core.normalize import normalize, normalize_for_matching
from models.events import CalendarEvent
from models.matching import MatchCandidate, MatchResult, MatchStrategy


def contains_word(text: str, word: str) -> bool:
    """Whole-word containment, tolerant of punctuation around the word."""
    return re.search(rf"(?<!\w){re.escape(word)}(?!\w)", text) is not None


class ClientMatcher:
    """Stateless matcher; safe to share across threads."""

    def __init__(self, max_words: int = DEFAULT_MATCH_WORDS):
        self.max_words = max_words

    def find_matches_with_strategy(
        self,
        title: str,
        client_names: Iterable[str],
        special_keywords: Sequence[str] = (),
    ) -> list[MatchResult]:
        """Return every candidate for `title` with the strategy that found it."""
        if not title or not title.strip():
            return []

        title_normalized = normalize(title)
        logger.debug(f"Matching '{title}' -> '{title_normalized}'")

        for keyword in special_keywords:
            keyword_normalized = normalize(keyword)
            if keyword_normalized and keyword_normalized in title_normalized:
                return [MatchResult(keyword, MatchStrategy.SPECIAL_KEYWORD, keyword)]

        keyword_set = {normalize(k) for k in special_keywords}
        matches: list[MatchResult] = []
        seen: set[str] = set()

        for client_name in client_names:
            if not client_name or not client_name.strip() or client_name in seen:
                continue
            if normalize(client_name) in keyword_set:
                continue
            result = self._match_client(title_normalized, client_name)
            if result is not None:
                seen.add(client_name)
                matches.append(result)

        return matches

    def find_matches(
        self,
        title: str,
        client_names: Iterable[str],
        special_keywords: Sequence[str] = (),
    ) -> list[str]:
        """Ordered, de-duplicated names of all matching clients (or the keyword)."""
        results = self.find_matches_with_strategy(title, client_names, special_keywords)
        return [r.client_name for r in results]

    def match_event(
        self,
        event: CalendarEvent,
        client_names: Iterable[str],
        special_keywords: Sequence[str] = (),
    ) -> MatchCandidate:
        results = self.find_matches_with_strategy(event.title, client_names, special_keywords)
        return MatchCandidate(event=event, results=tuple(results))

    def _match_client(self, title: str, client_name: str) -> MatchResult | None:
        client_normalized = normalize_for_matching(client_name, self.max_words)
        parts = client_normalized.split()
        if not parts:
            return None

        if client_normalized in title:
            return MatchResult(client_name, MatchStrategy.FULL_NAME, client_normalized)

        if len(parts) < 2:
            if parts[0] in title:
                return MatchResult(client_name, MatchStrategy.SINGLE_NAME, parts[0])
            return None

        first_name, surname = parts[0], parts[-1]

        reversed_name = f"{surname} {first_name}"
        if reversed_name in title:
            return MatchResult(client_name, MatchStrategy.REVERSED_NAME, reversed_name)

        if len(surname) > MIN_PARTIAL_NAME_LENGTH and contains_word(title, surname):
            return MatchResult(client_name, MatchStrategy.SURNAME, surname)

        if len(first_name) > MIN_PARTIAL_NAME_LENGTH and contains_word(title, first_name):
            return MatchResult(client_name, MatchStrategy.FIRST_NAME, first_name)

        if "-" in client_name:
            for segment in client_name.split("-"):
                segment_normalized = normalize_for_matching(segment, self.max_words)
                if segment_normalized and segment_normalized in title:
                    return MatchResult(client_name, MatchStrategy.DASH_SEGMENT, segment_normalized)

        return None
