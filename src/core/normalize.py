"""
Name normalization for accent- and case-insensitive comparison.

Handles Greek tonos/dialytika as well as Latin diacritics, so that
"ΒΑΣΙΛΙΚΗ ΣΤΑΙΚΟΥΡΑ" and "Βασιλική Σταικούρα Μετρητά" compare equal on
their first two words.
"""

import re
import unicodedata
from functools import lru_cache

from core.config import DEFAULT_MATCH_WORDS, NORMALIZE_CACHE_SIZE

_WHITESPACE = re.compile(r"\s+")

# Explicit table for Greek vowels; lowercase() already folds the capitals
_GREEK_ACCENTS = str.maketrans(
    {
        "ά": "α",
        "έ": "ε",
        "ή": "η",
        "ί": "ι",
        "ϊ": "ι",
        "ΐ": "ι",
        "ό": "ο",
        "ύ": "υ",
        "ϋ": "υ",
        "ΰ": "υ",
        "ώ": "ω",
    }
)


def _remove_accents(text: str) -> str:
    text = text.translate(_GREEK_ACCENTS)
    # Latin diacritics (María -> maria): decompose and drop combining marks
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return unicodedata.normalize("NFC", stripped)


@lru_cache(maxsize=NORMALIZE_CACHE_SIZE)
def normalize(text: str) -> str:
    """
    Normalize a full title: lowercase, strip accents, trim.

    Example: "ΒΑΣΙΛΙΚΗ ΣΤΑΙΚΟΥΡΑ Μετρητά" -> "βασιλικη σταικουρα μετρητα"
    """
    return _remove_accents(text.strip().lower()).strip()


@lru_cache(maxsize=NORMALIZE_CACHE_SIZE)
def normalize_for_matching(text: str, max_words: int = DEFAULT_MATCH_WORDS) -> str:
    """
    Normalize and keep only the first `max_words` whitespace-separated words.

    Example: "Μαρία Παπαδοπούλου Online" -> "μαρια παπαδοπουλου"
    """
    words = _WHITESPACE.split(normalize(text))
    return " ".join(w for w in words[:max_words] if w)


def names_match(name1: str, name2: str, max_words: int = DEFAULT_MATCH_WORDS) -> bool:
    """Check if two names match ignoring case, accents and trailing extra words."""
    return normalize_for_matching(name1, max_words) == normalize_for_matching(name2, max_words)


def starts_with(name: str, prefix: str) -> bool:
    """Accent/case-insensitive prefix test, used for roster search."""
    return " ".join(_WHITESPACE.split(normalize(name))).startswith(normalize(prefix))


def extract_first_words(name: str, max_words: int = DEFAULT_MATCH_WORDS) -> str:
    """First N words of a name with original casing (for display)."""
    return " ".join(name.split()[:max_words])


def clear_cache() -> None:
    normalize.cache_clear()
    normalize_for_matching.cache_clear()
