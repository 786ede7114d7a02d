"""Query term extraction."""

from __future__ import annotations

from .locale_rules import DEFAULT_RULES, LocaleRules

MIN_TERM_LENGTH = 3


def extract_terms(query: str, rules: LocaleRules = DEFAULT_RULES) -> list[str]:
    """Return the lowercase search terms found in *query*.

    Short tokens and stop words are dropped. Order and repeats are kept, so a
    word typed twice weighs twice when scoring.
    """

    return [
        token
        for token in query.lower().split()
        if len(token) >= MIN_TERM_LENGTH and token not in rules.stop_words
    ]
