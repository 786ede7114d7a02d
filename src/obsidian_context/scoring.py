"""Relevance scoring of a single document against a query."""

from __future__ import annotations

import math
import re
from collections.abc import Sequence

from .corpus import Document
from .dates import DateHint
from .locale_rules import DEFAULT_RULES, LocaleRules

FILENAME_WEIGHT = 0.5
PATH_WEIGHT = 0.3
OCCURRENCE_WEIGHT = 0.1
PRESENCE_WEIGHT = 0.2
EMPTY_QUERY_SCORE = 0.1

DAY_FILENAME_BOOST = 1.5
DAY_SEGMENT_BOOST = 1.0
DAY_BODY_BOOST = 0.3
MONTH_BOOST = 0.8
YEAR_BOOST = 0.5
JOURNAL_BOOST = 0.5


def lexical_score(document: Document, terms: Sequence[str]) -> float:
    """Average per-term match score of *document*; 0.1 when there are no terms."""

    if not terms:
        return EMPTY_QUERY_SCORE

    filename = document.basename.lower()
    path = document.path.lower()
    body = document.text.lower()

    score = 0.0
    for term in terms:
        if term in filename:
            score += FILENAME_WEIGHT
        if term in path:
            score += PATH_WEIGHT
        occurrences = len(re.findall(re.escape(term), document.text, re.IGNORECASE))
        # log damping keeps a repeated word from dominating
        score += OCCURRENCE_WEIGHT * math.log1p(occurrences)
        if term in body:
            score += PRESENCE_WEIGHT

    return score / len(terms)


def date_boost(document: Document, hint: DateHint, rules: LocaleRules = DEFAULT_RULES) -> float:
    """Extra score for documents whose path or body lines up with *hint*."""

    # leading slash lets root-level notes match the "/26.md" style checks
    path = "/" + document.path.lower()
    boost = 0.0

    if hint.day is not None:
        variants = {f"{hint.day:02d}", str(hint.day)}
        if path.endswith(tuple(f"/{day}.md" for day in variants)):
            boost += DAY_FILENAME_BOOST
        segments = [token for day in variants for token in (f"/{day}/", f"-{day}-", f"-{day}.")]
        if any(token in path for token in segments):
            boost += DAY_SEGMENT_BOOST
        if str(hint.day) in document.text:
            boost += DAY_BODY_BOOST

    if hint.month is not None:
        month = f"{hint.month:02d}"
        if f"/{month}/" in path or f"-{month}-" in path:
            boost += MONTH_BOOST

    if hint.year is not None:
        year = str(hint.year)
        if f"/{year}/" in path or f"{year}-" in path:
            boost += YEAR_BOOST

    if any(marker in path for marker in rules.journal_markers):
        boost += JOURNAL_BOOST

    return boost


def score_document(
    document: Document,
    terms: Sequence[str],
    hint: DateHint | None = None,
    rules: LocaleRules = DEFAULT_RULES,
) -> float:
    """Total relevance of *document*: lexical score plus any date boost."""

    score = lexical_score(document, terms)
    if hint is not None:
        score += date_boost(document, hint, rules)
    return score
