"""Relevance search over vault notes and assembly of prompt context."""

from __future__ import annotations

import logging
import math
import threading
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date

from .corpus import Document
from .dates import TodayProvider, extract_date_hint
from .excerpts import extract_excerpt
from .locale_rules import DEFAULT_RULES, LocaleRules
from .scoring import score_document
from .terms import extract_terms

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 5
DEFAULT_THRESHOLD = 0.3
CONTEXT_SEPARATOR = "\n\n---\n\n"


class SearchConfigError(ValueError):
    """Raised when search limits are out of range."""


class SearchCancelled(RuntimeError):
    """Raised when a search is cancelled or runs past its deadline."""


@dataclass(frozen=True)
class SearchConfig:
    max_result_count: int = DEFAULT_MAX_RESULTS
    score_threshold: float = DEFAULT_THRESHOLD

    def __post_init__(self) -> None:
        if self.max_result_count < 1:
            raise SearchConfigError("max_result_count must be at least 1")
        if math.isnan(self.score_threshold) or self.score_threshold < 0:
            raise SearchConfigError("score_threshold must be a non-negative number")


@dataclass(frozen=True)
class ScoredResult:
    source_id: str
    excerpt: str
    score: float


def _check_cancelled(cancel: threading.Event | None, deadline: float | None) -> None:
    if cancel is not None and cancel.is_set():
        raise SearchCancelled("Search was cancelled")
    if deadline is not None and time.monotonic() >= deadline:
        raise SearchCancelled("Search deadline exceeded")


def search(
    query: str,
    corpus: Iterable[Document],
    config: SearchConfig,
    *,
    rules: LocaleRules = DEFAULT_RULES,
    today: TodayProvider = date.today,
    cancel: threading.Event | None = None,
    deadline: float | None = None,
) -> list[ScoredResult]:
    """Rank the documents of *corpus* by relevance to *query*.

    Only documents scoring above ``config.score_threshold`` are returned, best
    first, at most ``config.max_result_count`` of them. *deadline* is a
    :func:`time.monotonic` timestamp; it and *cancel* are checked before each
    document.
    """

    terms = extract_terms(query, rules)
    hint = extract_date_hint(query, rules, today)

    results: list[ScoredResult] = []
    scanned = 0
    for document in corpus:
        _check_cancelled(cancel, deadline)
        scanned += 1
        score = score_document(document, terms, hint, rules)
        if score > config.score_threshold:
            results.append(
                ScoredResult(
                    source_id=document.path,
                    excerpt=extract_excerpt(document, terms),
                    score=score,
                )
            )

    results.sort(key=lambda result: result.score, reverse=True)
    logger.debug(
        "Query %r: terms=%s hint=%s, %d of %d notes above %.2f",
        query,
        terms,
        hint,
        len(results),
        scanned,
        config.score_threshold,
    )
    return results[: config.max_result_count]


def format_context(results: Sequence[ScoredResult]) -> str:
    """Render *results* as markdown sections for a model prompt."""

    return CONTEXT_SEPARATOR.join(f"## {r.source_id}\n{r.excerpt}" for r in results)


@dataclass
class NoteSearch:
    """Search engine bound to a configuration, locale and clock."""

    config: SearchConfig = field(default_factory=SearchConfig)
    rules: LocaleRules = DEFAULT_RULES
    today: TodayProvider = date.today

    def update_config(self, config: SearchConfig) -> None:
        self.config = config

    def search(
        self,
        query: str,
        corpus: Iterable[Document],
        *,
        cancel: threading.Event | None = None,
        deadline: float | None = None,
    ) -> list[ScoredResult]:
        return search(
            query,
            corpus,
            self.config,
            rules=self.rules,
            today=self.today,
            cancel=cancel,
            deadline=deadline,
        )

    def format_context(self, results: Sequence[ScoredResult]) -> str:
        return format_context(results)
