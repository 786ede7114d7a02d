"""Extraction of calendar hints ("yesterday", "26th of March 2025") from queries."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, timedelta

from .locale_rules import DEFAULT_RULES, LocaleRules

TodayProvider = Callable[[], date]


@dataclass(frozen=True)
class DateHint:
    """A possibly partial calendar date parsed out of a query."""

    day: int | None = None
    month: int | None = None
    year: int | None = None

    @classmethod
    def from_date(cls, value: date) -> DateHint:
        return cls(day=value.day, month=value.month, year=value.year)


def _valid_day(raw: str) -> int | None:
    value = int(raw)
    return value if 1 <= value <= 31 else None


def _find_relative(query: str, rules: LocaleRules, today: TodayProvider) -> DateHint | None:
    for phrase, offset in rules.relative_days:
        if phrase in query:
            return DateHint.from_date(today() + timedelta(days=offset))
    return None


def _find_day(query: str, rules: LocaleRules) -> int | None:
    for pattern in rules.day_patterns:
        match = pattern.search(query)
        if match:
            day = _valid_day(match.group(1))
            if day is not None:
                return day

    for match in rules.fallback_day_pattern.finditer(query):
        day = _valid_day(match.group(1))
        if day is not None:
            return day
    return None


def _month_named(stem: str, query: str, rules: LocaleRules) -> bool:
    word = re.escape(stem)
    if stem in rules.stop_words:
        # a stem that is also a common word ("may") only counts next to a number
        pattern = rf"\d\w*(?:\s+of)?\s+{word}\b|\b{word}\s+\d"
    else:
        pattern = rf"\b{word}"
    return re.search(pattern, query) is not None


def _find_month(query: str, rules: LocaleRules) -> int | None:
    for number, stems in enumerate(rules.month_stems, start=1):
        if any(_month_named(stem, query, rules) for stem in stems):
            return number
    return None


def _find_year(query: str, rules: LocaleRules) -> int | None:
    match = rules.year_pattern.search(query)
    return int(match.group(1)) if match else None


def extract_date_hint(
    query: str,
    rules: LocaleRules = DEFAULT_RULES,
    today: TodayProvider = date.today,
) -> DateHint | None:
    """Parse a :class:`DateHint` from *query*, or ``None`` if it names no date.

    Relative words resolve against *today* and short-circuit everything else.
    Otherwise day, month and year are looked up independently and any subset
    of them is returned.
    """

    lowered = query.lower()

    relative = _find_relative(lowered, rules, today)
    if relative is not None:
        return relative

    day = _find_day(lowered, rules)
    month = _find_month(lowered, rules)
    year = _find_year(lowered, rules)
    if day is None and month is None and year is None:
        return None
    return DateHint(day=day, month=month, year=year)
