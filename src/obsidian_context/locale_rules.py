"""Locale-specific word lists and date grammar used by the search engine."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml


class LocaleRulesError(ValueError):
    """Raised when a locale rules file is invalid."""


@dataclass(frozen=True)
class LocaleRules:
    """Pattern sets the engine consults for one (possibly bilingual) locale.

    ``relative_days`` maps a phrase to a day offset from today and is checked
    in order, so longer phrases that contain shorter ones must come first.
    ``day_patterns`` are tried in order; each must capture the day number in
    group 1. ``month_stems`` holds exactly twelve groups, January first.
    """

    stop_words: frozenset[str]
    relative_days: tuple[tuple[str, int], ...]
    day_patterns: tuple[re.Pattern[str], ...]
    fallback_day_pattern: re.Pattern[str]
    month_stems: tuple[tuple[str, ...], ...]
    year_pattern: re.Pattern[str]
    journal_markers: tuple[str, ...]


STOP_WORDS = frozenset(
    {
        # English function words
        "a", "an", "the", "is", "are", "was", "were", "be", "been",
        "being", "have", "has", "had", "do", "does", "did", "will",
        "would", "could", "should", "may", "might", "must", "shall",
        "can", "to", "of", "in", "for", "on", "with", "at", "by",
        "from", "as", "into", "through", "during", "before", "after",
        "above", "below", "between", "under", "again", "further",
        "then", "once", "here", "there", "when", "where", "why", "how",
        "all", "each", "few", "more", "most", "other", "some", "such",
        "no", "nor", "not", "only", "own", "same", "so", "than", "too",
        "very", "just", "and", "but", "if", "or", "because", "until",
        "while", "this", "that", "these", "those", "what", "which",
        "who", "whom", "you", "your", "about", "any", "tell",
        # date question scaffolding
        "date", "day", "days", "happened", "happen", "today", "yesterday",
        # Russian function words and pronouns
        "я", "ты", "он", "она", "мы", "вы", "они", "это", "что", "как",
        "где", "когда", "почему", "и", "или", "но", "а", "в", "на", "с",
        "к", "у", "о", "по", "за", "из", "было", "был", "была", "были",
        "мне", "меня", "мой", "моя", "мои", "про", "для", "ещё", "еще",
        "число", "числа", "день", "дня", "какой", "какая", "какие",
        "происходило", "случилось", "сегодня", "вчера", "позавчера",
    }
)

RELATIVE_DAYS: tuple[tuple[str, int], ...] = (
    ("day before yesterday", -2),
    ("позавчера", -2),
    ("yesterday", -1),
    ("вчера", -1),
    ("today", 0),
    ("сегодня", 0),
)

DAY_PATTERNS: tuple[str, ...] = (
    r"\b(\d{1,2})(?:st|nd|rd|th)\b",
    r"\bthe (\d{1,2})\b",
    r"\b(\d{1,2})-?(?:го|ое|е)\b",
    r"\b(\d{1,2}) числа\b",
    r"\b(?:за|от|на|с) (\d{1,2})\b",
)

FALLBACK_DAY_PATTERN = r"\b(\d{1,2})\b"

MONTH_STEMS: tuple[tuple[str, ...], ...] = (
    ("january", "январ"),
    ("february", "феврал"),
    ("march", "март"),
    ("april", "апрел"),
    ("may", "мая", "май"),
    ("june", "июн"),
    ("july", "июл"),
    ("august", "август"),
    ("september", "сентябр"),
    ("october", "октябр"),
    ("november", "ноябр"),
    ("december", "декабр"),
)

YEAR_PATTERN = r"\b(20\d{2})\b"

JOURNAL_MARKERS: tuple[str, ...] = ("daily/", "journal/", "дневник/", "ежедневник/")


def _compile(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        raise LocaleRulesError(f"Invalid pattern {pattern!r}: {exc}") from exc


def build_rules(
    *,
    stop_words: Iterable[str],
    relative_days: Iterable[tuple[str, int]],
    day_patterns: Iterable[str],
    fallback_day_pattern: str,
    month_stems: Iterable[Iterable[str]],
    year_pattern: str,
    journal_markers: Iterable[str],
) -> LocaleRules:
    """Build validated :class:`LocaleRules` from plain strings."""

    stems = tuple(tuple(stem.lower() for stem in group) for group in month_stems)
    if len(stems) != 12:
        raise LocaleRulesError(f"Expected 12 month stem groups, got {len(stems)}")
    if any(not group for group in stems):
        raise LocaleRulesError("Every month needs at least one stem")

    return LocaleRules(
        stop_words=frozenset(word.lower() for word in stop_words),
        relative_days=tuple((phrase.lower(), int(offset)) for phrase, offset in relative_days),
        day_patterns=tuple(_compile(pattern) for pattern in day_patterns),
        fallback_day_pattern=_compile(fallback_day_pattern),
        month_stems=stems,
        year_pattern=_compile(year_pattern),
        journal_markers=tuple(marker.lower() for marker in journal_markers),
    )


DEFAULT_RULES = build_rules(
    stop_words=STOP_WORDS,
    relative_days=RELATIVE_DAYS,
    day_patterns=DAY_PATTERNS,
    fallback_day_pattern=FALLBACK_DAY_PATTERN,
    month_stems=MONTH_STEMS,
    year_pattern=YEAR_PATTERN,
    journal_markers=JOURNAL_MARKERS,
)


def _as_list(data: Mapping[str, Any], key: str) -> list[Any]:
    value = data[key]
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise LocaleRulesError(f"'{key}' must be a list")
    return list(value)


def rules_from_mapping(data: Mapping[str, Any], base: LocaleRules = DEFAULT_RULES) -> LocaleRules:
    """Override the fields of *base* present in *data*."""

    overrides: dict[str, Any] = {}

    if "stop_words" in data:
        overrides["stop_words"] = frozenset(str(w).lower() for w in _as_list(data, "stop_words"))
    if "relative_days" in data:
        raw = data["relative_days"]
        if not isinstance(raw, Mapping):
            raise LocaleRulesError("'relative_days' must map phrases to day offsets")
        # longest phrase first so "day before yesterday" wins over "yesterday"
        ordered = sorted(raw.items(), key=lambda item: len(str(item[0])), reverse=True)
        overrides["relative_days"] = tuple((str(k).lower(), int(v)) for k, v in ordered)
    if "day_patterns" in data:
        overrides["day_patterns"] = tuple(_compile(str(p)) for p in _as_list(data, "day_patterns"))
    if "fallback_day_pattern" in data:
        overrides["fallback_day_pattern"] = _compile(str(data["fallback_day_pattern"]))
    if "month_stems" in data:
        groups = []
        for group in _as_list(data, "month_stems"):
            if isinstance(group, str):
                group = [group]
            groups.append(tuple(str(stem).lower() for stem in group))
        if len(groups) != 12 or any(not group for group in groups):
            raise LocaleRulesError("'month_stems' must hold 12 non-empty groups")
        overrides["month_stems"] = tuple(groups)
    if "year_pattern" in data:
        overrides["year_pattern"] = _compile(str(data["year_pattern"]))
    if "journal_markers" in data:
        overrides["journal_markers"] = tuple(
            str(m).lower() for m in _as_list(data, "journal_markers")
        )

    return replace(base, **overrides)


def load_locale_rules(path: Path) -> LocaleRules:
    """Load locale rules from the YAML file at *path*.

    Keys left out of the file keep their default English/Russian values.
    """

    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise LocaleRulesError(f"Could not parse {path}: {exc}") from exc
    if not isinstance(loaded, Mapping):
        raise LocaleRulesError(f"{path} must contain a mapping at the top level")
    return rules_from_mapping(loaded)
