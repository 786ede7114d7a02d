import math

import pytest

from obsidian_context.corpus import Document
from obsidian_context.dates import DateHint
from obsidian_context.scoring import date_boost, lexical_score, score_document


def _doc(path: str, text: str = "") -> Document:
    basename = path.rsplit("/", 1)[-1].removesuffix(".md")
    return Document(path=path, basename=basename, text=text)


@pytest.mark.parametrize(
    "document",
    [
        _doc("notes/a.md"),
        _doc("budget.md", "budget budget"),
        _doc("daily/2025/03/26.md", "26"),
    ],
)
def test_empty_terms_score_fallback(document):
    assert score_document(document, [], None) == 0.1


def test_filename_match_scores_higher():
    text = "We reviewed the budget."
    with_name = _doc("projects/budget.md", text)
    without_name = _doc("projects/review.md", text)
    assert score_document(with_name, ["budget"]) > score_document(without_name, ["budget"])


def test_body_score_is_case_insensitive_and_logarithmic():
    document = _doc("notes/meeting.md", "Budget first, then the budget again.")
    assert lexical_score(document, ["budget"]) == pytest.approx(0.1 * math.log(3) + 0.2)


def test_path_match_counts():
    document = _doc("budget/q3.md", "nothing relevant")
    assert lexical_score(document, ["budget"]) == pytest.approx(0.3)


def test_score_is_mean_over_terms():
    document = _doc("budget.md", "")
    assert lexical_score(document, ["budget", "travel"]) == pytest.approx(0.8 / 2)


def test_terms_with_regex_characters():
    document = _doc("notes/lang.md", "c++ and more c++")
    assert lexical_score(document, ["c++"]) == pytest.approx(0.1 * math.log(3) + 0.2)


def test_occurrences_grow_sublinearly():
    scores = {
        count: score_document(_doc("notes/x.md", "budget " * count), ["budget"])
        for count in (1, 10, 100)
    }
    assert scores[1] < scores[10] < scores[100]
    assert (scores[10] - scores[1]) / 9 > (scores[100] - scores[10]) / 90


def test_daily_note_matching_hint_scores_higher():
    hint = DateHint(day=26, month=3, year=2025)
    daily = _doc("journal-vault/daily/2025/03/26.md", "Met Anna.")
    other = _doc("notes/misc/meeting.md", "Met Anna.")
    assert score_document(daily, [], hint) > score_document(other, [], hint)
    assert date_boost(daily, hint) == pytest.approx(1.5 + 0.8 + 0.5 + 0.5)
    assert date_boost(other, hint) == 0


def test_hyphenated_date_filename():
    hint = DateHint(day=26, month=3, year=2025)
    document = _doc("journal/2025-03-26.md")
    assert date_boost(document, hint) == pytest.approx(1.0 + 0.8 + 0.5 + 0.5)


def test_unpadded_day_filename_at_vault_root():
    assert date_boost(_doc("6.md"), DateHint(day=6)) == pytest.approx(1.5)


def test_day_in_body():
    assert date_boost(_doc("notes/a.md", "Due on the 26th"), DateHint(day=26)) == pytest.approx(0.3)


def test_month_segment_only():
    assert date_boost(_doc("archive/2024/03/plan.md"), DateHint(month=3)) == pytest.approx(0.8)


def test_journal_marker_applies_with_any_hint():
    assert date_boost(_doc("Daily/recipes.md"), DateHint(year=2030)) == pytest.approx(0.5)


def test_no_boost_without_hint():
    document = _doc("daily/2025/03/26.md")
    assert score_document(document, ["budget"], None) == 0
