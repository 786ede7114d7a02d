from obsidian_context.locale_rules import STOP_WORDS
from obsidian_context.terms import extract_terms


def test_extract_terms_drops_stop_words_and_short_tokens():
    assert extract_terms("What is the budget for the Q3 trip") == ["budget", "trip"]


def test_extract_terms_lowercases():
    assert extract_terms("THE Quarterly BUDGET") == ["quarterly", "budget"]


def test_extract_terms_keeps_order_and_repeats():
    assert extract_terms("budget plan budget") == ["budget", "plan", "budget"]


def test_extract_terms_russian_query():
    assert extract_terms("что было вчера на встрече") == ["встрече"]


def test_extract_terms_empty_query():
    assert extract_terms("") == []
    assert extract_terms("   \n\t ") == []


def test_stop_words_never_returned_regardless_of_case():
    for word in sorted(STOP_WORDS):
        assert extract_terms(word.upper()) == []
        assert extract_terms(word.title()) == []


def test_extract_terms_is_deterministic():
    query = "Budget review with Anna about the offsite"
    assert extract_terms(query) == extract_terms(query)
