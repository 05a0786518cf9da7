"""
Pytest configuration and shared fixtures for stylocompare tests.

This module provides shared test fixtures, utilities, and configuration
for the stylocompare test suite. The synthetic corpus is small enough
that expected counts can be worked out by hand:

    Austen/emma      17 tokens, chapters 1-2
    Dante/inferno    10 tokens, chapter 1
    Melville/moby    17 tokens, chapters 1-2

with the ``stop_words`` fixture applied.
"""

import pytest
import polars as pl

import stylocompare as sc
from stylocompare.models import Document, Lexicon


EMMA_LINES = [
    "CHAPTER I",
    "Emma was happy, and Emma was clever.",
    "The grand ball was a delight; the grand ball was grand.",
    "CHAPTER II",
    "Harriet was sad but the party was happy.",
]

INFERNO_LINES = [
    "CANTO I",
    "Midway upon the journey of our life",
    "I found myself within a forest dark,",
    "For the straightforward pathway had been lost.",
]

MOBY_LINES = [
    "CHAPTER 1. Loomings.",
    "Call me Ishmael. The whale, the whale!",
    "The sea was dark and the storm was grim.",
    "CHAPTER 2. The Carpet-Bag.",
    "The whale was white; the sea was cold.",
]


@pytest.fixture(scope="session")
def stop_words():
    """A small, fixed stop-word set so expected counts do not depend on spaCy."""
    return frozenset(
        {
            "the", "a", "and", "was", "but", "of", "our", "upon", "i",
            "myself", "within", "for", "had", "been", "me",
        }
    )


@pytest.fixture(scope="session")
def documents():
    """Three short 'novels' by three authors."""
    return (
        Document("emma", "Austen", EMMA_LINES),
        Document("inferno", "Dante", INFERNO_LINES),
        Document("moby", "Melville", MOBY_LINES),
    )


@pytest.fixture(scope="session")
def corpus_frame(documents):
    """The synthetic corpus as a line-level polars DataFrame."""
    return sc.documents_to_frame(documents)


@pytest.fixture(scope="session")
def tokens(documents, stop_words):
    """Tokenize the synthetic corpus once per test session."""
    return sc.tokenize_corpus(documents, stop_words=stop_words)


@pytest.fixture(scope="session")
def table(tokens):
    """Word counts per author for the synthetic corpus."""
    return sc.frequency_table(tokens)


@pytest.fixture(scope="session")
def bigrams(documents, stop_words):
    """Stop-word filtered bigrams of the synthetic corpus."""
    return sc.ngrams(documents, span=2, stop_words=stop_words)


@pytest.fixture(scope="session")
def binary_lexicon():
    return Lexicon(
        name="binary",
        shape="binary",
        entries={
            "happy": "positive",
            "delight": "positive",
            "grand": "positive",
            "sad": "negative",
            "dark": "negative",
            "grim": "negative",
            "cold": "negative",
            "lost": "negative",
        },
    )


@pytest.fixture(scope="session")
def valence_lexicon():
    return Lexicon(
        name="valence",
        shape="valence",
        entries={"happy": 3, "sad": -2, "dark": -1, "grim": -3},
    )


@pytest.fixture(scope="session")
def categorical_lexicon():
    return Lexicon(
        name="categorical",
        shape="categorical",
        entries={
            "happy": frozenset({"joy", "positive"}),
            "sad": frozenset({"sadness", "negative"}),
            "dark": frozenset({"fear"}),
        },
    )


@pytest.fixture
def text_folder(tmp_path):
    """A temporary folder of plain-text novels plus a non-text file."""
    (tmp_path / "emma.txt").write_text("\n".join(EMMA_LINES), encoding="utf-8")
    (tmp_path / "moby.txt").write_text("\n".join(MOBY_LINES), encoding="utf-8")
    (tmp_path / "notes.md").write_text("not a novel", encoding="utf-8")
    return tmp_path


@pytest.fixture
def invalid_corpus_data():
    """Create various invalid corpus formats for error testing."""
    return {
        "missing_author": pl.DataFrame(
            {"doc_id": ["emma"], "line_number": [0], "text": ["CHAPTER I"]}
        ),
        "wrong_types": pl.DataFrame(
            {
                "doc_id": ["emma"],
                "author": ["Austen"],
                "line_number": ["0"],  # Should be an integer
                "text": ["CHAPTER I"],
            }
        ),
        "duplicate_lines": pl.DataFrame(
            {
                "doc_id": ["emma", "emma"],
                "author": ["Austen", "Austen"],
                "line_number": [0, 0],
                "text": ["CHAPTER I", "CHAPTER II"],
            }
        ),
        "two_authors": pl.DataFrame(
            {
                "doc_id": ["emma", "emma"],
                "author": ["Austen", "Bronte"],
                "line_number": [0, 1],
                "text": ["CHAPTER I", "Emma"],
            }
        ),
        "null_doc_id": pl.DataFrame(
            {
                "doc_id": ["emma", None],
                "author": ["Austen", "Austen"],
                "line_number": [0, 1],
                "text": ["CHAPTER I", "Emma"],
            }
        ),
        "negative_line": pl.DataFrame(
            {
                "doc_id": ["emma"],
                "author": ["Austen"],
                "line_number": [-1],
                "text": ["CHAPTER I"],
            }
        ),
    }


# Test utilities
def assert_dataframe_structure(
    df: pl.DataFrame, expected_columns: list, min_rows: int = 0
):
    """Assert that a DataFrame has the expected structure."""
    assert isinstance(df, pl.DataFrame), "Result should be a polars DataFrame"
    assert df.height >= min_rows, f"DataFrame should have at least {min_rows} rows"

    for col in expected_columns:
        assert col in df.columns, f"Column '{col}' should be present"


def assert_tokens_valid(tokens):
    """Assert that every token satisfies the token invariants."""
    for token in tokens:
        assert sc.RegexPatterns.VALID_TOKEN.match(token.word), token
        assert token.line_number >= 0
        assert token.chapter >= 0
