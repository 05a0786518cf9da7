"""
Tests that account for stylocompare's filtering behavior.

This module covers what the tokenizer and n-gram extractor drop: stop
words, digits and punctuation residue, malformed units, and n-grams with
a stop word in any position.
"""

import pytest

import stylocompare as sc
from stylocompare.models import Document
from stylocompare.processors import ChapterDetector, TextPreprocessor

from conftest import assert_tokens_valid


def _words(lines, stop_words=frozenset()):
    doc = Document("d1", "Anon", lines)
    return [t.word for t in sc.tokenize_corpus([doc], stop_words=stop_words)]


class TestNormalization:
    """Test word splitting and normalization."""

    def test_digits_and_punctuation_are_dropped(self):
        assert _words(["The whale's tale, 1851!"]) == ["the", "whale's", "tale"]

    def test_underscores_and_case_are_stripped(self):
        assert _words(["_EMMA_ Woodhouse"]) == ["emma", "woodhouse"]

    def test_curly_apostrophes_are_kept(self):
        assert _words(["Don’t ‘stop’ now"]) == ["don't", "stop", "now"]

    def test_outer_apostrophes_are_stripped(self):
        assert _words(["'Tis the season'"]) == ["tis", "the", "season"]

    def test_hyphenated_words_split(self):
        assert _words(["The Carpet-Bag"]) == ["the", "carpet", "bag"]

    def test_non_ascii_letters_are_removed(self):
        # Letters outside [a-z] are stripped rather than transliterated
        assert _words(["café naïve"]) == ["caf", "nave"]

    def test_unit_with_no_letters_is_dropped(self):
        assert _words(["'' -- 42 ..."]) == []

    def test_blank_lines_produce_no_tokens(self):
        assert _words(["", "   ", "whale"]) == ["whale"]

    def test_tokens_match_pattern(self, tokens):
        assert_tokens_valid(tokens)

    @pytest.mark.parametrize(
        "unit,expected",
        [
            ("Whale", "whale"),
            ("o'er", "o'er"),
            ("'twas", "twas"),
            ("1820", None),
            ("'", None),
            ("", None),
        ],
    )
    def test_normalize_word(self, unit, expected):
        assert TextPreprocessor.normalize_word(unit) == expected

    def test_normalize_units_keeps_positions(self):
        units = TextPreprocessor().normalize_units("CHAPTER 1. Loomings.")
        assert units == ["chapter", None, "loomings"]


class TestStopWords:
    """Test stop-word removal."""

    def test_default_stop_words_come_from_spacy(self):
        assert "the" in sc.DEFAULT_STOP_WORDS
        assert "whale" not in sc.DEFAULT_STOP_WORDS

    def test_default_stop_words_are_removed(self):
        doc = Document("d1", "Anon", ["The whale and the sea"])
        words = [t.word for t in sc.tokenize_corpus([doc])]
        assert words == ["whale", "sea"]

    def test_injected_stop_words(self):
        assert _words(["The whale and the sea"], {"whale"}) == [
            "the", "and", "the", "sea",
        ]

    def test_empty_stop_set_keeps_every_word(self):
        assert _words(["The whale and the sea"]) == [
            "the", "whale", "and", "the", "sea",
        ]

    def test_stop_words_filtered_before_counting(self, tokens, stop_words):
        table = sc.frequency_table(tokens)
        assert not set(table.vocabulary) & stop_words


class TestChapterDetection:
    """Test the chapter heading heuristic."""

    def test_running_count(self):
        lines = ["Preface", "CHAPTER I", "text", "Canto 2", "more"]
        assert ChapterDetector().chapter_indices(lines) == [0, 1, 1, 2, 2]

    @pytest.mark.parametrize(
        "line",
        ["CHAPTER XII", "chapter 3", "  Canto iv", "CHAPTER 1. Loomings."],
    )
    def test_headings(self, line):
        assert ChapterDetector.is_heading(line)

    @pytest.mark.parametrize(
        "line",
        ["The chapter ended", "CHAPTER", "Chapter One", "Chapters 1", ""],
    )
    def test_non_headings(self, line):
        assert not ChapterDetector.is_heading(line)

    def test_fixture_chapters(self, tokens):
        chapters = {(t.document_id, t.chapter) for t in tokens}
        assert chapters == {
            ("emma", 1), ("emma", 2), ("inferno", 1), ("moby", 1), ("moby", 2),
        }


class TestNGramFiltering:
    """Test that n-grams with stop words are removed entirely."""

    def test_quick_brown_fox(self):
        words = ["the", "quick", "brown", "fox"]
        spans = sc.NGramAnalyzer.ngrams_from_words(words, span=2)
        assert spans == [("the", "quick"), ("quick", "brown"), ("brown", "fox")]
        assert sc.NGramAnalyzer.filter_stop_ngrams(spans, {"the"}) == [
            ("quick", "brown"),
            ("brown", "fox"),
        ]

    def test_quick_brown_fox_from_document(self):
        doc = Document("d1", "Anon", ["The quick brown fox"])
        bigrams = sc.ngrams([doc], span=2, stop_words={"the"})
        assert [g.words for g in bigrams] == [("quick", "brown"), ("brown", "fox")]

    def test_stop_word_in_any_position(self):
        spans = [("quick", "the"), ("the", "fox"), ("quick", "fox")]
        assert sc.NGramAnalyzer.filter_stop_ngrams(spans, {"the"}) == [
            ("quick", "fox")
        ]

    def test_ngrams_do_not_span_lines(self):
        doc = Document("d1", "Anon", ["quick brown", "fox jumps"])
        bigrams = sc.ngrams([doc], span=2, stop_words=frozenset())
        assert [g.words for g in bigrams] == [("quick", "brown"), ("fox", "jumps")]
        assert [g.line_number for g in bigrams] == [0, 1]

    def test_malformed_unit_breaks_adjacency(self):
        doc = Document("d1", "Anon", ["quick 1851 fox", "CHAPTER 1. Loomings."])
        assert sc.ngrams([doc], span=2, stop_words=frozenset()) == ()

    def test_ngrams_beside_a_malformed_unit(self):
        doc = Document("d1", "Anon", ["quick brown 1851 fox jumps"])
        trigrams = sc.ngrams([doc], span=3, stop_words=frozenset())
        assert trigrams == ()
        bigrams = sc.ngrams([doc], span=2, stop_words=frozenset())
        assert [g.words for g in bigrams] == [("quick", "brown"), ("fox", "jumps")]

    def test_filter_malformed_ngrams(self):
        spans = [("quick", None), (None, "fox"), ("fox", "jumps")]
        assert sc.NGramAnalyzer.filter_malformed_ngrams(spans) == [("fox", "jumps")]

    def test_adjacency_from_unfiltered_text(self):
        # "whale" and "sea" are not adjacent once "and" is removed
        doc = Document("d1", "Anon", ["whale and sea"])
        assert sc.ngrams([doc], span=2, stop_words={"and"}) == ()

    def test_trigrams(self):
        doc = Document("d1", "Anon", ["call me ishmael"])
        trigrams = sc.ngrams([doc], span=3, stop_words=frozenset())
        assert [g.words for g in trigrams] == [("call", "me", "ishmael")]

    def test_fixture_bigrams(self, bigrams):
        words = {(g.author, g.words) for g in bigrams}
        assert words == {
            ("Austen", ("grand", "ball")),
            ("Austen", ("chapter", "ii")),
            ("Dante", ("forest", "dark")),
            ("Dante", ("straightforward", "pathway")),
            ("Melville", ("carpet", "bag")),
        }
        assert len(bigrams) == 6

    @pytest.mark.parametrize("span", [1, 6, 2.0, True])
    def test_invalid_span(self, documents, span):
        with pytest.raises(sc.ParameterValidationError):
            sc.ngrams(documents, span=span)
