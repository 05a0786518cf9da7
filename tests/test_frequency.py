"""
Tests for word frequencies, tf-idf salience, correlation and keyness.
"""

import math

import pytest

import stylocompare as sc
from stylocompare.models import FrequencyTable, Token
from stylocompare.validation import (
    DataFormatError,
    ParameterValidationError,
    ValidationWarning,
)


def _token(author, word, document_id=None, chapter=0):
    return Token(
        document_id=document_id or author.lower(),
        author=author,
        line_number=0,
        chapter=chapter,
        word=word,
    )


class TestFrequencyTable:
    """Test word counts per author."""

    def test_counts(self, table):
        assert table.authors == ("Austen", "Dante", "Melville")
        assert table.total("Austen") == 17
        assert table.total("Dante") == 10
        assert table.counts_for("Melville")["whale"] == 3
        assert table.counts_for("Austen")["chapter"] == 2

    def test_empty_input(self):
        table = sc.frequency_table([])
        assert len(table) == 0
        assert table.authors == ()

    def test_declared_authors(self, tokens):
        table = sc.frequency_table(tokens, authors=["Bronte"])
        assert "Bronte" in table.authors
        assert table.total("Bronte") == 0

    def test_rejects_other_records(self):
        with pytest.raises(DataFormatError):
            sc.frequency_table([("Austen", "emma")])

    def test_table_is_read_only(self, table):
        with pytest.raises(TypeError):
            table.counts[("Austen", "emma")] = 10


class TestRelativeFrequency:
    """Test proportions per author."""

    def test_proportions_sum_to_one(self, table):
        rows = sc.relative_frequency(table)
        for author in table.authors:
            total = sum(r.proportion for r in rows if r.author == author)
            assert total == pytest.approx(1.0)

    def test_ordering(self, table):
        rows = sc.relative_frequency(table)
        melville = [r for r in rows if r.author == "Melville"]
        assert melville[0].word == "whale"
        assert melville[0].proportion == pytest.approx(3 / 17)
        assert [r.author for r in rows] == sorted(r.author for r in rows)

    def test_empty_author_warns(self, tokens):
        table = sc.frequency_table(tokens, authors=["Bronte"])
        with pytest.warns(ValidationWarning, match="Bronte"):
            rows = sc.relative_frequency(table)
        assert "Bronte" not in {r.author for r in rows}


class TestTfIdf:
    """Test tf-idf salience."""

    def test_author_scores(self, tokens):
        scores = sc.tfidf_table(tokens, group_by="author")
        top = scores[0]
        assert (top.group, top.term) == ("Austen", "grand")
        assert top.tf == pytest.approx(3 / 17)
        assert top.idf == pytest.approx(math.log(3))
        assert top.tf_idf == pytest.approx(3 / 17 * math.log(3))
        assert (scores[1].group, scores[1].term) == ("Melville", "whale")

    def test_shared_terms(self, tokens):
        scores = sc.tfidf_table(tokens, group_by="author")
        chapter = [s for s in scores if s.term == "chapter"]
        assert {s.group for s in chapter} == {"Austen", "Melville"}
        assert all(s.idf == pytest.approx(math.log(3 / 2)) for s in chapter)

    def test_term_in_every_group_scores_zero(self):
        tokens = [_token("A", "sea"), _token("A", "whale"), _token("B", "sea")]
        scores = sc.tfidf_table(tokens)
        assert [s.tf_idf for s in scores if s.term == "sea"] == [0.0, 0.0]

    def test_ordering(self, tokens):
        scores = sc.tfidf_table(tokens, group_by="document")
        keys = [(-s.tf_idf, s.term, s.group) for s in scores]
        assert keys == sorted(keys)

    def test_chapter_groups(self, tokens):
        scores = sc.tfidf_table(tokens, group_by="chapter")
        assert {s.group for s in scores} == {
            "emma:1", "emma:2", "inferno:1", "moby:1", "moby:2",
        }

    def test_empty_declared_group_counts_toward_n(self):
        tokens = [_token("A", "sea")]
        with pytest.warns(ValidationWarning, match="B"):
            scores = sc.tfidf_table(tokens, groups=["B"])
        assert len(scores) == 1
        assert scores[0].idf == pytest.approx(math.log(2))

    def test_empty_input(self):
        assert sc.tfidf_table([]) == ()

    def test_invalid_group_by_suggests(self, tokens):
        with pytest.raises(ParameterValidationError, match="Did you mean: author"):
            sc.tfidf_table(tokens, group_by="Author")


class TestCorrelation:
    """Test author-to-author correlation of word proportions."""

    def test_identical_profiles(self):
        table = FrequencyTable.from_counts(
            {
                ("A", "x"): 2, ("A", "y"): 4, ("A", "z"): 6,
                ("B", "x"): 1, ("B", "y"): 2, ("B", "z"): 3,
            }
        )
        corr = sc.author_correlation(table, "A", "B")
        assert corr.estimate == pytest.approx(1.0)
        assert corr.n_terms == 3

    def test_too_few_shared_words(self, table):
        # Austen and Melville only share "chapter"
        with pytest.raises(ParameterValidationError, match="share 1 words"):
            sc.author_correlation(table, "Austen", "Melville")

    def test_unknown_author(self, table):
        with pytest.raises(ParameterValidationError, match="Unknown author"):
            sc.author_correlation(table, "Austen", "Bronte")

    def test_constant_proportions(self):
        table = FrequencyTable.from_counts(
            {
                ("A", "x"): 2, ("A", "y"): 2,
                ("B", "x"): 1, ("B", "y"): 3,
            }
        )
        with pytest.raises(ParameterValidationError, match="'A' uses all 2"):
            sc.author_correlation(table, "A", "B")
        with pytest.raises(ParameterValidationError, match="undefined"):
            sc.author_correlation(table, "B", "A")


class TestFrequencyComparison:
    """Test proportions paired with a reference author."""

    def test_shared_words(self, table):
        rows = sc.frequency_comparison(table, "Melville")
        assert {(r.author, r.word) for r in rows} == {
            ("Austen", "chapter"),
            ("Dante", "dark"),
        }
        dark = [r for r in rows if r.word == "dark"][0]
        assert dark.proportion == pytest.approx(1 / 10)
        assert dark.reference_proportion == pytest.approx(1 / 17)


class TestKeyness:
    """Test log-likelihood keyness."""

    @pytest.fixture
    def keyness_table(self):
        return FrequencyTable.from_counts(
            {
                ("A", "whale"): 50, ("A", "sea"): 50,
                ("B", "whale"): 1, ("B", "sea"): 49, ("B", "love"): 50,
                ("C", "whale"): 2, ("C", "love"): 8,
            }
        )

    def test_significant_words(self, keyness_table):
        rows = sc.keyness_table(keyness_table, "A", reference="B")
        assert [r.word for r in rows] == ["whale"]
        whale = rows[0]
        assert (whale.count_target, whale.count_reference) == (50, 1)
        assert whale.log_likelihood > 0
        assert whale.p_value < 0.01
        assert whale.log_ratio == pytest.approx(math.log2(50))

    def test_yates_correction_lowers_log_likelihood(self, keyness_table):
        plain = sc.keyness_table(keyness_table, "A", reference="B")[0]
        corrected = sc.keyness_table(keyness_table, "A", reference="B", correct=True)[0]
        assert corrected.log_likelihood < plain.log_likelihood

    def test_pooled_reference(self, keyness_table):
        rows = sc.keyness_table(keyness_table, "A")
        whale = [r for r in rows if r.word == "whale"][0]
        assert whale.count_reference == 3

    def test_unknown_author(self, keyness_table):
        with pytest.raises(ParameterValidationError):
            sc.keyness_table(keyness_table, "A", reference="Z")

    def test_empty_reference_warns(self):
        table = FrequencyTable.from_counts({("A", "whale"): 5}, authors=["B"])
        with pytest.warns(ValidationWarning):
            assert sc.keyness_table(table, "A", reference="B") == ()
