"""
Functions for comparing authorial style across a corpus of novels.

This module provides the main API functions for corpus comparison, serving
as convenient wrappers around the modular analyzer classes. Every function
accepts either Document/Token records or, where raw text is needed, a
line-level polars DataFrame as produced by ``corpus_from_folder``.

Main Functions:
    tokenize_corpus: Split, normalize and stop-word filter a corpus
    frequency_table: Count words per author
    relative_frequency: Word proportions per author
    tfidf_table: Word tf-idf per author, document or chapter
    author_correlation: Correlate two authors' word proportions
    frequency_comparison: Pair word proportions with a reference author
    keyness_table: Log-likelihood keyness of one author against others
    sentiment_table: Windowed sentiment scores for one lexicon
    sentiment_comparison: Raw windowed scores for several lexicons
    sentiment_contributions: Words contributing to sentiment scores
    ngrams: Extract stop-word filtered n-grams line by line
    ngram_table: Count n-grams per author
    ngram_tfidf: N-gram tf-idf
    cooccurrence_graph: Weighted directed bigram graph
    document_term_matrix: Sparse document-term matrix
    dtm_summary: Dimensions, nonzero cells and sparsity of a matrix
    top_terms: Most frequent terms of a matrix
    stem_dtm: Collapse matrix columns onto Porter stems
    dtm_weight: Proportional or tf-idf weighting of a matrix

Example:
    Basic corpus comparison workflow::

        import stylocompare as sc

        corpus = sc.corpus_from_folder(
            "novels/", authors={"emma": "Austen", "inferno": "Dante"}
        )
        documents = sc.documents_from_frame(corpus)

        tokens = sc.tokenize_corpus(documents)
        table = sc.frequency_table(tokens)
        salient = sc.tfidf_table(tokens, group_by="author")

        bing = sc.load_lexicon("bing.csv", shape="binary")
        trajectory = sc.sentiment_table(tokens, bing, documents=documents)

        bigrams = sc.ngrams(documents)
        graph = sc.cooccurrence_graph(sc.ngram_table(bigrams), min_count=20)

        dtm = sc.document_term_matrix(table)
        print(sc.dtm_summary(dtm))

.. codeauthor:: The stylocompare developers
"""

from typing import AbstractSet, Callable, Iterable, Optional, Sequence, Tuple, Union

import networkx as nx
import polars as pl

from .analyzers import (
    DocumentTermMatrix,
    FrequencyAnalyzer,
    KeynessAnalyzer,
    NGramAnalyzer,
    SentimentAnalyzer,
)
from .config import CONFIG
from .corpus_utils import documents_from_frame
from .models import (
    Correlation,
    Document,
    FrequencyComparison,
    FrequencyTable,
    KeynessScore,
    Lexicon,
    MatrixSummary,
    NGram,
    NGramCount,
    SentimentWindow,
    TermTotal,
    TfIdfScore,
    Token,
    WordFrequency,
    WordSentiment,
)
from .processors import CorpusProcessor

# Initialize analyzer instances for use in wrapper functions
_processor = CorpusProcessor()
_freq_analyzer = FrequencyAnalyzer()
_keyness_analyzer = KeynessAnalyzer()
_sentiment_analyzer = SentimentAnalyzer()
_ngram_analyzer = NGramAnalyzer()

Corpus = Union[pl.DataFrame, Sequence[Document]]


def _as_documents(corp: Corpus) -> Tuple[Document, ...]:
    if isinstance(corp, pl.DataFrame):
        return documents_from_frame(corp)
    return tuple(corp)


def tokenize_corpus(
    corp: Corpus,
    stop_words: Optional[AbstractSet[str]] = None,
    show_progress: Optional[bool] = None,
) -> Tuple[Token, ...]:
    """
    Tokenize a corpus into normalized, stop-word filtered words.

    Each line is split on whitespace and punctuation, lowercased and
    stripped of everything outside [a-z']. Units left empty or malformed
    are dropped, as are stop words. Chapter indices come from heading
    lines such as "CHAPTER XII" or "Canto 3".

    Args:
        corp: Document records, or a polars DataFrame with 'doc_id',
            'author', 'line_number' and 'text' columns.
        stop_words: Stop-word set. Defaults to spaCy's English stop words;
            pass an empty set to keep every word.
        show_progress: Whether to log progress for large corpora.

    Returns:
        A tuple of Token records (document_id, author, line_number,
        chapter, word) in document, line and word order.

    Raises:
        CorpusValidationError: If a DataFrame corpus has the wrong schema.
        DataFormatError: If the records are not Documents.

    Example:
        >>> from stylocompare.models import Document
        >>> doc = Document("d1", "Anon", ["CHAPTER I", "The whale swam."])
        >>> [t.word for t in tokenize_corpus([doc])]
        ['chapter', 'whale', 'swam']
    """
    return _processor.process_documents(
        _as_documents(corp), stop_words=stop_words, show_progress=show_progress
    )


def frequency_table(
    tokens: Sequence[Token], authors: Optional[Iterable[str]] = None
) -> FrequencyTable:
    """
    Count words per author.

    :param tokens: Token records.
    :param authors: Authors to include even if they have no tokens.
    :return: A FrequencyTable keyed by (author, word).
    """
    return _freq_analyzer.count(tokens, authors=authors)


def relative_frequency(table: FrequencyTable) -> Tuple[WordFrequency, ...]:
    """
    Word proportions per author (count / author total).

    :param table: A FrequencyTable.
    :return: WordFrequency records; proportions sum to 1 for each author.
    """
    return _freq_analyzer.relative_frequency(table)


def tfidf_table(
    tokens: Sequence[Token],
    group_by: str = "author",
    groups: Optional[Iterable[str]] = None,
) -> Tuple[TfIdfScore, ...]:
    """
    Word tf-idf per group.

    :param tokens: Token records.
    :param group_by: One of 'author', 'document' or 'chapter'.
    :param groups: Extra (possibly empty) group labels.
    :return: TfIdfScore records ordered by tf-idf, then word, then group.
    """
    return _freq_analyzer.tf_idf(tokens, group_by=group_by, groups=groups)


def author_correlation(
    table: FrequencyTable, author_a: str, author_b: str
) -> Correlation:
    """
    Pearson correlation of two authors' word proportions over shared words.

    :param table: A FrequencyTable.
    :param author_a: First author.
    :param author_b: Second author.
    :return: A Correlation record with estimate and p-value.
    """
    return _freq_analyzer.correlation(table, author_a, author_b)


def frequency_comparison(
    table: FrequencyTable, reference: str
) -> Tuple[FrequencyComparison, ...]:
    """
    Pair each author's word proportions with those of a reference author.

    :param table: A FrequencyTable.
    :param reference: The reference author.
    :return: FrequencyComparison records over words shared with the reference.
    """
    return _freq_analyzer.frequency_comparison(table, reference)


def keyness_table(
    table: FrequencyTable,
    target: str,
    reference: Optional[str] = None,
    correct: bool = False,
    threshold: float = 0.01,
) -> Tuple[KeynessScore, ...]:
    """
    Words used significantly more by the target author than the reference.

    :param table: A FrequencyTable.
    :param target: Target author.
    :param reference: Reference author; all other authors if None.
    :param correct: If True, apply the Yates correction.
    :param threshold: P-value threshold for significance.
    :return: KeynessScore records ordered by log-likelihood.
    """
    return _keyness_analyzer.keyness_table(
        table, target, reference=reference, correct=correct, threshold=threshold
    )


def sentiment_table(
    tokens: Sequence[Token],
    lexicon: Lexicon,
    window_size: int = CONFIG.DEFAULT_WINDOW_SIZE,
    documents: Optional[Sequence[Document]] = None,
) -> Tuple[SentimentWindow, ...]:
    """
    Windowed sentiment scores for a single lexicon.

    Lines are grouped into windows of ``window_size`` consecutive lines.
    Binary and categorical lexicons score positive minus negative matches;
    valence lexicons sum word values. Windows without matches score 0.

    :param tokens: Token records.
    :param lexicon: A Lexicon.
    :param window_size: Lines per window (default 80).
    :param documents: Source documents, so that trailing windows without
        tokens are reported.
    :return: SentimentWindow records ordered by author, document, window.
    """
    return _sentiment_analyzer.sentiment_windows(
        tokens, lexicon, window_size=window_size, documents=documents
    )


def sentiment_comparison(
    tokens: Sequence[Token],
    lexicons: Iterable[Lexicon],
    window_size: int = CONFIG.DEFAULT_WINDOW_SIZE,
    documents: Optional[Sequence[Document]] = None,
) -> Tuple[SentimentWindow, ...]:
    """
    Raw windowed scores for several lexicons, side by side.

    Scores are not adjusted across lexicons; differences in coverage
    show up as differences in the series.
    """
    return _sentiment_analyzer.sentiment_by_lexicon(
        tokens, lexicons, window_size=window_size, documents=documents
    )


def sentiment_contributions(
    tokens: Sequence[Token], lexicon: Lexicon
) -> Tuple[WordSentiment, ...]:
    """
    How often each matched word contributes to an author's sentiment.

    :return: WordSentiment records ordered by count.
    """
    return _sentiment_analyzer.word_contributions(tokens, lexicon)


def ngrams(
    corp: Corpus,
    span: int = CONFIG.DEFAULT_NGRAM_SPAN,
    stop_words: Optional[AbstractSet[str]] = None,
) -> Tuple[NGram, ...]:
    """
    Extract n-grams of adjacent words, line by line.

    Adjacency is taken from the text before stop-word removal; an n-gram
    with a stop word in any position is dropped entirely.

    :param corp: Document records or a line-level polars DataFrame.
    :param span: Words per n-gram, between 2 and 5.
    :param stop_words: Stop-word set; defaults to spaCy's English list.
    :return: NGram records.
    """
    return _ngram_analyzer.ngrams(_as_documents(corp), span=span, stop_words=stop_words)


def ngram_table(ngram_records: Sequence[NGram]) -> Tuple[NGramCount, ...]:
    """
    Count n-grams per author.

    :param ngram_records: NGram records.
    :return: NGramCount records ordered by count.
    """
    return _ngram_analyzer.ngram_counts(ngram_records)


def ngram_tfidf(
    ngram_records: Sequence[NGram],
    group_by: str = "author",
    groups: Optional[Iterable[str]] = None,
) -> Tuple[TfIdfScore, ...]:
    """
    N-gram tf-idf per group; terms are the words joined by a space.
    """
    return _ngram_analyzer.ngram_tf_idf(ngram_records, group_by=group_by, groups=groups)


def cooccurrence_graph(
    counts: Sequence[NGramCount],
    min_count: int = CONFIG.DEFAULT_MIN_COOCCURRENCE,
    author: Optional[str] = None,
) -> nx.DiGraph:
    """
    Weighted directed graph of bigrams occurring more than ``min_count`` times.

    :param counts: Bigram NGramCount records.
    :param min_count: Counts must exceed this value to become edges.
    :param author: Restrict to one author; all authors are summed if None.
    :return: A networkx DiGraph with 'weight' edge attributes.
    """
    return _ngram_analyzer.cooccurrence_graph(counts, min_count=min_count, author=author)


def document_term_matrix(
    source: Union[FrequencyTable, Sequence[Token]], group_by: str = "author"
) -> DocumentTermMatrix:
    """
    Build a sparse document-term matrix of counts.

    :param source: A FrequencyTable (one row per author) or Token records.
    :param group_by: Row grouping for Token records: 'author', 'document'
        or 'chapter'.
    :return: A DocumentTermMatrix.
    """
    if isinstance(source, FrequencyTable):
        return DocumentTermMatrix.from_frequency_table(source)
    return DocumentTermMatrix.from_tokens(source, group_by=group_by)


def dtm_summary(dtm: DocumentTermMatrix) -> MatrixSummary:
    """Dimensions, nonzero cells and sparsity of a document-term matrix."""
    return dtm.summary()


def top_terms(
    dtm: DocumentTermMatrix, n: int = CONFIG.DEFAULT_TOP_N
) -> Tuple[TermTotal, ...]:
    """The ``n`` terms with the highest corpus-wide counts."""
    return dtm.top_terms(n)


def stem_dtm(
    dtm: DocumentTermMatrix, stemmer: Optional[Callable[[str], str]] = None
) -> DocumentTermMatrix:
    """
    Collapse matrix columns onto Porter stems; colliding columns are summed.
    """
    return dtm.stem(stemmer)


def dtm_weight(dtm: DocumentTermMatrix, scheme: str = "prop") -> DocumentTermMatrix:
    """
    A function for weighting a document-term-matrix.

    :param dtm: A DocumentTermMatrix.
    :param scheme: One of 'prop' (normalized by totals per row) \
        or 'tfidf' (term-frequency-inverse-document-frequency).
    :return: A weighted DocumentTermMatrix.
    """
    return dtm.weight(scheme)
