"""
Analyzer classes for comparing authorial style across a corpus.

This module provides specialized analyzer classes that encapsulate the
corpus comparison functionality. Each analyzer is a set of pure
functions over token, n-gram or frequency records: inputs are never
modified and every result is a fresh tuple of frozen records.

Classes:
    FrequencyAnalyzer: Word counts, relative frequencies and tf-idf
    KeynessAnalyzer: Log-likelihood keyness between authors
    SentimentAnalyzer: Lexicon-based sentiment trajectories
    NGramAnalyzer: N-gram extraction, counts, tf-idf and co-occurrence graphs
    DocumentTermMatrix: Sparse document-term matrix with summaries and stemming

Example:
    Basic frequency analysis::

        from stylocompare.analyzers import FrequencyAnalyzer
        from stylocompare.processors import CorpusProcessor

        tokens = CorpusProcessor().process_documents(documents)

        analyzer = FrequencyAnalyzer()
        table = analyzer.count(tokens)
        proportions = analyzer.relative_frequency(table)
        salient = analyzer.tf_idf(tokens, group_by="author")

    Bigrams and their co-occurrence graph::

        from stylocompare.analyzers import NGramAnalyzer

        ngram_analyzer = NGramAnalyzer()
        bigrams = ngram_analyzer.ngrams(documents, span=2)
        graph = ngram_analyzer.cooccurrence_graph(
            ngram_analyzer.ngram_counts(bigrams), min_count=20
        )

.. codeauthor:: The stylocompare developers
"""

import math
import warnings
from collections import Counter, defaultdict
from functools import lru_cache
from typing import (
    AbstractSet,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

import networkx as nx
import numpy as np
from nltk.stem import PorterStemmer
from scipy import sparse
from scipy.stats import pearsonr
from scipy.stats.distributions import chi2

from .config import CONFIG
from .models import (
    Correlation,
    Document,
    FrequencyComparison,
    FrequencyTable,
    KeynessScore,
    Lexicon,
    LexiconShape,
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
from .performance import PerformanceMonitor
from .processors import DEFAULT_STOP_WORDS, ChapterDetector, TextPreprocessor
from .validation import (
    ParameterValidationError,
    ValidationWarning,
    suggest_alternatives_for_empty_results,
    validate_group_by_parameter,
    validate_records,
    validate_span_parameter,
    validate_window_size,
)


GROUP_TYPES = ["author", "document", "chapter"]


def _group_key(record: Union[Token, NGram], group_by: str) -> str:
    if group_by == "author":
        return record.author
    if group_by == "document":
        return record.document_id
    return f"{record.document_id}{CONFIG.CHAPTER_GROUP_SEPARATOR}{record.chapter}"


def _score_tf_idf(
    group_counts: Mapping[str, Counter], groups: Iterable[str] = ()
) -> Tuple[TfIdfScore, ...]:
    """
    Score every (group, term) pair of a grouped count.

    Groups listed in ``groups`` but absent from ``group_counts`` are empty:
    they count toward the number of groups but produce no scores.
    """
    all_groups = set(group_counts) | set(groups)
    empty = sorted(g for g in all_groups if sum(group_counts.get(g, {}).values()) == 0)
    if empty:
        warnings.warn(
            f"Groups with no terms are excluded from tf-idf scores: "
            f"{', '.join(empty)}",
            ValidationWarning,
        )

    n_groups = len(all_groups)
    document_frequency: Counter = Counter()
    for counts in group_counts.values():
        document_frequency.update(term for term, n in counts.items() if n > 0)

    scores = []
    for group, counts in group_counts.items():
        total = sum(counts.values())
        if total == 0:
            continue
        for term, n in counts.items():
            if n == 0:
                continue
            tf = n / total
            idf = math.log(n_groups / document_frequency[term])
            scores.append(
                TfIdfScore(
                    group=group, term=term, count=n, tf=tf, idf=idf, tf_idf=tf * idf
                )
            )

    scores.sort(key=lambda s: (-s.tf_idf, s.term, s.group))
    return tuple(scores)


class FrequencyAnalyzer:
    """
    Handles word counts, relative frequencies and tf-idf salience.

    Example:
        Compare two authors::

            analyzer = FrequencyAnalyzer()
            table = analyzer.count(tokens)

            # Proportion of each word in each author's vocabulary
            proportions = analyzer.relative_frequency(table)

            # How similar are their word-frequency profiles?
            corr = analyzer.correlation(table, "Austen", "Bronte")
            print(corr.estimate, corr.p_value)

        Words that characterize each book::

            scores = analyzer.tf_idf(tokens, group_by="document")
    """

    @staticmethod
    def _validate_tokens(tokens: Sequence[Token]) -> None:
        validate_records(tokens, Token, "in FrequencyAnalyzer")

    @staticmethod
    def _validate_author(table: FrequencyTable, author: str) -> None:
        if author not in table.authors:
            raise ParameterValidationError(
                f"Unknown author in FrequencyAnalyzer: '{author}'\n"
                f"Known authors are: {', '.join(table.authors)}"
            )

    def count(
        self, tokens: Sequence[Token], authors: Optional[Iterable[str]] = None
    ) -> FrequencyTable:
        """
        Count occurrences of each word per author.

        :param tokens: Token records, e.g. from CorpusProcessor.
        :param authors: Authors to include even if they have no tokens.
        :return: A FrequencyTable; empty input yields an empty table.
        """
        tokens = tuple(tokens)
        self._validate_tokens(tokens)
        counts = Counter((t.author, t.word) for t in tokens)
        return FrequencyTable.from_counts(counts, authors=authors)

    def relative_frequency(self, table: FrequencyTable) -> Tuple[WordFrequency, ...]:
        """
        Divide each word count by its author's total token count.

        Authors without tokens produce no rows and a ValidationWarning.

        :return: WordFrequency records ordered by author, then proportion
            (descending), then word.
        """
        rows = []
        empty = []
        for author in table.authors:
            counts = table.counts_for(author)
            total = sum(counts.values())
            if total == 0:
                empty.append(author)
                continue
            for word, n in counts.items():
                rows.append(
                    WordFrequency(
                        author=author, word=word, count=n, proportion=n / total
                    )
                )

        if empty:
            warnings.warn(
                f"Authors with no tokens have no relative frequencies: "
                f"{', '.join(empty)}",
                ValidationWarning,
            )

        rows.sort(key=lambda r: (r.author, -r.proportion, r.word))
        return tuple(rows)

    def tf_idf(
        self,
        tokens: Sequence[Token],
        group_by: str = "author",
        groups: Optional[Iterable[str]] = None,
    ) -> Tuple[TfIdfScore, ...]:
        """
        Score word salience within each group relative to the corpus.

        tf = count in group / terms in group; idf = ln(groups / groups with
        the word); tf-idf = tf * idf. Words found in every group score 0.

        :param tokens: Token records.
        :param group_by: One of 'author', 'document' or 'chapter'.
        :param groups: Extra group labels counted toward the number of groups.
        :return: TfIdfScore records ordered by tf-idf (descending), word, group.
        """
        validate_group_by_parameter(group_by, GROUP_TYPES, "in FrequencyAnalyzer")
        tokens = tuple(tokens)
        self._validate_tokens(tokens)

        with PerformanceMonitor(f"Word tf-idf ({group_by})"):
            group_counts: Dict[str, Counter] = defaultdict(Counter)
            for token in tokens:
                group_counts[_group_key(token, group_by)][token.word] += 1
            return _score_tf_idf(group_counts, groups or ())

    def correlation(
        self, table: FrequencyTable, author_a: str, author_b: str
    ) -> Correlation:
        """
        Pearson correlation of two authors' word proportions.

        Only words used by both authors are compared.
        """
        self._validate_author(table, author_a)
        self._validate_author(table, author_b)

        counts_a = table.counts_for(author_a)
        counts_b = table.counts_for(author_b)
        total_a = sum(counts_a.values())
        total_b = sum(counts_b.values())
        shared = sorted(set(counts_a) & set(counts_b))

        if len(shared) < 2:
            raise ParameterValidationError(
                f"Authors '{author_a}' and '{author_b}' share {len(shared)} "
                "words; at least 2 are needed for a correlation."
            )

        x = np.array([counts_a[w] / total_a for w in shared])
        y = np.array([counts_b[w] / total_b for w in shared])
        for author, values in ((author_a, x), (author_b, y)):
            if np.ptp(values) == 0:
                raise ParameterValidationError(
                    f"Author '{author}' uses all {len(shared)} shared words "
                    "in equal proportion; the correlation is undefined."
                )
        estimate, p_value = pearsonr(x, y)
        return Correlation(
            author_a=author_a,
            author_b=author_b,
            estimate=float(estimate),
            p_value=float(p_value),
            n_terms=len(shared),
        )

    def frequency_comparison(
        self, table: FrequencyTable, reference: str
    ) -> Tuple[FrequencyComparison, ...]:
        """
        Pair every other author's word proportions with a reference author's.

        :return: FrequencyComparison records for words used by both the
            author and the reference, ordered by author then word.
        """
        self._validate_author(table, reference)
        ref_counts = table.counts_for(reference)
        ref_total = sum(ref_counts.values())

        rows = []
        for author in table.authors:
            if author == reference:
                continue
            counts = table.counts_for(author)
            total = sum(counts.values())
            if total == 0 or ref_total == 0:
                continue
            for word in sorted(set(counts) & set(ref_counts)):
                rows.append(
                    FrequencyComparison(
                        author=author,
                        word=word,
                        proportion=counts[word] / total,
                        reference_proportion=ref_counts[word] / ref_total,
                    )
                )
        return tuple(rows)


class KeynessAnalyzer:
    """Handles keyness analysis between one author and a reference."""

    @staticmethod
    def _log_likelihood(a: float, b: float, total_a: int, total_b: int) -> float:
        total = total_a + total_b
        expected_a = total_a * (a + b) / total
        expected_b = total_b * (a + b) / total
        l1 = a * math.log(a / expected_a) if a > 0 else 0.0
        l2 = b * math.log(b / expected_b) if b > 0 else 0.0
        return 2 * (l1 + l2)

    def keyness_table(
        self,
        table: FrequencyTable,
        target: str,
        reference: Optional[str] = None,
        correct: bool = False,
        threshold: float = 0.01,
    ) -> Tuple[KeynessScore, ...]:
        """
        Generate a keyness table of words over-used by the target author.

        :param table: A FrequencyTable covering both authors.
        :param target: The author whose distinctive words are wanted.
        :param reference: The author to compare against; if None, all other
            authors are pooled.
        :param correct: If True, apply the Yates correction to the
            log-likelihood calculation.
        :param threshold: P-value threshold for significance.
        :return: KeynessScore records with positive log-likelihood, ordered by
            log-likelihood (descending) then word.
        """
        for author in [target] + ([reference] if reference else []):
            if author not in table.authors:
                raise ParameterValidationError(
                    f"Unknown author in KeynessAnalyzer: '{author}'\n"
                    f"Known authors are: {', '.join(table.authors)}"
                )

        target_counts = table.counts_for(target)
        if reference is not None:
            reference_counts = table.counts_for(reference)
        else:
            reference_counts = Counter()
            for (author, word), n in table.items():
                if author != target:
                    reference_counts[word] += n

        total_target = sum(target_counts.values())
        total_reference = sum(reference_counts.values())
        if total_target == 0 or total_reference == 0:
            warnings.warn(
                "Keyness needs tokens for both target and reference.",
                ValidationWarning,
            )
            return ()

        total = total_target + total_reference
        rows = []
        for word in sorted(set(target_counts) | set(reference_counts)):
            a = target_counts.get(word, 0)
            b = reference_counts.get(word, 0)
            a_adj, b_adj = float(a), float(b)

            if correct:
                deviation = a - (a + b) * total_target / total
                if abs(deviation) > 0.25:
                    a_adj -= 0.5 * math.copysign(1, deviation)
                    b_adj += 0.5 * math.copysign(1, deviation)

            ll = abs(self._log_likelihood(a_adj, b_adj, total_target, total_reference))
            if a / total_target < b / total_reference:
                ll = -ll

            if b == 0:
                lr = math.log2((a / total_target) / (0.5 / total_reference))
            elif a == 0:
                lr = -math.log2((b / total_reference) / (0.5 / total_target))
            else:
                lr = math.log2((a / total_target) / (b / total_reference))

            p_value = float(chi2.sf(abs(ll), 1))
            if ll > 0 and p_value < threshold:
                rows.append(
                    KeynessScore(
                        word=word,
                        count_target=a,
                        count_reference=b,
                        log_likelihood=ll,
                        p_value=p_value,
                        log_ratio=lr,
                    )
                )

        rows.sort(key=lambda r: (-r.log_likelihood, r.word))
        return tuple(rows)


class SentimentAnalyzer:
    """
    Handles lexicon-based sentiment scoring over line windows.

    Words missing from a lexicon contribute nothing, and windows without
    any matched word score 0. Lexicons differ in coverage, so scores are
    reported per lexicon and never reconciled across lexicons.

    Example:
        Sentiment trajectory of each book::

            analyzer = SentimentAnalyzer()
            windows = analyzer.sentiment_windows(
                tokens, bing, window_size=80, documents=documents
            )

        Raw scores from several lexicons side by side::

            series = analyzer.sentiment_by_lexicon(tokens, [bing, afinn, nrc])
    """

    @staticmethod
    def polarity(lexicon: Lexicon, word: str) -> Tuple[int, int]:
        """
        Positive and negative contribution of a single word.

        Labelled lexicons contribute 1 per matching label; valence lexicons
        contribute the absolute value to the matching side.
        """
        entry = lexicon.entries.get(word)
        if entry is None:
            return 0, 0

        if lexicon.shape is LexiconShape.VALENCE:
            value = entry
            return (value, 0) if value > 0 else (0, -value)

        if lexicon.shape is LexiconShape.BINARY:
            labels = {entry}
        else:
            labels = set(entry)
        return (
            int(CONFIG.POSITIVE_LABEL in labels),
            int(CONFIG.NEGATIVE_LABEL in labels),
        )

    def sentiment_windows(
        self,
        tokens: Sequence[Token],
        lexicon: Lexicon,
        window_size: int = CONFIG.DEFAULT_WINDOW_SIZE,
        documents: Optional[Sequence[Document]] = None,
    ) -> Tuple[SentimentWindow, ...]:
        """
        Score each document in windows of consecutive lines.

        The window of a token is ``line_number // window_size``. When the
        source documents are given, every window of every document is
        reported, including documents and windows without tokens;
        otherwise windows run up to the last line holding a token.

        :param tokens: Token records.
        :param lexicon: The lexicon to score with.
        :param window_size: Lines per window.
        :param documents: Optional source documents, used for line counts.
        :return: SentimentWindow records ordered by author, document, window.
        """
        validate_window_size(window_size, "in SentimentAnalyzer")
        tokens = tuple(tokens)
        validate_records(tokens, Token, "in SentimentAnalyzer")

        n_windows: Dict[Tuple[str, str], int] = {}
        for document in documents or ():
            key = (document.author, document.document_id)
            n_windows[key] = math.ceil(len(document.lines) / window_size)

        positive: Counter = Counter()
        negative: Counter = Counter()
        for token in tokens:
            key = (token.author, token.document_id)
            window = token.line_number // window_size
            n_windows[key] = max(n_windows.get(key, 0), window + 1)

            pos, neg = self.polarity(lexicon, token.word)
            positive[key + (window,)] += pos
            negative[key + (window,)] += neg

        rows = []
        for author, document_id in sorted(n_windows):
            for window in range(n_windows[(author, document_id)]):
                pos = positive[(author, document_id, window)]
                neg = negative[(author, document_id, window)]
                rows.append(
                    SentimentWindow(
                        lexicon=lexicon.name,
                        author=author,
                        document_id=document_id,
                        window_index=window,
                        positive=pos,
                        negative=neg,
                        sentiment=pos - neg,
                    )
                )

        if tokens and not any(positive.values()) and not any(negative.values()):
            suggest_alternatives_for_empty_results("sentiment", lexicon=lexicon.name)

        return tuple(rows)

    def sentiment_by_lexicon(
        self,
        tokens: Sequence[Token],
        lexicons: Iterable[Lexicon],
        window_size: int = CONFIG.DEFAULT_WINDOW_SIZE,
        documents: Optional[Sequence[Document]] = None,
    ) -> Tuple[SentimentWindow, ...]:
        """Concatenate the raw window scores of several lexicons."""
        tokens = tuple(tokens)
        rows: List[SentimentWindow] = []
        for lexicon in lexicons:
            rows.extend(
                self.sentiment_windows(tokens, lexicon, window_size, documents)
            )
        return tuple(rows)

    def word_contributions(
        self, tokens: Sequence[Token], lexicon: Lexicon
    ) -> Tuple[WordSentiment, ...]:
        """
        Count how often each matched word pushes an author's score up or down.

        :return: WordSentiment records ordered by count (descending), word,
            author, sentiment.
        """
        tokens = tuple(tokens)
        validate_records(tokens, Token, "in SentimentAnalyzer")

        counts: Counter = Counter()
        for token in tokens:
            pos, neg = self.polarity(lexicon, token.word)
            if pos:
                counts[(token.author, token.word, CONFIG.POSITIVE_LABEL)] += 1
            if neg:
                counts[(token.author, token.word, CONFIG.NEGATIVE_LABEL)] += 1

        rows = [
            WordSentiment(
                lexicon=lexicon.name,
                author=author,
                word=word,
                sentiment=sentiment,
                count=n,
            )
            for (author, word, sentiment), n in counts.items()
        ]
        rows.sort(key=lambda r: (-r.count, r.word, r.author, r.sentiment))
        return tuple(rows)


class NGramAnalyzer:
    """
    Handles n-gram extraction and co-occurrence analysis.

    N-grams are built from each line's units before any filtering, so
    adjacency is that of the original text. An n-gram with a malformed unit
    (a number, bare punctuation) or a stop word in any position is then
    dropped as a whole. N-grams never span lines.
    """

    def __init__(self):
        self.preprocessor = TextPreprocessor()
        self.chapter_detector = ChapterDetector()

    @staticmethod
    def ngrams_from_words(
        words: Sequence[str], span: int = CONFIG.DEFAULT_NGRAM_SPAN
    ) -> List[Tuple[str, ...]]:
        """
        Overlapping runs of ``span`` adjacent words.

        Example:
            >>> NGramAnalyzer.ngrams_from_words(["the", "quick", "brown"])
            [('the', 'quick'), ('quick', 'brown')]
        """
        validate_span_parameter(span, CONFIG.MAX_NGRAM_SPAN, "in NGramAnalyzer")
        return [tuple(words[i: i + span]) for i in range(len(words) - span + 1)]

    @staticmethod
    def filter_stop_ngrams(
        spans: Iterable[Tuple[str, ...]], stop_words: AbstractSet[str]
    ) -> List[Tuple[str, ...]]:
        """Drop every span that contains a stop word in any position."""
        return [s for s in spans if not any(w in stop_words for w in s)]

    @staticmethod
    def filter_malformed_ngrams(
        spans: Iterable[Tuple[Optional[str], ...]]
    ) -> List[Tuple[str, ...]]:
        """Drop every span that covers a malformed unit."""
        return [s for s in spans if None not in s]

    def ngrams(
        self,
        documents: Sequence[Document],
        span: int = CONFIG.DEFAULT_NGRAM_SPAN,
        stop_words: Optional[AbstractSet[str]] = None,
    ) -> Tuple[NGram, ...]:
        """
        Extract n-grams line by line from the source documents.

        :param documents: Document records.
        :param span: Words per n-gram (2 for bigrams).
        :param stop_words: Stop-word set; defaults to spaCy's English list.
        :return: NGram records in document, line and position order.
        """
        validate_span_parameter(span, CONFIG.MAX_NGRAM_SPAN, "in NGramAnalyzer")
        documents = tuple(documents)
        validate_records(documents, Document, "in NGramAnalyzer")
        if stop_words is None:
            stop_words = DEFAULT_STOP_WORDS

        with PerformanceMonitor(f"N-gram extraction (span={span})"):
            result = []
            for document in documents:
                chapters = self.chapter_detector.chapter_indices(document.lines)
                for line_number, line in enumerate(document.lines):
                    units = self.preprocessor.normalize_units(line)
                    spans = self.filter_stop_ngrams(
                        self.filter_malformed_ngrams(
                            self.ngrams_from_words(units, span)
                        ),
                        stop_words,
                    )
                    result.extend(
                        NGram(
                            document_id=document.document_id,
                            author=document.author,
                            line_number=line_number,
                            chapter=chapters[line_number],
                            words=s,
                        )
                        for s in spans
                    )

        if documents and not result:
            suggest_alternatives_for_empty_results("ngrams", span=span)

        return tuple(result)

    @staticmethod
    def ngram_counts(ngrams: Sequence[NGram]) -> Tuple[NGramCount, ...]:
        """
        Count n-grams per author.

        :return: NGramCount records ordered by count (descending), author, words.
        """
        ngrams = tuple(ngrams)
        validate_records(ngrams, NGram, "in NGramAnalyzer")
        counts = Counter((g.author, g.words) for g in ngrams)
        rows = [
            NGramCount(author=author, words=words, count=n)
            for (author, words), n in counts.items()
        ]
        rows.sort(key=lambda r: (-r.count, r.author, r.words))
        return tuple(rows)

    def ngram_tf_idf(
        self,
        ngrams: Sequence[NGram],
        group_by: str = "author",
        groups: Optional[Iterable[str]] = None,
    ) -> Tuple[TfIdfScore, ...]:
        """
        Score n-gram salience with the same tf-idf as single words.

        The term of each score is the n-gram's words joined by a space.
        """
        validate_group_by_parameter(group_by, GROUP_TYPES, "in NGramAnalyzer")
        ngrams = tuple(ngrams)
        validate_records(ngrams, NGram, "in NGramAnalyzer")

        group_counts: Dict[str, Counter] = defaultdict(Counter)
        for ngram in ngrams:
            term = CONFIG.NGRAM_SEPARATOR.join(ngram.words)
            group_counts[_group_key(ngram, group_by)][term] += 1
        return _score_tf_idf(group_counts, groups or ())

    @staticmethod
    def cooccurrence_graph(
        counts: Sequence[NGramCount],
        min_count: int = CONFIG.DEFAULT_MIN_COOCCURRENCE,
        author: Optional[str] = None,
    ) -> nx.DiGraph:
        """
        Build a weighted directed word graph from bigram counts.

        Counts are summed over authors unless ``author`` is given. Bigrams
        whose count exceeds ``min_count`` become edges ``word1 -> word2``
        with a ``weight`` attribute holding the count.
        """
        counts = tuple(counts)
        validate_records(counts, NGramCount, "in NGramAnalyzer")

        totals: Counter = Counter()
        for row in counts:
            if len(row.words) != 2:
                raise ParameterValidationError(
                    "Co-occurrence graphs are built from bigrams, "
                    f"got an n-gram of {len(row.words)} words: {row.words}"
                )
            if author is None or row.author == author:
                totals[row.words] += row.count

        graph = nx.DiGraph()
        for (first, second), n in sorted(totals.items()):
            if n > min_count:
                graph.add_edge(first, second, weight=n)

        if graph.number_of_edges() == 0:
            suggest_alternatives_for_empty_results(
                "cooccurrence", min_count=min_count, author=author
            )

        return graph


_PORTER = PorterStemmer()


@lru_cache(maxsize=None)
def porter_stem(word: str) -> str:
    """Porter stem of a word."""
    return _PORTER.stem(word)


def stem_to_fixed_point(
    word: str, stemmer: Callable[[str], str] = porter_stem, max_rounds: int = 10
) -> str:
    """
    Apply a stemmer until the result stops changing.

    A single pass of the Porter algorithm is not always idempotent
    ("agreed" -> "agre" -> "agr"), so repeated stemming keeps the
    collapsed vocabulary stable.
    """
    current = word
    for _ in range(max_rounds):
        stemmed = stemmer(current)
        if stemmed == current:
            break
        current = stemmed
    return current


class DocumentTermMatrix:
    """
    Sparse matrix of term counts, one row per author or document.

    The underlying scipy CSR matrix is never exposed for modification:
    transformations such as :meth:`stem` and :meth:`weight` return new
    matrices.

    Example:
        Summarize the vocabulary of a corpus::

            dtm = DocumentTermMatrix.from_frequency_table(table)
            print(dtm.shape, dtm.sparsity)
            print(dtm.top_terms(10))

            stemmed = dtm.stem()
    """

    def __init__(
        self,
        matrix: sparse.spmatrix,
        rows: Sequence[str],
        terms: Sequence[str],
    ):
        matrix = sparse.csr_matrix(matrix, copy=True)
        if matrix.shape != (len(rows), len(terms)):
            raise ParameterValidationError(
                f"Matrix shape {matrix.shape} does not match "
                f"{len(rows)} rows and {len(terms)} terms."
            )
        matrix.eliminate_zeros()
        self._matrix = matrix
        self.rows: Tuple[str, ...] = tuple(rows)
        self.terms: Tuple[str, ...] = tuple(terms)

    @classmethod
    def from_counts(
        cls, counts: Mapping[Tuple[str, str], int], rows: Iterable[str] = ()
    ) -> "DocumentTermMatrix":
        """Build a matrix from ``(row, term) -> count``; extra rows may be empty."""
        row_labels = sorted(set(rows) | {r for r, _ in counts})
        term_labels = sorted({t for (_, t), n in counts.items() if n})
        row_index = {r: i for i, r in enumerate(row_labels)}
        term_index = {t: j for j, t in enumerate(term_labels)}

        entries = [(row_index[r], term_index[t], n) for (r, t), n in counts.items() if n]
        if entries:
            i, j, data = zip(*entries)
        else:
            i, j, data = (), (), ()
        matrix = sparse.coo_matrix(
            (np.array(data, dtype=np.int64), (np.array(i, dtype=np.int64),
                                              np.array(j, dtype=np.int64))),
            shape=(len(row_labels), len(term_labels)),
        )
        return cls(matrix, row_labels, term_labels)

    @classmethod
    def from_frequency_table(cls, table: FrequencyTable) -> "DocumentTermMatrix":
        """Rows are the table's authors (empty authors included), columns its words."""
        return cls.from_counts(table.counts, rows=table.authors)

    @classmethod
    def from_tokens(
        cls, tokens: Sequence[Token], group_by: str = "author"
    ) -> "DocumentTermMatrix":
        """Rows are authors, documents or chapters, columns the token words."""
        validate_group_by_parameter(group_by, GROUP_TYPES, "in DocumentTermMatrix")
        tokens = tuple(tokens)
        validate_records(tokens, Token, "in DocumentTermMatrix")
        return cls.from_counts(Counter((_group_key(t, group_by), t.word) for t in tokens))

    @property
    def matrix(self) -> sparse.csr_matrix:
        return self._matrix.copy()

    @property
    def shape(self) -> Tuple[int, int]:
        return self._matrix.shape

    @property
    def nonzero(self) -> int:
        return int(self._matrix.nnz)

    @property
    def sparsity(self) -> float:
        """1 - nonzero / (rows * columns); 0.0 for a matrix with no cells."""
        n_cells = self.shape[0] * self.shape[1]
        if n_cells == 0:
            return 0.0
        return 1 - self.nonzero / n_cells

    def row_sums(self) -> Dict[str, float]:
        sums = np.asarray(self._matrix.sum(axis=1)).ravel()
        return {row: sums[i].item() for i, row in enumerate(self.rows)}

    def column_totals(self) -> Dict[str, float]:
        totals = np.asarray(self._matrix.sum(axis=0)).ravel()
        return {term: totals[j].item() for j, term in enumerate(self.terms)}

    def top_terms(self, n: int = CONFIG.DEFAULT_TOP_N) -> Tuple[TermTotal, ...]:
        """The n terms with the highest corpus-wide totals, ties by term."""
        if n < 0:
            raise ParameterValidationError(f"n must be non-negative, got {n}.")
        totals = sorted(self.column_totals().items(), key=lambda kv: (-kv[1], kv[0]))
        return tuple(TermTotal(term=t, count=c) for t, c in totals[:n])

    def summary(self) -> MatrixSummary:
        return MatrixSummary(
            rows=self.shape[0],
            columns=self.shape[1],
            nonzero=self.nonzero,
            sparsity=self.sparsity,
            max_term_length=max((len(t) for t in self.terms), default=0),
        )

    def stem(
        self, stemmer: Optional[Callable[[str], str]] = None
    ) -> "DocumentTermMatrix":
        """
        Collapse columns onto their stems, summing colliding columns.

        :param stemmer: A word -> stem function; defaults to the Porter
            stemmer. It is applied to a fixed point.
        """
        stemmer = stemmer or porter_stem
        stems = [stem_to_fixed_point(t, stemmer) for t in self.terms]
        stem_labels = sorted(set(stems))
        stem_index = {s: k for k, s in enumerate(stem_labels)}

        projection = sparse.csr_matrix(
            (
                np.ones(len(stems), dtype=self._matrix.dtype),
                (np.arange(len(stems)), [stem_index[s] for s in stems]),
            ),
            shape=(len(self.terms), len(stem_labels)),
        )
        with PerformanceMonitor("Document-term matrix stemming"):
            return DocumentTermMatrix(self._matrix @ projection, self.rows, stem_labels)

    def weight(self, scheme: str = "prop") -> "DocumentTermMatrix":
        """
        Weight the counts.

        :param scheme: 'prop' (counts divided by row totals) or 'tfidf'
            (row proportions multiplied by ln(rows / rows containing term)).
        """
        scheme_types = ["prop", "tfidf"]
        if scheme not in scheme_types:
            raise ParameterValidationError(
                f"Invalid weighting scheme: '{scheme}'\n"
                f"Valid options are: {', '.join(scheme_types)}"
            )

        n_rows, n_terms = self.shape
        if n_rows == 0 or n_terms == 0:
            return DocumentTermMatrix(
                self._matrix.astype(float), self.rows, self.terms
            )

        sums = np.asarray(self._matrix.sum(axis=1), dtype=float).ravel()
        inverse = np.divide(1.0, sums, out=np.zeros_like(sums), where=sums > 0)
        weighted = sparse.diags(inverse) @ self._matrix.astype(float)

        if scheme == "tfidf":
            doc_freq = np.asarray((self._matrix > 0).sum(axis=0), dtype=float).ravel()
            ratio = np.divide(
                n_rows, doc_freq, out=np.ones_like(doc_freq), where=doc_freq > 0
            )
            weighted = weighted @ sparse.diags(np.log(ratio))

        return DocumentTermMatrix(weighted, self.rows, self.terms)

    def to_coo(self) -> sparse.coo_matrix:
        return self._matrix.tocoo()

    def __repr__(self) -> str:
        return (
            f"DocumentTermMatrix(rows={self.shape[0]}, columns={self.shape[1]}, "
            f"nonzero={self.nonzero})"
        )
