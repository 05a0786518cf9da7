"""
Core processing classes for turning raw novels into tokens.

This module provides the tokenization pipeline for a corpus of documents,
from validation and text cleanup through chapter detection, word
normalization and stop-word removal. The classes are designed to work
together as a pipeline while also being usable independently.

Classes:
    CorpusValidator: Validates corpus frames and document records
    TextPreprocessor: Handles text cleanup, word splitting and normalization
    ChapterDetector: Assigns running chapter indices from heading lines
    CorpusProcessor: Main orchestrator for the tokenization pipeline

Example:
    Basic usage with the main processor::

        from stylocompare.models import Document
        from stylocompare.processors import CorpusProcessor

        documents = [
            Document("emma", "Austen", ["CHAPTER I", "Emma Woodhouse, handsome"]),
            Document("inferno", "Dante", ["CANTO I", "Midway upon the journey"]),
        ]

        processor = CorpusProcessor()
        tokens = processor.process_documents(documents)

.. codeauthor:: The stylocompare developers
"""

from typing import AbstractSet, Iterable, List, Optional, Sequence, Tuple

import polars as pl
from spacy.lang.en.stop_words import STOP_WORDS

from .config import PATTERNS
from .models import Document, Token
from .performance import PerformanceMonitor, ProgressTracker
from .validation import validate_corpus_dataframe, validate_records


DEFAULT_STOP_WORDS = frozenset(STOP_WORDS)


class CorpusValidator:
    """
    Validates corpus data before tokenization.

    Example:
        Validate a corpus frame before processing::

            import polars as pl
            from stylocompare.processors import CorpusValidator

            corpus = pl.DataFrame({
                'doc_id': ['emma'],
                'author': ['Austen'],
                'line_number': [0],
                'text': ['CHAPTER I'],
            })

            # This will raise an exception if validation fails
            CorpusValidator.validate_corpus_schema(corpus)
    """

    @staticmethod
    def validate_corpus_schema(corp: pl.DataFrame) -> None:
        """
        Validate that a line-level corpus frame has the expected schema.

        Args:
            corp: A polars DataFrame with 'doc_id', 'author', 'line_number'
                and 'text' columns.

        Raises:
            CorpusValidationError: If the corpus doesn't meet validation requirements.
        """
        validate_corpus_dataframe(corp, "in CorpusProcessor")

    @staticmethod
    def validate_documents(documents: Sequence[Document]) -> None:
        """
        Validate that every item is a Document.

        Raises:
            DataFormatError: If any item is not a Document record.
        """
        validate_records(documents, Document, "in CorpusProcessor")


class TextPreprocessor:
    """
    Handles text cleanup and word normalization.

    Example:
        Use individual preprocessing methods::

            from stylocompare.processors import TextPreprocessor

            preprocessor = TextPreprocessor()

            preprocessor.split_words("Don’t stop--now!")
            # Result: ["Don't", 'stop', 'now']

            preprocessor.normalize_word("_Emma_")
            # Result: 'emma'
    """

    @staticmethod
    def replace_curly_quotes(text: str) -> str:
        """
        Replace curly/smart quotes with straight ASCII quotes.

        Converts Unicode curly quotes (left and right, single and double)
        to standard ASCII quote characters so that apostrophes survive
        normalization.

        Example:
            >>> TextPreprocessor.replace_curly_quotes("don’t")
            "don't"
        """
        replacements = {
            "‘": "'",  # Left single quote
            "’": "'",  # Right single quote
            "“": '"',  # Left double quote
            "”": '"',  # Right double quote
        }

        for old, new in replacements.items():
            text = text.replace(old, new)
        return text

    def split_words(self, line: str) -> List[str]:
        """Split a line on whitespace and punctuation, keeping apostrophes."""
        if not line:
            return []
        line = self.replace_curly_quotes(line)
        return [unit for unit in PATTERNS.WORD_SPLIT.split(line) if unit]

    @staticmethod
    def normalize_word(unit: str) -> Optional[str]:
        """
        Lowercase a word-like unit and strip everything outside [a-z'].

        Leading and trailing apostrophes are removed so quoted speech does
        not leak into the token. Returns None when nothing valid is left.

        Example:
            >>> TextPreprocessor.normalize_word("'Tis")
            'tis'
            >>> TextPreprocessor.normalize_word("1820") is None
            True
        """
        core = PATTERNS.NON_TOKEN_CHARS.sub("", unit.lower()).strip("'")
        if not core or not PATTERNS.VALID_TOKEN.match(core):
            return None
        return core

    def normalize_units(self, line: str) -> List[Optional[str]]:
        """
        Normalized form of every unit in a line, None where a unit is malformed.

        Positions line up with the split units, so adjacency survives.

        Example:
            >>> TextPreprocessor().normalize_units("quick 1820 brown")
            ['quick', None, 'brown']
        """
        return [self.normalize_word(unit) for unit in self.split_words(line)]

    def normalize_line(self, line: str) -> List[str]:
        """Normalized words of a line, malformed units dropped, stop words kept."""
        return [word for word in self.normalize_units(line) if word is not None]


class ChapterDetector:
    """
    Assigns chapter indices to lines by counting heading lines.

    A heading is a line starting with "chapter" or "canto" followed by an
    arabic or roman numeral, in any case. Lines before the first heading
    belong to chapter 0.

    Example:
        >>> ChapterDetector().chapter_indices(["Preface", "CHAPTER I", "text"])
        [0, 1, 1]
    """

    @staticmethod
    def is_heading(line: str) -> bool:
        return bool(line) and PATTERNS.CHAPTER_HEADING.match(line) is not None

    def chapter_indices(self, lines: Iterable[str]) -> List[int]:
        indices = []
        chapter = 0
        for line in lines:
            if self.is_heading(line):
                chapter += 1
            indices.append(chapter)
        return indices


class CorpusProcessor:
    """Main class that orchestrates the tokenization pipeline."""

    def __init__(self):
        self.validator = CorpusValidator()
        self.preprocessor = TextPreprocessor()
        self.chapter_detector = ChapterDetector()

    def tokenize_document(
        self, document: Document, stop_words: AbstractSet[str] = DEFAULT_STOP_WORDS
    ) -> Tuple[Token, ...]:
        """
        Tokenize a single document.

        :param document: A Document record.
        :param stop_words: Words removed after normalization.
        :return: Tokens in line order, then word order.
        """
        chapters = self.chapter_detector.chapter_indices(document.lines)
        tokens = []
        for line_number, (line, chapter) in enumerate(zip(document.lines, chapters)):
            for word in self.preprocessor.normalize_line(line):
                if word in stop_words:
                    continue
                tokens.append(
                    Token(
                        document_id=document.document_id,
                        author=document.author,
                        line_number=line_number,
                        chapter=chapter,
                        word=word,
                    )
                )
        return tuple(tokens)

    def process_documents(
        self,
        documents: Sequence[Document],
        stop_words: Optional[AbstractSet[str]] = None,
        show_progress: Optional[bool] = None,
    ) -> Tuple[Token, ...]:
        """
        Tokenize a corpus using the complete pipeline.

        :param documents: Document records, processed in the order given.
        :param stop_words: Stop-word set; defaults to spaCy's English list.
            Pass an empty set to keep every word.
        :param show_progress: Whether to log progress. If None, progress is
            logged for corpora above the configured line threshold.
        :return: A tuple of Token records in document, line and word order.
        """
        if stop_words is None:
            stop_words = DEFAULT_STOP_WORDS

        with PerformanceMonitor("Corpus tokenization"):
            documents = tuple(documents)
            self.validator.validate_documents(documents)

            total_lines = sum(len(doc) for doc in documents)
            progress = ProgressTracker(total_lines, "Tokenizing corpus")
            if show_progress is not None:
                progress.show_progress = show_progress

            tokens: List[Token] = []
            for document in documents:
                tokens.extend(self.tokenize_document(document, stop_words))
                progress.update(len(document))

            progress.finish()
            return tuple(tokens)
