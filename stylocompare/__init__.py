"""
stylocompare: Exploratory comparison of authorial style across novels.

This package provides tools for tokenizing a small corpus of novels and
comparing its authors through word frequencies, tf-idf salience, sentiment
trajectories, bigram co-occurrence and document-term matrices. Results are
tuples of immutable records that can be exported as polars DataFrames.
"""

# Core analysis functions
from .corpus_analysis import (
    tokenize_corpus,
    frequency_table,
    relative_frequency,
    tfidf_table,
    author_correlation,
    frequency_comparison,
    keyness_table,
    sentiment_table,
    sentiment_comparison,
    sentiment_contributions,
    ngrams,
    ngram_table,
    ngram_tfidf,
    cooccurrence_graph,
    document_term_matrix,
    dtm_summary,
    top_terms,
    stem_dtm,
    dtm_weight,
)

# Utility functions
from .corpus_utils import (
    get_text_paths,
    readtext,
    corpus_from_folder,
    documents_from_frame,
    documents_to_frame,
    fetch_documents,
    lexicon_from_frame,
    load_lexicon,
    records_to_frame,
    dtm_to_coo,
    dtm_to_frame,
)

# Modular analyzers and processors
from .analyzers import (
    FrequencyAnalyzer,
    KeynessAnalyzer,
    SentimentAnalyzer,
    NGramAnalyzer,
    DocumentTermMatrix,
)

from .processors import (
    CorpusValidator,
    TextPreprocessor,
    ChapterDetector,
    CorpusProcessor,
    DEFAULT_STOP_WORDS,
)

# Records
from .models import (
    Document,
    Token,
    FrequencyTable,
    WordFrequency,
    TfIdfScore,
    Correlation,
    FrequencyComparison,
    KeynessScore,
    LexiconShape,
    Lexicon,
    SentimentWindow,
    WordSentiment,
    NGram,
    NGramCount,
    TermTotal,
    MatrixSummary,
)

# Configuration
from .config import ProcessingConfig, RegexPatterns

# Performance utilities
from .performance import ProgressTracker, PerformanceMonitor

# Validation and error handling
from .validation import (
    # Exception classes
    StyloCompareError,
    CorpusValidationError,
    UnknownDocumentError,
    LexiconError,
    DataFormatError,
    ParameterValidationError,
    FileSystemError,
    ValidationWarning,
    PerformanceWarning,
    # Validation functions
    validate_corpus_dataframe,
    validate_lexicon_dataframe,
    validate_directory_path,
    validate_text_files_in_directory,
    validate_group_by_parameter,
    validate_span_parameter,
    validate_window_size,
    suggest_alternatives_for_empty_results,
)

# Package metadata
__version__ = "0.1.0"
__author__ = "The stylocompare developers"
__email__ = "stylocompare@example.org"

# Public API - define what gets imported with "from stylocompare import *"
__all__ = [
    # Core analysis functions
    "tokenize_corpus",
    "frequency_table",
    "relative_frequency",
    "tfidf_table",
    "author_correlation",
    "frequency_comparison",
    "keyness_table",
    "sentiment_table",
    "sentiment_comparison",
    "sentiment_contributions",
    "ngrams",
    "ngram_table",
    "ngram_tfidf",
    "cooccurrence_graph",
    "document_term_matrix",
    "dtm_summary",
    "top_terms",
    "stem_dtm",
    "dtm_weight",
    # Utility functions
    "get_text_paths",
    "readtext",
    "corpus_from_folder",
    "documents_from_frame",
    "documents_to_frame",
    "fetch_documents",
    "lexicon_from_frame",
    "load_lexicon",
    "records_to_frame",
    "dtm_to_coo",
    "dtm_to_frame",
    # Analyzers and processors
    "FrequencyAnalyzer",
    "KeynessAnalyzer",
    "SentimentAnalyzer",
    "NGramAnalyzer",
    "DocumentTermMatrix",
    "CorpusValidator",
    "TextPreprocessor",
    "ChapterDetector",
    "CorpusProcessor",
    "DEFAULT_STOP_WORDS",
    # Records
    "Document",
    "Token",
    "FrequencyTable",
    "WordFrequency",
    "TfIdfScore",
    "Correlation",
    "FrequencyComparison",
    "KeynessScore",
    "LexiconShape",
    "Lexicon",
    "SentimentWindow",
    "WordSentiment",
    "NGram",
    "NGramCount",
    "TermTotal",
    "MatrixSummary",
    # Configuration
    "ProcessingConfig",
    "RegexPatterns",
    # Performance utilities
    "ProgressTracker",
    "PerformanceMonitor",
    # Validation and error handling
    "StyloCompareError",
    "CorpusValidationError",
    "UnknownDocumentError",
    "LexiconError",
    "DataFormatError",
    "ParameterValidationError",
    "FileSystemError",
    "ValidationWarning",
    "PerformanceWarning",
    "validate_corpus_dataframe",
    "validate_lexicon_dataframe",
    "validate_directory_path",
    "validate_text_files_in_directory",
    "validate_group_by_parameter",
    "validate_span_parameter",
    "validate_window_size",
    "suggest_alternatives_for_empty_results",
]
