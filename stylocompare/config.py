"""
Configuration constants for stylocompare.

.. codeauthor:: The stylocompare developers
"""

from dataclasses import dataclass
import re


@dataclass
class ProcessingConfig:
    """Configuration constants for corpus comparison."""

    # Sentiment windows (lines per window)
    DEFAULT_WINDOW_SIZE: int = 80

    # N-gram defaults
    DEFAULT_NGRAM_SPAN: int = 2
    MAX_NGRAM_SPAN: int = 5
    NGRAM_SEPARATOR: str = " "

    # Co-occurrence graph: pairs must exceed this count
    DEFAULT_MIN_COOCCURRENCE: int = 20

    # Matrix summaries
    DEFAULT_TOP_N: int = 10

    # Chapter groups for tf-idf
    CHAPTER_GROUP_SEPARATOR: str = ":"

    # Sentiment labels
    POSITIVE_LABEL: str = "positive"
    NEGATIVE_LABEL: str = "negative"

    # Monitoring
    PROGRESS_THRESHOLD: int = 50000  # lines to log progress
    SLOW_OPERATION_SECONDS: float = 5.0
    LARGE_CORPUS_LINES: int = 1000000


@dataclass
class RegexPatterns:
    """Compiled regex patterns for text processing."""

    CHAPTER_HEADING = re.compile(
        r"^\s*(chapter|canto)\s+([0-9]+|[ivxlcdm]+)\b", re.IGNORECASE
    )
    WORD_SPLIT = re.compile(r"[^\w']+")
    NON_TOKEN_CHARS = re.compile(r"[^a-z']")
    VALID_TOKEN = re.compile(r"^[a-z][a-z']*$")


# Global configuration instance
CONFIG = ProcessingConfig()
PATTERNS = RegexPatterns()
