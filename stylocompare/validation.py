"""
Error handling and validation utilities for stylocompare.

This module provides the package's exception classes, validation functions,
and user-friendly error messages with actionable suggestions for common
corpus comparison issues.

Exception Classes:
    StyloCompareError: Base exception for all stylocompare errors
    CorpusValidationError: Corpus structure and content validation
    UnknownDocumentError: Unknown document identifier from a corpus source
    LexiconError: Sentiment lexicon structure validation
    DataFormatError: Record type validation
    ParameterValidationError: Function parameter validation
    FileSystemError: File and directory access validation
    ValidationWarning: Non-fatal validation warnings
    PerformanceWarning: Performance-related warnings

Validation Functions:
    validate_corpus_dataframe: Validate line-level corpus DataFrame structure
    validate_lexicon_dataframe: Validate lexicon DataFrame structure
    validate_records: Validate that records are of the expected type
    validate_directory_path: Validate directory existence and access
    validate_text_files_in_directory: Validate text file availability
    validate_group_by_parameter: Validate grouping parameters
    validate_span_parameter: Validate n-gram span parameters
    validate_window_size: Validate sentiment window parameters
    suggest_alternatives_for_empty_results: Alternative suggestions

Example:
    Using validation functions::

        import polars as pl
        from stylocompare.validation import validate_corpus_dataframe

        corpus = pl.DataFrame({
            'doc_id': ['emma', 'emma'],
            'author': ['Austen', 'Austen'],
            'line_number': [0, 1],
            'text': ['CHAPTER I', 'Emma Woodhouse, handsome, clever, and rich']
        })

        try:
            validate_corpus_dataframe(corpus)
        except CorpusValidationError as e:
            print(f"Validation failed: {e}")

    Custom error handling::

        from stylocompare.validation import StyloCompareError

        try:
            # Your stylocompare operations
            pass
        except StyloCompareError as e:
            # Handle all stylocompare-specific errors
            print(f"stylocompare error: {e}")

.. codeauthor:: The stylocompare developers
"""

import warnings
from typing import Iterable, List, Union
from pathlib import Path
import polars as pl

from .config import CONFIG


class StyloCompareError(Exception):
    """
    Base exception class for all stylocompare errors.

    This is the parent class for all custom exceptions in the stylocompare
    package. It allows for catching all stylocompare-specific errors with
    a single except clause.

    Example:
        Catch all stylocompare errors::

            from stylocompare.validation import StyloCompareError

            try:
                documents = sc.fetch_documents(library, ["emma", "persuasion"])
            except StyloCompareError as e:
                print(f"Corpus comparison failed: {e}")
    """

    pass


class CorpusValidationError(StyloCompareError):
    """
    Raised when corpus DataFrame validation fails.

    This exception is raised when the input corpus doesn't meet the
    required structure or content standards for processing.

    Common causes:
        - Missing required columns ('doc_id', 'author', 'line_number', 'text')
        - Empty corpus or missing data
        - Invalid data types
        - Duplicate (doc_id, line_number) pairs
        - A document attributed to more than one author

    Example:
        >>> import polars as pl
        >>> from stylocompare.validation import validate_corpus_dataframe
        >>>
        >>> # This will raise CorpusValidationError
        >>> invalid_corpus = pl.DataFrame({'wrong_col': ['data']})
        >>> validate_corpus_dataframe(invalid_corpus)
        CorpusValidationError: Invalid corpus DataFrame schema...
    """

    pass


class UnknownDocumentError(StyloCompareError):
    """Raised when a corpus source has no document for an identifier."""

    pass


class LexiconError(StyloCompareError):
    """Raised when a sentiment lexicon is malformed."""

    pass


class DataFormatError(StyloCompareError):
    """Raised when data format is incorrect."""

    pass


class ParameterValidationError(StyloCompareError):
    """Raised when function parameters are invalid."""

    pass


class FileSystemError(StyloCompareError):
    """Raised when file system operations fail."""

    pass


class ValidationWarning(UserWarning):
    """Warning for potentially problematic but non-fatal issues."""

    pass


class PerformanceWarning(UserWarning):
    """Warning for performance-related issues."""

    pass


CORPUS_COLUMNS = ("doc_id", "author", "line_number", "text")


def validate_corpus_dataframe(corp: pl.DataFrame, context: str = "") -> None:
    """
    Comprehensive validation of a line-level corpus DataFrame.

    :param corp: DataFrame to validate, one row per line of text
    :param context: Context for error messages (e.g., "in documents_from_frame")
    """
    if corp is None:
        raise CorpusValidationError(
            f"Corpus DataFrame is None {context}. "
            "Please provide a valid DataFrame with 'doc_id', 'author', "
            "'line_number' and 'text' columns."
        )

    if corp.height == 0:
        raise CorpusValidationError(
            f"Corpus DataFrame is empty {context}. "
            "Please provide a DataFrame with at least one row of data."
        )

    actual_schema = corp.collect_schema()

    missing_cols = [col for col in CORPUS_COLUMNS if col not in actual_schema]
    wrong_types = {}
    for col in ("doc_id", "author", "text"):
        if col in actual_schema and actual_schema[col] != pl.String:
            wrong_types[col] = ("String", actual_schema[col])
    if "line_number" in actual_schema and not actual_schema["line_number"].is_integer():
        wrong_types["line_number"] = ("integer", actual_schema["line_number"])

    if missing_cols or wrong_types:
        error_msg = f"Invalid corpus DataFrame schema {context}.\n"

        if missing_cols:
            error_msg += f"Missing columns: {', '.join(missing_cols)}\n"

        if wrong_types:
            error_msg += "Incorrect column types:\n"
            for col, (expected, actual) in wrong_types.items():
                error_msg += f"  {col}: expected {expected}, got {actual}\n"

        error_msg += (
            "\nExpected schema: doc_id (String), author (String), "
            "line_number (integer), text (String)"
        )

        raise CorpusValidationError(error_msg)

    # Check for common data issues
    for col in ("doc_id", "author", "line_number"):
        null_count = corp.filter(pl.col(col).is_null()).height
        if null_count > 0:
            raise CorpusValidationError(
                f"Found {null_count} rows with null {col} {context}. "
                f"Every line must have a valid {col}."
            )

    if corp.filter(pl.col("line_number") < 0).height > 0:
        raise CorpusValidationError(
            f"Found negative line numbers {context}. "
            "Line numbers are 0-based positions within a document."
        )

    duplicate_lines = (
        corp.group_by(["doc_id", "line_number"]).len().filter(pl.col("len") > 1)
    )
    if duplicate_lines.height > 0:
        duplicates = duplicate_lines.get_column("doc_id").unique().sort().to_list()[:5]
        raise CorpusValidationError(
            f"Found duplicate line numbers {context} in documents: "
            f"{', '.join(duplicates)}\n"
            "Each (doc_id, line_number) pair must be unique."
        )

    multi_author = (
        corp.group_by("doc_id")
        .agg(pl.col("author").n_unique().alias("n_authors"))
        .filter(pl.col("n_authors") > 1)
    )
    if multi_author.height > 0:
        docs = multi_author.get_column("doc_id").sort().to_list()[:5]
        raise CorpusValidationError(
            f"Documents attributed to more than one author {context}: "
            f"{', '.join(docs)}"
        )

    # Warnings for potentially problematic data
    null_texts = corp.filter(pl.col("text").is_null()).height
    if null_texts > 0:
        warnings.warn(
            f"Found {null_texts} lines with null text {context}. "
            "These will be treated as blank lines.",
            ValidationWarning,
        )

    if corp.height > CONFIG.LARGE_CORPUS_LINES:
        warnings.warn(
            f"Large corpus detected ({corp.height:,} lines) {context}. "
            "Analysis runs in memory and may be slow.",
            PerformanceWarning,
        )


def validate_lexicon_dataframe(
    lexicon: pl.DataFrame, value_column: str, context: str = ""
) -> None:
    """
    Validate a lexicon DataFrame before it is turned into a Lexicon.

    :param lexicon: DataFrame with a 'word' column and a value column
    :param value_column: 'sentiment' for labelled lexicons, 'value' for valence
    :param context: Context for error messages
    """
    if lexicon is None or lexicon.height == 0:
        raise LexiconError(f"Lexicon DataFrame is empty {context}.")

    missing = {"word", value_column} - set(lexicon.columns)
    if missing:
        raise LexiconError(
            f"Lexicon DataFrame missing columns {context}: "
            f"{', '.join(sorted(missing))}\n"
            f"Expected columns: word, {value_column}"
        )

    if lexicon.filter(
        pl.col("word").is_null() | pl.col(value_column).is_null()
    ).height > 0:
        raise LexiconError(
            f"Lexicon DataFrame contains null words or {value_column}s {context}."
        )


def validate_records(records: Iterable, record_type: type, context: str = "") -> None:
    """
    Validate that every record is an instance of the expected type.

    :param records: Sequence of records
    :param record_type: Expected record class
    :param context: Context for error messages
    """
    for record in records:
        if not isinstance(record, record_type):
            raise DataFormatError(
                f"Expected {record_type.__name__} records {context}, "
                f"got {type(record).__name__}."
            )


def validate_directory_path(directory: Union[str, Path], context: str = "") -> Path:
    """
    Validate directory path and provide helpful error messages.

    :param directory: Directory path to validate
    :param context: Context for error messages
    :return: Validated Path object
    """
    if directory is None:
        raise FileSystemError(
            f"Directory path is None {context}. "
            "Please provide a valid directory path."
        )

    if isinstance(directory, str) and directory.strip() == "":
        raise FileSystemError(
            f"Directory path is empty {context}. "
            "Please provide a valid directory path."
        )

    path = Path(directory)

    if not path.exists():
        parent = path.parent
        if parent.exists():
            similar_dirs = [
                d.name
                for d in parent.iterdir()
                if d.is_dir() and d.name.lower().startswith(path.name[:3].lower())
            ]
            suggestion = ""
            if similar_dirs:
                suggestion = f"\nDid you mean: {', '.join(similar_dirs[:3])}?"
        else:
            suggestion = f"\nParent directory also doesn't exist: {parent}"

        raise FileSystemError(
            f"Directory does not exist {context}: {path}{suggestion}\n"
            "Please check the path and ensure the directory exists."
        )

    if not path.is_dir():
        raise FileSystemError(
            f"Path is not a directory {context}: {path}\n"
            "Please provide a path to a directory, not a file."
        )

    return path


def validate_text_files_in_directory(directory: Path, context: str = "") -> List[Path]:
    """
    Validate that directory contains text files.

    :param directory: Directory to check
    :param context: Context for error messages
    :return: Sorted list of text file paths
    """
    text_files = sorted(directory.glob("*.txt"))

    if len(text_files) == 0:
        other_files = list(directory.glob("*"))
        error_msg = f"No .txt files found in directory {context}: {directory}\n"

        if len(other_files) == 0:
            error_msg += "The directory is empty."
        else:
            error_msg += (
                f"Found {len(other_files)} files, but none with .txt extension.\n"
                "Only plain text (.txt) novels are supported."
            )

        raise FileSystemError(error_msg)

    return text_files


def validate_group_by_parameter(
    group_by: str, valid_types: List[str], context: str = ""
) -> None:
    """
    Validate group_by parameter with helpful suggestions.

    :param group_by: Parameter value to validate
    :param valid_types: List of valid values
    :param context: Context for error messages
    """
    if group_by not in valid_types:
        suggestions = []
        if str(group_by).lower() in [v.lower() for v in valid_types]:
            suggestions = [v for v in valid_types if v.lower() == str(group_by).lower()]
        else:
            for valid_type in valid_types:
                if str(group_by).startswith(valid_type[:2]) or valid_type.startswith(
                    str(group_by)[:2]
                ):
                    suggestions.append(valid_type)

        error_msg = f"Invalid group_by parameter {context}: '{group_by}'\n"
        error_msg += f"Valid options are: {', '.join(valid_types)}"

        if suggestions:
            error_msg += f"\nDid you mean: {', '.join(suggestions)}?"

        raise ParameterValidationError(error_msg)


def validate_span_parameter(span: int, max_span: int = 5, context: str = "") -> None:
    """
    Validate span parameter for n-grams.

    :param span: Span value to validate
    :param max_span: Largest supported span
    :param context: Context for error messages
    """
    if not isinstance(span, int) or isinstance(span, bool):
        raise ParameterValidationError(
            f"Span must be an integer {context}, got {type(span).__name__}: {span}"
        )

    if span < 2:
        raise ParameterValidationError(
            f"Span must be at least 2 {context}, got {span}. "
            "Use span=2 for bigrams, span=3 for trigrams, etc."
        )

    if span > max_span:
        raise ParameterValidationError(
            f"Span too large {context}: {span}. "
            f"Maximum supported span is {max_span}."
        )


def validate_window_size(window_size: int, context: str = "") -> None:
    """
    Validate the number of lines per sentiment window.

    :param window_size: Window size to validate
    :param context: Context for error messages
    """
    if not isinstance(window_size, int) or isinstance(window_size, bool):
        raise ParameterValidationError(
            f"Window size must be an integer {context}, "
            f"got {type(window_size).__name__}: {window_size}"
        )

    if window_size < 1:
        raise ParameterValidationError(
            f"Window size must be at least 1 line {context}, got {window_size}."
        )


def suggest_alternatives_for_empty_results(operation: str, **kwargs):
    """Provide suggestions when operations return empty results."""
    suggestions = []

    if operation == "cooccurrence":
        min_count = kwargs.get("min_count", 20)
        if min_count > 1:
            suggestions.append(f"Try reducing min_count (currently {min_count})")

        author = kwargs.get("author")
        if author:
            suggestions.append(f"Check that '{author}' has bigrams in the corpus")

    elif operation == "ngrams":
        span = kwargs.get("span", 2)
        if span > 2:
            suggestions.append(f"Try using a smaller span (currently {span})")
        suggestions.append("Try passing a smaller stop-word set")

    elif operation == "sentiment":
        lexicon = kwargs.get("lexicon", "")
        suggestions.append(
            f"Check that lexicon '{lexicon}' covers the corpus vocabulary"
        )

    if suggestions:
        warning_msg = f"No results found for {operation}. Suggestions:\n"
        warning_msg += "\n".join(f"- {s}" for s in suggestions)
        warnings.warn(warning_msg, ValidationWarning)
