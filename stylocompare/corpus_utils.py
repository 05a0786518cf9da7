"""
Misc. utility functions for loading corpora and lexicons and exporting results.

.. codeauthor:: The stylocompare developers
"""

import os
import warnings
from dataclasses import fields, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Tuple, Union

import polars as pl
from scipy.sparse import coo_matrix

from .analyzers import DocumentTermMatrix
from .models import Document, Lexicon, LexiconShape
from .validation import (
    DataFormatError,
    LexiconError,
    UnknownDocumentError,
    ValidationWarning,
    validate_corpus_dataframe,
    validate_directory_path,
    validate_lexicon_dataframe,
    validate_text_files_in_directory,
)


def get_text_paths(directory: str,
                   recursive=False) -> List:
    """
    Gets a list of full paths for all plain text files \
        in the given directory.

    :param directory: A string represting a path to directory.
    :param recursive: Whether or not to \
        recursively search through subdirectories.
    :return: A sorted list of paths to plain text (TXT) files.
    """
    full_paths = []
    if recursive is True:
        for root, dirs, files in os.walk(directory):
            for file in files:
                if file.endswith('.txt'):
                    full_paths.append(os.path.join(root, file))
    else:
        for file in Path(directory).glob("*.txt"):
            full_paths.append(str(file))
    return sorted(full_paths)


def readtext(paths: List,
             authors: Optional[Mapping[str, str]] = None) -> pl.DataFrame:
    """
    Read in text (TXT) files from a list of paths \
        into a polars DataFrame with one row per line.

    :param paths: A list of strings representing \
        paths to plain text (TXT) files.
    :param authors: A mapping from document id (the file name \
        without extension) to author. Unmapped documents use \
            their document id as author.
    :return: A polars DataFrame with 'doc_id', 'author', \
        'line_number' and 'text' columns.
    """
    authors = authors or {}
    doc_ids, doc_authors, line_numbers, texts = [], [], [], []
    for path in paths:
        doc_id = Path(path).stem
        lines = Path(path).read_text(encoding="utf-8").splitlines()
        doc_ids.extend([doc_id] * len(lines))
        doc_authors.extend([authors.get(doc_id, doc_id)] * len(lines))
        line_numbers.extend(range(len(lines)))
        texts.extend(lines)

    df = pl.DataFrame(
        {
            "doc_id": doc_ids,
            "author": doc_authors,
            "line_number": line_numbers,
            "text": texts,
        },
        schema={
            "doc_id": pl.String,
            "author": pl.String,
            "line_number": pl.Int64,
            "text": pl.String,
        },
    )
    return df.sort(["doc_id", "line_number"], descending=False)


def corpus_from_folder(directory: str,
                       authors: Optional[Mapping[str, str]] = None) -> pl.DataFrame:
    """
    A convenience function combining get_text_paths and readtext \
        to generate a line-level polars DataFrame.

    :param directory: A string representing the path \
        to a directory of text (TXT) files to be processed.
    :param authors: A mapping from document id to author.
    :return: A polars DataFrame with 'doc_id', 'author', \
        'line_number' and 'text' columns.
    """
    path = validate_directory_path(directory, "in corpus_from_folder")
    text_files = validate_text_files_in_directory(path, "in corpus_from_folder")
    return readtext([str(f) for f in text_files], authors=authors)


def documents_from_frame(corp: pl.DataFrame) -> Tuple[Document, ...]:
    """
    Convert a line-level corpus DataFrame into Document records.

    Documents keep the order in which they first appear; missing line
    numbers and null texts become blank lines.

    :param corp: A polars DataFrame with 'doc_id', 'author', \
        'line_number' and 'text' columns.
    :return: A tuple of Document records.
    """
    validate_corpus_dataframe(corp, "in documents_from_frame")

    grouped = (
        corp
        .with_columns(pl.col("text").fill_null(""))
        .sort("line_number")
        .group_by("doc_id", maintain_order=True)
        .agg(
            pl.col("author").first(),
            pl.col("line_number"),
            pl.col("text"),
        )
    )
    order = corp.get_column("doc_id").unique(maintain_order=True).to_list()
    rows = {row["doc_id"]: row for row in grouped.iter_rows(named=True)}

    documents = []
    for doc_id in order:
        row = rows[doc_id]
        lines = [""] * (max(row["line_number"]) + 1)
        for line_number, text in zip(row["line_number"], row["text"]):
            lines[line_number] = text
        documents.append(Document(doc_id, row["author"], tuple(lines)))
    return tuple(documents)


def documents_to_frame(documents: Iterable[Document]) -> pl.DataFrame:
    """
    Convert Document records back into a line-level corpus DataFrame.

    :param documents: Document records.
    :return: A polars DataFrame with 'doc_id', 'author', \
        'line_number' and 'text' columns.
    """
    return pl.DataFrame(
        [
            {
                "doc_id": doc.document_id,
                "author": doc.author,
                "line_number": i,
                "text": line,
            }
            for doc in documents
            for i, line in enumerate(doc.lines)
        ],
        schema={
            "doc_id": pl.String,
            "author": pl.String,
            "line_number": pl.Int64,
            "text": pl.String,
        },
    )


def fetch_documents(source: Mapping[str, Document],
                    document_ids: Iterable[str]) -> Tuple[Document, ...]:
    """
    Select documents by identifier from a corpus source.

    :param source: A mapping from document id to Document.
    :param document_ids: The identifiers wanted, in output order.
    :return: A tuple of Document records.
    :raises UnknownDocumentError: If any identifier is not in the source.
    """
    document_ids = list(document_ids)
    missing = [doc_id for doc_id in document_ids if doc_id not in source]
    if missing:
        raise UnknownDocumentError(
            f"Unknown document identifiers: {', '.join(missing)}\n"
            f"Available documents: {', '.join(sorted(source))}"
        )
    return tuple(source[doc_id] for doc_id in document_ids)


def lexicon_from_frame(lexicon: pl.DataFrame,
                       name: str,
                       shape: Union[str, LexiconShape]) -> Lexicon:
    """
    Build a Lexicon from a polars DataFrame.

    :param lexicon: A DataFrame with 'word' and 'sentiment' columns \
        ('binary' and 'categorical' shapes) or 'word' and 'value' \
            columns ('valence' shape).
    :param name: A name for the lexicon, reported with its scores.
    :param shape: One of 'binary', 'valence' or 'categorical'.
    :return: A Lexicon.
    """
    try:
        shape = LexiconShape(shape)
    except ValueError:
        raise LexiconError(
            f"Invalid lexicon shape: '{shape}'\n"
            f"Valid options are: {', '.join(s.value for s in LexiconShape)}"
        ) from None

    value_column = "value" if shape is LexiconShape.VALENCE else "sentiment"
    validate_lexicon_dataframe(lexicon, value_column, f"for lexicon '{name}'")

    frame = lexicon.select(
        pl.col("word").cast(pl.String).str.to_lowercase(),
        pl.col(value_column),
    )

    if shape is LexiconShape.VALENCE:
        try:
            frame = frame.with_columns(pl.col("value").cast(pl.Int64, strict=True))
        except (pl.exceptions.InvalidOperationError, pl.exceptions.ComputeError):
            raise LexiconError(
                f"Lexicon '{name}' has non-integer values."
            ) from None
        entries = dict(frame.unique(subset="word", keep="first",
                                    maintain_order=True).iter_rows())
        return Lexicon(name=name, shape=shape, entries=entries)

    frame = frame.with_columns(pl.col("sentiment").cast(pl.String).str.to_lowercase())

    if shape is LexiconShape.CATEGORICAL:
        grouped = frame.group_by("word", maintain_order=True).agg(pl.col("sentiment"))
        entries = {word: frozenset(labels) for word, labels in grouped.iter_rows()}
        return Lexicon(name=name, shape=shape, entries=entries)

    conflicts = (
        frame.unique()
        .group_by("word")
        .len()
        .filter(pl.col("len") > 1)
        .get_column("word")
        .sort()
        .to_list()
    )
    if conflicts:
        warnings.warn(
            f"Lexicon '{name}' labels {len(conflicts)} words more than once "
            f"(e.g. {', '.join(conflicts[:5])}); the first label is kept.",
            ValidationWarning,
        )
    entries = dict(frame.unique(subset="word", keep="first",
                                maintain_order=True).iter_rows())
    return Lexicon(name=name, shape=shape, entries=entries)


def load_lexicon(path: Union[str, Path],
                 name: Optional[str] = None,
                 shape: Union[str, LexiconShape] = "binary") -> Lexicon:
    """
    Read a sentiment lexicon from a CSV file.

    :param path: Path to a CSV file with a header row.
    :param name: A name for the lexicon; defaults to the file name.
    :param shape: One of 'binary', 'valence' or 'categorical'.
    :return: A Lexicon.
    """
    path = Path(path)
    if not path.is_file():
        raise LexiconError(f"Lexicon file does not exist: {path}")
    frame = pl.read_csv(path)
    return lexicon_from_frame(frame, name or path.stem, shape)


def _export_value(value):
    if isinstance(value, tuple):
        return list(value)
    if isinstance(value, Enum):
        return value.value
    return value


def records_to_frame(records: Iterable,
                     record_type: Optional[type] = None) -> pl.DataFrame:
    """
    Render a sequence of result records as a polars DataFrame.

    Columns are the record's field names; tuple fields become list columns.

    :param records: Result records (e.g. TfIdfScore, SentimentWindow).
    :param record_type: The record class, needed to name the columns \
        of an empty result.
    :return: A polars DataFrame with one row per record.
    """
    records = tuple(records)
    if record_type is None:
        if not records:
            raise DataFormatError(
                "Cannot infer columns from an empty result. "
                "Pass record_type to name the columns."
            )
        record_type = type(records[0])

    if not is_dataclass(record_type):
        raise DataFormatError(
            f"Expected result records, got {record_type.__name__}."
        )

    names = [f.name for f in fields(record_type)]
    return pl.DataFrame(
        {name: [_export_value(getattr(r, name)) for r in records] for name in names}
    )


def dtm_to_coo(dtm: DocumentTermMatrix) -> Tuple[coo_matrix, List[str], List[str]]:
    """
    A function for converting a document-term matrix to a COOrdinate format.

    :param dtm: A DocumentTermMatrix.
    :return: A COOrdinate format matrix, \
        a list of row labels, \
            and a list of terms.
    """
    return dtm.to_coo(), list(dtm.rows), list(dtm.terms)


def dtm_to_frame(dtm: DocumentTermMatrix) -> pl.DataFrame:
    """
    A function for converting a document-term matrix \
        to a wide polars DataFrame.

    :param dtm: A DocumentTermMatrix.
    :return: A polars DataFrame with a 'doc_id' column \
        followed by one column per term.
    """
    dense = dtm.matrix.toarray()
    data = {"doc_id": list(dtm.rows)}
    for j, term in enumerate(dtm.terms):
        data[term] = dense[:, j]
    return pl.DataFrame(data)
