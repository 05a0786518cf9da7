"""
Record types passed between the stages of a corpus comparison.

Every record is a frozen dataclass and every collection a tuple or a
read-only mapping, so results computed from a corpus are snapshots that
downstream stages cannot alter. The field names double as column names
when records are exported with :func:`stylocompare.corpus_utils.records_to_frame`.

.. codeauthor:: The stylocompare developers
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Tuple, Union

from .validation import LexiconError


@dataclass(frozen=True)
class Document:
    """A loaded text: identifier, author label and its raw lines."""

    document_id: str
    author: str
    lines: Tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(self, "lines", tuple(self.lines))

    def __len__(self) -> int:
        return len(self.lines)


@dataclass(frozen=True)
class Token:
    """A normalized word with its position in the corpus."""

    document_id: str
    author: str
    line_number: int
    chapter: int
    word: str


@dataclass(frozen=True)
class FrequencyTable:
    """
    Occurrence counts keyed by ``(author, word)``.

    Authors can be declared with no words at all; they keep a total of
    zero and are reported as empty groups by the frequency analyzer.

    Example:
        >>> table = FrequencyTable.from_counts({("Austen", "emma"): 3})
        >>> table.total("Austen")
        3
    """

    counts: Mapping[Tuple[str, str], int]
    authors: Tuple[str, ...]

    @classmethod
    def from_counts(
        cls,
        counts: Mapping[Tuple[str, str], int],
        authors: Optional[Iterable[str]] = None,
    ) -> "FrequencyTable":
        declared = set(authors or ())
        declared.update(author for author, _ in counts)
        frozen = {key: int(n) for key, n in sorted(counts.items()) if n > 0}
        return cls(counts=MappingProxyType(frozen), authors=tuple(sorted(declared)))

    def total(self, author: str) -> int:
        return sum(n for (a, _), n in self.counts.items() if a == author)

    def counts_for(self, author: str) -> Dict[str, int]:
        return {w: n for (a, w), n in self.counts.items() if a == author}

    @property
    def vocabulary(self) -> Tuple[str, ...]:
        return tuple(sorted({w for _, w in self.counts}))

    def items(self):
        return self.counts.items()

    def __len__(self) -> int:
        return len(self.counts)


@dataclass(frozen=True)
class WordFrequency:
    author: str
    word: str
    count: int
    proportion: float


@dataclass(frozen=True)
class TfIdfScore:
    group: str
    term: str
    count: int
    tf: float
    idf: float
    tf_idf: float


@dataclass(frozen=True)
class Correlation:
    author_a: str
    author_b: str
    estimate: float
    p_value: float
    n_terms: int


@dataclass(frozen=True)
class FrequencyComparison:
    author: str
    word: str
    proportion: float
    reference_proportion: float


@dataclass(frozen=True)
class KeynessScore:
    word: str
    count_target: int
    count_reference: int
    log_likelihood: float
    p_value: float
    log_ratio: float


class LexiconShape(str, Enum):
    """How a lexicon encodes sentiment."""

    BINARY = "binary"
    VALENCE = "valence"
    CATEGORICAL = "categorical"


def _valid_entry(shape: LexiconShape, entry) -> bool:
    if shape is LexiconShape.VALENCE:
        return isinstance(entry, int) and not isinstance(entry, bool)
    if shape is LexiconShape.BINARY:
        return isinstance(entry, str)
    return isinstance(entry, (set, frozenset)) and all(
        isinstance(label, str) for label in entry
    )


@dataclass(frozen=True)
class Lexicon:
    """
    Read-only sentiment reference data.

    ``entries`` maps a word to a label (``binary``), a signed integer
    (``valence``) or a frozenset of category labels (``categorical``).
    Categorical lexicons are read through their positive/negative
    categories only.
    """

    name: str
    shape: LexiconShape
    entries: Mapping[str, Union[str, int, FrozenSet[str]]] = field(repr=False)

    def __post_init__(self):
        try:
            shape = LexiconShape(self.shape)
        except ValueError:
            raise LexiconError(
                f"Invalid lexicon shape: '{self.shape}'\n"
                f"Valid options are: {', '.join(s.value for s in LexiconShape)}"
            ) from None
        entries = dict(self.entries)
        bad = sorted(
            w for w, entry in entries.items() if not _valid_entry(shape, entry)
        )
        if bad:
            raise LexiconError(
                f"Lexicon '{self.name}' has {len(bad)} entries that do not fit "
                f"the {shape.value} shape (e.g. {', '.join(map(str, bad[:5]))})."
            )
        if shape is LexiconShape.CATEGORICAL:
            entries = {w: frozenset(labels) for w, labels in entries.items()}
        object.__setattr__(self, "shape", shape)
        object.__setattr__(self, "entries", MappingProxyType(entries))

    def __contains__(self, word: str) -> bool:
        return word in self.entries

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class SentimentWindow:
    lexicon: str
    author: str
    document_id: str
    window_index: int
    positive: int
    negative: int
    sentiment: int


@dataclass(frozen=True)
class WordSentiment:
    lexicon: str
    author: str
    word: str
    sentiment: str
    count: int


@dataclass(frozen=True)
class NGram:
    """Adjacent words from a single line of a document."""

    document_id: str
    author: str
    line_number: int
    chapter: int
    words: Tuple[str, ...]


@dataclass(frozen=True)
class NGramCount:
    author: str
    words: Tuple[str, ...]
    count: int


@dataclass(frozen=True)
class TermTotal:
    term: str
    count: int


@dataclass(frozen=True)
class MatrixSummary:
    rows: int
    columns: int
    nonzero: int
    sparsity: float
    max_term_length: int
