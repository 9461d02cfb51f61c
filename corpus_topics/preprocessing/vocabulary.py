"""
Vocabulary and document-term matrix construction.

Tokenizes normalized documents on whitespace, assigns every distinct term a
stable integer id (sorted lexicographic order) and counts term occurrences
into a scipy CSR matrix. Rows whose total count is zero are dropped; the
original positions of retained rows are kept for re-alignment.

Usage:
    from corpus_topics.preprocessing.vocabulary import build_dtm

    dtm, vocabulary, kept = build_dtm(["cat sat", "dog ran", ""])
    dtm.matrix.toarray()
    # [[1, 0, 0, 1], [0, 1, 1, 0]]   columns: cat, dog, ran, sat
    kept
    # (0, 1)
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np
from scipy import sparse

from corpus_topics.exceptions import EmptyCorpusError
from .constants import PLACEHOLDER_TOKEN

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Vocabulary:
    """
    Sorted set of corpus terms with stable integer ids.

    Attributes:
        terms: Terms in id order (lexicographically sorted)
        index: Term -> id mapping
    """
    terms: Tuple[str, ...]
    index: Dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'index', {term: i for i, term in enumerate(self.terms)})

    @classmethod
    def from_tokens(cls, tokenized: Sequence[Sequence[str]]) -> "Vocabulary":
        """Build a vocabulary from tokenized documents."""
        return cls(terms=tuple(sorted({tok for doc in tokenized for tok in doc})))

    def __len__(self) -> int:
        return len(self.terms)

    def __contains__(self, term: object) -> bool:
        return term in self.index

    def __iter__(self) -> Iterator[str]:
        return iter(self.terms)

    def term(self, term_id: int) -> str:
        """Look up the term with the given id."""
        return self.terms[term_id]


@dataclass(frozen=True, eq=False)
class DocumentTermMatrix:
    """
    Sparse document x term frequency matrix.

    Read-only once built: the LDA engine and the reporting stage consume it
    without modification.

    Attributes:
        matrix: CSR matrix of int64 counts (retained documents x vocabulary)
        vocabulary: Column labels
        kept_row_indices: Original input position of every retained row
        dropped_row_indices: Original input positions of all-zero rows
    """
    matrix: sparse.csr_matrix
    vocabulary: Vocabulary
    kept_row_indices: Tuple[int, ...]
    dropped_row_indices: Tuple[int, ...] = ()

    @property
    def shape(self) -> Tuple[int, int]:
        return self.matrix.shape

    @property
    def num_documents(self) -> int:
        """Number of retained (non-empty) documents."""
        return self.matrix.shape[0]

    @property
    def num_terms(self) -> int:
        return self.matrix.shape[1]

    @property
    def total_tokens(self) -> int:
        return int(self.matrix.sum())

    def row_sums(self) -> np.ndarray:
        """Token count per retained document."""
        return np.asarray(self.matrix.sum(axis=1)).ravel()

    def column_sums(self) -> np.ndarray:
        """Corpus frequency per vocabulary term."""
        return np.asarray(self.matrix.sum(axis=0)).ravel()

    def document_terms(self, row: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Sparse view of one row.

        Args:
            row: Row index within the matrix (not the original position)

        Returns:
            (term_ids, counts) with term_ids ascending
        """
        start, end = self.matrix.indptr[row], self.matrix.indptr[row + 1]
        return self.matrix.indices[start:end], self.matrix.data[start:end]

    def to_bow(self) -> List[List[Tuple[int, int]]]:
        """Convert to gensim-style bag-of-words corpus (list of (id, count))."""
        corpus = []
        for row in range(self.num_documents):
            ids, counts = self.document_terms(row)
            corpus.append([(int(i), int(c)) for i, c in zip(ids, counts)])
        return corpus


def tokenize(document: str) -> List[str]:
    """Whitespace tokenizer for normalized text."""
    return document.split()


def build_dtm(
    normalized_docs: Sequence[str],
    exclude_placeholder: bool = False,
    placeholder: str = PLACEHOLDER_TOKEN,
) -> Tuple[DocumentTermMatrix, Vocabulary, Tuple[int, ...]]:
    """
    Build the document-term matrix for a normalized corpus.

    Args:
        normalized_docs: Output of the normalizer, one string per document
        exclude_placeholder: If True, documents consisting solely of the
            placeholder token count as empty and are dropped
        placeholder: Placeholder text used by the normalizer

    Returns:
        Tuple of (DocumentTermMatrix, Vocabulary, kept_row_indices)

    Raises:
        EmptyCorpusError: If no document contains any term
    """
    tokenized = [tokenize(doc) if doc else [] for doc in normalized_docs]
    if exclude_placeholder:
        tokenized = [[] if toks == [placeholder] else toks for toks in tokenized]

    vocabulary = Vocabulary.from_tokens(tokenized)
    if len(vocabulary) == 0:
        raise EmptyCorpusError(
            f"All {len(normalized_docs)} documents are empty after preprocessing. "
            "Check the input data and stopword list."
        )

    matrix = _count_matrix(tokenized, vocabulary)

    row_sums = np.asarray(matrix.sum(axis=1)).ravel()
    kept = np.flatnonzero(row_sums > 0)
    dropped = np.flatnonzero(row_sums == 0)
    if len(dropped):
        logger.info("Dropping %d empty document(s) from the matrix", len(dropped))
        matrix = matrix[kept]

    kept_row_indices = tuple(int(i) for i in kept)
    dtm = DocumentTermMatrix(
        matrix=matrix,
        vocabulary=vocabulary,
        kept_row_indices=kept_row_indices,
        dropped_row_indices=tuple(int(i) for i in dropped),
    )

    logger.info(
        "Built document-term matrix: %d documents x %d terms (%d tokens)",
        dtm.num_documents, dtm.num_terms, dtm.total_tokens,
    )
    return dtm, vocabulary, kept_row_indices


def _count_matrix(
    tokenized: Sequence[Sequence[str]],
    vocabulary: Vocabulary,
) -> sparse.csr_matrix:
    """Count tokens into a canonical CSR matrix (sorted column ids per row)."""
    indptr = [0]
    indices: List[int] = []
    data: List[int] = []

    for tokens in tokenized:
        counts = Counter(vocabulary.index[tok] for tok in tokens)
        for term_id in sorted(counts):
            indices.append(term_id)
            data.append(counts[term_id])
        indptr.append(len(indices))

    return sparse.csr_matrix(
        (
            np.asarray(data, dtype=np.int64),
            np.asarray(indices, dtype=np.int64),
            np.asarray(indptr, dtype=np.int64),
        ),
        shape=(len(tokenized), len(vocabulary)),
    )


def realign_rows(
    values: np.ndarray,
    kept_row_indices: Sequence[int],
    num_original: int,
    fill_value: Optional[float] = np.nan,
) -> np.ndarray:
    """
    Scatter per-row results back to original input positions.

    Args:
        values: Array whose first axis matches the retained rows
        kept_row_indices: Original position of each retained row
        num_original: Number of documents in the original input
        fill_value: Value for dropped rows

    Returns:
        Array with num_original rows
    """
    out = np.full((num_original,) + values.shape[1:], fill_value, dtype=float)
    out[list(kept_row_indices)] = values
    return out
