"""
Descriptive corpus statistics derived from a document-term matrix.

Usage:
    from corpus_topics.features.statistics import describe_corpus, term_frequencies

    frequencies = term_frequencies(dtm, drop_singletons=True)
    stats = describe_corpus(dtm, num_documents=len(raw_documents))
    print(stats.summary_text())
"""

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from corpus_topics.preprocessing.vocabulary import DocumentTermMatrix


class CorpusStatistics(BaseModel):
    """
    Descriptive statistics of a document-term matrix.

    Attributes:
        total_words: Sum of all term counts
        unique_words: Number of distinct terms
        num_documents: Documents in the original input
        num_retained_documents: Non-empty documents kept in the matrix
        num_dropped_documents: Empty documents removed from the matrix
        most_common: Most frequent terms with their counts
    """
    total_words: int = Field(..., ge=0)
    unique_words: int = Field(..., ge=0)
    num_documents: int = Field(..., ge=0)
    num_retained_documents: int = Field(..., ge=0)
    num_dropped_documents: int = Field(..., ge=0)
    most_common: List[Tuple[str, int]] = Field(default_factory=list)

    def summary_text(self) -> str:
        """Two-line summary written next to the statistics table."""
        return f"Total Words: {self.total_words}\nUnique Words: {self.unique_words}\n"


def term_frequencies(dtm: DocumentTermMatrix, drop_singletons: bool = False) -> Dict[str, int]:
    """
    Corpus-wide count of every vocabulary term.

    Args:
        dtm: Document-term matrix
        drop_singletons: If True, drop terms with frequency <= 1

    Returns:
        Mapping term -> count in vocabulary order
    """
    counts = dtm.column_sums()
    return {
        term: int(count)
        for term, count in zip(dtm.vocabulary.terms, counts)
        if not drop_singletons or count > 1
    }


def common_words(dtm: DocumentTermMatrix, n: int = 10) -> List[Tuple[str, int]]:
    """
    Most frequent terms, ties broken alphabetically.

    Args:
        dtm: Document-term matrix
        n: Number of terms to return

    Returns:
        [(term, count), ...] in descending frequency
    """
    frequencies = term_frequencies(dtm)
    ranked = sorted(frequencies.items(), key=lambda item: (-item[1], item[0]))
    return ranked[:n]


def describe_corpus(
    dtm: DocumentTermMatrix,
    num_documents: Optional[int] = None,
    top_n: int = 10,
    drop_singletons: bool = True,
) -> CorpusStatistics:
    """
    Summarize a document-term matrix.

    Total and unique word counts are computed over the same term set that
    goes into the descriptive statistics table, i.e. without singletons by
    default.

    Args:
        dtm: Document-term matrix
        num_documents: Size of the original input (defaults to retained + dropped)
        top_n: Number of most common words to include
        drop_singletons: Exclude terms occurring once from the word counts

    Returns:
        CorpusStatistics
    """
    frequencies = term_frequencies(dtm, drop_singletons=drop_singletons)
    if num_documents is None:
        num_documents = dtm.num_documents + len(dtm.dropped_row_indices)

    return CorpusStatistics(
        total_words=sum(frequencies.values()),
        unique_words=len(frequencies),
        num_documents=num_documents,
        num_retained_documents=dtm.num_documents,
        num_dropped_documents=num_documents - dtm.num_documents,
        most_common=common_words(dtm, top_n),
    )
