"""Feature extraction over document-term matrices: corpus statistics and topic models."""

from .statistics import CorpusStatistics, common_words, describe_corpus, term_frequencies

__all__ = [
    "CorpusStatistics",
    "common_words",
    "describe_corpus",
    "term_frequencies",
]
