"""Unit tests for corpus_topics/features/statistics.py"""

import pytest
from pydantic import ValidationError

from corpus_topics.features.statistics import (
    CorpusStatistics,
    common_words,
    describe_corpus,
    term_frequencies,
)


class TestTermFrequencies:

    def test_all_terms(self, small_dtm):
        assert term_frequencies(small_dtm) == {"cat": 3, "dog": 1, "sat": 1}

    def test_drop_singletons(self, small_dtm):
        assert term_frequencies(small_dtm, drop_singletons=True) == {"cat": 3}


class TestCommonWords:

    def test_descending_with_alphabetical_ties(self, small_dtm):
        assert common_words(small_dtm, n=3) == [("cat", 3), ("dog", 1), ("sat", 1)]

    def test_truncated(self, small_dtm):
        assert common_words(small_dtm, n=1) == [("cat", 3)]


class TestDescribeCorpus:

    def test_counts(self, small_dtm):
        stats = describe_corpus(small_dtm)
        assert stats.total_words == 3
        assert stats.unique_words == 1
        assert stats.num_documents == 3
        assert stats.num_retained_documents == 2
        assert stats.num_dropped_documents == 1

    def test_include_singletons(self, small_dtm):
        stats = describe_corpus(small_dtm, drop_singletons=False)
        assert stats.total_words == 5
        assert stats.unique_words == 3

    def test_explicit_document_count(self, small_dtm):
        stats = describe_corpus(small_dtm, num_documents=10)
        assert stats.num_documents == 10
        assert stats.num_dropped_documents == 8

    def test_most_common(self, small_dtm):
        assert describe_corpus(small_dtm, top_n=1).most_common == [("cat", 3)]

    def test_summary_text(self):
        stats = CorpusStatistics(
            total_words=12, unique_words=4, num_documents=2,
            num_retained_documents=2, num_dropped_documents=0,
        )
        assert stats.summary_text() == "Total Words: 12\nUnique Words: 4\n"

    def test_negative_counts_rejected(self):
        with pytest.raises(ValidationError):
            CorpusStatistics(
                total_words=-1, unique_words=0, num_documents=0,
                num_retained_documents=0, num_dropped_documents=0,
            )
