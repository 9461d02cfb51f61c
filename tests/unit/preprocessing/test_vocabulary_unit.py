"""
Unit tests for corpus_topics/preprocessing/vocabulary.py

Tests vocabulary ordering, count matrix construction, empty-row dropping and
row re-alignment.
"""

import numpy as np
import pytest

from corpus_topics.exceptions import CorpusTopicsError, EmptyCorpusError
from corpus_topics.preprocessing import (
    Vocabulary,
    build_dtm,
    normalize,
    realign_rows,
    tokenize,
)


class TestVocabulary:

    def test_terms_sorted_and_unique(self):
        vocab = Vocabulary.from_tokens([["sat", "cat"], ["cat", "dog"]])
        assert vocab.terms == ("cat", "dog", "sat")
        assert vocab.index == {"cat": 0, "dog": 1, "sat": 2}

    def test_lookup_helpers(self):
        vocab = Vocabulary.from_tokens([["b", "a"]])
        assert len(vocab) == 2
        assert "a" in vocab
        assert "z" not in vocab
        assert list(vocab) == ["a", "b"]
        assert vocab.term(1) == "b"

    def test_equal_vocabularies_compare_equal(self):
        assert Vocabulary.from_tokens([["x", "y"]]) == Vocabulary.from_tokens([["y"], ["x"]])


class TestBuildDtm:
    """Count matrix for the reference corpus."""

    @pytest.fixture
    def reference(self, sample_documents):
        normalized = normalize(sample_documents, extra_stopwords={"the"}, stopword_source="none")
        return build_dtm(normalized)

    def test_vocabulary(self, reference):
        _, vocabulary, _ = reference
        assert vocabulary.terms == ("cat", "dog", "placeholder", "ran", "sat")

    def test_row_sums(self, reference):
        dtm, _, _ = reference
        assert dtm.row_sums().tolist() == [2, 2, 1]

    def test_counts(self, reference):
        dtm, _, _ = reference
        # columns: cat, dog, placeholder, ran, sat
        assert dtm.matrix.toarray().tolist() == [
            [1, 0, 0, 0, 1],
            [0, 1, 0, 1, 0],
            [0, 0, 1, 0, 0],
        ]

    def test_all_rows_kept(self, reference):
        dtm, _, kept = reference
        assert kept == (0, 1, 2)
        assert dtm.dropped_row_indices == ()

    def test_repeated_terms_counted(self):
        dtm, vocab, _ = build_dtm(["cat cat cat sat"])
        assert dtm.matrix[0, vocab.index["cat"]] == 3
        assert dtm.total_tokens == 4

    def test_integer_counts(self, small_dtm):
        assert small_dtm.matrix.dtype == np.int64
        assert small_dtm.matrix.format == "csr"

    def test_deterministic(self, messy_documents):
        normalized = normalize(messy_documents, stopword_source="none")
        first, vocab_a, _ = build_dtm(normalized)
        second, vocab_b, _ = build_dtm(normalized)
        assert vocab_a == vocab_b
        assert (first.matrix != second.matrix).nnz == 0


class TestEmptyRows:
    """Dropping all-zero rows and the empty-corpus error."""

    def test_empty_rows_dropped_with_indices(self):
        dtm, _, kept = build_dtm(["", "cat", "", "dog cat"])
        assert kept == (1, 3)
        assert dtm.dropped_row_indices == (0, 2)
        assert dtm.num_documents == 2
        assert np.all(dtm.row_sums() > 0)

    def test_all_empty_raises(self):
        with pytest.raises(EmptyCorpusError, match="empty"):
            build_dtm(["", "", ""])

    def test_empty_sequence_raises(self):
        with pytest.raises(EmptyCorpusError):
            build_dtm([])

    def test_empty_corpus_error_hierarchy(self):
        with pytest.raises(CorpusTopicsError):
            build_dtm([""])
        with pytest.raises(ValueError):
            build_dtm([""])

    def test_placeholder_counted_by_default(self):
        dtm, vocab, kept = build_dtm(["cat", "placeholder"])
        assert "placeholder" in vocab
        assert kept == (0, 1)

    def test_exclude_placeholder_drops_placeholder_documents(self):
        dtm, vocab, kept = build_dtm(["cat", "placeholder"], exclude_placeholder=True)
        assert "placeholder" not in vocab
        assert kept == (0,)
        assert dtm.dropped_row_indices == (1,)

    def test_exclude_placeholder_keeps_word_in_real_text(self):
        """Only documents consisting solely of the placeholder are affected."""
        _, vocab, kept = build_dtm(["placeholder text", "placeholder"], exclude_placeholder=True)
        assert "placeholder" in vocab
        assert kept == (0,)

    def test_exclude_placeholder_on_all_empty_raises(self):
        with pytest.raises(EmptyCorpusError):
            build_dtm(["placeholder", "placeholder"], exclude_placeholder=True)


class TestDocumentTermMatrixViews:

    def test_column_sums(self, small_dtm):
        # vocabulary: cat, dog, sat
        assert small_dtm.column_sums().tolist() == [3, 1, 1]

    def test_document_terms(self, small_dtm):
        ids, counts = small_dtm.document_terms(0)
        assert ids.tolist() == [0, 2]
        assert counts.tolist() == [2, 1]

    def test_to_bow(self, small_dtm):
        assert small_dtm.to_bow() == [[(0, 2), (2, 1)], [(0, 1), (1, 1)]]

    def test_shape(self, small_dtm):
        assert small_dtm.shape == (2, 3)
        assert small_dtm.num_terms == 3


class TestHelpers:

    def test_tokenize_splits_on_whitespace(self):
        assert tokenize("cat  sat\tdown") == ["cat", "sat", "down"]
        assert tokenize("") == []

    def test_realign_rows_fills_dropped_positions(self):
        values = np.array([[0.2, 0.8], [0.6, 0.4]])
        out = realign_rows(values, (1, 3), num_original=4)
        assert out.shape == (4, 2)
        assert np.isnan(out[0]).all()
        assert np.isnan(out[2]).all()
        np.testing.assert_allclose(out[1], [0.2, 0.8])
        np.testing.assert_allclose(out[3], [0.6, 0.4])
