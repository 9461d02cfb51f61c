"""
Unit tests for corpus_topics/preprocessing/cleaning.py

Tests TextNormalizer placeholder substitution, case folding, punctuation and
digit stripping, whitespace collapse and stopword removal.
No real data dependencies - runs in <1 second.
"""

import string

import pytest

from corpus_topics.preprocessing import cleaning
from corpus_topics.preprocessing.cleaning import TextNormalizer, load_base_stopwords, normalize


class TestNormalizeScenario:
    """End-to-end behaviour on the reference three-document corpus."""

    def test_reference_corpus(self, sample_documents):
        """Stopword 'the' removed, empty document becomes the placeholder."""
        result = normalize(sample_documents, extra_stopwords={"the"}, stopword_source="none")
        assert result == ["cat sat", "dog ran", "placeholder"]

    def test_preserves_order_and_count(self, messy_documents):
        result = normalize(messy_documents, stopword_source="none")
        assert len(result) == len(messy_documents)

    def test_empty_input(self):
        assert normalize([], stopword_source="none") == []


class TestCharacterRemoval:
    """Case folding, punctuation, digits and whitespace."""

    @pytest.fixture
    def normalizer(self) -> TextNormalizer:
        """Normalizer without a base stopword list."""
        return TextNormalizer(stopword_source="none")

    def test_output_has_no_uppercase_digits_or_punctuation(self, normalizer, messy_documents):
        for text in normalizer.normalize(messy_documents):
            assert text == text.lower()
            assert not any(ch.isdigit() for ch in text)
            assert not any(ch in string.punctuation for ch in text)

    def test_punctuation_is_deleted_not_replaced(self, normalizer):
        """Removing the apostrophe joins the word."""
        assert normalizer.normalize_document("Don't stop") == "dont stop"

    def test_underscore_is_punctuation(self, normalizer):
        assert normalizer.normalize_document("snake_case") == "snakecase"

    def test_digits_removed_inside_words(self, normalizer):
        assert normalizer.normalize_document("abc123def 456") == "abcdef"

    def test_whitespace_collapsed_and_trimmed(self, normalizer):
        result = normalizer.normalize_document("  Tabs\tand\nnewlines   here  ")
        assert result == "tabs and newlines here"

    def test_non_ascii_letters_kept(self, normalizer):
        assert normalizer.normalize_document("Café Über") == "café über"

    def test_capitals_without_lowercase_form_dropped(self, normalizer):
        result = normalizer.normalize_document("\U0001D400BC word")
        assert result == "bc word"
        assert not any(ch.isupper() for ch in result)


class TestPlaceholder:
    """Null and zero-length documents."""

    @pytest.fixture
    def normalizer(self) -> TextNormalizer:
        return TextNormalizer(stopword_source="none")

    @pytest.mark.parametrize("document", [None, float("nan"), ""])
    def test_null_like_becomes_placeholder(self, normalizer, document):
        assert normalizer.normalize_document(document) == "placeholder"

    def test_whitespace_only_is_not_placeholder(self, normalizer):
        """Length > 0, so no substitution; it collapses to an empty string."""
        assert normalizer.normalize_document("   \t ") == ""

    def test_numeric_scalar_converted_to_text(self, normalizer):
        """42 -> '42' -> digits removed -> ''."""
        assert normalizer.normalize_document(42) == ""

    def test_custom_placeholder(self):
        normalizer = TextNormalizer(stopword_source="none", placeholder="emptydoc")
        assert normalizer.normalize_document(None) == "emptydoc"

    def test_placeholder_can_be_a_stopword(self):
        normalizer = TextNormalizer(extra_stopwords={"placeholder"}, stopword_source="none")
        assert normalizer.normalize_document("") == ""


class TestStopwords:
    """Stopword merging and removal."""

    def test_extra_stopwords_case_insensitive(self):
        normalizer = TextNormalizer(extra_stopwords={"The", " CAT "}, stopword_source="none")
        assert normalizer.stopwords == frozenset({"the", "cat"})
        assert normalizer.normalize_document("The Cat sat") == "sat"

    def test_exact_token_match_only(self):
        """'the' does not remove 'there' or 'other'."""
        normalizer = TextNormalizer(extra_stopwords={"the"}, stopword_source="none")
        assert normalizer.normalize_document("the other there") == "other there"

    def test_document_of_only_stopwords_becomes_empty(self):
        normalizer = TextNormalizer(extra_stopwords={"a", "b"}, stopword_source="none")
        assert normalizer.normalize_document("A b a") == ""

    def test_gensim_source_removes_english_function_words(self):
        normalizer = TextNormalizer(stopword_source="gensim")
        assert normalizer.normalize_document("The cat and the dog") == "cat dog"

    def test_stopword_set_is_frozen(self):
        normalizer = TextNormalizer(extra_stopwords={"x"}, stopword_source="none")
        assert isinstance(normalizer.stopwords, frozenset)


class TestLoadBaseStopwords:
    """Base English stopword lists."""

    @pytest.fixture(autouse=True)
    def clear_cache(self):
        load_base_stopwords.cache_clear()
        yield
        load_base_stopwords.cache_clear()

    def test_none_source_is_empty(self):
        assert load_base_stopwords("none") == frozenset()

    def test_gensim_source(self):
        words = load_base_stopwords("gensim")
        assert "the" in words
        assert "and" in words

    def test_unknown_source_raises(self):
        with pytest.raises(ValueError, match="Unknown stopword source"):
            load_base_stopwords("klingon")

    def test_missing_nltk_corpus_falls_back_to_gensim(self, monkeypatch, caplog):
        """A LookupError from NLTK logs a warning and uses the gensim list."""

        class MissingCorpus:
            def words(self, language):
                raise LookupError("Resource stopwords not found.")

        monkeypatch.setattr(cleaning, "nltk_stopwords", MissingCorpus())

        with caplog.at_level("WARNING"):
            words = load_base_stopwords("nltk")

        assert words == load_base_stopwords("gensim")
        assert "NLTK stopwords not downloaded" in caplog.text

    def test_nltk_words_are_lowercased(self, monkeypatch):
        class FakeCorpus:
            def words(self, language):
                assert language == "english"
                return ["The", "AND"]

        monkeypatch.setattr(cleaning, "nltk_stopwords", FakeCorpus())
        assert load_base_stopwords("nltk") == frozenset({"the", "and"})


class TestDeterminism:

    def test_identical_input_identical_output(self, messy_documents):
        first = normalize(messy_documents, extra_stopwords={"and"}, stopword_source="gensim")
        second = normalize(messy_documents, extra_stopwords={"and"}, stopword_source="gensim")
        assert first == second
