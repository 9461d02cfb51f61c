"""
Normalization module for raw document collections.

Turns raw document strings into cleaned, whitespace-delimited text ready for
tokenization: placeholder substitution for empty documents, case folding,
punctuation and digit stripping, whitespace collapse and stopword removal.

Usage:
    from corpus_topics.preprocessing.cleaning import TextNormalizer, normalize

    normalizer = TextNormalizer(extra_stopwords={"the"})
    cleaned = normalizer.normalize(["The cat sat.", "The dog ran.", ""])
    # ['cat sat', 'dog ran', 'placeholder']

    # One-shot convenience function
    cleaned = normalize(documents, extra_stopwords={"example", "stopword"})
"""

import logging
from functools import lru_cache
from typing import Any, FrozenSet, Iterable, List, Optional, Sequence

import pandas as pd
from gensim.parsing.preprocessing import STOPWORDS as GENSIM_STOPWORDS
from nltk.corpus import stopwords as nltk_stopwords

from .constants import (
    DIGIT_PATTERN,
    NLTK_STOPWORD_LANGUAGE,
    PLACEHOLDER_TOKEN,
    PUNCTUATION_PATTERN,
    STOPWORD_SOURCES,
    WHITESPACE_PATTERN,
)

logger = logging.getLogger(__name__)


@lru_cache(maxsize=len(STOPWORD_SOURCES))
def load_base_stopwords(source: str = "nltk") -> FrozenSet[str]:
    """
    Load the standard English stopword list.

    Args:
        source: 'nltk' (NLTK english corpus), 'gensim' (gensim built-in list)
            or 'none' (no base list, only custom stopwords apply)

    Returns:
        Frozen set of lowercase stopwords

    Raises:
        ValueError: If source is not a known stopword source
    """
    if source not in STOPWORD_SOURCES:
        raise ValueError(
            f"Unknown stopword source '{source}'. Expected one of {STOPWORD_SOURCES}"
        )

    if source == "none":
        return frozenset()

    if source == "nltk":
        try:
            return frozenset(w.lower() for w in nltk_stopwords.words(NLTK_STOPWORD_LANGUAGE))
        except LookupError:
            logger.warning(
                "NLTK stopwords not downloaded, using gensim's English list instead. "
                "Run: python -m nltk.downloader stopwords"
            )

    return frozenset(GENSIM_STOPWORDS)


def _coerce_document(document: Any) -> str:
    """Map null-like values to '' and anything else to its string form."""
    if document is None:
        return ""
    if isinstance(document, str):
        return document
    try:
        if pd.isna(document):
            return ""
    except (TypeError, ValueError):
        # pd.isna on a container returns an array; treat it as text
        pass
    return str(document)


class TextNormalizer:
    """
    Cleans raw documents into normalized, token-ready text.

    The stopword set (base English list plus extra stopwords) is merged once
    at construction and reused for every document.

    Output preserves document order and count. A document that loses all of
    its tokens to stopword removal is returned as an empty string; the
    vocabulary builder drops such rows later.
    """

    def __init__(
        self,
        extra_stopwords: Optional[Iterable[str]] = None,
        stopword_source: str = "nltk",
        placeholder: str = PLACEHOLDER_TOKEN,
    ):
        """
        Initialize TextNormalizer.

        Args:
            extra_stopwords: Additional stopwords beyond the English list
            stopword_source: Base list to use ('nltk', 'gensim' or 'none')
            placeholder: Text substituted for null or zero-length documents
        """
        self.placeholder = placeholder
        self.stopwords: FrozenSet[str] = self._merge_stopwords(extra_stopwords, stopword_source)

        logger.debug(
            "Initialized TextNormalizer with %d stopwords (source=%s)",
            len(self.stopwords), stopword_source,
        )

    def normalize(self, documents: Sequence[Any]) -> List[str]:
        """
        Normalize a collection of documents.

        Args:
            documents: Raw documents; None/NaN entries are treated as empty

        Returns:
            List of normalized strings, same length and order as the input
        """
        return [self.normalize_document(doc) for doc in documents]

    def normalize_document(self, document: Any) -> str:
        """
        Normalize a single document.

        Steps:
        1. Substitute the placeholder for null or zero-length documents
        2. Lowercase, dropping capitals that have no lowercase form
        3. Remove punctuation and digits
        4. Collapse whitespace and trim
        5. Remove stopwords

        Args:
            document: Raw document

        Returns:
            Normalized text (possibly empty)
        """
        text = _coerce_document(document)
        if len(text) == 0:
            text = self.placeholder

        text = self._lowercase(text)
        text = self._strip_punctuation(text)
        text = self._strip_digits(text)
        text = self._collapse_whitespace(text)

        return self._remove_stopwords(text)

    def _lowercase(self, text: str) -> str:
        # Letters such as U+1D400 have no lowercase mapping
        text = text.lower()
        return "".join(ch for ch in text if not ch.isupper())

    def _strip_punctuation(self, text: str) -> str:
        return PUNCTUATION_PATTERN.sub("", text)

    def _strip_digits(self, text: str) -> str:
        return DIGIT_PATTERN.sub("", text)

    def _collapse_whitespace(self, text: str) -> str:
        return WHITESPACE_PATTERN.sub(" ", text).strip()

    def _remove_stopwords(self, text: str) -> str:
        if not text:
            return text
        return " ".join(token for token in text.split(" ") if token not in self.stopwords)

    @staticmethod
    def _merge_stopwords(
        extra_stopwords: Optional[Iterable[str]],
        stopword_source: str,
    ) -> FrozenSet[str]:
        """
        Merge the base English list with user-provided stopwords.

        Args:
            extra_stopwords: Additional stopwords (matched case-insensitively)
            stopword_source: Base list to load

        Returns:
            Frozen set of lowercase stopwords
        """
        merged = set(load_base_stopwords(stopword_source))
        if extra_stopwords:
            merged.update(w.strip().lower() for w in extra_stopwords if w and w.strip())
        return frozenset(merged)


def normalize(
    documents: Sequence[Any],
    extra_stopwords: Optional[Iterable[str]] = None,
    stopword_source: str = "nltk",
    placeholder: str = PLACEHOLDER_TOKEN,
) -> List[str]:
    """
    Convenience function to normalize a document collection.

    Args:
        documents: Raw documents
        extra_stopwords: Additional stopwords beyond the English list
        stopword_source: Base list to use ('nltk', 'gensim' or 'none')
        placeholder: Text substituted for null or zero-length documents

    Returns:
        List of normalized strings
    """
    normalizer = TextNormalizer(
        extra_stopwords=extra_stopwords,
        stopword_source=stopword_source,
        placeholder=placeholder,
    )
    return normalizer.normalize(documents)
