"""Preprocessing modules for document collections

Pipeline Flow:
    1. Load      → load_documents → list of raw documents
    2. Normalize → TextNormalizer → list of cleaned strings
    3. Vectorize → build_dtm → DocumentTermMatrix + Vocabulary

Quick Start:
    >>> from corpus_topics.preprocessing import normalize, build_dtm
    >>> cleaned = normalize(["The cat sat.", "The dog ran.", ""], {"the"})
    >>> dtm, vocabulary, kept = build_dtm(cleaned)
    >>> vocabulary.terms
    ('cat', 'dog', 'placeholder', 'ran', 'sat')
"""

from .cleaning import TextNormalizer, normalize, load_base_stopwords
from .vocabulary import (
    DocumentTermMatrix,
    Vocabulary,
    build_dtm,
    realign_rows,
    tokenize,
)
from .loader import load_documents
from .constants import PLACEHOLDER_TOKEN

__all__ = [
    # Normalizer
    'TextNormalizer',
    'normalize',
    'load_base_stopwords',
    # Vocabulary / DTM
    'DocumentTermMatrix',
    'Vocabulary',
    'build_dtm',
    'realign_rows',
    'tokenize',
    # Loader
    'load_documents',
    # Constants
    'PLACEHOLDER_TOKEN',
]
