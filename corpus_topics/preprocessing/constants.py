"""
Preprocessing Constants

Patterns and defaults shared by the normalizer, the vocabulary builder and
the document loader.
"""

import re

# ===========================
# Placeholder Handling
# ===========================
PLACEHOLDER_TOKEN = "placeholder"
"""Substituted for documents that are null or have length 0"""

# ===========================
# Cleaning Patterns
# ===========================
# Anything that is neither a word character nor whitespace, plus the
# underscore which \w would otherwise keep.
PUNCTUATION_PATTERN = re.compile(r"[^\w\s]|_")

DIGIT_PATTERN = re.compile(r"\d")

WHITESPACE_PATTERN = re.compile(r"\s+")

# ===========================
# Stopword Sources
# ===========================
STOPWORD_SOURCES = ("nltk", "gensim", "none")

NLTK_STOPWORD_LANGUAGE = "english"

# ===========================
# Loader
# ===========================
CSV_SUFFIXES = (".csv",)
INPUT_ENCODING = "utf-8"
