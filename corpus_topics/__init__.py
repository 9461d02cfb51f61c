"""
corpus_topics: batch text analytics for document collections.

Normalizes raw documents, builds a document-term matrix, reports descriptive
statistics and fits an LDA topic model.
"""

__version__ = "0.1.0"
