"""
Error taxonomy for the corpus topics pipeline.

Every error raised by the core derives from CorpusTopicsError so the CLI can
report it and exit non-zero without catching unrelated exceptions.
"""


class CorpusTopicsError(Exception):
    """Base class for all pipeline errors."""


class EmptyCorpusError(CorpusTopicsError, ValueError):
    """No document retains any term after cleaning and row filtering."""


class InvalidTopicCountError(CorpusTopicsError, ValueError):
    """Requested topic count is below 1 or above the supported maximum."""


class InputNotFoundError(CorpusTopicsError, FileNotFoundError):
    """The document loader could not find its input file."""


class FitCancelledError(CorpusTopicsError):
    """Fitting was stopped through its cancellation token."""


class ModelNotFittedError(CorpusTopicsError, ValueError):
    """An export was requested before a topic model was fitted."""
