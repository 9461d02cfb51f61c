"""
Document loader for CSV and plain-text collections.

A CSV file is read with pandas (UTF-8, first row is the header) and every
cell is taken as one document, column by column. Any other suffix is read as
newline-delimited UTF-8 text, one document per line.

Usage:
    from corpus_topics.preprocessing.loader import load_documents

    documents = load_documents("data/input/abstracts.csv")
"""

import logging
from pathlib import Path
from typing import Any, List

import pandas as pd

from corpus_topics.exceptions import InputNotFoundError
from .constants import CSV_SUFFIXES, INPUT_ENCODING

logger = logging.getLogger(__name__)


def load_documents(file_path: Path | str) -> List[Any]:
    """
    Load a document collection from disk.

    Args:
        file_path: Path to a .csv file or a newline-delimited text file

    Returns:
        List of raw documents. CSV cells that are missing come back as None;
        the normalizer treats them as empty documents.

    Raises:
        InputNotFoundError: If file_path does not exist
    """
    file_path = Path(file_path)
    if not file_path.is_file():
        raise InputNotFoundError(f"Input file not found: {file_path}")

    if file_path.suffix.lower() in CSV_SUFFIXES:
        documents = _load_csv(file_path)
    else:
        documents = _load_text(file_path)

    logger.info("Loaded %d documents from %s", len(documents), file_path.name)
    return documents


def _load_csv(file_path: Path) -> List[Any]:
    frame = pd.read_csv(file_path, encoding=INPUT_ENCODING, dtype=str, keep_default_na=True)
    if frame.shape[1] > 1:
        logger.warning(
            "%s has %d columns; every column is treated as documents",
            file_path.name, frame.shape[1],
        )
    # Column-major flattening keeps each column's rows contiguous
    values = frame.to_numpy(dtype=object).ravel(order="F")
    return [None if pd.isna(value) else value for value in values]


def _load_text(file_path: Path) -> List[str]:
    # Universal newlines: only \n, \r and \r\n end a document. Form feeds and
    # Unicode line separators stay inside it.
    with open(file_path, 'r', encoding=INPUT_ENCODING, newline=None) as f:
        lines = f.read().split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines
