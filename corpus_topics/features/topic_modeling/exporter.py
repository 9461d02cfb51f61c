"""
Topic Exporter

Turns a fitted TopicModel into top-term listings and tabular outputs for
downstream reporting and visualization.

Usage:
    from corpus_topics.features.topic_modeling.exporter import TopicExporter, top_terms

    top_terms(model, n=10)
    # {0: [('data', 0.081), ('model', 0.064), ...], 1: [...], ...}

    exporter = TopicExporter(output_dir="data/output/run")
    exporter.write_topic_table(model)
"""

import heapq
import json
import logging
import shutil
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pandas as pd

from corpus_topics.exceptions import ModelNotFittedError
from corpus_topics.features.statistics import CorpusStatistics, common_words, term_frequencies
from corpus_topics.preprocessing.vocabulary import DocumentTermMatrix, realign_rows
from .constants import (
    BETA_FILENAME,
    DEFAULT_TOP_N,
    MODEL_INFO_FILENAME,
    THETA_FILENAME,
    TOPIC_TABLE_FILENAME,
)
from .schemas import LDAModelInfo, TopicModel, TopicTerm

logger = logging.getLogger(__name__)

DESCRIPTIVE_STATS_FILENAME = "descriptive_stats.csv"
SUMMARY_FILENAME = "summary.txt"
COMMON_WORDS_FILENAME = "common_words.csv"


def top_terms(model: TopicModel, n: int = DEFAULT_TOP_N) -> Dict[int, List[Tuple[str, float]]]:
    """
    Highest-probability terms of every topic.

    Ties are broken by lexicographic term order so listings are deterministic.

    Args:
        model: Fitted topic model
        n: Terms per topic (capped at the vocabulary size)

    Returns:
        Mapping topic_id -> [(term, probability), ...] in descending probability

    Raises:
        ValueError: If n < 1
    """
    if n < 1:
        raise ValueError(f"n must be at least 1, got {n}")

    terms = model.vocabulary.terms
    listing = {}
    for topic_id, row in enumerate(model.beta):
        best = heapq.nsmallest(n, range(len(terms)), key=lambda j: (-row[j], terms[j]))
        listing[topic_id] = [(terms[j], float(row[j])) for j in best]
    return listing


def topic_terms(model: TopicModel, n: int = DEFAULT_TOP_N) -> List[TopicTerm]:
    """Flatten top_terms into ranked TopicTerm records."""
    return [
        TopicTerm(topic_id=topic_id, rank=rank, term=term, probability=min(prob, 1.0))
        for topic_id, entries in top_terms(model, n).items()
        for rank, (term, prob) in enumerate(entries, start=1)
    ]


def topic_table(model: TopicModel, n: int = DEFAULT_TOP_N) -> pd.DataFrame:
    """
    Top-N terms per topic as a table.

    Topics are numbered from 1 in the table, matching the topic labels shown
    to users.

    Returns:
        DataFrame with columns Topic, Rank, Word, Beta
    """
    records = [
        {"Topic": t.topic_id + 1, "Rank": t.rank, "Word": t.term, "Beta": t.probability}
        for t in topic_terms(model, n)
    ]
    return pd.DataFrame.from_records(records, columns=["Topic", "Rank", "Word", "Beta"])


def beta_frame(model: TopicModel) -> pd.DataFrame:
    """Topic-term matrix with topics as rows and vocabulary terms as columns."""
    return pd.DataFrame(
        model.beta,
        index=pd.Index(range(1, model.num_topics + 1), name="Topic"),
        columns=list(model.vocabulary.terms),
    )


def theta_frame(model: TopicModel, num_original: Optional[int] = None) -> pd.DataFrame:
    """
    Document-topic matrix indexed by original document position.

    Args:
        model: Fitted topic model
        num_original: Size of the original input; when given, documents that
            were dropped as empty appear as rows of NaN

    Returns:
        DataFrame with one Topic_<n> column per topic
    """
    columns = [f"Topic_{i}" for i in range(1, model.num_topics + 1)]
    if num_original is None:
        return pd.DataFrame(
            model.theta,
            index=pd.Index(model.kept_row_indices, name="Document"),
            columns=columns,
        )

    values = realign_rows(model.theta, model.kept_row_indices, num_original)
    return pd.DataFrame(values, index=pd.Index(range(num_original), name="Document"), columns=columns)


class TopicExporter:
    """
    Writes statistics, topic tables and probability matrices to a directory.

    Output files:
        descriptive_stats.csv   Word, Frequency (terms occurring more than once)
        summary.txt             Total/unique word counts
        common_words.csv        Most frequent terms
        topic_models.csv        Topic, Rank, Word, Beta
        topic_term_beta.csv     beta matrix
        document_topic_theta.csv theta matrix by original document position
        model_info.json         LDAModelInfo
    """

    def __init__(
        self,
        output_dir: Path | str,
        top_n: int = DEFAULT_TOP_N,
        precision: int = 6,
    ):
        """
        Initialize exporter.

        Args:
            output_dir: Directory receiving the output files (created if missing)
            top_n: Terms per topic in the topic table
            precision: Decimal places for probabilities in CSV files
        """
        self.output_dir = Path(output_dir)
        self.top_n = top_n
        self.precision = precision
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def write_descriptive_stats(self, dtm: DocumentTermMatrix, stats: CorpusStatistics) -> Path:
        """Write term frequencies (count > 1) and the word-count summary."""
        frequencies = term_frequencies(dtm, drop_singletons=True)
        frame = pd.DataFrame(
            {"Word": list(frequencies.keys()), "Frequency": list(frequencies.values())},
            columns=["Word", "Frequency"],
        )
        path = self.output_dir / DESCRIPTIVE_STATS_FILENAME
        frame.to_csv(path, index=False, encoding='utf-8')

        with open(self.output_dir / SUMMARY_FILENAME, 'w', encoding='utf-8') as f:
            f.write(stats.summary_text())

        logger.info("Saved descriptive statistics to %s", path)
        return path

    def write_common_words(self, dtm: DocumentTermMatrix, n: int = DEFAULT_TOP_N) -> Path:
        frame = pd.DataFrame(common_words(dtm, n), columns=["Word", "Frequency"])
        path = self.output_dir / COMMON_WORDS_FILENAME
        frame.to_csv(path, index=False, encoding='utf-8')
        logger.info("Saved %d common words to %s", len(frame), path)
        return path

    def write_topic_table(self, model: Optional[TopicModel]) -> Path:
        self._require_model(model)
        path = self.output_dir / TOPIC_TABLE_FILENAME
        topic_table(model, self.top_n).to_csv(
            path, index=False, encoding='utf-8', float_format=self._float_format
        )
        logger.info("Saved topic table to %s", path)
        return path

    def write_matrices(self, model: Optional[TopicModel], num_original: Optional[int] = None) -> Tuple[Path, Path]:
        """Write beta and theta as CSV files."""
        self._require_model(model)
        beta_path = self.output_dir / BETA_FILENAME
        theta_path = self.output_dir / THETA_FILENAME
        beta_frame(model).to_csv(beta_path, encoding='utf-8', float_format=self._float_format)
        theta_frame(model, num_original).to_csv(theta_path, encoding='utf-8', float_format=self._float_format)
        logger.info("Saved topic-term and document-topic matrices to %s", self.output_dir)
        return beta_path, theta_path

    def write_model_info(self, model_info: LDAModelInfo) -> Path:
        path = self.output_dir / MODEL_INFO_FILENAME
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(model_info.model_dump(), f, indent=2, default=str)
        logger.info("Saved model info to %s", path)
        return path

    def copy_input(self, input_path: Path | str) -> Path:
        """Copy the source document file next to the outputs."""
        input_path = Path(input_path)
        target = self.output_dir / input_path.name
        shutil.copy2(input_path, target)
        logger.info("Copied input file to %s", target)
        return target

    @property
    def _float_format(self) -> str:
        return f"%.{self.precision}f"

    @staticmethod
    def _require_model(model: Optional[TopicModel]) -> None:
        if model is None:
            raise ModelNotFittedError("No fitted topic model to export. Fit a model first.")
