"""
Lightweight fixtures for unit tests - NO real data dependencies.
All fixtures use synthetic corpora that run in <1 second.
"""

from pathlib import Path
from typing import List

import numpy as np
import pytest

from corpus_topics.features.topic_modeling.schemas import LDAHyperparameters, TopicModel
from corpus_topics.preprocessing import DocumentTermMatrix, Vocabulary, build_dtm


# =============================================================================
# Raw Document Fixtures
# =============================================================================

@pytest.fixture
def sample_documents() -> List[str]:
    """Two short sentences and one empty document."""
    return ["The cat sat.", "The dog ran.", ""]


@pytest.fixture
def messy_documents() -> List[object]:
    """Documents with case, punctuation, digits, odd whitespace and nulls."""
    return [
        "Hello, World! It's 2024.",
        "  Tabs\tand\nnewlines   everywhere  ",
        "snake_case and e-mail: user@example.com",
        None,
        float("nan"),
        42,
        "",
    ]


@pytest.fixture
def separated_documents() -> List[str]:
    """
    Two groups with disjoint vocabularies plus one mixed document.

    Index 0 is the reference fruit document, index 4 the reference engine
    document and index 8 mixes both groups.
    """
    fruit = "apple banana cherry"
    engine = "piston valve gasket"
    return [
        f"{fruit} {fruit} {fruit} apple",
        f"{fruit} {fruit} banana",
        f"{fruit} cherry cherry",
        f"{fruit} {fruit}",
        f"{engine} {engine} {engine} piston",
        f"{engine} {engine} valve",
        f"{engine} gasket gasket",
        f"{engine} {engine}",
        "apple banana piston valve",
    ]


# =============================================================================
# Matrix / Model Fixtures
# =============================================================================

@pytest.fixture
def small_dtm() -> DocumentTermMatrix:
    """DTM of ['cat sat cat', 'dog cat', ''] with the empty row dropped."""
    dtm, _, _ = build_dtm(["cat sat cat", "dog cat", ""])
    return dtm


@pytest.fixture
def separated_dtm(separated_documents: List[str]) -> DocumentTermMatrix:
    dtm, _, _ = build_dtm(separated_documents)
    return dtm


@pytest.fixture
def handmade_model() -> TopicModel:
    """One-topic model with beta {a: 0.5, b: 0.3, c: 0.1, d: 0.1}."""
    return TopicModel(
        beta=np.array([[0.5, 0.3, 0.1, 0.1]]),
        theta=np.array([[1.0], [1.0]]),
        vocabulary=Vocabulary(terms=("a", "b", "c", "d")),
        kept_row_indices=(0, 2),
        hyperparameters=LDAHyperparameters(
            num_topics=1, alpha=1.0, eta=1.0, seed=0, max_iterations=1
        ),
        iterations=1,
        converged=False,
        log_likelihood=-10.0,
        log_likelihood_trace=(-10.0,),
        num_tokens=8,
    )


# =============================================================================
# File Fixtures
# =============================================================================

@pytest.fixture
def sample_text_file(tmp_path: Path) -> Path:
    """Newline-delimited corpus with one blank line."""
    path = tmp_path / "notes.txt"
    path.write_text(
        "Apple banana cherry apple banana.\n"
        "Piston valve gasket piston valve.\n"
        "\n"
        "Apple banana piston valve!\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def sample_csv_file(tmp_path: Path) -> Path:
    """Single-column CSV with a header and one missing cell."""
    path = tmp_path / "abstracts.csv"
    path.write_text(
        "text\n"
        "Apple banana cherry apple banana\n"
        "Piston valve gasket piston valve\n"
        "\"\"\n"
        "Apple banana piston valve\n",
        encoding="utf-8",
    )
    return path
