"""
Topic Modeling Schemas

The fitted TopicModel (numpy arrays, immutable) and Pydantic models for its
hyperparameters and exported metadata.
"""

from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

from corpus_topics.preprocessing.vocabulary import Vocabulary
from .constants import MAX_TOPICS


class LDAHyperparameters(BaseModel):
    """
    Resolved settings of one LDA fit.

    Attributes:
        num_topics: Number of topics k
        alpha: Symmetric Dirichlet prior on document-topic mixtures
        eta: Symmetric Dirichlet prior on topic-term distributions
        seed: Seed of the numpy Generator driving initialisation/sampling
        method: 'vem' or 'gibbs'
        max_iterations: EM iterations or sampling sweeps allowed
        tol: Relative ELBO improvement threshold (vem only)
    """
    model_config = ConfigDict(frozen=True)

    num_topics: int = Field(..., ge=1, le=MAX_TOPICS)
    alpha: float = Field(..., gt=0.0)
    eta: float = Field(..., gt=0.0)
    seed: int
    method: Literal["vem", "gibbs"] = "vem"
    max_iterations: int = Field(..., ge=1)
    tol: float = Field(default=0.0, ge=0.0)
    e_step_max_iter: int = Field(default=100, ge=1)
    e_step_tol: float = Field(default=1e-4, ge=0.0)
    chunksize: int = Field(default=256, ge=1)


@dataclass(frozen=True, eq=False)
class TopicModel:
    """
    Result of fitting k topics to a document-term matrix.

    beta and theta are read-only arrays; the model is never mutated after
    fitting.

    Attributes:
        beta: k x |V| topic-term probabilities (rows sum to 1)
        theta: documents x k document-topic probabilities (rows sum to 1)
        vocabulary: Column labels of beta
        kept_row_indices: Original input position of every theta row
        hyperparameters: Settings used for the fit
        iterations: Iterations actually run
        converged: True if the ELBO threshold stopped variational EM early
            (always False for Gibbs sampling, which runs its full budget)
        log_likelihood: Final ELBO (vem) or joint log p(w, z) (gibbs)
        log_likelihood_trace: Value after every iteration
        num_tokens: Total term occurrences in the fitted matrix
    """
    beta: np.ndarray
    theta: np.ndarray
    vocabulary: Vocabulary
    kept_row_indices: Tuple[int, ...]
    hyperparameters: LDAHyperparameters
    iterations: int
    converged: bool
    log_likelihood: float
    log_likelihood_trace: Tuple[float, ...]
    num_tokens: int

    def __post_init__(self):
        self.beta.setflags(write=False)
        self.theta.setflags(write=False)

    @property
    def num_topics(self) -> int:
        return self.beta.shape[0]

    @property
    def num_documents(self) -> int:
        return self.theta.shape[0]

    @property
    def perplexity(self) -> float:
        """exp(-log_likelihood / tokens); lower is better."""
        return float(np.exp(-self.log_likelihood / max(self.num_tokens, 1)))

    def dominant_topics(self) -> np.ndarray:
        """Most probable topic for every document row."""
        return np.argmax(self.theta, axis=1)


class TopicTerm(BaseModel):
    """One (term, probability) entry of a topic's top-term listing."""
    topic_id: int = Field(..., ge=0, description="Topic ID")
    rank: int = Field(..., ge=1, description="1-based rank within the topic")
    term: str
    probability: float = Field(..., ge=0.0, le=1.0)


class LDAModelInfo(BaseModel):
    """
    Information about a fitted LDA model.

    Attributes:
        num_topics: Number of topics
        num_documents: Number of documents in the fitted matrix
        vocabulary_size: Size of vocabulary
        method: Inference method
        iterations: Iterations run
        converged: Whether the convergence threshold was reached
        alpha: Document-topic prior
        eta: Topic-term prior
        seed: Random seed
        log_likelihood: Final ELBO / log-likelihood
        perplexity: Model perplexity on the fitted corpus
        coherence_score: Topic coherence score
        coherence_metric: Coherence measure used
        topic_top_words: Top words for each topic
    """
    num_topics: int = Field(..., ge=1)
    num_documents: int = Field(..., ge=0)
    vocabulary_size: int = Field(..., ge=0)
    method: str
    iterations: int = Field(..., ge=0)
    converged: bool
    alpha: float = Field(..., gt=0.0)
    eta: float = Field(..., gt=0.0)
    seed: int
    log_likelihood: float
    perplexity: Optional[float] = Field(default=None)
    coherence_score: Optional[float] = Field(default=None)
    coherence_metric: Optional[str] = Field(default=None)
    topic_top_words: Optional[Dict[int, List[Tuple[str, float]]]] = Field(
        default=None,
        description="Top words for each topic with probabilities"
    )

    @field_validator('perplexity')
    @classmethod
    def validate_perplexity(cls, v: Optional[float]) -> Optional[float]:
        """Perplexity is a positive finite number when present."""
        if v is not None and not (np.isfinite(v) and v > 0):
            raise ValueError(f"Perplexity must be positive and finite, got {v}")
        return v

    def get_topic_description(self, topic_id: int, num_words: int = 10) -> str:
        """
        Get human-readable description of a topic.

        Args:
            topic_id: Topic ID
            num_words: Number of top words to include

        Returns:
            String description of the topic
        """
        label = f"Topic {topic_id}"

        if self.topic_top_words and topic_id in self.topic_top_words:
            words = self.topic_top_words[topic_id][:num_words]
            word_str = ", ".join([w[0] for w in words])
            return f"{label}: {word_str}"

        return label
