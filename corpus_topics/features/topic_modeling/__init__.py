"""
Topic Modeling Module

LDA topic modeling over a document-term matrix: the inference engine, the
fitted model, evaluation and tabular exports.

Key Components:
- LDAEngine: Variational EM / collapsed Gibbs fitter
- TopicModel: Immutable fit result (beta, theta, hyperparameters)
- TopicExporter: Writes topic tables and probability matrices
- LDAModelInfo: Model metadata

Workflow:
    ```python
    from corpus_topics.preprocessing import normalize, build_dtm
    from corpus_topics.features.topic_modeling import LDAEngine, top_terms

    dtm, vocabulary, kept = build_dtm(normalize(documents))

    engine = LDAEngine(num_topics=5, seed=1234)
    model = engine.fit(dtm)

    for topic_id, terms in top_terms(model, n=10).items():
        print(topic_id, [term for term, _ in terms])
    ```
"""

from .lda_engine import LDAEngine, fit, validate_num_topics, resolve_prior
from .schemas import (
    LDAHyperparameters,
    LDAModelInfo,
    TopicModel,
    TopicTerm,
)
from .exporter import (
    TopicExporter,
    beta_frame,
    theta_frame,
    top_terms,
    topic_table,
    topic_terms,
)
from .evaluation import build_model_info, compute_coherence
from .constants import (
    TOPIC_MODELING_MODULE_VERSION,
    DEFAULT_NUM_TOPICS,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_RANDOM_STATE,
    MAX_TOPICS,
)

__all__ = [
    # Main classes
    "LDAEngine",
    "TopicExporter",
    "fit",
    "validate_num_topics",
    "resolve_prior",
    # Schemas
    "LDAHyperparameters",
    "LDAModelInfo",
    "TopicModel",
    "TopicTerm",
    # Exports
    "top_terms",
    "topic_terms",
    "topic_table",
    "beta_frame",
    "theta_frame",
    # Evaluation
    "build_model_info",
    "compute_coherence",
    # Constants
    "TOPIC_MODELING_MODULE_VERSION",
    "DEFAULT_NUM_TOPICS",
    "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_RANDOM_STATE",
    "MAX_TOPICS",
]

__version__ = TOPIC_MODELING_MODULE_VERSION
