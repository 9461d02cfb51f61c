"""
Topic model evaluation: perplexity and gensim topic coherence.
"""

import logging
from typing import List, Optional, Sequence

from gensim.corpora import Dictionary
from gensim.models import CoherenceModel

from .constants import DEFAULT_TOP_N
from .exporter import top_terms
from .schemas import LDAModelInfo, TopicModel

logger = logging.getLogger(__name__)


def compute_coherence(
    model: TopicModel,
    texts: Sequence[Sequence[str]],
    metric: str = "u_mass",
    top_n: int = DEFAULT_TOP_N,
) -> float:
    """
    Average topic coherence of the model's top terms.

    Args:
        model: Fitted topic model
        texts: Tokenized documents the model was fitted on
        metric: gensim coherence measure ('u_mass', 'c_v', 'c_uci', 'c_npmi')
        top_n: Top terms per topic entering the measure

    Returns:
        Mean coherence over topics
    """
    dictionary = Dictionary(texts)
    topn = min(top_n, len(model.vocabulary))
    topics = [[term for term, _ in entries] for entries in top_terms(model, topn).values()]

    coherence_model = CoherenceModel(
        topics=topics,
        texts=[list(text) for text in texts],
        dictionary=dictionary,
        coherence=metric,
        topn=topn,
    )
    score = float(coherence_model.get_coherence())
    logger.info("Coherence (%s): %.4f", metric, score)
    return score


def build_model_info(
    model: TopicModel,
    top_n: int = DEFAULT_TOP_N,
    texts: Optional[List[List[str]]] = None,
    compute_perplexity: bool = True,
    coherence_metric: Optional[str] = None,
) -> LDAModelInfo:
    """
    Collect fit metadata, evaluation scores and top words.

    Args:
        model: Fitted topic model
        top_n: Top words stored per topic
        texts: Tokenized documents; required when coherence_metric is set
        compute_perplexity: Store exp(-log_likelihood / tokens)
        coherence_metric: gensim coherence measure, or None to skip coherence

    Returns:
        LDAModelInfo
    """
    perplexity = None
    if compute_perplexity:
        perplexity = model.perplexity
        logger.info("Model perplexity: %.4f", perplexity)

    coherence_score = None
    if coherence_metric:
        if texts is None:
            raise ValueError("texts are required to compute topic coherence")
        coherence_score = compute_coherence(model, texts, coherence_metric, top_n)

    params = model.hyperparameters
    return LDAModelInfo(
        num_topics=model.num_topics,
        num_documents=model.num_documents,
        vocabulary_size=len(model.vocabulary),
        method=params.method,
        iterations=model.iterations,
        converged=model.converged,
        alpha=params.alpha,
        eta=params.eta,
        seed=params.seed,
        log_likelihood=model.log_likelihood,
        perplexity=perplexity,
        coherence_score=coherence_score,
        coherence_metric=coherence_metric,
        topic_top_words=top_terms(model, top_n),
    )
