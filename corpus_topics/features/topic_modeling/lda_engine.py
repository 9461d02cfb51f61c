"""
LDA Inference Engine

Fits a Latent Dirichlet Allocation model to a document-term matrix:

    for each document d:      theta_d ~ Dirichlet(alpha)
    for each term occurrence: z ~ Categorical(theta_d), w ~ Categorical(beta_z)
    for each topic k:         beta_k ~ Dirichlet(eta)

Two inference methods are available:

- 'vem'   Batch mean-field variational EM. Stops after max_iterations EM
          steps or when the relative ELBO improvement drops below tol.
- 'gibbs' Collapsed Gibbs sampling with a fixed sweep budget.

Both are deterministic for a given DTM, k, priors, seed and iteration count:
all randomness comes from one numpy Generator seeded per fit. In variational
EM the E-step runs over fixed-size document chunks whose sufficient
statistics are reduced in chunk order, so any number of worker threads
produces the same result as a sequential run.

Usage:
    from corpus_topics.features.topic_modeling import LDAEngine

    engine = LDAEngine(num_topics=5, seed=1234)
    model = engine.fit(dtm)
    model.beta.shape   # (5, |V|)
    model.theta.shape  # (dtm.num_documents, 5)
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Mapping, Optional, Tuple

import numpy as np
from scipy import sparse
from scipy.special import gammaln, logsumexp, psi

from corpus_topics.exceptions import (
    EmptyCorpusError,
    FitCancelledError,
    InvalidTopicCountError,
)
from corpus_topics.preprocessing.vocabulary import DocumentTermMatrix
from .constants import (
    DEFAULT_CHUNKSIZE,
    DEFAULT_E_STEP_MAX_ITER,
    DEFAULT_E_STEP_TOL,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_METHOD,
    DEFAULT_PRIOR,
    DEFAULT_RANDOM_STATE,
    DEFAULT_TOL,
    LAMBDA_INIT_SHAPE,
    MAX_TOPICS,
    PHI_NORM_EPSILON,
    SUPPORTED_METHODS,
)
from .schemas import LDAHyperparameters, TopicModel

logger = logging.getLogger(__name__)


def dirichlet_expectation(alpha: np.ndarray) -> np.ndarray:
    """E[log X] for X ~ Dir(alpha), row-wise for 2-D input."""
    if alpha.ndim == 1:
        return psi(alpha) - psi(np.sum(alpha))
    return psi(alpha) - psi(np.sum(alpha, axis=1))[:, np.newaxis]


def validate_num_topics(num_topics: Any) -> int:
    """
    Check a requested topic count.

    Raises:
        InvalidTopicCountError: If num_topics is not an integer in [1, MAX_TOPICS]
    """
    if isinstance(num_topics, bool) or not isinstance(num_topics, (int, np.integer)):
        raise InvalidTopicCountError(f"Number of topics must be an integer, got {num_topics!r}")
    if num_topics < 1:
        raise InvalidTopicCountError(f"Number of topics must be at least 1, got {num_topics}")
    if num_topics > MAX_TOPICS:
        raise InvalidTopicCountError(
            f"Number of topics must not exceed {MAX_TOPICS}, got {num_topics}"
        )
    return int(num_topics)


def resolve_prior(value: Any, num_topics: int, name: str) -> float:
    """
    Turn a configured prior into a positive float.

    Args:
        value: Float, numeric string, None or 'symmetric' (1 / num_topics)
        num_topics: Number of topics
        name: Prior name for error messages

    Raises:
        ValueError: If the prior is not a positive number
    """
    if value is None or value == DEFAULT_PRIOR:
        return 1.0 / num_topics
    try:
        prior = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a positive float or '{DEFAULT_PRIOR}', got {value!r}")
    if not np.isfinite(prior) or prior <= 0:
        raise ValueError(f"{name} must be a positive float, got {prior}")
    return prior


class LDAEngine:
    """
    Latent Dirichlet Allocation fitter.

    This class handles:
    1. Validating the topic count and the document-term matrix
    2. Resolving Dirichlet priors
    3. Running variational EM or collapsed Gibbs sampling
    4. Returning an immutable TopicModel with normalised beta and theta

    The input matrix is never modified.
    """

    def __init__(
        self,
        num_topics: int,
        seed: int = DEFAULT_RANDOM_STATE,
        alpha: float | str = DEFAULT_PRIOR,
        eta: float | str = DEFAULT_PRIOR,
        method: str = DEFAULT_METHOD,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        tol: float = DEFAULT_TOL,
        e_step_max_iter: int = DEFAULT_E_STEP_MAX_ITER,
        e_step_tol: float = DEFAULT_E_STEP_TOL,
        chunksize: int = DEFAULT_CHUNKSIZE,
        workers: int = 1,
    ):
        """
        Initialize LDA engine.

        Args:
            num_topics: Number of topics to discover
            seed: Random seed for reproducibility
            alpha: Document-topic prior (float or 'symmetric')
            eta: Topic-term prior (float or 'symmetric')
            method: 'vem' or 'gibbs'
            max_iterations: EM iterations or Gibbs sweeps
            tol: Relative ELBO improvement that stops variational EM (0 disables)
            e_step_max_iter: Gamma updates per document per E-step
            e_step_tol: Mean gamma change that ends a document's E-step
            chunksize: Documents per E-step chunk
            workers: Threads running E-step chunks (vem only)

        Raises:
            ValueError: If method, priors or iteration settings are invalid
        """
        if method not in SUPPORTED_METHODS:
            raise ValueError(f"Unknown method '{method}'. Expected one of {SUPPORTED_METHODS}")
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")

        self.num_topics = num_topics
        self.seed = seed
        self.alpha = alpha
        self.eta = eta
        self.method = method
        self.max_iterations = max_iterations
        self.tol = tol
        self.e_step_max_iter = e_step_max_iter
        self.e_step_tol = e_step_tol
        self.chunksize = chunksize
        self.workers = workers

    @classmethod
    def from_settings(cls, settings, num_topics: Optional[int] = None) -> "LDAEngine":
        """Build an engine from the global Settings object."""
        model_cfg = settings.topic_modeling.model
        proc_cfg = settings.topic_modeling.processing
        return cls(
            num_topics=num_topics if num_topics is not None else model_cfg.num_topics,
            seed=settings.reproducibility.random_seed,
            alpha=model_cfg.alpha,
            eta=model_cfg.eta,
            method=model_cfg.method,
            max_iterations=model_cfg.max_iterations,
            tol=model_cfg.tol,
            e_step_max_iter=model_cfg.e_step_max_iter,
            e_step_tol=model_cfg.e_step_tol,
            chunksize=proc_cfg.chunksize,
            workers=proc_cfg.workers,
        )

    def hyperparameters(self) -> LDAHyperparameters:
        """Validate and resolve the configured settings."""
        k = validate_num_topics(self.num_topics)
        return LDAHyperparameters(
            num_topics=k,
            alpha=resolve_prior(self.alpha, k, "alpha"),
            eta=resolve_prior(self.eta, k, "eta"),
            seed=self.seed,
            method=self.method,
            max_iterations=self.max_iterations,
            tol=self.tol,
            e_step_max_iter=self.e_step_max_iter,
            e_step_tol=self.e_step_tol,
            chunksize=self.chunksize,
        )

    def fit(
        self,
        dtm: DocumentTermMatrix,
        cancel_event: Optional[threading.Event] = None,
    ) -> TopicModel:
        """
        Fit the topic model.

        Args:
            dtm: Document-term matrix with no all-zero rows
            cancel_event: Optional token; when set, fitting stops at the next
                iteration boundary

        Returns:
            TopicModel with normalised beta and theta

        Raises:
            InvalidTopicCountError: If num_topics < 1 or > MAX_TOPICS
            EmptyCorpusError: If the matrix has no rows or no tokens
            FitCancelledError: If cancel_event is set during fitting
        """
        params = self.hyperparameters()

        if dtm.num_documents == 0 or dtm.total_tokens == 0:
            raise EmptyCorpusError("Cannot fit a topic model on a matrix with no usable rows")
        if params.num_topics > dtm.num_documents:
            logger.warning(
                "Requested %d topics for only %d documents; topics may be degenerate",
                params.num_topics, dtm.num_documents,
            )

        logger.info(
            "Fitting LDA (%s) with %d topics on %d documents x %d terms "
            "(alpha=%.4g, eta=%.4g, seed=%d, max_iterations=%d)",
            params.method, params.num_topics, dtm.num_documents, dtm.num_terms,
            params.alpha, params.eta, params.seed, params.max_iterations,
        )

        if params.method == "gibbs":
            sampler = _GibbsSampler(dtm.matrix, params)
            beta, theta, trace, converged = sampler.run(cancel_event)
        else:
            fitter = _VariationalEM(dtm.matrix, params, self.workers)
            beta, theta, trace, converged = fitter.run(cancel_event)

        model = TopicModel(
            beta=beta,
            theta=theta,
            vocabulary=dtm.vocabulary,
            kept_row_indices=dtm.kept_row_indices,
            hyperparameters=params,
            iterations=len(trace),
            converged=converged,
            log_likelihood=trace[-1],
            log_likelihood_trace=tuple(trace),
            num_tokens=dtm.total_tokens,
        )

        logger.info(
            "LDA fit complete after %d iteration(s) (converged=%s, log-likelihood=%.4f)",
            model.iterations, model.converged, model.log_likelihood,
        )
        return model


def fit(
    dtm: DocumentTermMatrix,
    k: int,
    seed: int = DEFAULT_RANDOM_STATE,
    priors: Optional[Mapping[str, float]] = None,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    cancel_event: Optional[threading.Event] = None,
    **engine_kwargs,
) -> TopicModel:
    """
    Convenience function to fit an LDA model.

    Args:
        dtm: Document-term matrix
        k: Number of topics
        seed: Random seed
        priors: Optional {'alpha': float, 'eta': float}
        max_iterations: Iteration budget
        cancel_event: Optional cancellation token
        **engine_kwargs: Further LDAEngine arguments (method, tol, workers, ...)

    Returns:
        Fitted TopicModel
    """
    priors = dict(priors or {})
    engine = LDAEngine(
        num_topics=k,
        seed=seed,
        alpha=priors.get("alpha", DEFAULT_PRIOR),
        eta=priors.get("eta", DEFAULT_PRIOR),
        max_iterations=max_iterations,
        **engine_kwargs,
    )
    return engine.fit(dtm, cancel_event=cancel_event)


def _check_cancelled(cancel_event: Optional[threading.Event], iteration: int) -> None:
    if cancel_event is not None and cancel_event.is_set():
        logger.warning("LDA fit cancelled at iteration %d", iteration)
        raise FitCancelledError(f"Fitting cancelled at iteration {iteration}")


def _normalize_rows(matrix: np.ndarray) -> np.ndarray:
    return matrix / matrix.sum(axis=1, keepdims=True)


# ===========================
# Variational EM
# ===========================

class _VariationalEM:
    """Batch mean-field variational EM over a CSR count matrix."""

    def __init__(self, counts: sparse.csr_matrix, params: LDAHyperparameters, workers: int):
        self.counts = sparse.csr_matrix(counts, dtype=np.float64, copy=True)
        self.params = params
        self.workers = workers
        self.num_docs, self.num_terms = self.counts.shape
        self.chunks = [
            (start, min(start + params.chunksize, self.num_docs))
            for start in range(0, self.num_docs, params.chunksize)
        ]

    def run(
        self,
        cancel_event: Optional[threading.Event],
    ) -> Tuple[np.ndarray, np.ndarray, List[float], bool]:
        p = self.params
        rng = np.random.default_rng(p.seed)
        lam = rng.gamma(LAMBDA_INIT_SHAPE, 1.0 / LAMBDA_INIT_SHAPE, (p.num_topics, self.num_terms))
        elog_beta = dirichlet_expectation(lam)

        trace: List[float] = []
        converged = False

        executor = ThreadPoolExecutor(max_workers=self.workers) if self.workers > 1 else None
        try:
            for iteration in range(1, p.max_iterations + 1):
                _check_cancelled(cancel_event, iteration)

                gamma, sstats = self._e_step(np.exp(elog_beta), executor)
                lam = p.eta + sstats
                elog_beta = dirichlet_expectation(lam)

                bound = self._bound(gamma, lam, elog_beta)
                logger.debug("EM iteration %d: ELBO %.6f", iteration, bound)

                if trace and abs(bound - trace[-1]) < p.tol * abs(trace[-1]):
                    trace.append(bound)
                    converged = True
                    logger.info("ELBO converged at iteration %d", iteration)
                    break
                trace.append(bound)

            # Final E-step so theta matches the returned beta
            gamma, _ = self._e_step(np.exp(elog_beta), executor)
        finally:
            if executor is not None:
                executor.shutdown(wait=True)

        beta = _normalize_rows(lam)
        theta = _normalize_rows(gamma)
        return beta, theta, trace, converged

    def _e_step(
        self,
        exp_elog_beta: np.ndarray,
        executor: Optional[ThreadPoolExecutor],
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Per-chunk gamma updates reduced in chunk order."""
        def run_chunk(bounds: Tuple[int, int]) -> Tuple[np.ndarray, np.ndarray]:
            return self._e_step_chunk(bounds[0], bounds[1], exp_elog_beta)

        if executor is None:
            results = [run_chunk(bounds) for bounds in self.chunks]
        else:
            results = list(executor.map(run_chunk, self.chunks))

        gamma = np.vstack([chunk_gamma for chunk_gamma, _ in results])
        sstats = np.zeros_like(exp_elog_beta)
        for _, chunk_sstats in results:
            sstats += chunk_sstats
        return gamma, sstats * exp_elog_beta

    def _e_step_chunk(
        self,
        start: int,
        end: int,
        exp_elog_beta: np.ndarray,
    ) -> Tuple[np.ndarray, np.ndarray]:
        p = self.params
        k = p.num_topics
        gamma = np.empty((end - start, k))
        sstats = np.zeros((k, self.num_terms))
        indptr, indices, data = self.counts.indptr, self.counts.indices, self.counts.data

        for offset, row in enumerate(range(start, end)):
            ids = indices[indptr[row]:indptr[row + 1]]
            cts = data[indptr[row]:indptr[row + 1]]

            gamma_d = np.full(k, p.alpha + cts.sum() / k)
            exp_elog_theta_d = np.exp(dirichlet_expectation(gamma_d))
            exp_elog_beta_d = exp_elog_beta[:, ids]
            phinorm = exp_elog_theta_d @ exp_elog_beta_d + PHI_NORM_EPSILON

            for _ in range(p.e_step_max_iter):
                last_gamma = gamma_d
                gamma_d = p.alpha + exp_elog_theta_d * ((cts / phinorm) @ exp_elog_beta_d.T)
                exp_elog_theta_d = np.exp(dirichlet_expectation(gamma_d))
                phinorm = exp_elog_theta_d @ exp_elog_beta_d + PHI_NORM_EPSILON
                if np.mean(np.abs(gamma_d - last_gamma)) < p.e_step_tol:
                    break

            gamma[offset] = gamma_d
            sstats[:, ids] += np.outer(exp_elog_theta_d, cts / phinorm)

        return gamma, sstats

    def _bound(self, gamma: np.ndarray, lam: np.ndarray, elog_beta: np.ndarray) -> float:
        """Evidence lower bound for the current variational parameters."""
        p = self.params
        k = p.num_topics
        elog_theta = dirichlet_expectation(gamma)
        indptr, indices, data = self.counts.indptr, self.counts.indices, self.counts.data

        score = 0.0
        for row in range(self.num_docs):
            ids = indices[indptr[row]:indptr[row + 1]]
            cts = data[indptr[row]:indptr[row + 1]]
            score += float(cts @ logsumexp(elog_theta[row][:, np.newaxis] + elog_beta[:, ids], axis=0))

        # E[log p(theta | alpha) - log q(theta | gamma)]
        score += np.sum((p.alpha - gamma) * elog_theta)
        score += np.sum(gammaln(gamma) - gammaln(p.alpha))
        score += np.sum(gammaln(p.alpha * k) - gammaln(np.sum(gamma, axis=1)))

        # E[log p(beta | eta) - log q(beta | lambda)]
        score += np.sum((p.eta - lam) * elog_beta)
        score += np.sum(gammaln(lam) - gammaln(p.eta))
        score += np.sum(gammaln(p.eta * self.num_terms) - gammaln(np.sum(lam, axis=1)))

        return float(score)


# ===========================
# Collapsed Gibbs Sampling
# ===========================

class _GibbsSampler:
    """
    Collapsed Gibbs sampler.

    Tokens are visited in row-major order of the CSR matrix, ascending term id
    within a row, each term repeated by its count.
    """

    def __init__(self, counts: sparse.csr_matrix, params: LDAHyperparameters):
        self.params = params
        self.num_docs, self.num_terms = counts.shape
        row_lengths = np.diff(counts.indptr)
        self.words = np.repeat(counts.indices, counts.data).astype(np.int64)
        self.docs = np.repeat(
            np.repeat(np.arange(self.num_docs), row_lengths), counts.data
        ).astype(np.int64)
        self.doc_lengths = np.asarray(counts.sum(axis=1)).ravel().astype(np.float64)

    def run(
        self,
        cancel_event: Optional[threading.Event],
    ) -> Tuple[np.ndarray, np.ndarray, List[float], bool]:
        p = self.params
        k = p.num_topics
        rng = np.random.default_rng(p.seed)
        num_tokens = len(self.words)
        v_eta = self.num_terms * p.eta

        z = rng.integers(0, k, size=num_tokens)
        n_dk = np.zeros((self.num_docs, k), dtype=np.int64)
        n_kw = np.zeros((k, self.num_terms), dtype=np.int64)
        np.add.at(n_dk, (self.docs, z), 1)
        np.add.at(n_kw, (z, self.words), 1)
        n_k = np.bincount(z, minlength=k).astype(np.int64)

        trace: List[float] = []
        for iteration in range(1, p.max_iterations + 1):
            _check_cancelled(cancel_event, iteration)

            uniforms = rng.random(num_tokens)
            for i in range(num_tokens):
                d, w, t = self.docs[i], self.words[i], z[i]
                n_dk[d, t] -= 1
                n_kw[t, w] -= 1
                n_k[t] -= 1

                weights = (n_dk[d] + p.alpha) * (n_kw[:, w] + p.eta) / (n_k + v_eta)
                cdf = np.cumsum(weights)
                t = min(int(np.searchsorted(cdf, uniforms[i] * cdf[-1], side="right")), k - 1)

                z[i] = t
                n_dk[d, t] += 1
                n_kw[t, w] += 1
                n_k[t] += 1

            log_likelihood = self._log_likelihood(n_dk, n_kw, n_k)
            logger.debug("Gibbs sweep %d: log-likelihood %.6f", iteration, log_likelihood)
            trace.append(log_likelihood)

        beta = _normalize_rows(n_kw + p.eta)
        theta = _normalize_rows(n_dk + p.alpha)
        return beta, theta, trace, False

    def _log_likelihood(self, n_dk: np.ndarray, n_kw: np.ndarray, n_k: np.ndarray) -> float:
        """Joint log p(w, z) with theta and beta integrated out."""
        p = self.params
        k = p.num_topics
        v = self.num_terms

        log_p_w = k * (gammaln(v * p.eta) - v * gammaln(p.eta))
        log_p_w += np.sum(gammaln(n_kw + p.eta)) - np.sum(gammaln(n_k + v * p.eta))

        log_p_z = self.num_docs * (gammaln(k * p.alpha) - k * gammaln(p.alpha))
        log_p_z += np.sum(gammaln(n_dk + p.alpha)) - np.sum(gammaln(self.doc_lengths + k * p.alpha))

        return float(log_p_w + log_p_z)
