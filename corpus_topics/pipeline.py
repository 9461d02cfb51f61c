"""
Topic Modeling Pipeline

Orchestrates the complete batch flow:
1. Normalize - Clean documents and remove stopwords
2. Vectorize - Build the document-term matrix
3. Describe - Corpus statistics
4. Fit - LDA topic model
5. Export - Statistics, topic tables and probability matrices

Stages run strictly in sequence; each consumes the previous stage's immutable
output.
"""

import logging
import threading
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, List, Literal, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from corpus_topics.config import RunContext, Settings, settings as global_settings
from corpus_topics.features.statistics import CorpusStatistics, describe_corpus
from corpus_topics.features.topic_modeling import (
    LDAEngine,
    LDAModelInfo,
    TopicExporter,
    TopicModel,
    build_model_info,
)
from corpus_topics.features.topic_modeling.constants import (
    DEFAULT_CHUNKSIZE,
    DEFAULT_E_STEP_MAX_ITER,
    DEFAULT_E_STEP_TOL,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_METHOD,
    DEFAULT_NUM_TOPICS,
    DEFAULT_PRIOR,
    DEFAULT_RANDOM_STATE,
    DEFAULT_TOL,
    DEFAULT_TOP_N,
)
from corpus_topics.preprocessing import (
    DocumentTermMatrix,
    TextNormalizer,
    build_dtm,
    load_documents,
    tokenize,
)

logger = logging.getLogger(__name__)


class PipelineConfig(BaseModel):
    """
    Configuration for the topic modeling pipeline (Pydantic V2)

    Attributes:
        num_topics: Number of LDA topics
        custom_stopwords: Stopwords added to the English list
        stopword_source: Base stopword list ('nltk', 'gensim' or 'none')
        placeholder: Text substituted for empty documents
        exclude_placeholder: Drop documents consisting only of the placeholder
        seed: Random seed of the LDA engine
        method: 'vem' or 'gibbs'
        alpha: Document-topic prior (float or 'symmetric')
        eta: Topic-term prior (float or 'symmetric')
        max_iterations: EM iterations or Gibbs sweeps
        tol: Relative ELBO improvement that stops variational EM
        e_step_max_iter: Gamma updates per document in one E-step
        e_step_tol: Mean gamma change that ends a document's E-step
        workers: Threads running E-step chunks
        chunksize: Documents per E-step chunk
        top_n: Terms per topic in the topic table
        num_common_words: Rows in the common words table
        precision: Decimal places for probabilities in CSV files
        compute_perplexity: Store perplexity in the model info
        compute_coherence: Compute gensim topic coherence
        coherence_metric: gensim coherence measure
        copy_input: Copy the input file next to the outputs
    """
    model_config = ConfigDict(
        validate_assignment=True,
        extra='forbid',
    )

    # Normalizer / DTM
    num_topics: int = DEFAULT_NUM_TOPICS
    custom_stopwords: List[str] = Field(default_factory=list)
    stopword_source: Literal["nltk", "gensim", "none"] = "nltk"
    placeholder: str = "placeholder"
    exclude_placeholder: bool = False

    # LDA engine
    seed: int = DEFAULT_RANDOM_STATE
    method: Literal["vem", "gibbs"] = DEFAULT_METHOD
    alpha: Union[float, str] = DEFAULT_PRIOR
    eta: Union[float, str] = DEFAULT_PRIOR
    max_iterations: int = Field(default=DEFAULT_MAX_ITERATIONS, ge=1)
    tol: float = Field(default=DEFAULT_TOL, ge=0.0)
    e_step_max_iter: int = Field(default=DEFAULT_E_STEP_MAX_ITER, ge=1)
    e_step_tol: float = Field(default=DEFAULT_E_STEP_TOL, gt=0.0)
    workers: int = Field(default=1, ge=1)
    chunksize: int = Field(default=DEFAULT_CHUNKSIZE, ge=1)

    # Outputs
    top_n: int = Field(default=DEFAULT_TOP_N, ge=1)
    num_common_words: int = Field(default=10, ge=1)
    precision: int = Field(default=6, ge=0)
    compute_perplexity: bool = True
    compute_coherence: bool = False
    coherence_metric: Literal["u_mass", "c_v", "c_uci", "c_npmi"] = "u_mass"
    copy_input: bool = True

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> "PipelineConfig":
        """Collect pipeline options from Settings, then apply non-None overrides."""
        tm = settings.topic_modeling
        values = dict(
            num_topics=tm.model.num_topics,
            custom_stopwords=list(settings.preprocessing.custom_stopwords),
            stopword_source=settings.preprocessing.stopword_source,
            placeholder=settings.preprocessing.placeholder,
            exclude_placeholder=settings.preprocessing.exclude_placeholder,
            seed=settings.reproducibility.random_seed,
            method=tm.model.method,
            alpha=tm.model.alpha,
            eta=tm.model.eta,
            max_iterations=tm.model.max_iterations,
            tol=tm.model.tol,
            e_step_max_iter=tm.model.e_step_max_iter,
            e_step_tol=tm.model.e_step_tol,
            workers=tm.processing.workers,
            chunksize=tm.processing.chunksize,
            top_n=tm.output.top_n,
            num_common_words=tm.output.num_common_words,
            precision=tm.output.precision,
            compute_perplexity=tm.evaluation.compute_perplexity,
            compute_coherence=tm.evaluation.compute_coherence,
            coherence_metric=tm.evaluation.coherence_metric,
            copy_input=tm.output.copy_input,
        )
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


@dataclass(frozen=True, eq=False)
class PipelineResult:
    """
    Everything produced by one pipeline run.

    Attributes:
        documents: Raw input documents
        normalized: Normalized documents, aligned with the input
        dtm: Document-term matrix (empty documents dropped)
        statistics: Descriptive corpus statistics
        model: Fitted topic model
        model_info: Model metadata and evaluation scores
        output_dir: Directory holding the exported files, if exported
    """
    documents: Sequence[Any]
    normalized: List[str]
    dtm: DocumentTermMatrix
    statistics: CorpusStatistics
    model: TopicModel
    model_info: LDAModelInfo
    output_dir: Optional[Path] = None


class TopicPipeline:
    """
    Complete topic modeling pipeline for a document collection

    Flow: Normalize → Vectorize → Describe → Fit → Export

    Example:
        >>> pipeline = TopicPipeline()
        >>> result = pipeline.run_file("data/input/abstracts.csv")
        >>> result.model_info.get_topic_description(0)
        >>> result.output_dir
    """

    def __init__(self, config: Optional[PipelineConfig] = None):
        """
        Initialize the pipeline

        Args:
            config: Pipeline configuration. Built from the global settings if
                not provided.
        """
        self.config = config or PipelineConfig.from_settings(global_settings)

        self.normalizer = TextNormalizer(
            extra_stopwords=self.config.custom_stopwords,
            stopword_source=self.config.stopword_source,
            placeholder=self.config.placeholder,
        )
        self.engine = LDAEngine(
            num_topics=self.config.num_topics,
            seed=self.config.seed,
            alpha=self.config.alpha,
            eta=self.config.eta,
            method=self.config.method,
            max_iterations=self.config.max_iterations,
            tol=self.config.tol,
            e_step_max_iter=self.config.e_step_max_iter,
            e_step_tol=self.config.e_step_tol,
            chunksize=self.config.chunksize,
            workers=self.config.workers,
        )

    def run(
        self,
        documents: Sequence[Any],
        cancel_event: Optional[threading.Event] = None,
    ) -> PipelineResult:
        """
        Run every stage up to the fitted model without writing files.

        Args:
            documents: Raw documents (strings; None/NaN count as empty)
            cancel_event: Optional token that stops LDA fitting

        Returns:
            PipelineResult

        Raises:
            EmptyCorpusError: If no document retains any term
            InvalidTopicCountError: If num_topics is out of range
            FitCancelledError: If cancel_event is set during fitting
        """
        cfg = self.config
        logger.info("Processing %d documents", len(documents))

        # Step 1: Normalize
        logger.info("Step 1/4: Normalizing documents...")
        normalized = self.normalizer.normalize(documents)

        # Step 2: Document-term matrix
        logger.info("Step 2/4: Building document-term matrix...")
        dtm, _, _ = build_dtm(
            normalized,
            exclude_placeholder=cfg.exclude_placeholder,
            placeholder=cfg.placeholder,
        )

        # Step 3: Statistics
        logger.info("Step 3/4: Computing descriptive statistics...")
        statistics = describe_corpus(dtm, num_documents=len(documents), top_n=cfg.num_common_words)
        logger.info(
            "Corpus: %d total words, %d unique words, %d/%d documents retained",
            statistics.total_words, statistics.unique_words,
            statistics.num_retained_documents, statistics.num_documents,
        )

        # Step 4: Topic model
        logger.info("Step 4/4: Fitting topic model...")
        model = self.engine.fit(dtm, cancel_event=cancel_event)

        texts = None
        if cfg.compute_coherence:
            texts = [tokenize(normalized[i]) for i in dtm.kept_row_indices]
        model_info = build_model_info(
            model,
            top_n=cfg.top_n,
            texts=texts,
            compute_perplexity=cfg.compute_perplexity,
            coherence_metric=cfg.coherence_metric if cfg.compute_coherence else None,
        )

        return PipelineResult(
            documents=documents,
            normalized=normalized,
            dtm=dtm,
            statistics=statistics,
            model=model,
            model_info=model_info,
        )

    def export(self, result: PipelineResult, output_dir: Path | str) -> Path:
        """
        Write all tables of a pipeline result.

        Args:
            result: Output of run()
            output_dir: Directory receiving the files

        Returns:
            The output directory
        """
        cfg = self.config
        exporter = TopicExporter(output_dir, top_n=cfg.top_n, precision=cfg.precision)

        exporter.write_descriptive_stats(result.dtm, result.statistics)
        exporter.write_common_words(result.dtm, cfg.num_common_words)
        exporter.write_topic_table(result.model)
        exporter.write_matrices(result.model, num_original=len(result.documents))
        exporter.write_model_info(result.model_info)

        logger.info("Exported results to %s", exporter.output_dir)
        return exporter.output_dir

    def run_file(
        self,
        input_path: Path | str,
        output_dir: Optional[Path | str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> PipelineResult:
        """
        Load a document file, run the pipeline and export the results.

        Outputs go to a timestamped run directory
        ``{output_dir}/{YYYYMMDD_HHMMSS}_{input_stem}/`` together with the
        run configuration and, if enabled, a copy of the input file.

        Args:
            input_path: CSV or newline-delimited text file
            output_dir: Base output directory (default: settings.paths.output_dir)
            cancel_event: Optional token that stops LDA fitting

        Returns:
            PipelineResult with output_dir set

        Raises:
            InputNotFoundError: If input_path does not exist
            EmptyCorpusError: If no document retains any term
        """
        input_path = Path(input_path)
        documents = load_documents(input_path)

        result = self.run(documents, cancel_event=cancel_event)

        run = RunContext(
            name=input_path.stem,
            base_dir=Path(output_dir) if output_dir is not None else None,
        ).create()
        run.save_config(self.config.model_dump())

        run_dir = self.export(result, run.output_dir)
        if self.config.copy_input:
            TopicExporter(run_dir).copy_input(input_path)

        return replace(result, output_dir=run_dir)
