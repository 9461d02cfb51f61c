"""Topic modeling configuration."""

from typing import Literal, Union

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from corpus_topics.config._loader import load_yaml_section
from corpus_topics.features.topic_modeling.constants import (
    DEFAULT_CHUNKSIZE,
    DEFAULT_E_STEP_MAX_ITER,
    DEFAULT_E_STEP_TOL,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_METHOD,
    DEFAULT_NUM_TOPICS,
    DEFAULT_PRIOR,
    DEFAULT_TOL,
    DEFAULT_TOP_N,
)


def _yaml_default(section: str, key: str, fallback):
    """Default from configs/features/topic_modeling.yaml, else fallback."""
    values = load_yaml_section("features/topic_modeling.yaml", "topic_modeling").get(section) or {}
    return values.get(key, fallback)


class TopicModelingModelConfig(BaseSettings):
    """LDA inference settings."""
    model_config = SettingsConfigDict(
        env_prefix='TOPIC_MODELING_MODEL_',
        case_sensitive=False
    )

    num_topics: int = Field(
        default_factory=lambda: _yaml_default('model', 'num_topics', DEFAULT_NUM_TOPICS)
    )
    method: Literal["vem", "gibbs"] = Field(
        default_factory=lambda: _yaml_default('model', 'method', DEFAULT_METHOD)
    )
    alpha: Union[float, str] = Field(
        default_factory=lambda: _yaml_default('model', 'alpha', DEFAULT_PRIOR)
    )
    eta: Union[float, str] = Field(
        default_factory=lambda: _yaml_default('model', 'eta', DEFAULT_PRIOR)
    )
    max_iterations: int = Field(
        default_factory=lambda: _yaml_default('model', 'max_iterations', DEFAULT_MAX_ITERATIONS)
    )
    tol: float = Field(
        default_factory=lambda: _yaml_default('model', 'tol', DEFAULT_TOL)
    )
    e_step_max_iter: int = Field(
        default_factory=lambda: _yaml_default('model', 'e_step_max_iter', DEFAULT_E_STEP_MAX_ITER)
    )
    e_step_tol: float = Field(
        default_factory=lambda: _yaml_default('model', 'e_step_tol', DEFAULT_E_STEP_TOL)
    )


class TopicModelingProcessingConfig(BaseSettings):
    """E-step parallelism settings."""
    model_config = SettingsConfigDict(
        env_prefix='TOPIC_MODELING_PROC_',
        case_sensitive=False
    )

    workers: int = Field(
        default_factory=lambda: _yaml_default('processing', 'workers', 1)
    )
    chunksize: int = Field(
        default_factory=lambda: _yaml_default('processing', 'chunksize', DEFAULT_CHUNKSIZE)
    )


class TopicModelingEvaluationConfig(BaseSettings):
    """Model evaluation settings."""
    model_config = SettingsConfigDict(
        env_prefix='TOPIC_MODELING_EVAL_',
        case_sensitive=False
    )

    compute_perplexity: bool = Field(
        default_factory=lambda: _yaml_default('evaluation', 'compute_perplexity', True)
    )
    compute_coherence: bool = Field(
        default_factory=lambda: _yaml_default('evaluation', 'compute_coherence', False)
    )
    coherence_metric: Literal["u_mass", "c_v", "c_uci", "c_npmi"] = Field(
        default_factory=lambda: _yaml_default('evaluation', 'coherence_metric', 'u_mass')
    )


class TopicModelingOutputConfig(BaseSettings):
    """Exported table settings."""
    model_config = SettingsConfigDict(
        env_prefix='TOPIC_MODELING_OUT_',
        case_sensitive=False
    )

    top_n: int = Field(
        default_factory=lambda: _yaml_default('output', 'top_n', DEFAULT_TOP_N)
    )
    num_common_words: int = Field(
        default_factory=lambda: _yaml_default('output', 'num_common_words', 10)
    )
    precision: int = Field(
        default_factory=lambda: _yaml_default('output', 'precision', 6)
    )
    copy_input: bool = Field(
        default_factory=lambda: _yaml_default('output', 'copy_input', True)
    )


class TopicModelingConfig(BaseSettings):
    """
    Topic modeling configuration.
    Loads from configs/features/topic_modeling.yaml with environment variable overrides.
    """
    model_config = SettingsConfigDict(
        env_prefix='TOPIC_MODELING_',
        env_nested_delimiter='__',
        case_sensitive=False
    )

    model: TopicModelingModelConfig = Field(
        default_factory=TopicModelingModelConfig
    )
    processing: TopicModelingProcessingConfig = Field(
        default_factory=TopicModelingProcessingConfig
    )
    evaluation: TopicModelingEvaluationConfig = Field(
        default_factory=TopicModelingEvaluationConfig
    )
    output: TopicModelingOutputConfig = Field(
        default_factory=TopicModelingOutputConfig
    )
