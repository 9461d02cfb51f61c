"""
Corpus Topics Configuration Package.

This module uses Pydantic Settings to:
1. Define the schema for all configuration
2. Load defaults from configs/config.yaml and configs/features/topic_modeling.yaml
3. Automatically override with environment variables from .env or CI/CD secrets

Usage:
    from corpus_topics.config import settings

    # Number of LDA topics
    k = settings.topic_modeling.model.num_topics

    # Extra stopwords merged with the English list
    extra = settings.preprocessing.custom_stopwords

    # Seed used by the LDA engine
    seed = settings.reproducibility.random_seed
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from corpus_topics.config.paths import PathsConfig
from corpus_topics.config.preprocessing import PreprocessingConfig
from corpus_topics.config.reproducibility import ReproducibilityConfig
from corpus_topics.config.run_context import RunContext
from corpus_topics.config.topic_modeling import (
    TopicModelingConfig,
    TopicModelingEvaluationConfig,
    TopicModelingModelConfig,
    TopicModelingOutputConfig,
    TopicModelingProcessingConfig,
)


class Settings(BaseSettings):
    """
    Main settings class that combines all configuration sections.

    Usage:
        from corpus_topics.config import settings

        settings.paths.output_dir
        settings.topic_modeling.output.top_n
    """
    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore'
    )

    paths: PathsConfig = Field(default_factory=PathsConfig)
    preprocessing: PreprocessingConfig = Field(default_factory=PreprocessingConfig)
    topic_modeling: TopicModelingConfig = Field(default_factory=TopicModelingConfig)
    reproducibility: ReproducibilityConfig = Field(default_factory=ReproducibilityConfig)


# ===========================
# Global Settings Instance
# ===========================

settings = Settings()


# ===========================
# Utility Functions
# ===========================

ensure_directories = settings.paths.ensure_directories


__all__ = [
    "settings",
    "Settings",
    "ensure_directories",
    "RunContext",
    "PathsConfig",
    "PreprocessingConfig",
    "ReproducibilityConfig",
    "TopicModelingConfig",
    "TopicModelingModelConfig",
    "TopicModelingProcessingConfig",
    "TopicModelingEvaluationConfig",
    "TopicModelingOutputConfig",
]
