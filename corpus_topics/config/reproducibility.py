"""Reproducibility configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from corpus_topics.config._loader import load_yaml_section
from corpus_topics.features.topic_modeling.constants import DEFAULT_RANDOM_STATE


def _get_reproducibility_config() -> dict:
    return load_yaml_section("config.yaml").get("reproducibility", {})


class ReproducibilityConfig(BaseSettings):
    """Seed shared by every stochastic step of a run."""
    model_config = SettingsConfigDict(
        env_prefix='REPRODUCIBILITY_',
        case_sensitive=False
    )

    random_seed: int = Field(
        default_factory=lambda: _get_reproducibility_config().get('random_seed', DEFAULT_RANDOM_STATE)
    )
