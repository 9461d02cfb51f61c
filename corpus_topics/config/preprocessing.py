"""Text normalization configuration."""

from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from corpus_topics.config._loader import load_yaml_section


def _get_config() -> dict:
    return load_yaml_section("config.yaml").get("preprocessing", {})


class PreprocessingConfig(BaseSettings):
    """Normalizer and document-term matrix settings."""
    model_config = SettingsConfigDict(
        env_prefix='PREPROCESSING_',
        case_sensitive=False
    )

    custom_stopwords: List[str] = Field(
        default_factory=lambda: list(_get_config().get('custom_stopwords', []) or [])
    )
    placeholder: str = Field(
        default_factory=lambda: _get_config().get('placeholder', "placeholder")
    )
    exclude_placeholder: bool = Field(
        default_factory=lambda: _get_config().get('exclude_placeholder', False)
    )
    stopword_source: Literal["nltk", "gensim", "none"] = Field(
        default_factory=lambda: _get_config().get('stopword_source', "nltk")
    )

    @field_validator('custom_stopwords')
    @classmethod
    def lowercase_stopwords(cls, v: List[str]) -> List[str]:
        """Stopwords match case-insensitively, so store them folded."""
        return sorted({word.strip().lower() for word in v if word and word.strip()})
