"""
YAML defaults for the settings classes.

Every settings section reads its defaults from a file under ``configs/``.
Set CORPUS_TOPICS_CONFIGS_DIR to point the whole package at another
directory, e.g. a per-experiment copy of the defaults.

    from corpus_topics.config._loader import load_yaml_section

    defaults = load_yaml_section("config.yaml")
    lda = load_yaml_section("features/topic_modeling.yaml", "topic_modeling")
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

CONFIGS_DIR_ENV = "CORPUS_TOPICS_CONFIGS_DIR"

DEFAULT_CONFIGS_DIR = Path(__file__).resolve().parents[2] / "configs"


def configs_dir() -> Path:
    override = os.environ.get(CONFIGS_DIR_ENV)
    return Path(override) if override else DEFAULT_CONFIGS_DIR


@lru_cache(maxsize=16)
def _read(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    with path.open(encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def load_yaml_section(config_file: str, section: str | None = None) -> dict[str, Any]:
    """
    Return the parsed YAML file, or one top-level mapping of it.

    Missing files and missing sections yield an empty dict so that the
    field defaults declared in code apply. Parsed files are cached per
    resolved path; call clear_config_cache() after editing them.
    """
    data = _read(configs_dir() / config_file)
    if section is None:
        return data
    return data.get(section) or {}


def clear_config_cache() -> None:
    _read.cache_clear()
