"""Per-run output folders for exported corpus statistics and topic tables."""

from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from pydantic import Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

RUN_CONFIG_FILE = "run_config.yaml"


class RunContext(BaseSettings):
    """
    One analysis run over one document collection.

    The folder is named ``{YYYYMMDD_HHMMSS}_{name}`` under ``base_dir``. If
    that folder already exists when the run is created (two runs over the
    same corpus within one second), a ``_2``, ``_3``, ... suffix is added so
    runs never share a folder.

    Usage:
        run = RunContext(name="abstracts").create()
        run.save_config({"num_topics": 5})
        run.artifact("topic_models.csv")
    """
    model_config = SettingsConfigDict(env_prefix='RUN_', arbitrary_types_allowed=True)

    name: str = Field(..., min_length=1, description="Usually the input file stem")
    base_dir: Optional[Path] = Field(
        default=None,
        description="Parent of the run folder; settings.paths.output_dir when unset",
    )
    timestamp: datetime = Field(default_factory=datetime.now)

    _collisions: int = PrivateAttr(default=0)
    _created: bool = PrivateAttr(default=False)

    def model_post_init(self, __context) -> None:
        if self.base_dir is None:
            # Deferred: the settings module imports this one
            from corpus_topics.config import settings
            self.base_dir = settings.paths.output_dir

    @property
    def run_id(self) -> str:
        return self.timestamp.strftime("%Y%m%d_%H%M%S")

    @property
    def output_dir(self) -> Path:
        folder = f"{self.run_id}_{self.name}"
        if self._collisions:
            folder = f"{folder}_{self._collisions + 1}"
        return self.base_dir / folder

    def artifact(self, filename: str) -> Path:
        """Path of a file inside the run folder."""
        return self.output_dir / filename

    def create(self) -> "RunContext":
        """Create a fresh run folder; repeated calls reuse it."""
        if self._created:
            return self
        self.base_dir.mkdir(parents=True, exist_ok=True)
        while True:
            try:
                self.output_dir.mkdir()
                break
            except FileExistsError:
                self._collisions += 1
        self._created = True
        return self

    def save_config(self, config: Mapping[str, Any]) -> Path:
        """Write the effective options of this run to run_config.yaml."""
        self.create()
        path = self.artifact(RUN_CONFIG_FILE)
        path.write_text(
            yaml.safe_dump(dict(config), default_flow_style=False, sort_keys=True),
            encoding="utf-8",
        )
        return path
