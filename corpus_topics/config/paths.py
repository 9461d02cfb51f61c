"""Filesystem locations used by the CLI and the pipeline."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_root() -> Path:
    return Path(__file__).resolve().parents[2]


class PathsConfig(BaseSettings):
    """
    Data directories, all relative to ``project_root``.

    Override the root with PATHS_PROJECT_ROOT to keep corpora and run
    outputs outside the source checkout.
    """
    model_config = SettingsConfigDict(env_prefix='PATHS_', case_sensitive=False)

    project_root: Path = Field(default_factory=_default_root)

    @property
    def data_dir(self) -> Path:
        return self.project_root / "data"

    @property
    def input_dir(self) -> Path:
        """Document collections (CSV or one document per line)"""
        return self.data_dir / "input"

    @property
    def output_dir(self) -> Path:
        """Base directory for timestamped run folders"""
        return self.data_dir / "output"

    @property
    def logs_dir(self) -> Path:
        return self.project_root / "logs"

    def ensure_directories(self) -> None:
        for path in (self.input_dir, self.output_dir, self.logs_dir):
            path.mkdir(parents=True, exist_ok=True)
