"""ABOUTME: Configuration logic and path settings for the project.
ABOUTME: Provides paths for config files and the fetch batch size."""

from pathlib import Path

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tabledump import __version__


def _get_project_root() -> Path:
    """Find project root by looking for pyproject.toml."""
    current = Path(__file__).resolve().parent
    while current != current.parent:
        if (current / "pyproject.toml").exists():
            return current
        current = current.parent
    return Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Contains settings for this project."""

    model_config = SettingsConfigDict(env_prefix="TABLEDUMP_")

    VERSION: str = __version__
    """Project version."""

    PROJECT_ROOT: Path = _get_project_root()
    """Root directory of the project."""

    BATCH_SIZE: int = Field(default=1000, gt=0)
    """Number of rows pulled from a cursor per fetchmany call."""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def project_root(self) -> Path:
        """Root directory of the project (alias for PROJECT_ROOT)."""
        return self.PROJECT_ROOT

    @computed_field  # type: ignore[prop-decorator]
    @property
    def configs_dir(self) -> Path:
        """Directory containing configuration files."""
        return self.PROJECT_ROOT / "configs"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def exports_config_path(self) -> Path:
        """Path to the exports.yml job configuration."""
        return self.configs_dir / "exports.yml"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def logging_config_path(self) -> Path:
        """Path to the logging.yml configuration."""
        return self.configs_dir / "logging.yml"


settings = Settings()
