"""Configuration management for ampdocs.

Loads environment variables and provides centralized config access.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

__version__ = "1.0.0"


class Config:
    """Configuration loader with environment variable support."""

    def __init__(self, env_path: str | Path = None):
        """Initialize config by loading .env file.

        Args:
            env_path: Optional .env file (defaults to project_root/.env)
        """
        if env_path is None:
            project_root = Path(__file__).parent.parent
            env_path = project_root / ".env"
        load_dotenv(env_path)

        self._validate()

    def _validate(self):
        """Validate environment variables that must parse.

        Raises:
            ValueError: If AMPDOCS_MAX_DEPTH is not a non-negative integer
        """
        if self.max_depth < 0:
            raise ValueError("AMPDOCS_MAX_DEPTH must be zero or greater.")

    @property
    def export_path(self) -> Path:
        """Get the default documentation export file.

        Returns:
            Path from AMPDOCS_EXPORT_PATH, or docs/export.json
        """
        return Path(os.getenv("AMPDOCS_EXPORT_PATH", "docs/export.json"))

    @property
    def root_kind(self) -> str:
        """Get the entity kind built for each export record.

        Returns:
            Kind name ('file' unless AMPDOCS_ROOT_KIND says otherwise)
        """
        return os.getenv("AMPDOCS_ROOT_KIND", "file")

    @property
    def max_depth(self) -> int:
        """Get how many levels of children the CLI expands.

        Returns:
            Depth limit (defaults to 4)

        Raises:
            ValueError: If AMPDOCS_MAX_DEPTH is not an integer
        """
        raw = os.getenv("AMPDOCS_MAX_DEPTH", "4")
        try:
            return int(raw)
        except ValueError:
            raise ValueError(f"AMPDOCS_MAX_DEPTH must be an integer, got {raw!r}.")


# Singleton instance
_config = None


def get_config() -> Config:
    """Get or create singleton Config instance.

    Returns:
        Config instance
    """
    global _config
    if _config is None:
        _config = Config()
    return _config
