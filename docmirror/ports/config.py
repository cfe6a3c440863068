"""Configuration provider port.

Defines the interface for loading and accessing application configuration.
"""

from pathlib import Path
from typing import Protocol

from docmirror.domain.config import DocMirrorConfig


class ConfigProvider(Protocol):
    """Protocol for loading and providing configuration."""

    def load(self, project_dir: Path) -> DocMirrorConfig:
        """Load configuration for a project directory.

        Args:
            project_dir: Directory containing docmirror.toml

        Returns:
            DocMirrorConfig instance with loaded or default values

        Note:
            Implementations should gracefully fall back to defaults
            if config file is missing or invalid.
        """
        ...
