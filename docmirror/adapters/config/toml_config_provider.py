"""TOML-based configuration provider.

Loads configuration from docmirror.toml with global config fallback.

Config loading priority (highest to lowest):
1. Environment: DOCMIRROR_* variables
2. Local: <project>/docmirror.toml
3. Global: ~/.config/docmirror/config.toml (user defaults)
4. Built-in defaults
"""

import logging
from pathlib import Path

from docmirror.domain.config import DocMirrorConfig
from docmirror.shared.config_io import (
    CONFIG_FILENAME,
    env_config_data,
    get_global_config_path,
    load_config_data,
)

logger = logging.getLogger(__name__)


class TomlConfigProvider:
    """Configuration provider that loads from TOML files.

    Implements config cascade:
    1. Load global config (~/.config/docmirror/config.toml) if present
    2. Load local config (docmirror.toml) if present
    3. Apply DOCMIRROR_* environment overrides
    4. Missing values fall back to built-in defaults

    Gracefully handles missing or invalid configs with warnings.

    Args:
        config_path: Explicit config file; replaces the local lookup when set.
    """

    def __init__(self, config_path: Path | None = None) -> None:
        self._config_path = config_path

    def load(self, project_dir: Path) -> DocMirrorConfig:
        """Load configuration with global fallback.

        Args:
            project_dir: Directory containing docmirror.toml

        Returns:
            DocMirrorConfig instance with merged values or defaults
        """
        local_path = self._config_path or project_dir / CONFIG_FILENAME
        global_path = get_global_config_path()

        config = DocMirrorConfig.default()

        if global_path.exists():
            try:
                global_data = load_config_data(global_path)
                config = DocMirrorConfig.from_partial(config, global_data)
                logger.debug("Loaded global config from %s", global_path)
            except (FileNotFoundError, ValueError) as e:
                logger.warning(
                    "Failed to parse global config at %s: %s. Ignoring global config.",
                    global_path,
                    e,
                )

        if local_path.exists():
            try:
                local_data = load_config_data(local_path)
                config = DocMirrorConfig.from_partial(config, local_data)
                logger.debug("Loaded local config from %s", local_path)
            except (FileNotFoundError, ValueError) as e:
                logger.warning(
                    "Failed to parse %s: %s. Using global/default configuration.",
                    local_path,
                    e,
                )

        env_data = env_config_data()
        if env_data:
            try:
                config = DocMirrorConfig.from_partial(config, env_data)
                logger.debug("Applied environment overrides: %s", sorted(env_data))
            except ValueError as e:
                logger.warning("Ignoring invalid environment overrides: %s", e)

        return config
