"""Configuration I/O utilities for reading and writing TOML config files.

This module handles serialization/deserialization of DocMirrorConfig to/from
TOML format, and environment variable overrides.
"""

import os
import platform
import tomllib  # Built-in Python 3.11+
from collections.abc import Mapping
from dataclasses import asdict
from pathlib import Path
from typing import Any

import tomli_w

from docmirror.domain.config import DocMirrorConfig

CONFIG_FILENAME = "docmirror.toml"

# Environment variable -> (section, key)
ENV_OVERRIDES = {
    "DOCMIRROR_HOSTS": ("connection", "hosts"),
    "DOCMIRROR_DEFAULT_INDEX": ("connection", "default_index"),
    "DOCMIRROR_USERNAME": ("connection", "username"),
    "DOCMIRROR_PASSWORD": ("connection", "password"),
    "DOCMIRROR_API_KEY": ("connection", "api_key"),
}

SECRET_KEYS = ("password", "api_key")


def get_global_config_path() -> Path:
    """Get the path to the global config file.

    The location is platform-dependent:
    - Linux/macOS: $XDG_CONFIG_HOME/docmirror/config.toml or ~/.config/docmirror/config.toml
    - Windows: %APPDATA%/docmirror/config.toml

    Returns:
        Path to the global config file (may not exist)
    """
    if platform.system() == "Windows":
        appdata = os.environ.get("APPDATA", "")
        if appdata:
            return Path(appdata) / "docmirror" / "config.toml"
        return Path.home() / ".config" / "docmirror" / "config.toml"
    else:
        xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
        if xdg_config:
            return Path(xdg_config) / "docmirror" / "config.toml"
        return Path.home() / ".config" / "docmirror" / "config.toml"


def load_config_data(path: Path) -> dict[str, Any]:
    """Load raw TOML data from a config file.

    Args:
        path: Path to a TOML config file

    Returns:
        Dictionary with parsed TOML data

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in config file: {e}") from e


def env_config_data(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Collect config overrides from DOCMIRROR_* environment variables.

    DOCMIRROR_HOSTS is a comma-separated list of node URLs.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Raw config data containing only the variables that are set
    """
    if environ is None:
        environ = os.environ

    data: dict[str, dict[str, Any]] = {}
    for name, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(name)
        if not value:
            continue
        if key == "hosts":
            data.setdefault(section, {})[key] = [
                host.strip() for host in value.split(",") if host.strip()
            ]
        else:
            data.setdefault(section, {})[key] = value
    return data


def config_data_to_config(data: dict[str, Any]) -> DocMirrorConfig:
    """Convert raw config data dictionary to DocMirrorConfig.

    Args:
        data: Dictionary with config sections

    Returns:
        DocMirrorConfig instance

    Raises:
        ValueError: If the data contains unknown keys or invalid values
    """
    return DocMirrorConfig.from_partial(DocMirrorConfig.default(), data)


def load_config(path: Path) -> DocMirrorConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to docmirror.toml

    Returns:
        Parsed DocMirrorConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed
    """
    data = load_config_data(path)
    return config_data_to_config(data)


def config_to_data(config: DocMirrorConfig, mask_secrets: bool = False) -> dict[str, Any]:
    """Convert a config to TOML-serializable data.

    TOML has no null, so unset optional values are omitted.

    Args:
        config: DocMirrorConfig to convert
        mask_secrets: Replace passwords and API keys with "********"

    Returns:
        Dictionary keyed by section name
    """
    data: dict[str, Any] = {}
    for section, values in asdict(config).items():
        data[section] = {}
        for key, value in values.items():
            if value is None:
                continue
            if mask_secrets and key in SECRET_KEYS:
                value = "********"
            data[section][key] = value
    return data


def save_config(config: DocMirrorConfig, path: Path) -> None:
    """Save configuration to a TOML file.

    Args:
        config: DocMirrorConfig to save
        path: Destination path for docmirror.toml
    """
    data = config_to_data(config)

    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("wb") as f:
        tomli_w.dump(data, f)


def create_default_config_file(path: Path, default_index: str = "docmirror") -> None:
    """Create a default docmirror.toml with sensible defaults and comments.

    Args:
        path: Destination path for docmirror.toml
        default_index: Index used for models that do not set __document_index__
    """
    # We use a template string to preserve comments and formatting
    index_line = tomli_w.dumps({"default_index": default_index}).rstrip("\n")
    template = f"""\
# docmirror configuration
# Created by: docmirror init

[connection]
# Elasticsearch node URLs
hosts = ["http://localhost:9200"]

# Index used for models that do not set __document_index__
{index_line}

# Credentials: set either username/password or api_key.
# Prefer DOCMIRROR_PASSWORD / DOCMIRROR_API_KEY over storing secrets here.
# username = "elastic"
# password = ""
# api_key = ""

# Verify TLS certificates
verify_certs = true

# Request timeout in seconds
request_timeout = 30

[sync]
# Index, update and delete documents automatically when sessions flush
enabled = true

# Refresh mode for writes: "true", "false" or "wait_for"
# (omit to use the cluster's refresh interval)
# refresh = "wait_for"

# Records per bulk request when running 'docmirror reindex'
chunk_size = 500
"""

    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("w", encoding="utf-8") as f:
        f.write(template)
