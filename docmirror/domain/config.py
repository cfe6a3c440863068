"""Config domain models for docmirror.

Configuration is stored in docmirror.toml (per project) and
~/.config/docmirror/config.toml (per user). This module defines the domain
models that represent validated configuration state.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any

REFRESH_MODES = (None, "true", "false", "wait_for")


@dataclass(frozen=True)
class ConnectionConfig:
    """Configuration for the Elasticsearch connection.

    Attributes:
        hosts: Node URLs (e.g., ["http://localhost:9200"])
        default_index: Index used for records that do not name their own
        username: HTTP Basic Auth user name (optional)
        password: HTTP Basic Auth password (optional)
        api_key: API key, used instead of basic auth when set (optional)
        verify_certs: Whether to verify TLS certificates
        request_timeout: Per-request timeout in seconds

    Raises:
        ValueError: If hosts or default_index is empty, or request_timeout
                   is not positive.
    """

    hosts: list[str] = field(default_factory=lambda: ["http://localhost:9200"])
    default_index: str = "docmirror"
    username: str | None = None
    password: str | None = None
    api_key: str | None = None
    verify_certs: bool = True
    request_timeout: int = 30

    def __post_init__(self) -> None:
        """Validate connection config after initialization."""
        if not self.hosts:
            raise ValueError("hosts must contain at least one node URL")
        if not self.default_index:
            raise ValueError("default_index cannot be empty")
        if self.request_timeout <= 0:
            raise ValueError(
                f"request_timeout must be positive, got {self.request_timeout}"
            )


@dataclass(frozen=True)
class SyncConfig:
    """Configuration for automatic document synchronization.

    Attributes:
        enabled: Register session hooks that sync records on flush
        refresh: Refresh mode sent with writes ("true", "false", "wait_for")
                 or None to leave it to the cluster
        chunk_size: Records per bulk request when reindexing a table

    Raises:
        ValueError: If refresh is not a known mode or chunk_size is not
                   positive.
    """

    enabled: bool = True
    refresh: str | None = None
    chunk_size: int = 500

    def __post_init__(self) -> None:
        """Validate sync config after initialization."""
        if self.refresh not in REFRESH_MODES:
            raise ValueError(
                f"refresh must be one of 'true', 'false', 'wait_for', got {self.refresh!r}"
            )
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")

    def write_options(self) -> dict[str, Any]:
        """Statement options the observer adds to every save and delete."""
        options: dict[str, Any] = {}
        if self.refresh is not None:
            options["fresh"] = self.refresh
        return options


@dataclass(frozen=True)
class DocMirrorConfig:
    """Complete docmirror configuration.

    Attributes:
        connection: Elasticsearch connection configuration
        sync: Synchronization behaviour
    """

    connection: ConnectionConfig = field(default_factory=ConnectionConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)

    @staticmethod
    def default() -> "DocMirrorConfig":
        """Create a config with all default values."""
        return DocMirrorConfig(connection=ConnectionConfig(), sync=SyncConfig())

    @staticmethod
    def from_partial(
        base: "DocMirrorConfig", data: dict[str, Any]
    ) -> "DocMirrorConfig":
        """Overlay raw config data on top of an existing config.

        Keys present in a section replace the base values; missing keys keep
        them. Each section is rebuilt so validation runs again.

        Args:
            base: Config to start from.
            data: Raw config data keyed by section name.

        Returns:
            New DocMirrorConfig with the overrides applied.

        Raises:
            ValueError: If a section is not a table, contains unknown keys, or
                       the merged values fail validation.
        """
        sections = {"connection": base.connection, "sync": base.sync}
        merged: dict[str, Any] = {}
        for name, current in sections.items():
            overrides = data.get(name, {})
            if not isinstance(overrides, dict):
                raise ValueError(f"[{name}] must be a table")
            known = {f.name for f in fields(current)}
            unknown = set(overrides) - known
            if unknown:
                raise ValueError(
                    f"Unknown keys in [{name}]: {', '.join(sorted(unknown))}"
                )
            try:
                merged[name] = replace(current, **overrides)
            except TypeError as e:
                raise ValueError(f"Invalid value in [{name}]: {e}") from e
        return DocMirrorConfig(**merged)
