"""Factory classes for adapter instantiation.

This module centralizes the wiring of configuration to concrete adapters,
keeping the CLI layer free from direct adapter imports.

The factories use lazy imports so that importing docmirror does not pull in
the Elasticsearch client or SQLAlchemy until they are needed.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from elasticsearch import Elasticsearch

    from docmirror.adapters.elasticsearch import ElasticsearchConnection
    from docmirror.adapters.sqlalchemy import SearchableObserver
    from docmirror.core.persistence import DocumentPersistence
    from docmirror.domain.config import DocMirrorConfig
    from docmirror.ports.config import ConfigProvider


class ConfigFactory:
    """Factory for creating configuration providers."""

    def create_config_provider(self, config_path: Path | None = None) -> ConfigProvider:
        """Create the TOML config provider.

        Args:
            config_path: Explicit config file overriding the local lookup.

        Returns:
            ConfigProvider instance.
        """
        from docmirror.adapters.config.toml_config_provider import TomlConfigProvider

        return TomlConfigProvider(config_path)


class ConnectionFactory:
    """Factory for Elasticsearch clients and the objects built on them.

    Args:
        config: DocMirrorConfig with connection and sync settings.
    """

    def __init__(self, config: DocMirrorConfig) -> None:
        self._config = config

    def create_client(self) -> Elasticsearch:
        """Create an Elasticsearch client from the connection settings."""
        from docmirror.adapters.elasticsearch import create_es_client

        return create_es_client(self._config.connection)

    def create_connection(self, client: Elasticsearch | None = None) -> ElasticsearchConnection:
        """Create the statement executor.

        Args:
            client: Existing client to reuse; a new one is created when None.

        Returns:
            ElasticsearchConnection using the configured default index.
        """
        from docmirror.adapters.elasticsearch import ElasticsearchConnection

        if client is None:
            client = self.create_client()
        return ElasticsearchConnection(client, self._config.connection.default_index)

    def create_persistence(self, client: Elasticsearch | None = None) -> DocumentPersistence:
        """Create a DocumentPersistence over a new or given client."""
        from docmirror.core.persistence import DocumentPersistence

        return DocumentPersistence(self.create_connection(client))

    def create_observer(
        self, persistence: DocumentPersistence | None = None
    ) -> SearchableObserver | None:
        """Create a SearchableObserver using the [sync] options.

        Returns:
            The observer, or None when sync is disabled in config.
        """
        if not self._config.sync.enabled:
            return None

        from docmirror.adapters.sqlalchemy import SearchableObserver

        if persistence is None:
            persistence = self.create_persistence()
        return SearchableObserver(persistence, self._config.sync.write_options())
