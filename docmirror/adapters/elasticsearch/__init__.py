"""Elasticsearch adapters: client creation and the statement executor."""

from docmirror.adapters.elasticsearch.client import check_connection, create_es_client
from docmirror.adapters.elasticsearch.connection import ElasticsearchConnection

__all__ = ["ElasticsearchConnection", "create_es_client", "check_connection"]
