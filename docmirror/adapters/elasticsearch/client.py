"""Elasticsearch client factory.

Builds a client from ConnectionConfig and checks reachability.
"""

from __future__ import annotations

import logging

from elasticsearch import Elasticsearch

from docmirror.domain.config import ConnectionConfig

logger = logging.getLogger(__name__)


def create_es_client(cfg: ConnectionConfig | None = None) -> Elasticsearch:
    """Create an Elasticsearch client.

    Args:
        cfg: Connection settings. Defaults are used when None.

    Returns:
        Elasticsearch client instance.
    """
    if cfg is None:
        cfg = ConnectionConfig()

    # API key takes precedence over basic auth
    if cfg.api_key:
        return Elasticsearch(
            hosts=cfg.hosts,
            api_key=cfg.api_key,
            verify_certs=cfg.verify_certs,
            request_timeout=cfg.request_timeout,
        )

    if cfg.username and cfg.password:
        return Elasticsearch(
            hosts=cfg.hosts,
            basic_auth=(cfg.username, cfg.password),
            verify_certs=cfg.verify_certs,
            request_timeout=cfg.request_timeout,
        )

    # No auth (local development)
    return Elasticsearch(
        hosts=cfg.hosts,
        verify_certs=cfg.verify_certs,
        request_timeout=cfg.request_timeout,
    )


def check_connection(es: Elasticsearch) -> bool:
    """Check whether the cluster answers a ping.

    Returns:
        True if the cluster is reachable.
    """
    try:
        return bool(es.ping())
    except Exception as e:
        logger.debug("Ping failed: %s", e)
        return False
