"""Test fixtures module."""

from tests.fixtures.models import Article, AuditEntry, Base, Draft, Membership, Tag

__all__ = ["Base", "Article", "Tag", "Draft", "Membership", "AuditEntry"]
