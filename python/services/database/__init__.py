"""
Database services package - modular PostgresClient implementation.

Domain-specific query mixins are combined into one PostgresClient that
shares a single asyncpg connection pool.
"""

from .base_client import BaseClient
from .users_client import UsersClient
from .projects_client import ProjectsClient
from .annotations_client import AnnotationsClient


class PostgresClient(
    BaseClient,
    UsersClient,
    ProjectsClient,
    AnnotationsClient,
):
    """Unified PostgresClient that combines all domain-specific clients."""
    pass


__all__ = [
    'PostgresClient',
    'BaseClient',
    'UsersClient',
    'ProjectsClient',
    'AnnotationsClient',
]
