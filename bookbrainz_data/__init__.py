"""
BookBrainz Data - Revisioned Edition Store

Async SQLAlchemy layer for BookBrainz entities. Editions keep their full
history as append-only revisions; the current state of an Edition is the
snapshot with the highest revision id, and every Edition belongs to an
Edition Group.

Usage:
    from bookbrainz_data import PostgresClient, EditionStore, CreateEditionCommand

    client = PostgresClient()
    store = EditionStore()
    async with client.session() as session:
        edition = await store.create(session, CreateEditionCommand(author_id=1))
"""
from bookbrainz_data.config import Config, DatabaseConfig, get_config
from bookbrainz_data.core.errors import (
    BookBrainzError,
    ConfigError,
    ConstraintViolationError,
    InvalidUpdateError,
    NotFoundError,
)
from bookbrainz_data.db import (
    UNSET,
    CreateEditionCommand,
    Edition,
    EditionGroup,
    EditionRelation,
    EditionGroupRelation,
    EditionStore,
    PostgresClient,
    UpdateEditionCommand,
)

__version__ = "2.0.0"

__all__ = [
    "Config",
    "DatabaseConfig",
    "get_config",
    "BookBrainzError",
    "ConfigError",
    "ConstraintViolationError",
    "InvalidUpdateError",
    "NotFoundError",
    "UNSET",
    "CreateEditionCommand",
    "Edition",
    "EditionGroup",
    "EditionRelation",
    "EditionGroupRelation",
    "EditionStore",
    "PostgresClient",
    "UpdateEditionCommand",
]
