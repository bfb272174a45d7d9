"""
BookBrainz Data - Database Layer

Editions are stored as an append-only history: each write adds a Revision
and a snapshot row, and nothing already written is changed. The current
state is derived on read as the snapshot with the highest revision id.

Usage:
    from bookbrainz_data.db import PostgresClient, EditionStore, UpdateEditionCommand

    client = PostgresClient()
    store = EditionStore()
    async with client.session() as session:
        await store.update(session, UpdateEditionCommand(bbid=bbid, author_id=1, pages=320))
"""

# ============================================================================
# Models
# ============================================================================

from bookbrainz_data.db.models import (
    Base,
    EntityType,
    Editor,
    Revision,
    Entity,
    EditionData,
    EditionRevision,
    EditionGroupData,
    EditionGroupRevision,
    EDITION_DATA_FIELDS,
)

# ============================================================================
# Client
# ============================================================================

from bookbrainz_data.db.postgres import PostgresClient

# ============================================================================
# Commands
# ============================================================================

from bookbrainz_data.db.commands import (
    UNSET,
    BaseCommand,
    CreateEditionCommand,
    UpdateEditionCommand,
)
from bookbrainz_data.db.command_handlers import (
    CommandHandler,
    CreateEditionCommandHandler,
    UpdateEditionCommandHandler,
)

# ============================================================================
# Revisioned store
# ============================================================================

from bookbrainz_data.db.relations import EditionRelation, EditionGroupRelation
from bookbrainz_data.db.resolver import CurrentStateResolver, RevisionEntry
from bookbrainz_data.db.revisions import RevisionWriter
from bookbrainz_data.db.linker import EditionGroupLinker
from bookbrainz_data.db.edition_groups import EditionGroup, fetch_edition_group
from bookbrainz_data.db.editions import Edition, EditionStore

__all__ = [
    "Base",
    "EntityType",
    "Editor",
    "Revision",
    "Entity",
    "EditionData",
    "EditionRevision",
    "EditionGroupData",
    "EditionGroupRevision",
    "EDITION_DATA_FIELDS",
    "PostgresClient",
    "UNSET",
    "BaseCommand",
    "CreateEditionCommand",
    "UpdateEditionCommand",
    "CommandHandler",
    "CreateEditionCommandHandler",
    "UpdateEditionCommandHandler",
    "EditionRelation",
    "EditionGroupRelation",
    "CurrentStateResolver",
    "RevisionEntry",
    "RevisionWriter",
    "EditionGroupLinker",
    "EditionGroup",
    "fetch_edition_group",
    "Edition",
    "EditionStore",
]
