"""
BookBrainz Data - Test Configuration

Pytest fixtures and configuration for all tests. Database tests run against
a throwaway SQLite file per test through aiosqlite.
"""
from pathlib import Path

import pytest
import pytest_asyncio

from bookbrainz_data.db.models import (
    AliasSet,
    Annotation,
    Disambiguation,
    Editor,
    EditorType,
    Entity,
    EntityType,
    Gender,
    IdentifierSet,
    RelationshipSet,
    Revision,
)
from bookbrainz_data.db.postgres import PostgresClient


EDITION_BBID = "68f52341-eea4-4ebc-9a15-6226fb68962c"
EDITOR_ID = 1
SET_ID = 1
REVISION_ID = 1


def sqlite_url(directory: Path) -> str:
    return f"sqlite+aiosqlite:///{directory / 'bookbrainz.db'}"


async def seed_database(client: PostgresClient) -> None:
    """Editor, sets, disambiguation, annotation and an unused Edition entity."""
    async with client.session() as session:
        session.add_all([
            Gender(id=1, name="Female"),
            EditorType(id=1, label="Editor"),
        ])
        await session.flush()

        session.add(Editor(id=EDITOR_ID, name="bob", type_id=1, gender_id=1))
        session.add_all([
            AliasSet(id=SET_ID),
            IdentifierSet(id=SET_ID),
            RelationshipSet(id=SET_ID),
            Disambiguation(id=1, comment="A Disambiguation"),
            Entity(bbid=EDITION_BBID, type=EntityType.EDITION.value),
        ])
        await session.flush()

        session.add(Revision(id=REVISION_ID, author_id=EDITOR_ID))
        await session.flush()

        session.add(Annotation(id=1, content="Test Annotation", last_revision_id=REVISION_ID))


@pytest_asyncio.fixture
async def client(tmp_path):
    """Client bound to an empty schema."""
    client = PostgresClient(database_url=sqlite_url(tmp_path))
    await client.create_tables()
    yield client
    await client.close()


@pytest_asyncio.fixture
async def seeded_client(client):
    """Client whose database holds the standard seed rows."""
    await seed_database(client)
    return client


@pytest.fixture
def edition_bbid() -> str:
    return EDITION_BBID


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "db: marks database tests")
    config.addinivalue_line("markers", "integration: marks integration tests")
    config.addinivalue_line("markers", "property: marks property-based tests using Hypothesis")
    config.addinivalue_line("markers", "slow: marks tests as slow")
