"""
Property-Based Tests for Edition Revision Invariants

Random sequences of partial updates are applied to one Edition and the
resulting history is checked for a single master at the highest revision,
a populated Edition Group, and values inherited from earlier revisions.
"""
import asyncio
import tempfile
from pathlib import Path

import pytest
from hypothesis import HealthCheck, given, settings, strategies as st

from bookbrainz_data.core.errors import InvalidUpdateError
from bookbrainz_data.db.commands import UNSET, CreateEditionCommand, UpdateEditionCommand
from bookbrainz_data.db.editions import EditionStore
from bookbrainz_data.db.linker import EditionGroupLinker
from bookbrainz_data.db.models import EDITION_DATA_FIELDS
from bookbrainz_data.db.postgres import PostgresClient
from tests.conftest import EDITION_BBID, EDITOR_ID, REVISION_ID, seed_database, sqlite_url


MEASUREMENTS = ("pages", "width", "height", "depth", "weight")

measurement_changes = st.dictionaries(
    keys=st.sampled_from(MEASUREMENTS),
    values=st.one_of(st.none(), st.integers(min_value=0, max_value=10_000)),
)

update_values = st.one_of(st.just(UNSET), st.none(), st.text(min_size=1, max_size=36))


async def apply_history(directory: Path, initial: dict, updates: list) -> tuple:
    client = PostgresClient(database_url=sqlite_url(directory))
    store = EditionStore()
    await client.create_tables()
    await seed_database(client)
    try:
        async with client.session() as session:
            created = await store.create(
                session, CreateEditionCommand(bbid=EDITION_BBID, revision_id=REVISION_ID, **initial)
            )
        for changes in updates:
            async with client.session() as session:
                await store.update(
                    session, UpdateEditionCommand.from_changes(EDITION_BBID, changes, author_id=EDITOR_ID)
                )
        async with client.session() as session:
            current = await store.fetch(session, EDITION_BBID)
            history = await store.revision_history(session, EDITION_BBID)
        return created, current, history
    finally:
        await client.close()


@pytest.mark.property
@pytest.mark.db
class TestRevisionHistoryInvariants:
    """Invariants over arbitrary update sequences."""

    @given(initial=measurement_changes, updates=st.lists(measurement_changes, max_size=5))
    @settings(max_examples=25, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    def test_history_invariants(self, initial, updates):
        with tempfile.TemporaryDirectory() as directory:
            created, current, history = asyncio.run(apply_history(Path(directory), initial, updates))

        # Exactly one master, and it is the highest revision
        masters = [entry for entry in history if entry.master]
        assert len(masters) == 1
        assert masters[0].revision_id == max(entry.revision_id for entry in history)
        assert current.revision_id == masters[0].revision_id
        assert current.master is True
        assert len(history) == len(updates) + 1

        # Group link survives every update
        assert current.edition_group_bbid == created.edition_group_bbid

        # Last explicit value wins; untouched fields keep the initial value
        expected = {name: initial.get(name) for name in MEASUREMENTS}
        for changes in updates:
            expected.update(changes)
        assert {name: getattr(current, name) for name in MEASUREMENTS} == expected


@pytest.mark.property
class TestLinkerInvariants:
    """The linker rejects exactly the explicit null group."""

    @given(group=update_values)
    @settings(max_examples=100)
    def test_rejects_only_explicit_none(self, group):
        command = UpdateEditionCommand(bbid=EDITION_BBID, edition_group_bbid=group)

        if group is None:
            with pytest.raises(InvalidUpdateError):
                EditionGroupLinker().check_update(command)
        else:
            EditionGroupLinker().check_update(command)

    @given(changes=st.dictionaries(
        keys=st.sampled_from(EDITION_DATA_FIELDS),
        values=st.one_of(st.none(), st.integers(min_value=1, max_value=100)),
    ))
    @settings(max_examples=100)
    def test_changes_round_trip_through_command(self, changes):
        command = UpdateEditionCommand.from_changes(EDITION_BBID, changes)

        assert command.changes() == changes
