"""
Current-state resolver.

The master revision of an entity is the snapshot with the greatest revision
id among all snapshots sharing the entity's bbid. It is computed on every
read and never stored.
"""
from dataclasses import dataclass
from typing import List, Type, Union

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bookbrainz_data.core.errors import NotFoundError
from bookbrainz_data.db.models import EditionGroupRevision, EditionRevision

SnapshotModel = Union[Type[EditionRevision], Type[EditionGroupRevision]]


@dataclass(frozen=True)
class RevisionEntry:
    """One snapshot in an entity's history."""
    revision_id: int
    data_id: int
    master: bool


class CurrentStateResolver:
    """Derives master revisions from persisted snapshot history."""

    async def master_revision_id(
        self,
        session: AsyncSession,
        bbid: str,
        snapshot: SnapshotModel = EditionRevision,
    ) -> int:
        """
        Highest revision id recorded for ``bbid``.

        Raises:
            NotFoundError: If the entity has no snapshots
        """
        result = await session.execute(
            select(func.max(snapshot.id)).where(snapshot.bbid == bbid)
        )
        revision_id = result.scalar_one()
        if revision_id is None:
            raise NotFoundError(
                f"No revisions found for {bbid}",
                resource_type=snapshot.__tablename__,
                resource_id=bbid,
            )
        return revision_id

    async def is_master(
        self,
        session: AsyncSession,
        bbid: str,
        revision_id: int,
        snapshot: SnapshotModel = EditionRevision,
    ) -> bool:
        return revision_id == await self.master_revision_id(session, bbid, snapshot)

    async def revision_history(
        self,
        session: AsyncSession,
        bbid: str,
        snapshot: SnapshotModel = EditionRevision,
    ) -> List[RevisionEntry]:
        """
        All snapshots of ``bbid`` in ascending revision order, exactly one
        of them flagged master.

        Raises:
            NotFoundError: If the entity has no snapshots
        """
        result = await session.execute(
            select(snapshot.id, snapshot.data_id)
            .where(snapshot.bbid == bbid)
            .order_by(snapshot.id)
        )
        rows = result.all()
        if not rows:
            raise NotFoundError(
                f"No revisions found for {bbid}",
                resource_type=snapshot.__tablename__,
                resource_id=bbid,
            )
        master_id = rows[-1][0]
        return [
            RevisionEntry(revision_id=revision_id, data_id=data_id, master=revision_id == master_id)
            for revision_id, data_id in rows
        ]
