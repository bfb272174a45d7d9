"""
Revision writer.

Appends Revision rows and the typed snapshot rows that reference them.
Nothing here commits: callers run the writer inside one session
transaction so a revision and its snapshot land together or not at all.
"""
from typing import Any, Dict, Iterable, Optional

from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from bookbrainz_data.core.errors import NotFoundError
from bookbrainz_data.db.models import (
    EditionData,
    EditionRevision,
    Editor,
    Revision,
    revision_parent,
)
from bookbrainz_data.observability.logging import get_logger


logger = get_logger(__name__)


class RevisionWriter:
    """Writes revisions and edition snapshots within a caller's session."""

    async def write_revision(
        self,
        session: AsyncSession,
        author_id: int,
        revision_id: Optional[int] = None,
        parent_ids: Iterable[int] = (),
    ) -> Revision:
        """
        Insert a new Revision attributed to ``author_id``.

        Args:
            session: Open session; the caller owns the transaction
            author_id: Editor credited with the revision
            revision_id: Explicit id; the store's sequence assigns one otherwise
            parent_ids: Revisions this one supersedes

        Raises:
            NotFoundError: If the author does not exist
        """
        if await session.get(Editor, author_id) is None:
            raise NotFoundError(
                f"Editor {author_id} not found",
                resource_type="editor",
                resource_id=author_id,
            )

        revision = Revision(author_id=author_id)
        if revision_id is not None:
            revision.id = revision_id
        session.add(revision)
        await session.flush()

        parents = [{"parent_id": parent_id, "child_id": revision.id} for parent_id in parent_ids]
        if parents:
            await session.execute(insert(revision_parent), parents)

        logger.debug("Revision written", revision_id=revision.id, author_id=author_id)
        return revision

    async def get_revision(self, session: AsyncSession, revision_id: int) -> Revision:
        """
        Load an existing revision.

        Raises:
            NotFoundError: If no revision has that id
        """
        revision = await session.get(Revision, revision_id)
        if revision is None:
            raise NotFoundError(
                f"Revision {revision_id} not found",
                resource_type="revision",
                resource_id=revision_id,
            )
        return revision

    async def resolve_revision(
        self,
        session: AsyncSession,
        author_id: Optional[int],
        revision_id: Optional[int],
        parent_ids: Iterable[int] = (),
    ) -> Revision:
        """
        Revision a new snapshot should reference.

        A new revision is written when an author is given; otherwise
        ``revision_id`` must name an existing revision.
        """
        if author_id is not None:
            return await self.write_revision(session, author_id, revision_id, parent_ids)
        if revision_id is None:
            raise ValueError("Either author_id or revision_id is required")
        return await self.get_revision(session, revision_id)

    async def write_edition_snapshot(
        self,
        session: AsyncSession,
        revision_id: int,
        bbid: str,
        attributes: Dict[str, Any],
    ) -> EditionRevision:
        """Insert an edition_data row and the edition_revision row pointing at it."""
        data = EditionData(**attributes)
        session.add(data)
        await session.flush()

        snapshot = EditionRevision(id=revision_id, bbid=bbid, data_id=data.id)
        session.add(snapshot)
        await session.flush()

        logger.debug(
            "Edition snapshot written",
            bbid=bbid,
            revision_id=revision_id,
            data_id=data.id,
        )
        return snapshot
