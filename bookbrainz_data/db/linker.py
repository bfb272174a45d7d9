"""
Edition Group linkage.

Every Edition snapshot references an Edition Group. Creating an Edition
without one synthesizes a default group in the same transaction; updating an
Edition with an explicit null group is refused before anything is written.
"""
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from bookbrainz_data.core.errors import ErrorContext, InvalidUpdateError, NotFoundError
from bookbrainz_data.db.commands import UpdateEditionCommand
from bookbrainz_data.db.edition_groups import create_default_edition_group
from bookbrainz_data.db.models import Entity, EntityType
from bookbrainz_data.observability.logging import get_logger


logger = get_logger(__name__)

MISSING_GROUP_MESSAGE = "EditionGroupBbid required in Edition update"


class EditionGroupLinker:
    """Keeps ``edition_group_bbid`` populated on every Edition write."""

    def check_update(self, command: UpdateEditionCommand) -> None:
        """
        Refuse an update that unlinks the Edition Group.

        Raises:
            InvalidUpdateError: If ``edition_group_bbid`` is explicitly None
        """
        if command.edition_group_bbid is None:
            logger.warning("Rejected Edition update without group", bbid=command.bbid)
            raise InvalidUpdateError(
                MISSING_GROUP_MESSAGE,
                field_name="edition_group_bbid",
                context=ErrorContext.from_current_span(
                    operation="update", component="edition_group_linker", bbid=command.bbid
                ),
            )

    async def verify_edition_group(self, session: AsyncSession, bbid: str) -> None:
        """
        Raises:
            NotFoundError: If ``bbid`` is not an Edition Group entity
        """
        entity = await session.get(Entity, bbid)
        if entity is None or entity.type != EntityType.EDITION_GROUP.value:
            raise NotFoundError(
                f"Edition Group {bbid} not found",
                resource_type="edition_group",
                resource_id=bbid,
            )

    async def ensure_edition_group(
        self,
        session: AsyncSession,
        revision_id: int,
        attributes: Dict[str, Any],
        edition_group_bbid: Optional[str] = None,
    ) -> str:
        """
        Edition Group bbid for a newly created Edition.

        An explicit bbid is checked and returned; otherwise a default group is
        written under ``revision_id`` from the Edition's alias set and author
        credit.
        """
        if edition_group_bbid is not None:
            await self.verify_edition_group(session, edition_group_bbid)
            return edition_group_bbid

        return await create_default_edition_group(
            session,
            revision_id,
            alias_set_id=attributes.get("alias_set_id"),
            author_credit_id=attributes.get("author_credit_id"),
        )
