"""
BookBrainz Data - Edition Store

Revisioned reads and writes of Editions. Each write appends a Revision (or
attaches to an existing one) plus a new edition_data / edition_revision pair;
earlier snapshots are never modified. Reads resolve the master revision on
the fly.

Usage:
    store = EditionStore()
    async with client.session() as session:
        edition = await store.create(session, CreateEditionCommand(author_id=1))
"""
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bookbrainz_data.core.errors import (
    ConstraintViolationError,
    ErrorContext,
    InvalidUpdateError,
    NotFoundError,
)
from bookbrainz_data.db import loaders
from bookbrainz_data.db.commands import CreateEditionCommand, UpdateEditionCommand
from bookbrainz_data.db.edition_groups import EditionGroup, Loader, fetch_edition_group
from bookbrainz_data.db.linker import EditionGroupLinker
from bookbrainz_data.db.models import (
    AliasSet,
    EDITION_DATA_FIELDS,
    EditionData,
    EditionRevision,
    Entity,
    EntityType,
)
from bookbrainz_data.db.relations import EditionGroupRelation, EditionRelation
from bookbrainz_data.db.resolver import CurrentStateResolver, RevisionEntry
from bookbrainz_data.db.revisions import RevisionWriter
from bookbrainz_data.observability.logging import get_logger


logger = get_logger(__name__)

EDITION_LOADERS: Dict[EditionRelation, Tuple[str, Loader]] = {
    EditionRelation.ALIAS_SET: ("alias_set_id", loaders.load_alias_set),
    EditionRelation.IDENTIFIER_SET: ("identifier_set_id", loaders.load_identifier_set),
    EditionRelation.RELATIONSHIP_SET: ("relationship_set_id", loaders.load_relationship_set),
    EditionRelation.ANNOTATION: ("annotation_id", loaders.load_annotation),
    EditionRelation.DISAMBIGUATION: ("disambiguation_id", loaders.load_disambiguation),
    EditionRelation.AUTHOR_CREDIT: ("author_credit_id", loaders.load_author_credit),
}


@dataclass
class Edition:
    """
    One Edition snapshot as seen by callers.

    ``master`` is derived when the record is read; ``default_alias_id`` comes
    from the alias set and ``type`` from the entity row.
    """
    bbid: str
    revision_id: int
    data_id: int
    master: bool
    type: str
    edition_group_bbid: str
    alias_set_id: Optional[int] = None
    identifier_set_id: Optional[int] = None
    relationship_set_id: Optional[int] = None
    annotation_id: Optional[int] = None
    disambiguation_id: Optional[int] = None
    author_credit_id: Optional[int] = None
    default_alias_id: Optional[int] = None
    format_id: Optional[int] = None
    status_id: Optional[int] = None
    language_set_id: Optional[int] = None
    publisher_set_id: Optional[int] = None
    release_event_set_id: Optional[int] = None
    pages: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    depth: Optional[int] = None
    weight: Optional[int] = None
    related: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Flat mapping of every field plus one key per loaded relation."""
        data = asdict(self)
        related = data.pop("related")
        data.update(related)
        return data


class EditionStore:
    """
    Reads and writes Edition snapshots.

    Every method takes the caller's session and never commits; the session
    owner decides the transaction boundary.
    """

    def __init__(
        self,
        resolver: Optional[CurrentStateResolver] = None,
        writer: Optional[RevisionWriter] = None,
        linker: Optional[EditionGroupLinker] = None,
    ):
        self.resolver = resolver or CurrentStateResolver()
        self.writer = writer or RevisionWriter()
        self.linker = linker or EditionGroupLinker()

    # =========================================================================
    # Writes
    # =========================================================================

    async def create(self, session: AsyncSession, command: CreateEditionCommand) -> Edition:
        """
        Write the first snapshot of an Edition.

        Raises:
            NotFoundError: If the author, revision or Edition Group is missing
            ConstraintViolationError: If ``bbid`` is not a fresh Edition
        """
        bbid = command.bbid or str(uuid4())
        await self._claim_entity(session, bbid)

        revision = await self.writer.resolve_revision(
            session, command.author_id, command.revision_id
        )

        attributes = command.data_attributes()
        attributes["edition_group_bbid"] = await self.linker.ensure_edition_group(
            session, revision.id, attributes, command.edition_group_bbid
        )
        await self.writer.write_edition_snapshot(session, revision.id, bbid, attributes)

        logger.info(
            "Edition created",
            bbid=bbid,
            revision_id=revision.id,
            edition_group_bbid=attributes["edition_group_bbid"],
        )
        return await self.fetch(session, bbid)

    async def update(self, session: AsyncSession, command: UpdateEditionCommand) -> Edition:
        """
        Layer ``command.changes()`` on the master snapshot as a new revision.

        Raises:
            InvalidUpdateError: If the Edition Group is explicitly unset, or
                ``revision_id`` does not follow the master revision
            NotFoundError: If the Edition, author, revision or group is missing
        """
        self.linker.check_update(command)

        previous_id = await self.resolver.master_revision_id(session, command.bbid)
        if command.revision_id is not None and command.revision_id <= previous_id:
            raise InvalidUpdateError(
                f"Revision {command.revision_id} must follow master revision {previous_id}",
                field_name="revision_id",
                context=ErrorContext.from_current_span(
                    operation="update",
                    component="edition_store",
                    bbid=command.bbid,
                    revision_id=command.revision_id,
                ),
            )
        previous = await self._load_data(session, command.bbid, previous_id)

        changes = command.changes()
        if "edition_group_bbid" in changes and changes["edition_group_bbid"] != previous.edition_group_bbid:
            await self.linker.verify_edition_group(session, changes["edition_group_bbid"])

        revision = await self.writer.resolve_revision(
            session, command.author_id, command.revision_id, parent_ids=(previous_id,)
        )

        attributes = {name: getattr(previous, name) for name in EDITION_DATA_FIELDS}
        attributes.update(changes)
        await self.writer.write_edition_snapshot(session, revision.id, command.bbid, attributes)

        logger.info(
            "Edition updated",
            bbid=command.bbid,
            revision_id=revision.id,
            parent_revision_id=previous_id,
            changed=sorted(changes),
        )
        return await self.fetch(session, command.bbid)

    # =========================================================================
    # Reads
    # =========================================================================

    async def fetch(
        self,
        session: AsyncSession,
        bbid: str,
        related: Iterable[EditionRelation] = (),
        revision_id: Optional[int] = None,
    ) -> Edition:
        """
        Load the master snapshot of an Edition, or the one written at
        ``revision_id``, with the requested relations.

        Raises:
            NotFoundError: If the Edition or the requested revision is missing
        """
        master_id = await self.resolver.master_revision_id(session, bbid)
        wanted = master_id if revision_id is None else revision_id

        result = await session.execute(
            select(EditionRevision, EditionData, AliasSet.default_alias_id, Entity.type)
            .join(EditionData, EditionData.id == EditionRevision.data_id)
            .join(Entity, Entity.bbid == EditionRevision.bbid)
            .outerjoin(AliasSet, AliasSet.id == EditionData.alias_set_id)
            .where(EditionRevision.bbid == bbid, EditionRevision.id == wanted)
        )
        row = result.first()
        if row is None:
            raise NotFoundError(
                f"Edition {bbid} has no revision {wanted}",
                resource_type="edition_revision",
                resource_id=bbid,
            )
        snapshot, data, default_alias_id, entity_type = row

        edition = Edition(
            bbid=snapshot.bbid,
            revision_id=snapshot.id,
            data_id=data.id,
            master=snapshot.id == master_id,
            type=entity_type,
            default_alias_id=default_alias_id,
            **{name: getattr(data, name) for name in EDITION_DATA_FIELDS},
        )

        for relation in map(EditionRelation, related):
            if relation is EditionRelation.EDITION_GROUP:
                group = await self.fetch_edition_group(session, data.edition_group_bbid)
                edition.related[relation.value] = group.to_dict()
                continue
            column, loader = EDITION_LOADERS[relation]
            edition.related[relation.value] = await loader(session, getattr(data, column))

        return edition

    async def fetch_edition_group(
        self,
        session: AsyncSession,
        bbid: str,
        related: Iterable[EditionGroupRelation] = (),
        revision_id: Optional[int] = None,
    ) -> EditionGroup:
        return await fetch_edition_group(session, bbid, related, revision_id, self.resolver)

    async def revision_history(self, session: AsyncSession, bbid: str) -> List[RevisionEntry]:
        return await self.resolver.revision_history(session, bbid)

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _claim_entity(self, session: AsyncSession, bbid: str) -> None:
        """Create the entity row for ``bbid``, or reuse an unused Edition one."""
        entity = await session.get(Entity, bbid)
        if entity is None:
            session.add(Entity(bbid=bbid, type=EntityType.EDITION.value))
            await session.flush()
            return

        if entity.type != EntityType.EDITION.value:
            raise ConstraintViolationError(
                f"Entity {bbid} is a {entity.type}, not an Edition"
            )

        result = await session.execute(
            select(func.count()).select_from(EditionRevision).where(EditionRevision.bbid == bbid)
        )
        if result.scalar_one():
            raise ConstraintViolationError(f"Edition {bbid} already exists")

    async def _load_data(self, session: AsyncSession, bbid: str, revision_id: int) -> EditionData:
        result = await session.execute(
            select(EditionData)
            .join(EditionRevision, EditionRevision.data_id == EditionData.id)
            .where(EditionRevision.bbid == bbid, EditionRevision.id == revision_id)
        )
        return result.scalar_one()
