"""
Edition Group snapshots.

Edition Groups are the parent aggregate of Editions. Besides reading them,
this module writes the default group synthesized for an Edition created
without one.
"""
from dataclasses import asdict, dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Tuple
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bookbrainz_data.core.errors import NotFoundError
from bookbrainz_data.db import loaders
from bookbrainz_data.db.models import (
    AliasSet,
    EditionGroupData,
    EditionGroupRevision,
    Entity,
    EntityType,
)
from bookbrainz_data.db.relations import EditionGroupRelation
from bookbrainz_data.db.resolver import CurrentStateResolver
from bookbrainz_data.observability.logging import get_logger


logger = get_logger(__name__)

Loader = Callable[[AsyncSession, Optional[int]], Awaitable[Optional[Dict[str, Any]]]]

GROUP_LOADERS: Dict[EditionGroupRelation, Tuple[str, Loader]] = {
    EditionGroupRelation.ALIAS_SET: ("alias_set_id", loaders.load_alias_set),
    EditionGroupRelation.IDENTIFIER_SET: ("identifier_set_id", loaders.load_identifier_set),
    EditionGroupRelation.RELATIONSHIP_SET: ("relationship_set_id", loaders.load_relationship_set),
    EditionGroupRelation.ANNOTATION: ("annotation_id", loaders.load_annotation),
    EditionGroupRelation.DISAMBIGUATION: ("disambiguation_id", loaders.load_disambiguation),
    EditionGroupRelation.AUTHOR_CREDIT: ("author_credit_id", loaders.load_author_credit),
    EditionGroupRelation.EDITION_GROUP_TYPE: ("type_id", loaders.load_edition_group_type),
}


@dataclass
class EditionGroup:
    """One Edition Group snapshot with its derived master flag."""
    bbid: str
    revision_id: int
    data_id: int
    master: bool
    type: str
    alias_set_id: Optional[int] = None
    identifier_set_id: Optional[int] = None
    relationship_set_id: Optional[int] = None
    annotation_id: Optional[int] = None
    disambiguation_id: Optional[int] = None
    author_credit_id: Optional[int] = None
    type_id: Optional[int] = None
    default_alias_id: Optional[int] = None
    related: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        related = data.pop("related")
        data.update(related)
        return data


async def fetch_edition_group(
    session: AsyncSession,
    bbid: str,
    related: Iterable[EditionGroupRelation] = (),
    revision_id: Optional[int] = None,
    resolver: Optional[CurrentStateResolver] = None,
) -> EditionGroup:
    """
    Load the master snapshot of an Edition Group, or the snapshot written
    at ``revision_id``.

    Raises:
        NotFoundError: If the group or the requested revision does not exist
    """
    resolver = resolver or CurrentStateResolver()
    master_id = await resolver.master_revision_id(session, bbid, EditionGroupRevision)
    wanted = master_id if revision_id is None else revision_id

    result = await session.execute(
        select(EditionGroupRevision, EditionGroupData, AliasSet.default_alias_id, Entity.type)
        .join(EditionGroupData, EditionGroupData.id == EditionGroupRevision.data_id)
        .join(Entity, Entity.bbid == EditionGroupRevision.bbid)
        .outerjoin(AliasSet, AliasSet.id == EditionGroupData.alias_set_id)
        .where(EditionGroupRevision.bbid == bbid, EditionGroupRevision.id == wanted)
    )
    row = result.first()
    if row is None:
        raise NotFoundError(
            f"Edition Group {bbid} has no revision {wanted}",
            resource_type="edition_group_revision",
            resource_id=bbid,
        )
    snapshot, data, default_alias_id, entity_type = row

    group = EditionGroup(
        bbid=snapshot.bbid,
        revision_id=snapshot.id,
        data_id=data.id,
        master=snapshot.id == master_id,
        type=entity_type,
        alias_set_id=data.alias_set_id,
        identifier_set_id=data.identifier_set_id,
        relationship_set_id=data.relationship_set_id,
        annotation_id=data.annotation_id,
        disambiguation_id=data.disambiguation_id,
        author_credit_id=data.author_credit_id,
        type_id=data.type_id,
        default_alias_id=default_alias_id,
    )
    for relation in map(EditionGroupRelation, related):
        column, loader = GROUP_LOADERS[relation]
        group.related[relation.value] = await loader(session, getattr(data, column))
    return group


async def create_default_edition_group(
    session: AsyncSession,
    revision_id: int,
    alias_set_id: Optional[int] = None,
    author_credit_id: Optional[int] = None,
) -> str:
    """
    Write a new Edition Group under ``revision_id`` and return its bbid.

    The group shares the Edition's alias set and author credit; every other
    reference is left empty.
    """
    bbid = str(uuid4())
    session.add(Entity(bbid=bbid, type=EntityType.EDITION_GROUP.value))
    data = EditionGroupData(alias_set_id=alias_set_id, author_credit_id=author_credit_id)
    session.add(data)
    await session.flush()

    session.add(EditionGroupRevision(id=revision_id, bbid=bbid, data_id=data.id))
    await session.flush()

    logger.info("Default Edition Group created", bbid=bbid, revision_id=revision_id)
    return bbid
