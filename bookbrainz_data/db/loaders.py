"""
Loaders for the auxiliary rows a snapshot references.

Every loader takes the open session and a (possibly null) foreign key and
returns a plain dict, or None when the reference is null.
"""
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from bookbrainz_data.db.models import (
    AliasSet,
    Annotation,
    AuthorCredit,
    Disambiguation,
    EditionGroupType,
    IdentifierSet,
    RelationshipSet,
)


async def load_alias_set(session: AsyncSession, set_id: Optional[int]) -> Optional[Dict[str, Any]]:
    if set_id is None:
        return None
    alias_set = await session.get(AliasSet, set_id)
    if alias_set is None:
        return None
    return {
        "id": alias_set.id,
        "default_alias_id": alias_set.default_alias_id,
        "aliases": [
            {
                "id": alias.id,
                "name": alias.name,
                "sort_name": alias.sort_name,
                "language_id": alias.language_id,
                "primary": alias.primary,
            }
            for alias in alias_set.aliases
        ],
    }


async def load_identifier_set(session: AsyncSession, set_id: Optional[int]) -> Optional[Dict[str, Any]]:
    if set_id is None:
        return None
    identifier_set = await session.get(IdentifierSet, set_id)
    if identifier_set is None:
        return None
    return {
        "id": identifier_set.id,
        "identifiers": [
            {"id": ident.id, "type_id": ident.type_id, "value": ident.value}
            for ident in identifier_set.identifiers
        ],
    }


async def load_relationship_set(session: AsyncSession, set_id: Optional[int]) -> Optional[Dict[str, Any]]:
    if set_id is None:
        return None
    relationship_set = await session.get(RelationshipSet, set_id)
    if relationship_set is None:
        return None
    return {
        "id": relationship_set.id,
        "relationships": [
            {
                "id": rel.id,
                "type_id": rel.type_id,
                "source_bbid": rel.source_bbid,
                "target_bbid": rel.target_bbid,
            }
            for rel in relationship_set.relationships
        ],
    }


async def load_annotation(session: AsyncSession, annotation_id: Optional[int]) -> Optional[Dict[str, Any]]:
    if annotation_id is None:
        return None
    annotation = await session.get(Annotation, annotation_id)
    if annotation is None:
        return None
    return {
        "id": annotation.id,
        "content": annotation.content,
        "last_revision_id": annotation.last_revision_id,
    }


async def load_disambiguation(session: AsyncSession, disambiguation_id: Optional[int]) -> Optional[Dict[str, Any]]:
    if disambiguation_id is None:
        return None
    disambiguation = await session.get(Disambiguation, disambiguation_id)
    if disambiguation is None:
        return None
    return {"id": disambiguation.id, "comment": disambiguation.comment}


async def load_author_credit(session: AsyncSession, credit_id: Optional[int]) -> Optional[Dict[str, Any]]:
    if credit_id is None:
        return None
    credit = await session.get(AuthorCredit, credit_id)
    if credit is None:
        return None
    return {
        "id": credit.id,
        "author_count": credit.author_count,
        "names": [
            {
                "position": name.position,
                "author_bbid": name.author_bbid,
                "name": name.name,
                "join_phrase": name.join_phrase,
            }
            for name in credit.names
        ],
    }


async def load_edition_group_type(session: AsyncSession, type_id: Optional[int]) -> Optional[Dict[str, Any]]:
    if type_id is None:
        return None
    group_type = await session.get(EditionGroupType, type_id)
    if group_type is None:
        return None
    return {"id": group_type.id, "label": group_type.label}
