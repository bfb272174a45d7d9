"""
BookBrainz Data - SQLAlchemy ORM Models

Tables for editors, revisions, entity identities, the auxiliary sets a
revision snapshot can reference, and the Edition / Edition Group snapshots.

Snapshots are append-only: every revision of an entity adds one
``*_revision`` row pointing at one ``*_data`` row. The master (current)
revision of an entity is never stored; it is the highest revision id
among the entity's snapshot rows.
"""
from datetime import datetime
from typing import List, Optional
import enum

from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Table, Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class EntityType(enum.Enum):
    """Entity type tags stored on ``entity.type``."""
    AUTHOR = "Author"
    EDITION = "Edition"
    EDITION_GROUP = "EditionGroup"
    PUBLISHER = "Publisher"
    SERIES = "Series"
    WORK = "Work"


# =============================================================================
# Editors
# =============================================================================

class Gender(Base):
    __tablename__ = "gender"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))


class EditorType(Base):
    __tablename__ = "editor_type"

    id: Mapped[int] = mapped_column(primary_key=True)
    label: Mapped[str] = mapped_column(String(255), unique=True)


class Editor(Base):
    """A user account; every revision is attributed to one."""
    __tablename__ = "editor"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(64), unique=True)
    type_id: Mapped[int] = mapped_column(ForeignKey("editor_type.id"))
    gender_id: Mapped[Optional[int]] = mapped_column(ForeignKey("gender.id"), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    revisions_applied: Mapped[int] = mapped_column(Integer, default=0)

    def __repr__(self) -> str:
        return f"<Editor {self.id}: {self.name}>"


# =============================================================================
# Revisions
# =============================================================================

revision_parent = Table(
    "revision_parent",
    Base.metadata,
    Column("parent_id", ForeignKey("revision.id"), primary_key=True),
    Column("child_id", ForeignKey("revision.id"), primary_key=True),
)


class Revision(Base):
    """One immutable state-change event, attributed to an editor."""
    __tablename__ = "revision"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    author_id: Mapped[int] = mapped_column(ForeignKey("editor.id"), index=True)
    is_merge: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    def __repr__(self) -> str:
        return f"<Revision {self.id} by editor {self.author_id}>"


class Entity(Base):
    """Stable identity of one real-world bibliographic item."""
    __tablename__ = "entity"

    bbid: Mapped[str] = mapped_column(String(36), primary_key=True)
    type: Mapped[str] = mapped_column(String(16), index=True)

    def __repr__(self) -> str:
        return f"<Entity {self.type} {self.bbid}>"


# =============================================================================
# Auxiliary sets
# =============================================================================

alias_set__alias = Table(
    "alias_set__alias",
    Base.metadata,
    Column("set_id", ForeignKey("alias_set.id"), primary_key=True),
    Column("alias_id", ForeignKey("alias.id"), primary_key=True),
)


class Alias(Base):
    __tablename__ = "alias"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(Text)
    sort_name: Mapped[str] = mapped_column(Text)
    language_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    primary: Mapped[bool] = mapped_column(Boolean, default=False)


class AliasSet(Base):
    __tablename__ = "alias_set"

    id: Mapped[int] = mapped_column(primary_key=True)
    default_alias_id: Mapped[Optional[int]] = mapped_column(ForeignKey("alias.id"), nullable=True)

    aliases: Mapped[List["Alias"]] = relationship(secondary=alias_set__alias, lazy="selectin")


identifier_set__identifier = Table(
    "identifier_set__identifier",
    Base.metadata,
    Column("set_id", ForeignKey("identifier_set.id"), primary_key=True),
    Column("identifier_id", ForeignKey("identifier.id"), primary_key=True),
)


class IdentifierType(Base):
    __tablename__ = "identifier_type"

    id: Mapped[int] = mapped_column(primary_key=True)
    label: Mapped[str] = mapped_column(String(255))
    entity_type: Mapped[str] = mapped_column(String(16))
    validation_regex: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class Identifier(Base):
    __tablename__ = "identifier"

    id: Mapped[int] = mapped_column(primary_key=True)
    type_id: Mapped[int] = mapped_column(ForeignKey("identifier_type.id"))
    value: Mapped[str] = mapped_column(Text)


class IdentifierSet(Base):
    __tablename__ = "identifier_set"

    id: Mapped[int] = mapped_column(primary_key=True)

    identifiers: Mapped[List["Identifier"]] = relationship(
        secondary=identifier_set__identifier, lazy="selectin"
    )


relationship_set__relationship = Table(
    "relationship_set__relationship",
    Base.metadata,
    Column("set_id", ForeignKey("relationship_set.id"), primary_key=True),
    Column("relationship_id", ForeignKey("relationship.id"), primary_key=True),
)


class RelationshipType(Base):
    __tablename__ = "relationship_type"

    id: Mapped[int] = mapped_column(primary_key=True)
    label: Mapped[str] = mapped_column(String(255))
    link_phrase: Mapped[str] = mapped_column(Text)
    source_entity_type: Mapped[str] = mapped_column(String(16))
    target_entity_type: Mapped[str] = mapped_column(String(16))


class Relationship(Base):
    __tablename__ = "relationship"

    id: Mapped[int] = mapped_column(primary_key=True)
    type_id: Mapped[int] = mapped_column(ForeignKey("relationship_type.id"))
    source_bbid: Mapped[str] = mapped_column(ForeignKey("entity.bbid"))
    target_bbid: Mapped[str] = mapped_column(ForeignKey("entity.bbid"))


class RelationshipSet(Base):
    __tablename__ = "relationship_set"

    id: Mapped[int] = mapped_column(primary_key=True)

    relationships: Mapped[List["Relationship"]] = relationship(
        secondary=relationship_set__relationship, lazy="selectin"
    )


class Annotation(Base):
    __tablename__ = "annotation"

    id: Mapped[int] = mapped_column(primary_key=True)
    content: Mapped[str] = mapped_column(Text)
    last_revision_id: Mapped[int] = mapped_column(ForeignKey("revision.id"))


class Disambiguation(Base):
    __tablename__ = "disambiguation"

    id: Mapped[int] = mapped_column(primary_key=True)
    comment: Mapped[str] = mapped_column(Text)


class AuthorCreditName(Base):
    __tablename__ = "author_credit_name"

    author_credit_id: Mapped[int] = mapped_column(ForeignKey("author_credit.id"), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, primary_key=True)
    author_bbid: Mapped[str] = mapped_column(ForeignKey("entity.bbid"))
    name: Mapped[str] = mapped_column(Text)
    join_phrase: Mapped[str] = mapped_column(Text, default="")


class AuthorCredit(Base):
    __tablename__ = "author_credit"

    id: Mapped[int] = mapped_column(primary_key=True)
    author_count: Mapped[int] = mapped_column(Integer, default=0)

    names: Mapped[List["AuthorCreditName"]] = relationship(
        order_by=AuthorCreditName.position, lazy="selectin"
    )


class LanguageSet(Base):
    __tablename__ = "language_set"

    id: Mapped[int] = mapped_column(primary_key=True)


class PublisherSet(Base):
    __tablename__ = "publisher_set"

    id: Mapped[int] = mapped_column(primary_key=True)


class ReleaseEventSet(Base):
    __tablename__ = "release_event_set"

    id: Mapped[int] = mapped_column(primary_key=True)


class EditionFormat(Base):
    __tablename__ = "edition_format"

    id: Mapped[int] = mapped_column(primary_key=True)
    label: Mapped[str] = mapped_column(String(255), unique=True)


class EditionStatus(Base):
    __tablename__ = "edition_status"

    id: Mapped[int] = mapped_column(primary_key=True)
    label: Mapped[str] = mapped_column(String(255), unique=True)


class EditionGroupType(Base):
    __tablename__ = "edition_group_type"

    id: Mapped[int] = mapped_column(primary_key=True)
    label: Mapped[str] = mapped_column(String(255), unique=True)


# =============================================================================
# Edition Group snapshots
# =============================================================================

class EditionGroupData(Base):
    __tablename__ = "edition_group_data"

    id: Mapped[int] = mapped_column(primary_key=True)
    alias_set_id: Mapped[Optional[int]] = mapped_column(ForeignKey("alias_set.id"), nullable=True)
    identifier_set_id: Mapped[Optional[int]] = mapped_column(ForeignKey("identifier_set.id"), nullable=True)
    relationship_set_id: Mapped[Optional[int]] = mapped_column(ForeignKey("relationship_set.id"), nullable=True)
    annotation_id: Mapped[Optional[int]] = mapped_column(ForeignKey("annotation.id"), nullable=True)
    disambiguation_id: Mapped[Optional[int]] = mapped_column(ForeignKey("disambiguation.id"), nullable=True)
    author_credit_id: Mapped[Optional[int]] = mapped_column(ForeignKey("author_credit.id"), nullable=True)
    type_id: Mapped[Optional[int]] = mapped_column(ForeignKey("edition_group_type.id"), nullable=True)


class EditionGroupRevision(Base):
    __tablename__ = "edition_group_revision"

    id: Mapped[int] = mapped_column(ForeignKey("revision.id"), primary_key=True)
    bbid: Mapped[str] = mapped_column(ForeignKey("entity.bbid"), primary_key=True)
    data_id: Mapped[int] = mapped_column(ForeignKey("edition_group_data.id"))

    __table_args__ = (
        Index("ix_edition_group_revision_bbid_id", "bbid", "id"),
    )


# =============================================================================
# Edition snapshots
# =============================================================================

class EditionData(Base):
    __tablename__ = "edition_data"

    id: Mapped[int] = mapped_column(primary_key=True)
    alias_set_id: Mapped[Optional[int]] = mapped_column(ForeignKey("alias_set.id"), nullable=True)
    identifier_set_id: Mapped[Optional[int]] = mapped_column(ForeignKey("identifier_set.id"), nullable=True)
    relationship_set_id: Mapped[Optional[int]] = mapped_column(ForeignKey("relationship_set.id"), nullable=True)
    annotation_id: Mapped[Optional[int]] = mapped_column(ForeignKey("annotation.id"), nullable=True)
    disambiguation_id: Mapped[Optional[int]] = mapped_column(ForeignKey("disambiguation.id"), nullable=True)
    author_credit_id: Mapped[Optional[int]] = mapped_column(ForeignKey("author_credit.id"), nullable=True)
    edition_group_bbid: Mapped[str] = mapped_column(ForeignKey("entity.bbid"), nullable=False, index=True)
    format_id: Mapped[Optional[int]] = mapped_column(ForeignKey("edition_format.id"), nullable=True)
    status_id: Mapped[Optional[int]] = mapped_column(ForeignKey("edition_status.id"), nullable=True)
    language_set_id: Mapped[Optional[int]] = mapped_column(ForeignKey("language_set.id"), nullable=True)
    publisher_set_id: Mapped[Optional[int]] = mapped_column(ForeignKey("publisher_set.id"), nullable=True)
    release_event_set_id: Mapped[Optional[int]] = mapped_column(ForeignKey("release_event_set.id"), nullable=True)
    pages: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    width: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    height: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    depth: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    weight: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


class EditionRevision(Base):
    __tablename__ = "edition_revision"

    id: Mapped[int] = mapped_column(ForeignKey("revision.id"), primary_key=True)
    bbid: Mapped[str] = mapped_column(ForeignKey("entity.bbid"), primary_key=True)
    data_id: Mapped[int] = mapped_column(ForeignKey("edition_data.id"))

    __table_args__ = (
        # Master resolution scans max(id) per bbid
        Index("ix_edition_revision_bbid_id", "bbid", "id"),
    )

    def __repr__(self) -> str:
        return f"<EditionRevision {self.id} of {self.bbid}>"


# Columns of an edition snapshot a caller may set; everything else is derived
EDITION_DATA_FIELDS = (
    "alias_set_id",
    "identifier_set_id",
    "relationship_set_id",
    "annotation_id",
    "disambiguation_id",
    "author_credit_id",
    "edition_group_bbid",
    "format_id",
    "status_id",
    "language_set_id",
    "publisher_set_id",
    "release_event_set_id",
    "pages",
    "width",
    "height",
    "depth",
    "weight",
)

EDITION_GROUP_DATA_FIELDS = (
    "alias_set_id",
    "identifier_set_id",
    "relationship_set_id",
    "annotation_id",
    "disambiguation_id",
    "author_credit_id",
    "type_id",
)
