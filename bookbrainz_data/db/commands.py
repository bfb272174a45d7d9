"""
Edition write commands.

Commands represent intentions to change an Edition. They are validated and
executed by the handlers in ``bookbrainz_data.db.command_handlers``.

Update commands distinguish an omitted field from an explicit ``None``:
every field defaults to ``UNSET``, which means "inherit the previous
snapshot's value". ``edition_group_bbid=None`` on an update is an attempt
to unlink the Edition Group and is rejected.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union
from uuid import UUID, uuid4

from bookbrainz_data.db.models import EDITION_DATA_FIELDS


class Unset(Enum):
    """Marker type for a field the caller did not mention."""
    TOKEN = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"


UNSET = Unset.TOKEN


@dataclass(kw_only=True)
class BaseCommand:
    """Base class for all commands."""
    command_id: UUID = field(default_factory=uuid4)
    correlation_id: Optional[str] = None

    # Revision attribution. With author_id a new revision is written (using
    # revision_id as its id when given); with only revision_id the snapshot
    # is attached to that existing revision.
    author_id: Optional[int] = None
    revision_id: Optional[int] = None


@dataclass(kw_only=True)
class CreateEditionCommand(BaseCommand):
    """
    Command to write the first revision of an Edition.

    Args:
        bbid: Identity to use; generated when omitted. An existing ``entity``
            row of type Edition is reused.
        edition_group_bbid: Parent Edition Group. When omitted (or None) a
            default Edition Group is created in the same transaction.
    """
    bbid: Optional[str] = None
    edition_group_bbid: Optional[str] = None

    alias_set_id: Optional[int] = None
    identifier_set_id: Optional[int] = None
    relationship_set_id: Optional[int] = None
    annotation_id: Optional[int] = None
    disambiguation_id: Optional[int] = None
    author_credit_id: Optional[int] = None
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

    def data_attributes(self) -> Dict[str, Any]:
        """Snapshot columns carried by this command, edition group excluded."""
        return {
            name: getattr(self, name)
            for name in EDITION_DATA_FIELDS
            if name != "edition_group_bbid"
        }


@dataclass(kw_only=True)
class UpdateEditionCommand(BaseCommand):
    """
    Command to layer a partial change set on top of an Edition's master
    revision.

    Args:
        bbid: Edition to update
        <field>: New value, ``UNSET`` to inherit. ``None`` clears optional
            references; it is rejected for ``edition_group_bbid``.
    """
    bbid: str

    edition_group_bbid: Union[str, None, Unset] = UNSET
    alias_set_id: Union[int, None, Unset] = UNSET
    identifier_set_id: Union[int, None, Unset] = UNSET
    relationship_set_id: Union[int, None, Unset] = UNSET
    annotation_id: Union[int, None, Unset] = UNSET
    disambiguation_id: Union[int, None, Unset] = UNSET
    author_credit_id: Union[int, None, Unset] = UNSET
    format_id: Union[int, None, Unset] = UNSET
    status_id: Union[int, None, Unset] = UNSET
    language_set_id: Union[int, None, Unset] = UNSET
    publisher_set_id: Union[int, None, Unset] = UNSET
    release_event_set_id: Union[int, None, Unset] = UNSET
    pages: Union[int, None, Unset] = UNSET
    width: Union[int, None, Unset] = UNSET
    height: Union[int, None, Unset] = UNSET
    depth: Union[int, None, Unset] = UNSET
    weight: Union[int, None, Unset] = UNSET

    @classmethod
    def from_changes(cls, bbid: str, changes: Dict[str, Any], **kwargs: Any) -> "UpdateEditionCommand":
        """
        Build a command from a plain mapping; keys absent from ``changes``
        stay UNSET.

        Raises:
            ValueError: If ``changes`` names an unknown field
        """
        unknown = set(changes) - set(EDITION_DATA_FIELDS)
        if unknown:
            raise ValueError(f"Unknown Edition fields: {sorted(unknown)}")
        return cls(bbid=bbid, **changes, **kwargs)

    def changes(self) -> Dict[str, Any]:
        """Fields explicitly set by the caller (None included)."""
        return {
            name: getattr(self, name)
            for name in EDITION_DATA_FIELDS
            if getattr(self, name) is not UNSET
        }
