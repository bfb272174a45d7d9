"""
Relations that can be loaded alongside an entity record.

Each member names one foreign-key hop from a snapshot; the store maps each
member to exactly one loader.
"""
import enum


class EditionRelation(enum.Enum):
    ALIAS_SET = "alias_set"
    IDENTIFIER_SET = "identifier_set"
    RELATIONSHIP_SET = "relationship_set"
    ANNOTATION = "annotation"
    DISAMBIGUATION = "disambiguation"
    AUTHOR_CREDIT = "author_credit"
    EDITION_GROUP = "edition_group"


class EditionGroupRelation(enum.Enum):
    ALIAS_SET = "alias_set"
    IDENTIFIER_SET = "identifier_set"
    RELATIONSHIP_SET = "relationship_set"
    ANNOTATION = "annotation"
    DISAMBIGUATION = "disambiguation"
    AUTHOR_CREDIT = "author_credit"
    EDITION_GROUP_TYPE = "edition_group_type"
