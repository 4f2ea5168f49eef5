"""
Relational metadata consumed by association auto-population.

The mapping framework itself is external; exemplars only needs to know, per
class, which belongs-to relations exist and which presence rules apply.
``DeclaredMetadata`` reads both from class attributes::

    class Frobnitz(Record):
        __belongs_to__ = [BelongsTo("foo", Foo), BelongsTo("thing", "Thing")]
        __validations__ = [
            *validates_presence_of("foo", "thing_id", "name"),
            *validates_presence_of("title", on="create", message="can't be blank"),
        ]
"""

from __future__ import annotations

import logging
import sys
from typing import List, Optional, Protocol, Sequence, runtime_checkable

from exemplars.models import BelongsTo, PresenceRule
from exemplars.utils import import_object

logger = logging.getLogger(__name__)


@runtime_checkable
class RelationalMetadata(Protocol):
    """What the association resolver needs from a mapping framework."""

    def has_metadata(self, cls: type) -> bool:
        ...

    def belongs_to(self, cls: type) -> Sequence[BelongsTo]:
        ...

    def presence_rules(self, cls: type) -> Sequence[PresenceRule]:
        ...


def resolve_class(target, owner: Optional[type] = None) -> type:
    """
    Resolve a relation target to a class.

    Accepts a class, ``"module:Class"``, ``"module.Class"`` or a bare class
    name looked up in the owner's module.
    """
    if isinstance(target, type):
        return target
    if not isinstance(target, str):
        raise TypeError(f"Cannot resolve relation target {target!r}")

    if ":" in target:
        return import_object(target)

    if owner is not None:
        module = sys.modules.get(owner.__module__)
        if module is not None and hasattr(module, target):
            return getattr(module, target)

    if "." in target:
        return import_object(target)

    raise LookupError(f"Cannot resolve relation target '{target}'")


class DeclaredMetadata:
    """Reads relations and presence rules declared on the class itself."""

    relations_attr = "__belongs_to__"
    validations_attr = "__validations__"

    def has_metadata(self, cls: type) -> bool:
        return hasattr(cls, self.relations_attr) or hasattr(cls, self.validations_attr)

    def belongs_to(self, cls: type) -> List[BelongsTo]:
        return list(getattr(cls, self.relations_attr, None) or [])

    def presence_rules(self, cls: type) -> List[PresenceRule]:
        return [
            rule for rule in getattr(cls, self.validations_attr, None) or []
            if isinstance(rule, PresenceRule)
        ]


def presence_validated_attributes(cls: type, metadata: RelationalMetadata) -> List[str]:
    """Attributes named by any presence rule, in declaration order, without duplicates."""
    seen: List[str] = []
    for rule in metadata.presence_rules(cls):
        if rule.attribute not in seen:
            seen.append(rule.attribute)
    return seen


def required_relations(cls: type, metadata: RelationalMetadata) -> List[BelongsTo]:
    """
    Belongs-to relations that a create-time presence rule makes mandatory.

    A relation is required when a rule names either the relation itself or
    its foreign key. Rules scoped to other contexts (e.g. update) are ignored.
    """
    required = {
        rule.attribute for rule in metadata.presence_rules(cls)
        if rule.applies_on_create
    }
    relations = [
        relation for relation in metadata.belongs_to(cls)
        if relation.name in required or relation.foreign_key in required
    ]
    logger.debug(f"{cls.__name__} requires relations: {[r.name for r in relations]}")
    return relations
