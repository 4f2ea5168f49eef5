"""
Association resolver.

For classes carrying relational metadata, generates related instances for
every belongs-to relation that a create-time presence rule makes mandatory
and that the caller has not already supplied.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

from exemplars.relational import RelationalMetadata, required_relations, resolve_class

logger = logging.getLogger(__name__)


class AssociationResolver:
    """
    Fills in required associations.

    Relations are handled in declaration order. A relation counts as
    supplied when either its name or its foreign key is present in the
    generated attributes or the overrides.
    """

    def __init__(self, metadata: RelationalMetadata, engine: Any):
        self.metadata = metadata
        self.engine = engine

    def resolve(
        self,
        cls: type,
        attributes: Mapping[str, Any],
        overrides: Mapping[str, Any],
    ) -> Dict[str, Any]:
        """
        Generate instances for required, unsupplied relations of ``cls``.

        Returns:
            Mapping of relation name to generated related instance
        """
        if not self.metadata.has_metadata(cls):
            return {}

        supplied = set(attributes) | set(overrides)
        generated: Dict[str, Any] = {}

        for relation in required_relations(cls, self.metadata):
            if relation.name in supplied or relation.foreign_key in supplied:
                continue
            related = resolve_class(relation.target, cls)
            logger.debug(f"Generating {related.__name__} for {cls.__name__}.{relation.name}")
            generated[relation.name] = self._generate_related(related)

        return generated

    def _generate_related(self, related: type) -> Any:
        """
        Build a related instance through this engine.

        A class that replaces ``generate()`` with its own factory keeps it;
        the inherited ``Generatable.generate`` would go through the
        process-wide engine instead of this one, so it is bypassed.
        """
        from exemplars.generatable import Generatable

        factory = getattr(related, "generate", None)
        inherited = (
            isinstance(related, type)
            and issubclass(related, Generatable)
            and getattr(factory, "__func__", None) is Generatable.generate.__func__
        )
        if callable(factory) and not inherited:
            return factory()
        return self.engine.generate(related)
