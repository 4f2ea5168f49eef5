"""
Generation engine for building test objects.

Handles:
- One-time exemplar population per class
- Running generators in registration order, skipping overridden attributes
- Auto-populating required belongs-to associations
- Constructing the instance with overrides taking final precedence
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from exemplars.associations import AssociationResolver
from exemplars.exemplar import ExemplarLoader
from exemplars.models import GeneratorDescriptor
from exemplars.registry import GeneratorRegistry, RegistryTable, normalize_attribute
from exemplars.relational import DeclaredMetadata, RelationalMetadata

logger = logging.getLogger(__name__)


class GenerationEngine:
    """
    Generates instances of arbitrary classes.

    The engine:
    1. Populates the class's registry from its exemplar (once)
    2. Runs each registered generator whose attribute is not overridden
    3. Generates required associations the caller did not supply
    4. Applies overrides last
    5. Calls the class constructor with the merged attributes
    """

    def __init__(
        self,
        table: Optional[RegistryTable] = None,
        loader: Optional[ExemplarLoader] = None,
        metadata: Optional[RelationalMetadata] = None,
    ):
        """
        Initialize engine.

        Args:
            table: Registry table; a fresh one when omitted
            loader: Exemplar source used for one-time population
            metadata: Relational metadata provider for association lookup
        """
        self.table = table if table is not None else RegistryTable()
        self.loader = loader if loader is not None else ExemplarLoader()
        self.metadata = metadata if metadata is not None else DeclaredMetadata()
        self.resolver = AssociationResolver(self.metadata, self)

    def registry(self, cls: type) -> GeneratorRegistry:
        """Return the generator registry for ``cls``."""
        return self.table.for_class(cls)

    def register(
        self,
        cls: type,
        attribute: Any = None,
        options: Optional[Dict[str, Any]] = None,
        block: Optional[Callable[[Any], Any]] = None,
        **kwargs: Any,
    ) -> GeneratorDescriptor:
        """Register a generator for ``cls``; see GeneratorRegistry.register."""
        return self.registry(cls).register(attribute, options, block, **kwargs)

    def populate(self, cls: type) -> GeneratorRegistry:
        """Make sure the exemplar for ``cls`` has been loaded."""
        registry = self.registry(cls)
        registry.populate(self.loader)
        return registry

    def attributes_for(
        self,
        cls: type,
        overrides: Optional[Mapping[Any, Any]] = None,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        """
        Compute the constructor attributes for a new ``cls`` instance.

        Overridden attributes never reach their generator, so sequence
        generators do not advance on overridden calls.
        """
        overrides = self._normalize_overrides(overrides, kwargs)
        registry = self.populate(cls)

        attributes: Dict[str, Any] = {}
        for descriptor in registry:
            if descriptor.attribute in overrides:
                continue
            attributes[descriptor.attribute] = descriptor.next_value(cls)

        if self.metadata.has_metadata(cls):
            attributes.update(self.resolver.resolve(cls, attributes, overrides))

        attributes.update(overrides)
        return attributes

    def generate(
        self,
        cls: type,
        overrides: Optional[Mapping[Any, Any]] = None,
        **kwargs: Any,
    ) -> Any:
        """
        Generate an instance of ``cls``.

        Args:
            cls: Class to instantiate
            overrides: Attribute values that take precedence over generators
            **kwargs: Further overrides; attributes named ``self``, ``cls`` or
                ``overrides`` must go in the ``overrides`` mapping instead

        Returns:
            ``cls(**attributes)``
        """
        attributes = self.attributes_for(cls, overrides, **kwargs)
        logger.debug(f"Generating {cls.__name__} with {sorted(attributes)}")
        return cls(**attributes)

    def generate_batch(
        self,
        cls: type,
        count: int,
        overrides: Optional[Mapping[Any, Any]] = None,
        **kwargs: Any,
    ) -> List[Any]:
        """Generate ``count`` instances sharing the same overrides."""
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        return [self.generate(cls, overrides, **kwargs) for _ in range(count)]

    def reset(self) -> None:
        """Drop every registry, so exemplars are loaded again on next use."""
        self.table.reset()

    @staticmethod
    def _normalize_overrides(
        overrides: Optional[Mapping[Any, Any]],
        extra: Mapping[str, Any],
    ) -> Dict[str, Any]:
        merged = {normalize_attribute(k): v for k, v in (overrides or {}).items()}
        merged.update(extra)
        return merged


_engine: Optional[GenerationEngine] = None


def get_engine() -> GenerationEngine:
    """Return the process-wide engine used by Generatable classes."""
    global _engine
    if _engine is None:
        _engine = GenerationEngine()
    return _engine


def set_engine(engine: Optional[GenerationEngine]) -> Optional[GenerationEngine]:
    """Replace the process-wide engine, returning the previous one."""
    global _engine
    previous, _engine = _engine, engine
    return previous
