"""
Per-class generator registry.

Handles:
- Validating generator declarations (exactly one strategy per attribute)
- Keeping descriptors in registration order
- One-time population from an exemplar source, guarded by a per-class lock
"""

from __future__ import annotations

import inspect
import logging
import threading
from collections.abc import Iterator
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from exemplars.errors import DeclarationError
from exemplars.models import (
    ABSENT,
    GeneratorDescriptor,
    PopulationState,
    StrategyKind,
)

logger = logging.getLogger(__name__)

KNOWN_OPTIONS = ("start", "method", "class", "generator")


def normalize_attribute(attribute: Any) -> str:
    """Canonical string form of an attribute identifier."""
    if isinstance(attribute, Enum):
        attribute = attribute.value
    if attribute is None or attribute == "":
        raise DeclarationError("An attribute name is required to register a generator")
    return str(attribute)


def _accepts(func: Callable, *args: Any) -> bool:
    """Whether ``func`` can be called with exactly ``args``."""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures
        return True
    try:
        signature.bind(*args)
    except TypeError:
        return False
    return True


class GeneratorRegistry:
    """
    Attribute generators registered for one class.

    Registries are never shared: a subclass gets its own, empty registry
    rather than inheriting its parent's generators.
    """

    def __init__(self, owner: type):
        self.owner = owner
        self.state = PopulationState.UNPOPULATED
        self._descriptors: Dict[str, GeneratorDescriptor] = {}
        self._lock = threading.RLock()

    def __contains__(self, attribute: Any) -> bool:
        return normalize_attribute(attribute) in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)

    def __iter__(self):
        return iter(self.descriptors)

    @property
    def descriptors(self) -> List[GeneratorDescriptor]:
        """Descriptors in registration order."""
        with self._lock:
            return list(self._descriptors.values())

    @property
    def attributes(self) -> List[str]:
        return [d.attribute for d in self.descriptors]

    @property
    def is_populated(self) -> bool:
        return self.state is PopulationState.POPULATED

    def get(self, attribute: Any) -> Optional[GeneratorDescriptor]:
        return self._descriptors.get(normalize_attribute(attribute))

    def register(
        self,
        attribute: Any = None,
        options: Optional[Dict[str, Any]] = None,
        block: Optional[Callable[[Any], Any]] = None,
        **kwargs: Any,
    ) -> GeneratorDescriptor:
        """
        Register a generator for an attribute.

        Args:
            attribute: Attribute name (string, or anything with a string form)
            options: ``start``, ``method`` or ``class`` (alias ``generator``)
            block: Callable taking the previous value and returning the next
            **kwargs: Merged into ``options``

        Returns:
            The new descriptor

        Raises:
            DeclarationError: If the attribute is missing or already has a
                generator, or the strategy is missing, ambiguous or invalid
        """
        options = dict(options or {})
        options.update(kwargs)
        name = normalize_attribute(attribute)

        unknown = sorted(set(options) - set(KNOWN_OPTIONS))
        if unknown:
            logger.warning(
                f"Ignoring unknown generator options for {self.owner.__name__}.{name}: "
                f"{', '.join(unknown)}"
            )

        with self._lock:
            if name in self._descriptors:
                raise DeclarationError(
                    f"A generator for '{name}' is already registered on {self.owner.__name__}"
                )
            descriptor = self._build(name, options, block)
            self._descriptors[name] = descriptor

        logger.debug(f"Registered {descriptor.summary} for {self.owner.__name__}.{name}")
        return descriptor

    def _build(
        self,
        name: str,
        options: Dict[str, Any],
        block: Optional[Callable[[Any], Any]],
    ) -> GeneratorDescriptor:
        """Validate a declaration and turn it into a descriptor."""
        method = options.get("method")
        generator = options.get("class", options.get("generator"))

        supplied = [s for s, given in (
            ("block", block is not None),
            ("method", method is not None),
            ("class", generator is not None),
        ) if given]
        if not supplied:
            raise DeclarationError(
                f"No generator block, class or method given for '{name}'"
            )
        if len(supplied) > 1:
            raise DeclarationError(
                f"Generator for '{name}' must use exactly one strategy, got {' and '.join(supplied)}"
            )

        if "start" in options and block is None:
            logger.warning(f"Initial value for '{name}' ignored: only block generators use it")

        if block is not None:
            if not callable(block):
                raise DeclarationError(f"Generator block for '{name}' is not callable")
            if not _accepts(block, None):
                raise DeclarationError(
                    f"Generator block for '{name}' must accept the previous value"
                )
            return GeneratorDescriptor(
                attribute=name,
                kind=StrategyKind.BLOCK,
                block=block,
                initial_value=options.get("start", ABSENT),
            )

        if method is not None:
            method_name = normalize_attribute(method)
            target = getattr(self.owner, method_name, None)
            if not callable(target):
                raise DeclarationError(
                    f"{self.owner.__name__} has no generator method '{method_name}'"
                )
            if not _accepts(target):
                raise DeclarationError(
                    f"Generator method '{method_name}' must be callable without arguments"
                )
            return GeneratorDescriptor(
                attribute=name,
                kind=StrategyKind.METHOD,
                method=method_name,
            )

        produce = getattr(generator, "next", None)
        if callable(produce):
            if not _accepts(produce):
                raise DeclarationError(
                    f"Generator {generator!r} for '{name}' has a next() that takes arguments"
                )
        elif not isinstance(generator, Iterator):
            raise DeclarationError(
                f"Generator {generator!r} for '{name}' has no next() method"
            )
        return GeneratorDescriptor(
            attribute=name,
            kind=StrategyKind.KLASS,
            generator=generator,
        )

    def populate(self, source: Any) -> None:
        """
        Load generators from ``source`` the first time this is called.

        ``source`` must provide ``apply(owner, registry)``. The registry is
        marked populated even when loading fails, so a broken exemplar raises
        once and is not retried.
        """
        if self.state is PopulationState.POPULATED:
            return

        with self._lock:
            if self.state is not PopulationState.UNPOPULATED:
                # Already done, or re-entered while populating
                return
            self.state = PopulationState.POPULATING
            try:
                count = source.apply(self.owner, self)
                logger.info(f"Populated {count or 0} generators for {self.owner.__name__}")
            except Exception as e:
                logger.error(f"Error loading exemplar for {self.owner.__name__}: {e}")
                raise
            finally:
                self.state = PopulationState.POPULATED

    def reset_sequences(self) -> None:
        """Rewind every block generator to its initial value."""
        for descriptor in self.descriptors:
            descriptor.reset()


class RegistryTable:
    """Maps classes, by identity, to their generator registries."""

    def __init__(self):
        self._registries: Dict[type, GeneratorRegistry] = {}
        self._lock = threading.Lock()

    def for_class(self, cls: type) -> GeneratorRegistry:
        """Return the registry for ``cls``, creating it on first use."""
        registry = self._registries.get(cls)
        if registry is None:
            with self._lock:
                registry = self._registries.setdefault(cls, GeneratorRegistry(cls))
        return registry

    def __contains__(self, cls: type) -> bool:
        return cls in self._registries

    def classes(self) -> Iterable[type]:
        return list(self._registries)

    def reset(self) -> None:
        """Forget every registry (generators and population state)."""
        with self._lock:
            self._registries.clear()
