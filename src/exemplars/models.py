"""
Core data models for the exemplars package.

Defines generator descriptors, the declaration format read from exemplar
files, and the relational metadata (belongs-to relations and presence rules)
consumed when auto-populating associations.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from exemplars.errors import DeclarationError


class _Absent:
    """Marker for "no value produced yet"."""

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()


class StrategyKind(str, Enum):
    """How a generator produces values."""
    BLOCK = "block"     # callable(previous) -> next
    KLASS = "klass"     # external generator exposing next()
    METHOD = "method"   # zero-argument method on the owning class


class PopulationState(str, Enum):
    """Lifecycle of a registry's one-time exemplar population."""
    UNPOPULATED = "unpopulated"
    POPULATING = "populating"
    POPULATED = "populated"


class ValidationContext(str, Enum):
    """Lifecycle context a validation rule applies in."""
    ALWAYS = "always"
    CREATE = "create"
    UPDATE = "update"


@dataclass
class GeneratorDescriptor:
    """
    One attribute's generation strategy and its sequence state.

    Only block generators keep state: ``last_value`` holds the value most
    recently produced and is handed back to the block on the next call.
    Klass and method generators delegate any sequencing to their target.
    """
    attribute: str
    kind: StrategyKind
    block: Optional[Callable[[Any], Any]] = None
    generator: Optional[Any] = None
    method: Optional[str] = None
    initial_value: Any = ABSENT
    last_value: Any = ABSENT
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def has_initial_value(self) -> bool:
        return self.initial_value is not ABSENT

    def next_value(self, owner: type) -> Any:
        """Produce the next value for this attribute, advancing block state."""
        if self.kind is StrategyKind.METHOD:
            return getattr(owner, self.method)()

        if self.kind is StrategyKind.KLASS:
            produce = getattr(self.generator, "next", None)
            if callable(produce):
                return produce()
            return next(self.generator)

        with self._lock:
            if self.last_value is ABSENT:
                if self.has_initial_value:
                    value = self.initial_value
                else:
                    value = self.block(None)
            else:
                value = self.block(self.last_value)
            self.last_value = value
            return value

    def reset(self) -> None:
        """Rewind a block generator to its initial state."""
        with self._lock:
            self.last_value = ABSENT

    @property
    def summary(self) -> str:
        """Short human readable description of the strategy."""
        if self.kind is StrategyKind.METHOD:
            return f"method {self.method}()"
        if self.kind is StrategyKind.KLASS:
            name = getattr(self.generator, "__name__", None) or repr(self.generator)
            return f"generator {name}"
        name = getattr(self.block, "__name__", "<block>")
        if self.has_initial_value:
            return f"sequence {name} from {self.initial_value!r}"
        return f"sequence {name}"


@dataclass
class GeneratorDeclaration:
    """
    Deserializable form of a single generator registration.

    Exactly one of ``sequence``, ``method``, ``generator``, ``faker`` is
    expected; a declaration carrying only ``start`` repeats that value.
    """
    attribute: str
    start: Any = ABSENT
    sequence: Optional[str] = None
    method: Optional[str] = None
    generator: Optional[str] = None
    faker: Optional[Union[str, Dict[str, Any]]] = None
    source: Optional[Path] = field(default=None, compare=False)

    KEYS = ("start", "sequence", "method", "generator", "faker")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: Dict[str, Any] = {}
        if self.start is not ABSENT:
            data["start"] = self.start
        for key in ("sequence", "method", "generator", "faker"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(
        cls,
        attribute: str,
        data: Optional[Dict[str, Any]],
        source: Optional[Path] = None,
    ) -> GeneratorDeclaration:
        """Create from the mapping stored under an attribute in an exemplar file."""
        if data is None:
            raise DeclarationError(f"No generator given for attribute '{attribute}'")
        if not isinstance(data, dict):
            # Shorthand: `foo: bar` is a constant value
            return cls(attribute=attribute, start=data, source=source)

        unknown = sorted(set(data) - set(cls.KEYS))
        if unknown:
            raise DeclarationError(
                f"Unknown generator option(s) for '{attribute}': {', '.join(unknown)}"
            )
        return cls(
            attribute=attribute,
            start=data.get("start", ABSENT),
            sequence=data.get("sequence"),
            method=data.get("method"),
            generator=data.get("generator"),
            faker=data.get("faker"),
            source=source,
        )


@dataclass
class BelongsTo:
    """A many-to-one reference from the owning class to another class."""
    name: str
    target: Union[type, str]
    foreign_key: Optional[str] = None

    def __post_init__(self):
        if self.foreign_key is None:
            self.foreign_key = f"{self.name}_id"

    @property
    def attributes(self) -> List[str]:
        """Names under which the relation may be satisfied."""
        return [self.name, self.foreign_key]


@dataclass
class PresenceRule:
    """Declares that an attribute must be non-empty, optionally per context."""
    attribute: str
    on: ValidationContext = ValidationContext.ALWAYS
    message: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.on, str):
            self.on = ValidationContext(self.on)

    @property
    def applies_on_create(self) -> bool:
        return self.on in (ValidationContext.ALWAYS, ValidationContext.CREATE)


def validates_presence_of(
    *attributes: str,
    on: Union[ValidationContext, str] = ValidationContext.ALWAYS,
    message: Optional[str] = None,
) -> List[PresenceRule]:
    """Build one presence rule per attribute sharing the same options."""
    return [PresenceRule(attribute=str(a), on=on, message=message) for a in attributes]
