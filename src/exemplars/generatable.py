"""
Generatable capability for classes.

Mixing ``Generatable`` into a class gives it ``generate()`` and
``generator_for()``. Registries live in the engine's table keyed by class,
so nothing is stored on the class itself.

Example:
    >>> class Widget(Generatable, SimpleNamespace):
    ...     pass
    >>> _ = Widget.generator_for("name", start="widget-a", block=succ)
    >>> Widget.generate().name
    'widget-a'
    >>> Widget.generate(name="custom").name
    'custom'
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from exemplars.config import get_config
from exemplars.engine import get_engine
from exemplars.models import BelongsTo, GeneratorDescriptor, PresenceRule
from exemplars.registry import GeneratorRegistry
from exemplars.relational import presence_validated_attributes


class Generatable:
    """Mixin providing test-object generation through the process-wide engine."""

    @classmethod
    def generate(cls, overrides: Optional[Mapping[Any, Any]] = None, **kwargs: Any):
        """
        Build an instance from registered generators, overrides taking precedence.

        Attributes named ``overrides`` or ``cls`` can only be overridden through
        the mapping form: ``generate({"overrides": value})``.
        """
        return get_engine().generate(cls, overrides, **kwargs)

    @classmethod
    def generate_batch(
        cls,
        count: int,
        overrides: Optional[Mapping[Any, Any]] = None,
        **kwargs: Any,
    ) -> List[Any]:
        return get_engine().generate_batch(cls, count, overrides, **kwargs)

    @classmethod
    def attributes_for(
        cls,
        overrides: Optional[Mapping[Any, Any]] = None,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        return get_engine().attributes_for(cls, overrides, **kwargs)

    @classmethod
    def generator_for(
        cls,
        attribute: Any = None,
        options: Optional[Dict[str, Any]] = None,
        block: Optional[Callable[[Any], Any]] = None,
        **kwargs: Any,
    ) -> GeneratorDescriptor:
        """
        Register a generator for one attribute of this class.

        Pass exactly one of ``block`` (called with the previous value),
        ``method`` (name of a zero-argument class method) or ``class``
        (an object with ``next()``; use ``options={"class": ...}`` or
        ``generator=...``). ``start`` seeds a block generator's first value.
        """
        return get_engine().register(cls, attribute, options, block, **kwargs)

    @classmethod
    def generator_registry(cls) -> GeneratorRegistry:
        return get_engine().registry(cls)

    @classmethod
    def exemplar_path(cls) -> Path:
        """Directory holding this class's exemplar file."""
        return Path(get_config().exemplar_path)

    @classmethod
    def exemplar_name(cls) -> str:
        """Name the exemplar file is derived from."""
        return cls.__name__


class Record(Generatable):
    """
    Base for relational record classes.

    Subclasses declare ``__belongs_to__`` and ``__validations__``; unset
    relations default to None. Exemplars are looked up in the configured
    exemplar path, which defaults to ``<project root>/tests/exemplars``.
    """

    __belongs_to__: Sequence[BelongsTo] = ()
    __validations__: Sequence[PresenceRule] = ()

    def __init__(self, **attributes: Any):
        for relation in self.__belongs_to__:
            setattr(self, relation.name, None)
        for name, value in attributes.items():
            setattr(self, name, value)

    @classmethod
    def presence_validated_attributes(cls) -> List[str]:
        return presence_validated_attributes(cls, get_engine().metadata)

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({fields})"
