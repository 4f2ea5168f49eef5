"""
Exemplar loader.

Locates a class's exemplar file, parses its generator declarations and
registers them. Declarations are data, never code::

    generators:
      name: {start: frobnitz, sequence: succ}
      email: {faker: email}
      serial: {generator: "myapp.generators:SerialNumbers"}
      title: {method: default_title}
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from exemplars.config import ExemplarConfig, get_config
from exemplars.errors import DeclarationError, ExemplarFileError
from exemplars.models import ABSENT, GeneratorDeclaration
from exemplars.sequences import SEQUENCES, FakerGenerator
from exemplars.utils import import_object, snake_case

logger = logging.getLogger(__name__)


def _repeat(previous: Any) -> Any:
    return previous


def read_declarations(path: Path) -> List[GeneratorDeclaration]:
    """Parse an exemplar file into declarations, in file order."""
    path = Path(path)
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ExemplarFileError(path, f"invalid YAML: {e}") from e

    if data is None:
        return []
    generators = (data.get("generators") or {}) if isinstance(data, dict) else None
    if not isinstance(generators, dict):
        raise ExemplarFileError(path, "expected a 'generators' mapping")

    declarations = []
    for attribute, spec in generators.items():
        try:
            declarations.append(GeneratorDeclaration.from_dict(str(attribute), spec, source=path))
        except DeclarationError as e:
            raise ExemplarFileError(path, str(e)) from e
    return declarations


class ExemplarLoader:
    """
    Finds and applies exemplar files for classes.

    The directory comes from the class's ``exemplar_path()`` when it defines
    one, otherwise from the configured exemplar path. The file name comes
    from ``exemplar_name()`` when defined, otherwise the class name.
    """

    def __init__(self, config: Optional[ExemplarConfig] = None):
        self._config = config

    @property
    def config(self) -> ExemplarConfig:
        return self._config if self._config is not None else get_config()

    def exemplar_dir(self, cls: type) -> Path:
        hook = getattr(cls, "exemplar_path", None)
        if callable(hook):
            return Path(hook())
        return Path(self.config.exemplar_path)

    def exemplar_name(self, cls: type) -> str:
        hook = getattr(cls, "exemplar_name", None)
        if callable(hook):
            return hook()
        return cls.__name__

    def find(self, cls: type) -> Optional[Path]:
        """Return the exemplar file for ``cls``, or None if there is none."""
        base = self.exemplar_dir(cls)
        stem = snake_case(self.exemplar_name(cls))
        for suffix in self.config.suffixes:
            candidate = base / f"{stem}{suffix}"
            if candidate.is_file():
                return candidate
        return None

    def load(self, cls: type) -> List[GeneratorDeclaration]:
        """Read the declarations for ``cls``; a missing exemplar yields none."""
        path = self.find(cls)
        if path is None:
            logger.debug(f"No exemplar for {cls.__name__} in {self.exemplar_dir(cls)}")
            return []
        logger.info(f"Loading exemplar {path}")
        return read_declarations(path)

    def apply(self, cls: type, registry: Any) -> int:
        """Register every declaration for ``cls`` on ``registry``."""
        declarations = self.load(cls)
        for declaration in declarations:
            options, block = self.strategy_for(declaration)
            registry.register(declaration.attribute, options, block)
        return len(declarations)

    def strategy_for(self, declaration: GeneratorDeclaration):
        """Translate a declaration into registry options and an optional block."""
        if declaration.faker is not None and declaration.generator is not None:
            raise DeclarationError(
                f"Generator for '{declaration.attribute}' must use exactly one strategy, "
                f"got faker and generator"
            )

        options: Dict[str, Any] = {}
        block = None
        try:
            if declaration.faker is not None:
                options["class"] = self._faker_generator(declaration.faker)
            if declaration.generator is not None:
                options["class"] = import_object(declaration.generator)
            if declaration.method is not None:
                options["method"] = declaration.method
            if declaration.sequence is not None:
                block = SEQUENCES.get(declaration.sequence) or import_object(declaration.sequence)
        except (ImportError, AttributeError, TypeError, ValueError) as e:
            raise ExemplarFileError(
                declaration.source or "<exemplar>",
                f"cannot resolve generator for '{declaration.attribute}': {e}",
            ) from e

        if declaration.start is not ABSENT:
            # A bare start value repeats itself
            if block is None and not options:
                block = _repeat
            options["start"] = declaration.start
        return options, block

    def _faker_generator(self, spec) -> FakerGenerator:
        if isinstance(spec, str):
            spec = {"provider": spec}
        spec = dict(spec)
        spec.setdefault("locale", self.config.faker_locale)
        spec.setdefault("seed", self.config.faker_seed)
        return FakerGenerator(**spec)
