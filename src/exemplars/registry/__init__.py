"""
Generator registry module.

Holds per-class generator descriptors and the table mapping classes to their
registries.
"""

from exemplars.registry.registry import (
    GeneratorRegistry,
    RegistryTable,
    normalize_attribute,
)

__all__ = [
    "GeneratorRegistry",
    "RegistryTable",
    "normalize_attribute",
]
