"""
Exemplars - Test Object Generation for Python Classes

Generates fully populated instances of a class from per-attribute generators,
with caller overrides taking precedence and required belongs-to associations
generated automatically.

Features:
- Sequence, method and external generator strategies per attribute
- Exemplar files (YAML) loaded once per class
- Auto-generation of associations required by presence rules
- Faker-backed generators for realistic values
"""

__version__ = "0.1.0"
__author__ = "DDG Team"

from exemplars.config import ExemplarConfig, configure, get_config
from exemplars.errors import DeclarationError, ExemplarError, ExemplarFileError
from exemplars.models import (
    BelongsTo,
    GeneratorDeclaration,
    GeneratorDescriptor,
    PopulationState,
    PresenceRule,
    StrategyKind,
    ValidationContext,
    validates_presence_of,
)
from exemplars.sequences import FakerGenerator, increment, succ
from exemplars.registry import GeneratorRegistry, RegistryTable
from exemplars.exemplar import ExemplarLoader
from exemplars.relational import DeclaredMetadata, RelationalMetadata, required_relations
from exemplars.associations import AssociationResolver
from exemplars.engine import GenerationEngine, get_engine, set_engine
from exemplars.generatable import Generatable, Record

__all__ = [
    # Configuration
    "ExemplarConfig",
    "configure",
    "get_config",
    # Errors
    "DeclarationError",
    "ExemplarError",
    "ExemplarFileError",
    # Core models
    "BelongsTo",
    "GeneratorDeclaration",
    "GeneratorDescriptor",
    "PopulationState",
    "PresenceRule",
    "StrategyKind",
    "ValidationContext",
    "validates_presence_of",
    # Generators
    "FakerGenerator",
    "increment",
    "succ",
    # Registry and loading
    "GeneratorRegistry",
    "RegistryTable",
    "ExemplarLoader",
    # Associations
    "DeclaredMetadata",
    "RelationalMetadata",
    "required_relations",
    "AssociationResolver",
    # Generation
    "GenerationEngine",
    "get_engine",
    "set_engine",
    "Generatable",
    "Record",
]
