"""
Exemplar module for loading generator declarations from files.

An exemplar is a YAML file named after the class it configures
(``Widget`` -> ``widget_exemplar.yaml``) listing attribute generators.
"""

from exemplars.exemplar.loader import ExemplarLoader, read_declarations

__all__ = ["ExemplarLoader", "read_declarations"]
