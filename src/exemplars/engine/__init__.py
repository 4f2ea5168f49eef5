"""
Generation engine module.

Turns registered generators, caller overrides and required associations
into populated instances.
"""

from exemplars.engine.engine import GenerationEngine, get_engine, set_engine

__all__ = ["GenerationEngine", "get_engine", "set_engine"]
