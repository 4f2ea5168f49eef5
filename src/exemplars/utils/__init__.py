"""Shared helpers."""

from exemplars.utils.imports import import_object, snake_case

__all__ = ["import_object", "snake_case"]
