"""Import-path and naming helpers used by exemplar files and relation targets."""

from __future__ import annotations

import importlib
import re
from typing import Any

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def import_object(path: str) -> Any:
    """
    Import an object from ``"package.module:attr"`` or ``"package.module.attr"``.

    Nested attributes are allowed after the colon (``"module:Class.method"``).
    """
    if ":" in path:
        module_name, _, attr_path = path.partition(":")
    else:
        module_name, _, attr_path = path.rpartition(".")
    if not module_name or not attr_path:
        raise ImportError(f"Not an import path: '{path}'")

    obj: Any = importlib.import_module(module_name)
    for part in attr_path.split("."):
        obj = getattr(obj, part)
    return obj


def snake_case(name: str) -> str:
    """Convert a class name to snake_case (``WidgetPart`` -> ``widget_part``)."""
    name = name.replace("::", "_").replace(".", "_")
    return _CAMEL_BOUNDARY.sub("_", name).lower()
