"""
Configuration for exemplar lookup and built-in generators.

Settings come from keyword arguments, the ``EXEMPLARS_*`` environment
variables, or the ``exemplars:`` section of a YAML file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_EXEMPLAR_DIR = Path("tests") / "exemplars"


@dataclass
class ExemplarConfig:
    """Where exemplar files live and how built-in generators are seeded."""
    project_root: Path = field(default_factory=Path.cwd)
    exemplar_path: Optional[Path] = None
    suffixes: List[str] = field(default_factory=lambda: ["_exemplar.yaml", "_exemplar.yml"])
    faker_locale: Optional[str] = None
    faker_seed: Optional[int] = None

    def __post_init__(self):
        if isinstance(self.project_root, str):
            self.project_root = Path(self.project_root)
        if isinstance(self.exemplar_path, str):
            self.exemplar_path = Path(self.exemplar_path)
        if self.exemplar_path is None:
            self.exemplar_path = self.project_root / DEFAULT_EXEMPLAR_DIR

    @classmethod
    def from_env(cls, **overrides: Any) -> ExemplarConfig:
        """Build a config from EXEMPLARS_* environment variables."""
        values: Dict[str, Any] = {}
        if os.environ.get("EXEMPLARS_ROOT"):
            values["project_root"] = os.environ["EXEMPLARS_ROOT"]
        if os.environ.get("EXEMPLARS_PATH"):
            values["exemplar_path"] = os.environ["EXEMPLARS_PATH"]
        if os.environ.get("EXEMPLARS_FAKER_LOCALE"):
            values["faker_locale"] = os.environ["EXEMPLARS_FAKER_LOCALE"]
        if os.environ.get("EXEMPLARS_FAKER_SEED"):
            values["faker_seed"] = int(os.environ["EXEMPLARS_FAKER_SEED"])
        values.update(overrides)
        return cls(**values)

    @classmethod
    def from_yaml(cls, path: Path) -> ExemplarConfig:
        """Load the ``exemplars:`` section of a YAML file."""
        path = Path(path)
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        section = data.get("exemplars", data) or {}
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(section) - known)
        if unknown:
            logger.warning(f"Ignoring unknown config keys in {path}: {', '.join(unknown)}")

        values = {k: v for k, v in section.items() if k in known}
        # Relative exemplar paths are taken from the config file's directory
        if "exemplar_path" in values and not Path(values["exemplar_path"]).is_absolute():
            values["exemplar_path"] = path.parent / values["exemplar_path"]
        logger.info(f"Loaded exemplar config from {path}")
        return cls(**values)


_config: Optional[ExemplarConfig] = None


def get_config() -> ExemplarConfig:
    """Return the process-wide config, building it from the environment on first use."""
    global _config
    if _config is None:
        _config = ExemplarConfig.from_env()
    return _config


def configure(config: Optional[ExemplarConfig] = None, **kwargs: Any) -> ExemplarConfig:
    """Replace the process-wide config."""
    global _config
    _config = config if config is not None else ExemplarConfig.from_env(**kwargs)
    return _config
