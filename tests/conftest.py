"""Shared fixtures: every test gets a fresh engine and a tmp project root."""

import pytest

from exemplars.config import ExemplarConfig, configure, get_config
from exemplars.engine import GenerationEngine, get_engine, set_engine


@pytest.fixture(autouse=True)
def engine(tmp_path):
    """Isolate registries and exemplar lookup per test."""
    previous_config = get_config()
    configure(ExemplarConfig(project_root=tmp_path))
    previous_engine = set_engine(GenerationEngine())

    yield get_engine()

    set_engine(previous_engine)
    configure(previous_config)


@pytest.fixture
def exemplar_dir():
    """Configured exemplar directory, created on demand."""
    path = get_config().exemplar_path
    path.mkdir(parents=True, exist_ok=True)
    return path
