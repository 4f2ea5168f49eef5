"""
Command-line interface for exemplars.

Provides check, generate and info commands for exemplar files and the
classes they configure.
"""

from __future__ import annotations

import dataclasses
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from exemplars.config import ExemplarConfig, configure
from exemplars.engine import get_engine
from exemplars.errors import ExemplarError
from exemplars.exemplar import ExemplarLoader, read_declarations
from exemplars.relational import presence_validated_attributes, required_relations
from exemplars.utils import import_object

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with Rich handler."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _load_target(target: str) -> type:
    """Import ``module:Class`` relative to the working directory."""
    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)
    try:
        cls = import_object(target)
    except (ImportError, AttributeError) as e:
        raise click.BadParameter(f"cannot import {target}: {e}", param_hint="TARGET")
    if not isinstance(cls, type):
        raise click.BadParameter(f"{target} is not a class", param_hint="TARGET")
    return cls


def _parse_overrides(pairs: Tuple[str, ...]) -> Dict[str, Any]:
    """Turn ``key=value`` pairs into overrides, reading values as YAML scalars."""
    overrides: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got '{pair}'", param_hint="--set")
        overrides[key.strip()] = yaml.safe_load(raw)
    return overrides


def _attributes_of(instance: Any) -> Dict[str, Any]:
    """Public attribute values of a generated instance, including slotted classes."""
    if dataclasses.is_dataclass(instance):
        return {f.name: getattr(instance, f.name) for f in dataclasses.fields(instance)}
    attributes: Dict[str, Any] = {}
    for klass in reversed(type(instance).__mro__):
        slots = getattr(klass, "__slots__", ())
        for name in (slots,) if isinstance(slots, str) else slots:
            if not name.startswith("__") and hasattr(instance, name):
                attributes[name] = getattr(instance, name)
    attributes.update(getattr(instance, "__dict__", {}))
    return attributes


def _configure(
config_file: Optional[Path], exemplar_path: Optional[Path]) -> ExemplarConfig:
    if config_file:
        config = ExemplarConfig.from_yaml(config_file)
    else:
        config = ExemplarConfig.from_env()
    if exemplar_path:
        config.exemplar_path = exemplar_path
    return configure(config)


@click.group()
@click.version_option(version="0.1.0", prog_name="exemplars")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
def cli(verbose: bool) -> None:
    """
    Exemplars - Test Object Generation

    Validate exemplar files and generate populated instances of your classes.
    """
    setup_logging(verbose)


@cli.command()
@click.argument(
    "exemplar_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
def check(exemplar_dir: Path) -> None:
    """
    Validate every exemplar file in a directory.

    Example:

        exemplars check tests/exemplars
    """
    loader = ExemplarLoader(ExemplarConfig(exemplar_path=exemplar_dir))
    files: List[Path] = sorted(
        p for suffix in loader.config.suffixes for p in exemplar_dir.glob(f"*{suffix}")
    )

    if not files:
        console.print(f"[yellow]No exemplar files found in {exemplar_dir}[/yellow]")
        return

    table = Table(title="Exemplar Generators")
    table.add_column("File", style="cyan")
    table.add_column("Attribute", style="green")
    table.add_column("Strategy", style="yellow")

    failures = 0
    for path in files:
        try:
            declarations = read_declarations(path)
            for declaration in declarations:
                loader.strategy_for(declaration)
                strategy = ", ".join(f"{k}={v!r}" for k, v in declaration.to_dict().items())
                table.add_row(path.name, declaration.attribute, strategy)
        except ExemplarError as e:
            failures += 1
            console.print(f"[red]Error: {e}[/red]")

    console.print(table)
    if failures:
        console.print(f"[red]{failures} of {len(files)} exemplar files are invalid[/red]")
        sys.exit(1)
    console.print(f"[green]{len(files)} exemplar files OK[/green]")


@cli.command()
@click.argument("target")
@click.option(
    "--set",
    "pairs",
    multiple=True,
    help="Attribute override as key=value (repeatable)",
)
@click.option(
    "--count",
    type=click.IntRange(min=1),
    default=1,
    help="Number of instances to generate",
)
@click.option(
    "--exemplar_path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory containing exemplar files",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file with an 'exemplars' section",
)
def generate(
    target: str,
    pairs: Tuple[str, ...],
    count: int,
    exemplar_path: Optional[Path],
    config_file: Optional[Path],
) -> None:
    """
    Generate instances of a class and print their attributes.

    Example:

        exemplars generate myapp.models:Widget --set color=red --count 3
    """
    _configure(config_file, exemplar_path)
    cls = _load_target(target)
    overrides = _parse_overrides(pairs)

    instances = get_engine().generate_batch(cls, count, overrides)
    rows = [_attributes_of(instance) for instance in instances]

    columns: List[str] = []
    for values in rows:
        for name in values:
            if name not in columns:
                columns.append(name)

    table = Table(title=f"Generated {cls.__name__}")
    for name in columns:
        table.add_column(name, style="cyan" if name in overrides else "green")
    for values in rows:
        table.add_row(*(repr(values[c]) if c in values else "" for c in columns))

    console.print(table)


@cli.command()
@click.argument("target")
@click.option(
    "--exemplar_path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory containing exemplar files",
)
def info(target: str, exemplar_path: Optional[Path]) -> None:
    """
    Display the generators and required relations of a class.

    Example:

        exemplars info myapp.models:Widget
    """
    _configure(None, exemplar_path)
    cls = _load_target(target)
    engine = get_engine()
    registry = engine.populate(cls)

    console.print(f"[bold blue]{cls.__module__}.{cls.__name__}[/bold blue]")
    exemplar = engine.loader.find(cls)
    console.print(f"Exemplar: {exemplar or 'none'}", soft_wrap=True)

    gen_table = Table(title="Generators")
    gen_table.add_column("Attribute", style="cyan")
    gen_table.add_column("Strategy", style="green")
    for descriptor in registry:
        gen_table.add_row(descriptor.attribute, descriptor.summary)
    console.print(gen_table)

    if engine.metadata.has_metadata(cls):
        console.print(
            "Presence validated: "
            f"{', '.join(presence_validated_attributes(cls, engine.metadata)) or 'none'}"
        )
        rel_table = Table(title="Required Relations")
        rel_table.add_column("Relation", style="cyan")
        rel_table.add_column("Foreign Key", style="yellow")
        rel_table.add_column("Target", style="magenta")
        for relation in required_relations(cls, engine.metadata):
            target_name = getattr(relation.target, "__name__", relation.target)
            rel_table.add_row(relation.name, relation.foreign_key, str(target_name))
        console.print(rel_table)


if __name__ == "__main__":
    cli()
