"""Command line interface entry point."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click

from schema_sync.catalog_checks import (
    CatalogCheckError,
    CheckOutcome,
    CheckRequest,
    assemble_definitions,
    dereference_entity,
    run_consistency_checks,
    run_example_checks,
)
from schema_sync.configuration import DEFAULT_CONFIG_FILENAME, write_placeholder_configuration
from schema_sync.schema_merging import MergeStrategy, SchemaMergeError, merge_schemas


class CliError(Exception):
    """Custom CLI error."""


_CONFIG_OPTION = click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the YAML/JSON entity catalog configuration",
)
_ENTITY_FILTER_OPTION = click.option(
    "--entity",
    "entity_names",
    multiple=True,
    help="Restrict the check to this entity (repeatable)",
)
_OUTPUT_OPTION = click.option(
    "--output",
    "output_path",
    required=False,
    type=click.Path(path_type=str),
    help="Write the JSON document to this path instead of stdout",
)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="schema-sync")
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Schema reference resolution and consistency checking utility."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML catalog configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML catalog configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="dereference")
@_CONFIG_OPTION
@click.option("--entity", "entity_name", required=True, help="Entity whose schema to resolve")
@click.option(
    "--transitive",
    is_flag=True,
    default=False,
    help="Keep resolving until the schema is fully self-contained.",
)
@_OUTPUT_OPTION
def dereference_command(
    config_path: str, entity_name: str, transitive: bool, output_path: str | None
) -> None:
    """Print an entity schema with external references inlined as definitions."""
    try:
        document = dereference_entity(config_path, entity_name, transitive=transitive)
    except CatalogCheckError as exc:
        raise CliError(str(exc)) from exc
    _emit_json(document.to_json(), output_path)


@cli.command(name="check-consistency")
@_CONFIG_OPTION
@_ENTITY_FILTER_OPTION
def check_consistency_command(config_path: str, entity_names: tuple[str, ...]) -> None:
    """Check runtime types against their entity schemas."""
    try:
        outcome = run_consistency_checks(
            CheckRequest(config_path=config_path, entity_names=entity_names)
        )
    except CatalogCheckError as exc:
        raise CliError(str(exc)) from exc
    _report(outcome, "consistency")


@cli.command(name="check-examples")
@_CONFIG_OPTION
@_ENTITY_FILTER_OPTION
def check_examples_command(config_path: str, entity_names: tuple[str, ...]) -> None:
    """Validate entity examples against their dereferenced schemas."""
    try:
        outcome = run_example_checks(
            CheckRequest(config_path=config_path, entity_names=entity_names)
        )
    except CatalogCheckError as exc:
        raise CliError(str(exc)) from exc
    _report(outcome, "example")


@cli.command(name="assemble")
@_CONFIG_OPTION
@_OUTPUT_OPTION
def assemble_command(config_path: str, output_path: str | None) -> None:
    """Assemble the merged definitions table of every configured entity."""
    try:
        document = assemble_definitions(config_path)
    except CatalogCheckError as exc:
        raise CliError(str(exc)) from exc
    _emit_json(document, output_path)


@cli.command(name="merge-schemas")
@click.argument("schema_paths", nargs=-1, required=True, type=click.Path(path_type=str))
@click.option(
    "--strategy",
    type=click.Choice([strategy.value for strategy in MergeStrategy]),
    default=MergeStrategy.OVERWRITE.value,
    show_default=True,
    help="How to treat a property defined by more than one schema",
)
def merge_schemas_command(schema_paths: tuple[str, ...], strategy: str) -> None:
    """Merge the properties of several object schemas into one."""
    try:
        texts = [Path(path).read_text(encoding="utf-8") for path in schema_paths]
        merged = merge_schemas(*texts, strategy=MergeStrategy(strategy))
    except (SchemaMergeError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(merged)


def _emit_json(document: Any, output_path: str | None) -> None:
    text = json.dumps(document, indent=2)
    if output_path is None:
        click.echo(text)
        return
    destination = Path(output_path)
    try:
        destination.write_text(text + "\n", encoding="utf-8")
    except OSError as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(destination.resolve()))


def _report(outcome: CheckOutcome, label: str) -> None:
    for result in outcome.results:
        if result.diagnostic is None:
            click.echo(f"ok    {result.entity_name}")
        else:
            click.echo(
                f"FAIL  {result.entity_name}: [{result.diagnostic.kind}] {result.diagnostic}"
            )
    for name in outcome.skipped:
        click.echo(f"skip  {name}")
    if not outcome.is_ok:
        raise CliError(f"{len(outcome.failures)} entities failed the {label} check.")


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
