"""Command line interface for typelink.

    typelink link process.json             # print the linked graph
    typelink interface process.json        # print derived boundary ports
"""

import json
import sys
from pathlib import Path
from typing import Any, NoReturn, Optional

import click

from typelink import __version__
from typelink.core.exceptions import TypelinkError
from typelink.core.process_schema import ValidationError
from typelink.core.settings import TypelinkSettings, load_settings
from typelink.runtime.compiler import load_process_file
from typelink.runtime.dag import Dag
from typelink.runtime.linker import LinkResolver

from .logging_config import configure_logging


def _settings(ctx: click.Context) -> TypelinkSettings:
    return ctx.obj["settings"]  # type: ignore[no-any-return]


def _output_format(ctx: click.Context, output_json: Optional[bool]) -> str:
    if output_json is None:
        return _settings(ctx).output_format
    return "json" if output_json else "text"


def _load(path: Path) -> LinkResolver:
    try:
        return load_process_file(path)
    except (ValidationError, ValueError, TypelinkError) as e:
        _fail(e)


def _fail(error: Exception) -> NoReturn:
    click.echo(f"typelink: {error}", err=True)
    sys.exit(1)


def _format_operation(operation: Any) -> str:
    if isinstance(operation, Dag):
        return f"{operation.name} (process, {len(operation.operations)} operations)"
    return f"{operation.name} ({operation.operation})"


def _echo_dag(dag: Dag) -> None:
    click.echo(f"Process '{dag.name}': {len(dag.operations)} operations, {len(dag.links)} links")
    click.echo("Operations:")
    for operation in dag.operations:
        click.echo(f"  {_format_operation(operation)}")
    if dag.links:
        click.echo("Links:")
        for link in dag.links:
            click.echo(
                f"  {link.source}.{link.source_property} -> {link.destination}.{link.destination_property}"
            )
    if dag.inputs:
        click.echo("Inputs:")
        for name, bindings in dag.inputs.items():
            targets = ", ".join(f"{b.operation}.{b.property_name}" for b in bindings)
            click.echo(f"  {name} -> {targets}")
    if dag.outputs:
        click.echo("Outputs:")
        for name, binding in dag.outputs.items():
            click.echo(f"  {name} <- {binding.operation}.{binding.property_name}")


@click.group()
@click.version_option(__version__, "--version", prog_name="typelink", message="%(prog)s version %(version)s")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging from the linker")
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Settings file (default: ~/.typelink/settings.json)",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, settings_path: Optional[Path]) -> None:
    """typelink - link workflow processes by data type."""
    configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = load_settings(settings_path)


@main.command(name="link")
@click.argument("process_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--name", "graph_name", default=None, help="Name of the linked graph")
@click.option("--json/--text", "output_json", default=None, help="Output format (default from settings)")
@click.pass_context
def link_command(ctx: click.Context, process_file: Path, graph_name: Optional[str], output_json: Optional[bool]) -> None:
    """Link PROCESS_FILE and print the resulting graph."""
    settings = _settings(ctx)
    resolver = _load(process_file)
    name = graph_name if graph_name is not None else settings.default_graph_name

    try:
        result = resolver.resolve(name)
    except TypelinkError as e:
        _fail(e)
    if not result.success:
        _fail(result.error)  # type: ignore[arg-type]

    dag: Dag = result.graph
    if _output_format(ctx, output_json) == "json":
        click.echo(json.dumps(dag.to_dict(), indent=settings.json_indent))
    else:
        _echo_dag(dag)


@main.command(name="interface")
@click.argument("process_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json/--text", "output_json", default=None, help="Output format (default from settings)")
@click.pass_context
def interface_command(ctx: click.Context, process_file: Path, output_json: Optional[bool]) -> None:
    """Print the boundary inputs and outputs PROCESS_FILE exposes."""
    settings = _settings(ctx)
    resolver = _load(process_file)

    try:
        inputs = resolver.inputs()
        outputs = resolver.outputs()
    except TypelinkError as e:
        _fail(e)

    if _output_format(ctx, output_json) == "json":
        payload = {
            "inputs": [port.model_dump() for port in inputs],
            "outputs": [port.model_dump() for port in outputs],
        }
        click.echo(json.dumps(payload, indent=settings.json_indent))
        return

    if not inputs and not outputs:
        click.echo("Process exposes no inputs or outputs")
        return
    for port in inputs:
        click.echo(f"input   {port.type:<16} {port.name}")
    for port in outputs:
        click.echo(f"output  {port.type:<16} {port.name}")
