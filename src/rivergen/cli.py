# cli.py
from __future__ import annotations

import sys

import click
from pydantic import ValidationError

from rivergen import river
from rivergen.errors import WorkflowError
from rivergen.layout import stale_workflows, workflow_path, write_workflows
from rivergen.river import River
from rivergen.service import load_service
from rivergen.ui.console import Console, get_console, set_console


def build_river(service_file: str) -> River:
    """
    Load a service description and assemble its River.

    Exits with status 1 after printing a structured error when the file is
    missing, malformed, or describes a topology that cannot be assembled.
    """
    console = get_console()

    try:
        service = load_service(service_file)
    except FileNotFoundError:
        console.print_error(
            "Service file not found",
            f"Could not find service file: {service_file}",
        )
        sys.exit(1)
    except ValidationError as e:
        console.print_error(
            "Invalid service file",
            f"Could not load service from {service_file}",
            details=str(e).splitlines(),
        )
        sys.exit(1)
    except ValueError as e:
        console.print_error(
            "Invalid service file",
            f"Could not load service from {service_file}",
            details=[str(e)],
        )
        sys.exit(1)

    try:
        return river.build(service)
    except WorkflowError as e:
        console.print_error(
            "Could not assemble workflows",
            f"Service {service.name!r} produced an invalid workflow set.",
            details=str(e).splitlines(),
        )
        if console.debug:
            console.print_exception(e)
        sys.exit(1)


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """rivergen: generate chained GitHub Actions workflows for a service."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command()
@click.argument("service_file", type=click.Path(dir_okay=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["yaml", "json"]),
    default="yaml",
    show_default=True,
    help="Output format",
)
def render(service_file, output_format):
    """Print every generated workflow."""
    console = get_console()
    generated = build_river(service_file)

    for wf in generated.all_workflows:
        content = wf.to_yaml() if output_format == "yaml" else wf.to_json()
        console.print_document(str(workflow_path(wf)), content)


@cli.command()
@click.argument("service_file", type=click.Path(dir_okay=False))
@click.option("--root", default=".", show_default=True, help="Repository root to write into")
@click.option("--check", is_flag=True, default=False, help="Only report missing or stale files")
def write(service_file, root, check):
    """Write the generated workflows into the repository."""
    console = get_console()
    generated = build_river(service_file)

    if check:
        stale = stale_workflows(generated.all_workflows, root)
        for path in stale:
            console.print_stale(str(path))
        if stale:
            console.print_error(
                "Generated workflows are out of date",
                f"{len(stale)} file(s) differ from the generated output.",
                suggestion=f"Regenerate them:\n  rivergen write {service_file} --root {root}",
            )
            sys.exit(1)
        console.print_info("Workflows are up to date")
        return

    for path in write_workflows(generated.all_workflows, root):
        console.print_written(str(path))


@cli.command()
@click.argument("service_file", type=click.Path(dir_okay=False))
def plan(service_file):
    """Print the order in which the root workflow runs its jobs."""
    console = get_console()
    generated = build_river(service_file)

    console.print_header(f"{generated.workflow.name} ({workflow_path(generated.workflow)})")
    for i, level in enumerate(generated.stages(), start=1):
        console.print_stage(i, level)


if __name__ == "__main__":
    cli()
