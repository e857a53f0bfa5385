"""CLI entry point for klbfw-describe."""

import functools
import logging
import sys
from pathlib import Path

import click

from klb_describe.client import ApiClient
from klb_describe.config import DEFAULT_DOC_FILE, ConfigError, load_settings
from klb_describe.describe import (
    describe_api,
    describe_root_objects,
    export_typescript,
    fetch_documentation,
    get_api_resource,
)
from klb_describe.generator.style import RenderOptions


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _done(ok: bool) -> None:
    if not ok:
        sys.exit(1)


@click.group()
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML settings file.")
@click.option("--host", default=None, help="API host (default: ws.atonline.com).")
@click.option("-v", "--verbose", is_flag=True, help="Log HTTP requests to stderr.")
@click.option("--no-color", is_flag=True, help="Disable ANSI colors.")
@click.option("--markdown", is_flag=True, help="Produce markdown instead of terminal text.")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, host: str | None, verbose: bool, no_color: bool, markdown: bool):
    """Describe KLB API endpoints, resources and documentation."""
    _setup_logging(verbose)
    try:
        settings = load_settings(config_path, api_host=host)
    except ConfigError as e:
        raise click.UsageError(str(e)) from e

    ctx.obj = {
        "client": ApiClient(settings),
        "options": RenderOptions(use_colors=not no_color, markdown=markdown),
    }


@main.command()
@click.argument("api_path")
@click.option("--raw", is_flag=True, help="Show the raw JSON description.")
@click.option("--ts", "typescript", is_flag=True, help="Generate TypeScript definitions.")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), help="Write TypeScript definitions to a file.")
@click.pass_obj
def describe(obj: dict, api_path: str, raw: bool, typescript: bool, output: Path | None):
    """Describe an API endpoint (OPTIONS request)."""
    if output is None:
        _done(describe_api(obj["client"], api_path, obj["options"], raw=raw, typescript=typescript))
        return

    if raw or not typescript:
        raise click.UsageError("--output is only supported together with --ts")

    errors = obj["options"].model_copy(update={"output": functools.partial(click.echo, err=True)})
    lines = export_typescript(obj["client"], api_path, errors)
    if lines is None:
        sys.exit(1)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
    click.echo(f"TypeScript definitions saved to {output}")


@main.command()
@click.argument("api_path")
@click.option("--raw", is_flag=True, help="Show the raw JSON response.")
@click.option("--depth", type=click.IntRange(min=1), default=None, help="Maximum nesting depth to expand.")
@click.pass_obj
def get(obj: dict, api_path: str, raw: bool, depth: int | None):
    """Fetch a resource (GET request) and pretty-print it."""
    _done(get_api_resource(obj["client"], api_path, obj["options"], raw=raw, max_depth=depth))


@main.command()
@click.argument("file_name", default=DEFAULT_DOC_FILE)
@click.pass_obj
def doc(obj: dict, file_name: str):
    """Fetch a documentation file (default: README.md)."""
    _done(fetch_documentation(obj["client"], obj["options"], file_name))


@main.command()
@click.pass_obj
def objects(obj: dict):
    """List the objects available at the API root."""
    _done(describe_root_objects(obj["client"], obj["options"]))


@main.command()
@click.pass_obj
def mcp(obj: dict):
    """Run the MCP server on stdio."""
    from klb_describe.mcp_server import serve

    serve(obj["client"])
