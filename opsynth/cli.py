"""
CLI interface for opsynth.

Provides commands to synthesize an OpenAPI document from a request
descriptor, generate a client from it, and dispatch calls through the
generated client.

Descriptors are JSON or YAML files (use - for stdin) with keys url,
method/methods, operationId, headers, queryParams, body, bodies.

Exit codes:
    0  success
    1  execution failure (generator or downstream call broke)
    2  request failure (fix the descriptor or call generate first)
"""

import json
import sys
from pathlib import Path
from typing import Any, Optional

import click
import yaml

from opsynth import __version__
from opsynth.config import LOG_LEVELS
from opsynth.errors import RequestError, ValidationError


def _read_descriptor(source: str):
    """Parse a descriptor file (or stdin) into a RequestDescriptor."""
    from opsynth.schemas import RequestDescriptor

    if source == "-":
        text = sys.stdin.read()
    else:
        text = Path(source).read_text()

    try:
        if source.endswith(".json"):
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValidationError(f"Cannot parse descriptor {source}: {e}")

    return RequestDescriptor.from_dict(data or {})


def _get_config(ctx):
    from opsynth.config import OpsynthConfig
    from opsynth.utils import print_warning

    config = ctx.obj.get("config")
    if config is None:
        print_warning(
            f"Using default configuration ({ctx.obj.get('config_error', 'no config')})"
        )
        config = OpsynthConfig()
        ctx.obj["config"] = config
    return config


def _get_service(ctx):
    from opsynth.service import OperationService

    if "service" not in ctx.obj:
        ctx.obj["service"] = OperationService.from_config(_get_config(ctx))
    return ctx.obj["service"]


def _fail(error: Exception) -> None:
    from opsynth.utils import print_error

    if isinstance(error, RequestError):
        print_error(f"{error}")
        raise SystemExit(2)
    print_error(f"Error: {error}")
    raise SystemExit(1)


@click.group()
@click.version_option(version=__version__, prog_name="opsynth")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override the configured log level",
)
@click.pass_context
def main(ctx, log_level: Optional[str]):
    """
    opsynth - Operation synthesis and dynamic dispatch.

    Turn a generic call descriptor into an OpenAPI document, generate a
    client from it, and invoke operations through that client.
    """
    from opsynth.config import load_config
    from opsynth.utils import setup_logging

    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = load_config()
    except Exception as e:
        # init creates the file; other commands fall back to defaults
        ctx.obj["config_error"] = str(e)

    config = ctx.obj.get("config")
    level = log_level or (config.log_level if config else "WARNING")
    log_format = config.log_format if config else "pretty"
    log_file = Path(config.log_file).expanduser() if config and config.log_file else None
    setup_logging(level, log_format, log_file)


@main.command("init")
@click.option("--force", is_flag=True, help="Overwrite existing configuration")
def init(force: bool):
    """Initialize opsynth configuration."""
    from opsynth.config import OpsynthConfig, get_opsynth_home

    home = get_opsynth_home()
    if not home.exists():
        home.mkdir(parents=True)

    cfg_path = home / "config.yaml"
    if cfg_path.exists() and not force:
        click.echo(f"Config already exists at {cfg_path}. Use --force to overwrite.", err=True)
        raise SystemExit(1)

    cfg_path.write_text(yaml.safe_dump(OpsynthConfig().to_dict(), sort_keys=False))
    click.echo(f"Initialized opsynth config at {cfg_path}")


@main.command("synthesize")
@click.argument("descriptor")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path),
              help="Write the document here instead of the configured path")
@click.option("--stdout", "to_stdout", is_flag=True, help="Print the document instead of writing it")
@click.pass_context
def synthesize_cmd(ctx, descriptor: str, output: Optional[Path], to_stdout: bool):
    """
    Synthesize an OpenAPI document from DESCRIPTOR.

    Examples:

        opsynth synthesize call.json

        opsynth synthesize call.yaml --stdout
    """
    from opsynth.synthesis import synthesize, write_document
    from opsynth.utils import print_success

    try:
        desc = _read_descriptor(descriptor)
        text = synthesize(desc)
        if to_stdout:
            click.echo(text, nl=False)
            return
        path = write_document(text, output or _get_config(ctx).document_file)
    except Exception as e:
        _fail(e)
    print_success(f"Document written to {path}")


@main.command("generate")
@click.argument("descriptor")
@click.pass_context
def generate_cmd(ctx, descriptor: str):
    """Synthesize a document from DESCRIPTOR and generate the client."""
    from opsynth.utils import print_success

    try:
        desc = _read_descriptor(descriptor)
        path = _get_service(ctx).generate(desc)
    except Exception as e:
        _fail(e)
    print_success(f"Generation complete ({path})")


@main.command("execute")
@click.argument("descriptor")
@click.pass_context
def execute_cmd(ctx, descriptor: str):
    """
    Invoke the operation named by DESCRIPTOR and print the result as JSON.

    Call generate first so the client package exists.
    """
    try:
        desc = _read_descriptor(descriptor)
        result: Any = _get_service(ctx).execute(desc)
    except Exception as e:
        _fail(e)
    click.echo(json.dumps(result, indent=2, default=str))


@main.command("operations")
@click.pass_context
def operations_cmd(ctx):
    """List operations exposed by the generated client."""
    try:
        names = _get_service(ctx).operations()
    except Exception as e:
        _fail(e)
    if not names:
        click.echo("No operations found.")
        return
    for name in names:
        click.echo(f"  {name}")


if __name__ == "__main__":
    main()
