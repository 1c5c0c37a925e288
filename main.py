#!/usr/bin/env python3
"""
Main entry point for plancarbon - read the compute resources of Terraform plans.

Pipeline:
- obtain plan JSON (plan a directory, or read a plan file)
- parse plan -> {address: Resource} (vCPUs, memory, storage, GPUs, replication)
- render table or JSON

Flags CLI:
  PATH                 terraform directory, plan JSON file, or saved plan file
  -o, --output         table|json (default: table)
  --pretty             pretty-print JSON
  --log-level          TRACE|DEBUG|INFO|WARN|ERROR (default: WARN)
  -v, --verbose        convenience alias for DEBUG (ignored if --log-level set)
  --no-color           disable colored output
  --data-path          directory overriding the embedded data files
"""
from __future__ import annotations

import logging
import sys

import click

from plancarbon.config import load_config
from plancarbon.errors import PlanCarbonError, ProviderAuthError
from plancarbon.output.json import to_json as output_to_json
from plancarbon.output.table import render_table
from plancarbon.providers.terraform import ParserContext, Plan, get_plan, parse_plan_json

log = logging.getLogger("plancarbon")

_EMPTY_PLAN = {"planned_values": {"root_module": {}}}


# ---------------- CLI ----------------
def _fail(msg: str, ctx: click.Context | None = None) -> None:
    click.secho(msg, fg="bright_red", err=True)
    if ctx is not None:
        click.echo(ctx.get_help(), err=True)
    raise SystemExit(1)


def _set_log_level(log_level: str | None, verbose: bool) -> None:
    """
    levels:
      TRACE -> logging.DEBUG (Python has no TRACE)
      DEBUG -> logging.DEBUG
      INFO  -> logging.INFO
      WARN  -> logging.WARN
      ERROR -> logging.ERROR
    If --log-level not given, -v maps to DEBUG, else WARN by default.
    """
    mapping = {
        "TRACE": logging.DEBUG,
        "DEBUG": logging.DEBUG,
        "INFO":  logging.INFO,
        "WARN":  logging.WARN,
        "ERROR": logging.ERROR,
    }
    if log_level:
        level = mapping.get(log_level.upper(), logging.WARN)
    else:
        level = logging.DEBUG if verbose else logging.WARN

    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", force=True)
    if log_level and log_level.upper() == "TRACE":
        logging.getLogger().debug("TRACE enabled (mapped to DEBUG)")


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.argument("path", required=False, type=click.Path(exists=False))
@click.option(
    "--output",
    "-o",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    show_default=True,
    help="Output format.",
)
@click.option("--pretty", is_flag=True, help="Pretty-print JSON when -o json.")
@click.option(
    "--log-level",
    type=click.Choice(["TRACE", "DEBUG", "INFO", "WARN", "ERROR"], case_sensitive=False),
    help="Log level (default: PLANCARBON_LOG_LEVEL or WARN).",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable DEBUG logs (ignored if --log-level is set).")
@click.option("--no-color", is_flag=True, help="Turn off colored output.")
@click.option(
    "--data-path",
    type=click.Path(exists=True, file_okay=False),
    help=(
        "Directory whose data files (mappings, catalogs) override the embedded ones. "
        "Ignored resource patterns in mappings.json must match the whole resource type."
    ),
)
def main(
    path: str | None,
    output: str,
    pretty: bool,
    log_level: str | None,
    verbose: bool,
    no_color: bool,
    data_path: str | None,
) -> None:
    """Read the compute resources (vCPUs, memory, storage, GPUs) of a Terraform plan."""
    ctx = click.get_current_context()
    try:
        config = load_config(data_path=data_path, no_color=no_color or None)
    except PlanCarbonError as e:
        _set_log_level(log_level, verbose)
        _fail(f"Error: {e}")

    if not log_level and not verbose:
        log_level = config.log_level
    _set_log_level(log_level, verbose)

    if not path:
        _fail("Please provide a terraform directory or plan file.", ctx)

    try:
        try:
            plan = get_plan(path, config)
        except ProviderAuthError as e:
            log.warning("Skipping plan, provider credentials are missing or invalid: %s", e)
            plan = Plan(_EMPTY_PLAN)

        resources = parse_plan_json(plan, ParserContext.default(config))
        if not resources:
            click.echo("No resources found in plan.", err=True)
            sys.exit(0)

        if output.lower() == "json":
            click.echo(output_to_json(resources, pretty=pretty).decode("utf-8"))
        else:
            click.echo(render_table(resources, no_color=config.no_color), nl=False)

    except FileNotFoundError as e:
        _fail(f"Error: File not found: {e}")
    except PlanCarbonError as e:
        _fail(f"Error: {e}")


if __name__ == "__main__":
    main()
