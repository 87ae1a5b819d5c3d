"""
CLI Entry Point

Command-line interface for the clientbench benchmarking harness using the
Click framework with rich output formatting.
"""

import sys
from dataclasses import replace
from typing import List, Optional

import click
from dotenv import find_dotenv, load_dotenv
from rich.table import Table

from clientbench import __version__
from clientbench.actions import default_catalog
from clientbench.benchmark.catalog import ActionCatalog
from clientbench.benchmark.reporting import ElasticsearchReportSink, ReportBatch, ReportSink
from clientbench.benchmark.runner import Runner
from clientbench.benchmark.stats import ActionSummary
from clientbench.cli.formatting import (
    console, display_error, format_summary_table, print_errors, print_stats,
)
from clientbench.core.config import Config
from clientbench.core.config_validator import load_config
from clientbench.core.exceptions import ConfigurationError, ResponseError, RunError
from clientbench.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def run_benchmarks(config: Config, catalog: ActionCatalog,
                   sink: Optional[ReportSink] = None) -> List[ActionSummary]:
    """
    Run every non-filtered action in catalog order.

    Errors of individual actions are printed and never stop the sweep.

    Args:
        config: Validated configuration
        catalog: Actions to execute
        sink: Optional destination for the stats of each action

    Returns:
        One summary per executed action
    """
    summaries = []

    for action in catalog.selected(config.action_filter):
        runner = Runner(config, action)
        errors = 0

        try:
            runner.run()
        except ResponseError as e:
            logger.error(f"Setup of {action.action} failed: {e}")
            print_errors(f"{action.action}: setup failed: {e}")
            summaries.append(ActionSummary.from_stats(
                action.action, runner.category, runner.environment, [], aborted=True
            ))
            continue
        except RunError as e:
            errors = len(e.errors)
            print_errors(str(e))

        print_stats(action.action, runner.stats)

        if sink is not None:
            try:
                sink.report(ReportBatch.from_runner(runner))
            except ResponseError as e:
                logger.error(f"Reporting {action.action} failed: {e}")
                print_errors(str(e))

        summaries.append(ActionSummary.from_stats(
            action.action, runner.category, runner.environment, runner.stats, errors=errors
        ))

    return summaries


def _load_config(ctx: click.Context) -> Config:
    """Validate configuration or exit with status 1."""
    try:
        config = load_config()
    except ConfigurationError as e:
        display_error(e.message, "Configuration Error")
        sys.exit(1)

    setup_logging(config.logging, console_level="DEBUG" if ctx.obj.get('verbose') else None)
    return config


@click.group()
@click.option('--env-file', type=click.Path(exists=True, dir_okay=False),
              help='Load environment variables from this file')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.version_option(__version__, prog_name='clientbench')
@click.pass_context
def cli(ctx, env_file, verbose):
    """clientbench - REST API client benchmarking harness"""
    ctx.ensure_object(dict)
    load_dotenv(env_file or find_dotenv(usecwd=True))
    ctx.obj['verbose'] = verbose


@cli.command()
@click.option('--filter', 'action_filter', default=None,
              help='Skip actions whose name occurs in this value (overrides FILTER)')
@click.option('--timeout', type=click.FloatRange(min=0, min_open=True), default=None,
              help='Per-call deadline in seconds (overrides CALL_TIMEOUT)')
@click.option('--warmups', type=click.IntRange(min=0), default=None,
              help='Override the warmup count of every action')
@click.option('--repetitions', type=click.IntRange(min=0), default=None,
              help='Override the repetition count of every action')
@click.option('--report/--no-report', default=False,
              help='Send results to the report destination')
@click.option('--summary/--no-summary', default=False, help='Print a summary table')
@click.pass_context
def run(ctx, action_filter, timeout, warmups, repetitions, report, summary):
    """Run the benchmark catalog against the target service.

    \b
    EXAMPLES:

    clientbench run
    clientbench run --filter index --repetitions 100
    clientbench --env-file bench.env run --report --summary
    """
    config = _load_config(ctx)

    overrides = {}
    if action_filter is not None:
        overrides['action_filter'] = action_filter
    if timeout is not None:
        overrides['call_timeout'] = timeout
    if overrides:
        config = replace(config, **overrides)

    action_overrides = {}
    if warmups is not None:
        action_overrides['warmups'] = warmups
    if repetitions is not None:
        action_overrides['repetitions'] = repetitions

    catalog = default_catalog()
    if action_overrides:
        catalog = ActionCatalog(replace(action, **action_overrides) for action in catalog)

    sink = ElasticsearchReportSink.from_config(config) if report else None

    logger.info(f"Starting benchmark build {config.build_id} against "
                f"{config.runner_client.base_url}")
    summaries = run_benchmarks(config, catalog, sink)

    if summary:
        console.print(format_summary_table(summaries))


@cli.command(name='list')
def list_actions():
    """List the actions in the benchmark catalog."""
    table = Table(title="Benchmark Actions", show_header=True, header_style="bold blue")
    table.add_column("Action", style="cyan")
    table.add_column("Warmups", justify="right")
    table.add_column("Repetitions", justify="right")
    table.add_column("Operations", justify="right")
    table.add_column("Setup", justify="center")

    for action in default_catalog():
        table.add_row(
            action.action,
            str(action.warmups),
            str(action.repetitions),
            str(action.operations or 1),
            "yes" if action.has_setup else "no",
        )

    console.print(table)


@cli.command(name='check-config')
@click.pass_context
def check_config(ctx):
    """Validate configuration without running any action."""
    config = _load_config(ctx)

    table = Table(title="Configuration", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Build", config.build_id)
    table.add_row("Environment", config.environment)
    table.add_row("Data source", config.data_source)
    table.add_row("Category", config.category or "-")
    table.add_row("Filter", config.action_filter or "-")
    table.add_row("Call timeout", f"{config.call_timeout}s")
    table.add_row("Target", config.runner_client.base_url)
    table.add_row("Report", config.report_client.base_url)
    service = config.target.service
    table.add_row("Service", f"{service.type} {service.name} {service.version}")
    table.add_row("Client", f"{service.git.branch}@{service.git.commit}")
    table.add_row("Runtime", f"{config.runner.runtime.name} {config.runner.runtime.version}")
    console.print(table)


if __name__ == '__main__':
    cli()
