"""otelctl CLI entry point."""

import click

from otelctl.config import get_config
from otelctl.cli.commands import (
    start_gcp_command,
    start_local_command,
    status_command,
    stop_command,
)
from otelctl.utils.logger import set_level


@click.group(invoke_without_command=True)
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, debug):
    """otelctl - Run Gemini CLI telemetry collectors in the background."""
    set_level('DEBUG' if debug else get_config().get('general', 'log_level', 'WARNING'))

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(1)


@cli.command('start-gcp')
@click.argument('project_id', required=False, envvar='OTLP_GOOGLE_CLOUD_PROJECT')
def start_gcp(project_id):
    """Start GCP telemetry collector in background."""
    start_gcp_command(project_id)


@cli.command('start-local')
@click.argument('outfile', required=False)
def start_local(outfile):
    """Start local telemetry collector in background."""
    start_local_command(outfile)


@cli.command()
@click.option('--timeout', type=float, default=None,
              help='Seconds to wait before force-killing (default: from config, 0 = never)')
def stop(timeout):
    """Stop all running telemetry collectors."""
    stop_command(timeout)


@cli.command()
def status():
    """Show status of all collectors."""
    status_command()


if __name__ == '__main__':
    cli()
