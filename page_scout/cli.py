# === FILE: page_scout/cli.py ===
#!/usr/bin/env python3
"""
Command-line entry point for PageScout.

Commands:
  check URL   Navigate once and print the verdict as JSON
  config      Show the effective configuration

Common options:
  --config PATH       YAML/JSON config (default: configs/default.yaml when present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stdout when omitted)
  --version, -v       Show the PageScout version

Example:
  page-scout check https://example.com --pretty
"""
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict

import click

from page_scout import __version__
from page_scout.config import _DEFAULT_CFG, ClientConfig, load_config
from page_scout.errors import PageScoutError
from page_scout.logger import configure
from page_scout.navigation.session import NavigationSession

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


async def run_check(cfg: ClientConfig, url: str) -> Dict[str, Any]:
    """Navigate to *url* and collect a report of the outcome."""
    async with NavigationSession(cfg) as session:
        await session.navigate(url)
        result = session.result
        return {
            'url': url,
            'final_url': result.final_url if result else url,
            'status': session.status_code(),
            'verdict': session.verdict().names(),
            'uses_temporary_redirect': session.uses_temporary_redirect(),
            'permanent_redirect_url': session.permanent_redirect_url(),
            'retry_at': session.retry_at(),
        }


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='PageScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML/JSON config file.'
)
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (stdout when omitted)'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file):
    """PageScout command group."""
    configure(level=log_level, log_file=str(log_file) if log_file else None)
    try:
        if config_path is not None or _DEFAULT_CFG.exists():
            cfg = load_config(config_path)
        else:
            cfg = ClientConfig()
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('check', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option(
    '--pretty', is_flag=True,
    help='Pretty-print JSON output (indent 2)'
)
@click.pass_context
def check(ctx, url, pretty):
    """Open URL and show how the response is classified."""
    cfg = ctx.obj['config']
    try:
        report = asyncio.run(run_check(cfg, url))
    except PageScoutError as e:
        print_error(f'Navigation failed: {e}')
    click.echo(json.dumps(report, ensure_ascii=False, indent=2 if pretty else None))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the current configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
