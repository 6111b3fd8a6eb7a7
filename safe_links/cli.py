import logging
import os
import socket

import click

from .app import create_app
from .config import BASE_PATH_ENV, SafeLinksConfig
from .errors import SafeLinksError
from .pipeline import build_directory


def _setup_logging(verbose):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='[%(levelname)s] %(message)s',
        force=True,
    )


def find_free_port(host, start, attempts=50, reserved=(5000,)):
    """First port from ``start`` that ``host`` can bind, or None after ``attempts`` tries."""
    for candidate in range(start, start + attempts):
        if candidate in reserved:
            continue
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            try:
                s.bind((host, candidate))
            except OSError:
                continue
        return candidate
    return None


@click.group()
def main():
    """Rewrite local links and mark external links in a built static site."""


@main.command()
@click.argument('src', type=click.Path(exists=True, file_okay=False))
@click.argument('out', type=click.Path(file_okay=False))
@click.option('--hostname', 'hostnames', multiple=True,
              help='Hostname treated as local; repeat or comma-separate (default: SAFE_LINKS_HOSTNAMES)')
@click.option('--base-path', default=None, help='Path prefix for subdirectory deployments (default: SAFE_LINKS_BASE_PATH)')
@click.option('--verbose', is_flag=True, help='Log every rewritten URL')
def build(src, out, hostnames, base_path, verbose):
    """Copy the site at SRC to OUT, rewriting links in every HTML file."""
    _setup_logging(verbose)
    config = SafeLinksConfig.from_env(hostnames=','.join(hostnames), base_path=base_path)
    if not config.enabled:
        click.echo('Warning: no hostnames configured; files are copied unchanged', err=True)
    try:
        report = build_directory(src, out, config)
    except SafeLinksError as e:
        raise click.ClickException(str(e))

    totals = report.totals
    click.echo(f'Processed {len(report.files)} HTML files: {totals.links} links, '
               f'{totals.local} local, {totals.external} external, {totals.styles} styles')
    if report.skipped:
        click.echo(f'Skipped {len(report.skipped)} files: {", ".join(report.skipped)}', err=True)


@main.command()
@click.argument('site', type=click.Path(exists=True, file_okay=False))
@click.option('--base-path', default=None, help='Mount the site under this path (default: SAFE_LINKS_BASE_PATH)')
@click.option('--host', default='127.0.0.1')
@click.option('--port', default=5001)
def preview(site, base_path, host, port):
    """Serve a built site locally under its deployment base path."""
    if base_path is None:
        base_path = os.environ.get(BASE_PATH_ENV, '')

    chosen = find_free_port(host, port)
    if chosen is None:
        raise click.ClickException(f'Ports {port}-{port + 49} on {host} are all taken')
    if chosen != port:
        click.echo(f'Port {port} is busy, previewing on {chosen}', err=True)

    app = create_app(site, base_path)
    prefix = '/' + app.config['BASE_PATH'] if app.config['BASE_PATH'] else ''
    click.echo(f'Serving {os.path.abspath(site)} at http://{host}:{chosen}{prefix}/')
    app.run(host=host, port=chosen)


if __name__ == '__main__':
    main()
