"""Typer-based command line for creating, validating and inspecting mesh node data."""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from meshnode.models.flags import FEATURE_FLAGS
from meshnode.models.profile import NetworkProfile, ProfileSummary
from meshnode.models.status import NetworkInstanceRunningInfo
from meshnode.status.decoder import decode_running_info
from meshnode.utils.errors import DecodeError, MeshNodeError
from meshnode.utils.logging import configure_from_settings
from meshnode.utils.settings import Settings
from meshnode.validation.profile import validate

console = Console()

app = typer.Typer(
    name='meshnode',
    help='Mesh VPN node profile and status tooling',
    rich_markup_mode='rich',
    no_args_is_help=True,
)


def _format_bytes(count: int) -> str:
    size = float(count)
    for unit in ('B', 'KiB', 'MiB', 'GiB'):
        if size < 1024 or unit == 'GiB':
            return f'{size:.0f} {unit}' if unit == 'B' else f'{size:.1f} {unit}'
        size /= 1024
    return f'{size:.1f} GiB'


def _load_profile(path: Path) -> NetworkProfile:
    """Load a profile, or the profile inside a summary document."""
    data = json.loads(path.read_text(encoding='utf-8'))
    if isinstance(data, dict) and 'profile' in data:
        return ProfileSummary.model_validate(data).profile
    return NetworkProfile.model_validate(data)


@app.callback()
def main(
    debug: Annotated[
        bool,
        typer.Option('--debug', help='Mirror debug logging to stderr'),
    ] = False,
    env_file: Annotated[
        Path,
        typer.Option('--env-file', help='Dotenv file with MESHNODE_* settings'),
    ] = Path('.env'),
):
    """Mesh VPN node profile and status tooling."""
    try:
        settings = Settings.from_env(str(env_file))
    except MeshNodeError as e:
        console.print(f'[red]{e}[/red]')
        raise typer.Exit(code=2)

    configure_from_settings(settings, debug=debug)


@app.command()
def new(
    name: Annotated[str, typer.Argument(help='Display name of the network')] = '',
    output: Annotated[
        Optional[Path],
        typer.Option('--output', '-o', help='Write the profile here instead of stdout'),
    ] = None,
):
    """Create a profile with default settings."""
    summary = ProfileSummary.create(name)
    document = summary.model_dump_json(indent=2)

    if output:
        output.write_text(document + '\n', encoding='utf-8')
        console.print(f'[green]Created[/green] {summary.name} ({summary.id}) -> {output}')
    else:
        typer.echo(document)


@app.command('validate')
def validate_command(
    path: Annotated[Path, typer.Argument(help='Profile or summary JSON file', exists=True)],
):
    """Validate a profile and list every issue found."""
    try:
        profile = _load_profile(path)
    except (json.JSONDecodeError, ValidationError) as e:
        console.print(f'[red]Cannot read profile {path}:[/red] {e}')
        raise typer.Exit(code=2)

    issues = validate(profile)
    if not issues:
        console.print(f'[green]✓[/green] {path} is valid')
        return

    table = Table(title=f'{len(issues)} issue(s) in {path}')
    table.add_column('Field', style='cyan')
    table.add_column('Code', style='magenta')
    table.add_column('Message')
    for issue in issues:
        table.add_row(issue.field, issue.code, issue.message)
    console.print(table)
    raise typer.Exit(code=1)


def _print_running_info(info: NetworkInstanceRunningInfo) -> None:
    node = info.my_node_info
    console.print(
        f'[bold]{node.hostname}[/bold] {node.virtual_ipv4} on {info.dev_name} '
        f'(engine {node.version}, NAT {node.stun_info.udp_nat_type.label})'
    )
    if info.error_msg:
        console.print(f'[red]Error:[/red] {info.error_msg}')

    table = Table(title='Peers')
    table.add_column('Hostname', style='cyan')
    table.add_column('Virtual IPv4')
    table.add_column('Path')
    table.add_column('Tunnel')
    table.add_column('Latency', justify='right')
    table.add_column('Loss', justify='right')
    table.add_column('RX / TX', justify='right')

    for item in info.peer_route_pairs:
        route = item.route
        path = 'local' if route.is_local else 'direct' if route.is_direct else 'relay'
        latency = f'{item.latency_ms:.1f} ms' if item.latency_ms is not None else '-'
        loss = f'{item.loss_rate:.1%}' if item.loss_rate is not None else '-'
        traffic = (
            f'{_format_bytes(item.peer.rx_bytes)} / {_format_bytes(item.peer.tx_bytes)}'
            if item.peer
            else '-'
        )
        table.add_row(
            route.hostname,
            route.ipv4_addr or '-',
            f'{path} (cost {route.cost})',
            ', '.join(item.tunnel_types) or '-',
            latency,
            loss,
            traffic,
        )
    console.print(table)


@app.command()
def status(
    path: Annotated[Path, typer.Argument(help='Running-info report JSON file', exists=True)],
    events: Annotated[bool, typer.Option('--events', help='Also list the event log')] = False,
):
    """Decode an engine report and show the peer/route view."""
    try:
        info = decode_running_info(path.read_bytes())
    except DecodeError as e:
        logger.error(f'Failed to decode {path}: {e.field}: {e.reason}')
        console.print(f'[red]{e}[/red]')
        raise typer.Exit(code=2)

    _print_running_info(info)

    if events:
        for event in info.chronological_events:
            console.print(f'{event.time.isoformat()}  {event.kind or "?"}')


@app.command()
def flags():
    """List the feature flags a profile supports."""
    table = Table(title='Feature flags')
    table.add_column('Field', style='cyan')
    table.add_column('Label')
    table.add_column('Description')
    for flag in FEATURE_FLAGS:
        table.add_row(flag.field, flag.label, flag.help)
    console.print(table)


if __name__ == '__main__':
    app()
