from pathlib import Path

import typer

from svcmgr import __version__
from svcmgr.actions import Activate, Deactivate, ToggleActivity, decode, apply_all
from svcmgr.config import Config, load_config
from svcmgr.errors import ConfigError, LoadError, ProfileError, TargetError
from svcmgr.gateway import Gateway, strip_suffix
from svcmgr.loader import load
from svcmgr.output import (
    info,
    success,
    warning,
    error,
    added,
    removed,
    header,
    raw,
    services_table,
    setup_logging,
)
from svcmgr.profile import load_profile, save_profile
from svcmgr.reconciler import Reconciler
from svcmgr.registry import Registry
from svcmgr.target import TargetSelector

app = typer.Typer(
    name='svcmgr',
    help='Manage systemd services and the default boot target',
    context_settings={
        'help_option_names': ['--help', '-h'],
    },
)
target_app = typer.Typer(help='Manage the default boot target')
app.add_typer(target_app, name='target')

DRY_RUN = typer.Option(False, '--dry-run', '-n', help='Show what would be done')
SWITCH = typer.Option(None, '--switch/--no-switch', help='Start or stop services after enabling/disabling')
FORCE = typer.Option(None, '--force/--no-force', help='Write every service, not only changed ones')


def version_callback(value: bool):
    if value:
        typer.echo(f'svcmgr {__version__}')
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False, '--version', '-v', callback=version_callback, is_eager=True, help='Show version'
    ),
    verbose: bool = typer.Option(False, '--verbose', help='Show debug logging'),
):
    """Manage systemd services and the default boot target."""
    setup_logging(verbose)


def open_gateway(config: Config) -> Gateway:
    return Gateway(timeout=config.timeout)


def get_config() -> Config:
    try:
        return load_config()
    except ConfigError as e:
        error(str(e))
        raise typer.Exit(1)


def load_registry(gateway: Gateway) -> Registry:
    try:
        return load(gateway)
    except LoadError as e:
        error(str(e))
        raise typer.Exit(1)


def load_targets(gateway: Gateway) -> TargetSelector:
    try:
        return TargetSelector(gateway)
    except TargetError as e:
        error(str(e))
        raise typer.Exit(1)


def resolve(configured: bool, override: bool | None) -> bool:
    """Command line flags win over config.yaml."""
    return configured if override is None else override


def print_plan(registry: Registry, switch: bool):
    """Print staged changes consistently."""
    header('Changes:')
    for record in registry.modified_records():
        if record.enabled:
            added(f'{record.name}: enable')
        else:
            removed(f'{record.name}: disable')
        if switch and record.enabled:
            info(f'    {"start" if record.active else "stop"}')


def commit(registry: Registry, dry_run: bool, switch: bool, force: bool):
    """Print the plan and write it unless this is a dry run."""
    if not registry.modified and not force:
        info('Services in sync')
        return

    print_plan(registry, switch)

    if dry_run:
        warning('Dry run - no changes made')
        return

    report = Reconciler(registry).commit(force=force, switch=switch)
    if not report.ok:
        error('Writing the configuration failed:')
        for message in report.errors:
            error(message)
        registry.reset()
        raise typer.Exit(1)

    for name in report.toggled:
        success(f'{name}: {"enabled" if registry.is_enabled(name) else "disabled"}')
    success('Changes committed')


def stage(command: str, services: list[str], dry_run: bool, switch: bool | None, force: bool | None):
    config = get_config()
    switch = resolve(config.switch, switch)
    registry = load_registry(open_gateway(config))

    names = [strip_suffix(service) for service in services]
    for name in names:
        if name not in registry:
            warning(f'{name} not found')

    actions = decode(command, names)
    for action in apply_all(registry, actions):
        error(f'{action.service} cannot be enabled/disabled because its unit failed to load')

    for action in actions:
        switches = isinstance(action, (Activate, Deactivate, ToggleActivity))
        if switches and registry.is_enabled(action.service) is False:
            warning(f'{action.service} is disabled, it will not be started or stopped')

    commit(registry, dry_run, switch, resolve(config.force, force))


@app.command('list')
def list_services(
    enabled: bool = typer.Option(False, '--enabled', help='Only enabled services'),
    disabled: bool = typer.Option(False, '--disabled', help='Only disabled services'),
):
    """List services with their start mode and run state."""
    registry = load_registry(open_gateway(get_config()))
    records = registry.records()
    if enabled:
        records = [r for r in records if r.enabled]
    if disabled:
        records = [r for r in records if not r.enabled]
    services_table(records)


@app.command()
def show(name: str = typer.Argument(..., help='Service to show')):
    """Show full systemd status of a service."""
    gateway = open_gateway(get_config())
    raw(gateway.status(strip_suffix(name)))


@app.command()
def logs(name: str = typer.Argument(..., help='Service to show logs for')):
    """Show journal entries of a service from the current boot."""
    gateway = open_gateway(get_config())
    raw(gateway.journal(strip_suffix(name)))


@app.command()
def enable(
    services: list[str] = typer.Argument(..., help='Service(s) to enable'),
    dry_run: bool = DRY_RUN,
    switch: bool | None = SWITCH,
    force: bool | None = FORCE,
):
    """Enable service(s) at boot."""
    stage('enable', services, dry_run, switch, force)


@app.command()
def disable(
    services: list[str] = typer.Argument(..., help='Service(s) to disable'),
    dry_run: bool = DRY_RUN,
    switch: bool | None = SWITCH,
    force: bool | None = FORCE,
):
    """Disable service(s) at boot."""
    stage('disable', services, dry_run, switch, force)


@app.command()
def start(
    services: list[str] = typer.Argument(..., help='Service(s) to start'),
    dry_run: bool = DRY_RUN,
    force: bool | None = FORCE,
):
    """Start enabled service(s)."""
    stage('start', services, dry_run, True, force)


@app.command()
def stop(
    services: list[str] = typer.Argument(..., help='Service(s) to stop'),
    dry_run: bool = DRY_RUN,
    force: bool | None = FORCE,
):
    """Stop enabled service(s)."""
    stage('stop', services, dry_run, True, force)


@app.command()
def switch(
    services: list[str] = typer.Argument(..., help='Service(s) to start or stop'),
    dry_run: bool = DRY_RUN,
    force: bool | None = FORCE,
):
    """Start stopped service(s) and stop running ones."""
    stage('switch', services, dry_run, True, force)


@app.command()
def toggle(
    services: list[str] = typer.Argument(..., help='Service(s) to toggle'),
    dry_run: bool = DRY_RUN,
    switch: bool | None = SWITCH,
    force: bool | None = FORCE,
):
    """Flip whether service(s) start at boot."""
    stage('toggle', services, dry_run, switch, force)


@app.command('export')
def export_profile(path: Path = typer.Argument(None, help='Profile file (default from config)')):
    """Write the names of enabled services to a profile."""
    config = get_config()
    path = path or config.profile
    registry = load_registry(open_gateway(config))

    enabled = registry.export()
    save_profile(path, enabled)
    success(f'Exported {len(enabled)} enabled services to {path}')


@app.command('import')
def import_profile(
    path: Path = typer.Argument(None, help='Profile file (default from config)'),
    dry_run: bool = DRY_RUN,
    switch: bool | None = SWITCH,
    force: bool | None = FORCE,
):
    """Enable exactly the services listed in a profile, disable the rest."""
    config = get_config()
    path = path or config.profile

    try:
        names = load_profile(path)
    except ProfileError as e:
        error(str(e))
        raise typer.Exit(1)
    if not names:
        error(f'No services in profile: {path}')
        raise typer.Exit(1)

    registry = load_registry(open_gateway(config))
    for name in registry.import_profile(names):
        warning(f"{name} doesn't exist on this system")

    commit(registry, dry_run, resolve(config.switch, switch), resolve(config.force, force))


# Target subcommands
@target_app.command('list')
def target_list():
    """List targets the system can boot into."""
    selector = load_targets(open_gateway(get_config()))
    for target in selector.list():
        status = '✓' if target.is_default else '○'
        info(f'{status} {target.name}: {target.label}')


@target_app.command('get')
def target_get():
    """Show the default boot target."""
    selector = load_targets(open_gateway(get_config()))
    info(selector.get_default())


@target_app.command('set')
def target_set(
    name: str = typer.Argument(..., help='Target to boot into by default'),
    dry_run: bool = DRY_RUN,
):
    """Change the default boot target."""
    selector = load_targets(open_gateway(get_config()))
    try:
        selector.set_default(name)
    except TargetError as e:
        error(str(e))
        raise typer.Exit(1)

    if not selector.modified:
        info(f'{selector.get_default()} is already the default target')
        return
    if dry_run:
        info(f'Would set default target to {selector.get_default()}')
        return
    if not selector.save():
        error(f'Failed to set default target to {selector.get_default()}')
        raise typer.Exit(1)
    success(f'Default target: {selector.get_default()}')


def main():
    app()


if __name__ == '__main__':
    main()
