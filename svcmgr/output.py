import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from svcmgr.registry import ServiceRecord

console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool = False):
    """Send svcmgr log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(message)s',
        datefmt='[%X]',
        handlers=[RichHandler(console=err_console, show_path=verbose)],
        force=True,
    )


def info(msg: str):
    console.print(escape(msg))


def success(msg: str):
    console.print(f'[green]✓[/green] {escape(msg)}')


def warning(msg: str):
    console.print(f'[yellow]![/yellow] {escape(msg)}')


def error(msg: str):
    console.print(f'[red]✗[/red] {escape(msg)}')


def added(msg: str):
    console.print(f'[green]  + {escape(msg)}[/green]')


def removed(msg: str):
    console.print(f'[red]  - {escape(msg)}[/red]')


def header(msg: str):
    console.print(f'\n[bold]{escape(msg)}[/bold]')


def raw(text: str):
    """Print system output verbatim."""
    console.print(text, markup=False, highlight=False, end='')


def services_table(records: list[ServiceRecord]):
    table = Table(box=None, header_style='bold')
    table.add_column('Service')
    table.add_column('Start')
    table.add_column('Active')
    table.add_column('Description', overflow='fold')

    for record in records:
        name = escape(record.name) if record.loaded else f'[dim]{escape(record.name)}[/dim]'
        active = '[green]Active[/green]' if record.active else 'Inactive'
        table.add_row(name, record.start_mode.label, active, escape(record.description))

    console.print(table)
