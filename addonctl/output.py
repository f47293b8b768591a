from rich.console import Console

from addonctl.packages import Package

console = Console(highlight=False)


def info(msg: str):
    console.print(msg)


def success(msg: str):
    console.print(f'[green]✓[/green] {msg}')


def warning(msg: str):
    console.print(f'[yellow]![/yellow] {msg}')


def error(msg: str):
    console.print(f'[red]✗[/red] {msg}')


def header(msg: str):
    console.print(f'\n[bold]{msg}[/bold]')


def runtime_note(package: Package, runtime_issue: bool) -> str:
    if not runtime_issue:
        return ''
    return f' [yellow](needs runtime {package.min_runtime_version})[/yellow]'


def added(package: Package, runtime_issue: bool = False):
    note = runtime_note(package, runtime_issue)
    console.print(f'[green]  + {package.display_name} {package.version}[/green]{note}')


def removed(package: Package):
    console.print(f'[red]  - {package.display_name} {package.version}[/red]')


def updated(old: Package | None, new: Package, runtime_issue: bool = False):
    version = f'{old.version} → {new.version}' if old is not None else str(new.version)
    note = runtime_note(new, runtime_issue)
    console.print(f'[cyan]  ~ {new.display_name} {version}[/cyan]{note}')
