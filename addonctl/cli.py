from pathlib import Path

import typer

from addonctl import __version__
from addonctl.catalog import PackageSet, UnknownPackageError
from addonctl.checker import DependencyChecker
from addonctl.config import get_catalog_path, get_runtime_version, load_catalog, load_config
from addonctl.output import added, error, header, info, removed, success, updated, warning
from addonctl.packages import Package
from addonctl.requirements import calculate_run_requirements
from addonctl.review import ChangeReview, UninstallReview, confirm_changes, confirm_uninstall

app = typer.Typer(
    name='addonctl',
    help='Add-on dependency change calculator',
    context_settings={
        'help_option_names': ['--help', '-h'],
    },
)


def version_callback(value: bool):
    if value:
        typer.echo(f'addonctl {__version__}')
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    catalog: Path = typer.Option(None, '--catalog', '-c', help='Catalog snapshot (YAML)'),
    runtime: str = typer.Option(None, '--runtime', '-r', help='Host runtime version'),
    version: bool = typer.Option(
        False, '--version', '-v', callback=version_callback, is_eager=True, help='Show version'
    ),
):
    """Add-on dependency change calculator."""
    ctx.obj = {'catalog': catalog, 'runtime': runtime}


def load_checker(ctx: typer.Context) -> DependencyChecker:
    """Build a checker from config and CLI overrides, exiting on bad input."""
    options = ctx.obj or {}
    try:
        config = load_config()
        catalog = load_catalog(get_catalog_path(config, options.get('catalog')))
        runtime_version = get_runtime_version(config, options.get('runtime'))
    except (FileNotFoundError, ValueError) as e:
        error(str(e))
        raise typer.Exit(1)
    return DependencyChecker(catalog, runtime_version)


def resolve_available(checker: DependencyChecker, ids: list[str]) -> list[Package]:
    packages = []
    for package_id in ids:
        package = checker.catalog.get_available(package_id)
        if package is None:
            error(f'{package_id} is not available')
            raise typer.Exit(1)
        packages.append(package)
    return packages


def resolve_installed(checker: DependencyChecker, ids: list[str]) -> list[Package]:
    packages = []
    for package_id in ids:
        package = checker.catalog.get_installed(package_id)
        if package is None:
            error(f'{package_id} is not installed')
            raise typer.Exit(1)
        packages.append(package)
    return packages


def latest_package(checker: DependencyChecker, package_id: str) -> Package | None:
    """Get the available version of a package, or the installed one."""
    return checker.catalog.get_available(package_id) or checker.catalog.get_installed(package_id)


def print_change_review(checker: DependencyChecker, review: ChangeReview):
    """Print a change review consistently."""
    runtime = checker.runtime_version
    changes = review.changes

    if review.selected_runtime_issues:
        header('Selected, requiring a newer runtime:')
        for pkg in review.selected_runtime_issues.sorted():
            added(pkg, runtime_issue=True)

    if review.uninstalls:
        header('Uninstalling:')
        for pkg in review.uninstalls.sorted():
            removed(pkg)

    if review.updates:
        header('Updating:')
        for pkg in review.updates.sorted():
            updated(changes.old_versions.get(pkg.id), pkg, pkg.requires_newer_runtime(runtime))

    if review.installs:
        header('Installing:')
        for pkg in review.installs.sorted():
            added(pkg, pkg.requires_newer_runtime(runtime))

    if review.dependents:
        header('Reloading dependents:')
        for pkg in review.dependents.sorted():
            updated(None, pkg, pkg.requires_newer_runtime(runtime))

    if review.runtime_issues:
        warning(f'{review.runtime_issues} package(s) will not run on runtime {runtime}')

    if not review.has_other_changes:
        info('No other changes required')


def print_uninstall_review(review: UninstallReview):
    """Print an uninstall review consistently."""
    header('Uninstalling:')
    for pkg in review.result.selected.sorted():
        removed(pkg)

    if review.forced:
        header('Also uninstalling, as their dependencies go away:')
        for pkg in review.forced.sorted():
            removed(pkg)

    if review.required_by_downloads:
        warning('Some packages being downloaded require packages being uninstalled')


def ask(question: str, yes: bool):
    """Confirmation callback backed by a prompt, or auto-accepting."""
    def confirm(review) -> bool:
        return yes or typer.confirm(question)
    return confirm


def report(accepted: bool):
    if accepted:
        success('Changes accepted')
    else:
        warning('Aborted')


@app.command()
def install(
    ctx: typer.Context,
    ids: list[str] = typer.Argument(..., help='Package(s) to install'),
    yes: bool = typer.Option(False, '--yes', '-y', help='Skip confirmation prompts'),
):
    """Show the changes needed to install package(s)."""
    checker = load_checker(ctx)
    selected = resolve_available(checker, ids)

    for pkg in selected:
        if checker.catalog.is_installed(pkg.id):
            warning(f'{pkg.id} is already installed')

    try:
        changes = checker.calculate_install_changes(selected)
    except UnknownPackageError as e:
        error(str(e))
        raise typer.Exit(1)

    review = checker.review_install_changes(changes)
    print_change_review(checker, review)
    report(confirm_changes(review, ask('Continue with installation?', yes)))


@app.command()
def update(
    ctx: typer.Context,
    ids: list[str] = typer.Argument(..., help='Package(s) to update'),
    yes: bool = typer.Option(False, '--yes', '-y', help='Skip confirmation prompts'),
):
    """Show the changes needed to update package(s)."""
    checker = load_checker(ctx)
    resolve_installed(checker, ids)

    selected = []
    for pkg in resolve_available(checker, ids):
        if pkg.version == checker.catalog.get_installed(pkg.id).version:
            info(f'{pkg.id} is up to date')
        else:
            selected.append(pkg)

    if not selected:
        success('Nothing to update')
        return

    try:
        changes = checker.calculate_update_changes(selected)
    except UnknownPackageError as e:
        error(str(e))
        raise typer.Exit(1)

    review = checker.review_update_changes(changes)
    print_change_review(checker, review)
    report(confirm_changes(review, ask('Continue with update?', yes)))


@app.command()
def uninstall(
    ctx: typer.Context,
    ids: list[str] = typer.Argument(..., help='Package(s) to uninstall'),
    downloading: list[str] = typer.Option([], '--downloading', '-d', help='Package(s) being downloaded'),
    yes: bool = typer.Option(False, '--yes', '-y', help='Skip confirmation prompts'),
):
    """Show the changes needed to uninstall package(s)."""
    checker = load_checker(ctx)
    selected = resolve_installed(checker, ids)
    in_progress = [p for p in (latest_package(checker, i) for i in downloading) if p is not None]

    try:
        result = checker.calculate_uninstall_changes(selected)
    except UnknownPackageError as e:
        error(str(e))
        raise typer.Exit(1)

    review = checker.review_uninstall_changes(result, in_progress)
    print_uninstall_review(review)
    report(confirm_uninstall(review, ask('Continue with uninstallation?', yes)))


@app.command()
def dependents(
    ctx: typer.Context,
    ids: list[str] = typer.Argument(..., help='Package(s) being updated'),
):
    """List installed packages that depend on the given package(s)."""
    checker = load_checker(ctx)

    targets = []
    for package_id in ids:
        pkg = latest_package(checker, package_id)
        if pkg is None:
            error(f'Unknown package: {package_id}')
            raise typer.Exit(1)
        targets.append(pkg)

    found = checker.find_dependents(targets)
    if not found:
        info('No dependents')
        return

    header('Dependents:')
    for pkg in found.sorted():
        info(f'  {pkg.display_name} {pkg.version}')


@app.command()
def status(ctx: typer.Context):
    """Show installed packages, broken dependencies and available updates."""
    checker = load_checker(ctx)
    catalog = checker.catalog
    runtime = checker.runtime_version
    installed = catalog.installed

    info(f'Installed: {len(installed)} packages, available: {len(catalog.list_available())}')
    info(f'Runtime: {runtime if runtime is not None else "unknown"}')

    broken = PackageSet()
    for pkg in installed.sorted():
        requirements = calculate_run_requirements(pkg, installed, runtime)
        if requirements.has_dependency_issue:
            broken.add(pkg)
            for issue in requirements.issues:
                found = f'found {issue.found.version}' if issue.found else 'missing'
                warning(f'{pkg.id}: needs {issue.dependency} ({found})')

    updates = []
    for pkg in installed.sorted():
        available = catalog.get_available(pkg.id)
        if available is not None and available.version > pkg.version:
            updates.append((pkg, available))

    if updates:
        header('Updates available:')
        for old, new in updates:
            updated(old, new, new.requires_newer_runtime(runtime))

    if not broken and not updates:
        success('All packages up to date')


def main():
    app()


if __name__ == '__main__':
    main()
