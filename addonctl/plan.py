from collections.abc import Iterable
from dataclasses import dataclass, field
from itertools import chain

from packaging.version import Version

from addonctl.catalog import PackageCatalog, PackageSet
from addonctl.packages import InstallationStatus, Package
from addonctl.requirements import calculate_run_requirements


@dataclass
class ChangeSet:
    """Changes resulting from installing or updating packages."""

    selected: PackageSet = field(default_factory=PackageSet)
    old_versions: PackageSet = field(default_factory=PackageSet)
    uninstalls: PackageSet = field(default_factory=PackageSet)
    new_versions: PackageSet = field(default_factory=PackageSet)
    installs: PackageSet = field(default_factory=PackageSet)
    newer_runtime_required: bool = False

    def is_empty(self) -> bool:
        return not (self.selected or self.old_versions or self.uninstalls or self.new_versions or self.installs)


@dataclass
class UninstallResult:
    """Packages to uninstall: the selected ones plus those left broken."""

    selected: PackageSet = field(default_factory=PackageSet)
    uninstallations: PackageSet = field(default_factory=PackageSet)

    @property
    def forced(self) -> PackageSet:
        return self.uninstallations - self.selected


def _can_fetch(catalog: PackageCatalog, package: Package | None) -> bool:
    return package is not None and catalog.get_installation_status(package) == InstallationStatus.AVAILABLE


def add_dependencies(
    catalog: PackageCatalog,
    package: Package,
    selected: PackageSet,
    old_versions: PackageSet,
    new_versions: PackageSet,
    installs: PackageSet,
):
    """Walk the dependencies of package, recording what must be fetched.

    Missing dependencies go to installs; installed ones the package does not
    accept are replaced through old_versions/new_versions. Fetched packages
    are walked in turn.
    """
    visited = {package.id}
    pending = [package]

    while pending:
        current = pending.pop(0)
        for dependency in current.dependencies:
            if dependency.id in selected or dependency.id in visited:
                continue
            visited.add(dependency.id)

            available = catalog.get_available(dependency.id)
            if not _can_fetch(catalog, available) or not dependency.accepts(available.version):
                available = None

            installed = catalog.get_installed(dependency.id)
            if installed is None:
                if available is not None:
                    installs.add(available)
                    pending.append(available)
            elif not current.depends_on(installed):
                if available is not None:
                    old_versions.add(installed)
                    new_versions.add(available)
                    pending.append(available)


def _find_broken(
    catalog: PackageCatalog,
    selected: PackageSet,
    new_versions: PackageSet,
    installs: PackageSet,
    runtime_version: Version | None,
) -> PackageSet:
    """Installed packages whose dependencies break once the changes apply."""
    remaining = PackageSet(
        p for p in catalog.list_installed() if p not in selected and p not in new_versions
    )
    expected = PackageSet(chain(selected, new_versions, installs, remaining))

    broken = PackageSet()
    for package in remaining:
        if calculate_run_requirements(package, expected, runtime_version).has_dependency_issue:
            broken.add(package)
    return broken


def drop_preexisting_issues(
    catalog: PackageCatalog,
    uninstalls: PackageSet,
    removed: Iterable[Package] = (),
    runtime_version: Version | None = None,
):
    """Remove from uninstalls the packages that were broken already.

    A package stays if one of its dependencies is itself being removed.
    Dropping one package can clear that reason for another, so this repeats
    until nothing changes.
    """
    installed = catalog.installed
    removed = PackageSet(removed)
    preexisting = {
        p.id for p in uninstalls
        if calculate_run_requirements(p, installed, runtime_version).has_dependency_issue
    }

    changed = True
    while changed:
        changed = False
        for package in uninstalls:
            if package.id not in preexisting:
                continue
            if any(d in uninstalls or d in removed for d in package.dependency_ids):
                continue
            uninstalls.discard(package)
            changed = True


def calculate_changes(
    catalog: PackageCatalog,
    selected: Iterable[Package],
    updating: bool,
    runtime_version: Version | None = None,
) -> ChangeSet:
    """Compute the changes needed to install or update the selected packages."""
    selected = PackageSet(selected)
    if not selected:
        return ChangeSet()

    old_versions = PackageSet()
    new_versions = PackageSet()
    installs = PackageSet()

    if updating:
        for update in selected:
            installed = catalog.get_installed(update.id)
            if installed is not None:
                old_versions.add(installed)

    for package in selected:
        add_dependencies(catalog, package, selected, old_versions, new_versions, installs)

    # Prefer updating a package that would break over uninstalling it. Each
    # rescue changes the expected state, so look again until none is found.
    while True:
        uninstalls = _find_broken(catalog, selected, new_versions, installs, runtime_version)
        rescued = False
        for package in uninstalls:
            update = catalog.get_available(package.id)
            if not _can_fetch(catalog, update) or update.version == package.version:
                continue
            uninstalls.discard(package)
            old_versions.add(package)
            new_versions.add(update)
            add_dependencies(catalog, update, selected, old_versions, new_versions, installs)
            rescued = True
        if not rescued:
            break

    for package in uninstalls:
        if package in installs or package in new_versions:
            uninstalls.discard(package)
    drop_preexisting_issues(catalog, uninstalls, runtime_version=runtime_version)

    if updating:
        new_versions |= selected
    else:
        installs |= selected

    newer_runtime = any(
        p.requires_newer_runtime(runtime_version) for p in chain(selected, installs, new_versions)
    )

    return ChangeSet(
        selected=selected,
        old_versions=old_versions,
        uninstalls=uninstalls,
        new_versions=new_versions,
        installs=installs,
        newer_runtime_required=newer_runtime,
    )


def calculate_uninstall_changes(
    catalog: PackageCatalog,
    selected: Iterable[Package],
    runtime_version: Version | None = None,
) -> UninstallResult:
    """Compute the packages to uninstall along with the selected ones."""
    selected = PackageSet(selected)
    if not selected:
        return UninstallResult()

    remaining = PackageSet(p for p in catalog.list_installed() if p not in selected)

    uninstalls = PackageSet()
    known_good: set[str] = set()
    for package in remaining:
        if package.id in known_good:
            continue
        requirements = calculate_run_requirements(package, remaining, runtime_version)
        if not requirements.has_dependency_issue:
            known_good |= requirements.dependencies.ids()
        elif catalog.get_installation_status(package) != InstallationStatus.UNINSTALLATION_FAILED:
            uninstalls.add(package)

    drop_preexisting_issues(catalog, uninstalls, removed=selected, runtime_version=runtime_version)

    return UninstallResult(selected=selected, uninstallations=selected | uninstalls)
