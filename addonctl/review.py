"""Confirmation inputs for computed changes.

The confirmation layer only answers yes or no. This module works out what it
has to be told, and whether it has to be asked at all.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from packaging.version import Version

from addonctl.catalog import PackageCatalog, PackageSet
from addonctl.dependents import find_dependents
from addonctl.packages import Package
from addonctl.plan import ChangeSet, UninstallResult


@dataclass
class ChangeReview:
    """What an install or update does besides the selected packages."""

    changes: ChangeSet
    updating: bool
    selected_runtime_issues: PackageSet = field(default_factory=PackageSet)
    installs: PackageSet = field(default_factory=PackageSet)
    updates: PackageSet = field(default_factory=PackageSet)
    dependents: PackageSet = field(default_factory=PackageSet)
    runtime_issues: int = 0

    @property
    def uninstalls(self) -> PackageSet:
        return self.changes.uninstalls

    @property
    def has_other_changes(self) -> bool:
        return bool(self.uninstalls or self.installs or self.updates or self.dependents)

    @property
    def requires_confirmation(self) -> bool:
        return self.has_other_changes or bool(self.selected_runtime_issues)


@dataclass
class UninstallReview:
    """What an uninstall removes besides the selected packages."""

    result: UninstallResult
    forced: PackageSet = field(default_factory=PackageSet)
    required_by_downloads: bool = False

    @property
    def requires_confirmation(self) -> bool:
        return True


def _count_runtime_issues(packages: Iterable[Package], runtime_version: Version | None) -> int:
    return sum(1 for p in packages if p.requires_newer_runtime(runtime_version))


def review_changes(
    catalog: PackageCatalog,
    changes: ChangeSet,
    updating: bool,
    runtime_version: Version | None = None,
) -> ChangeReview:
    """Summarize a change set for confirmation."""
    selected_issues = PackageSet(
        p for p in changes.selected if p.requires_newer_runtime(runtime_version)
    )

    installs = PackageSet(changes.installs)
    updates = PackageSet(changes.new_versions)
    dependents = find_dependents(catalog, updates, ignore=changes.uninstalls)

    if updating:
        updates -= changes.selected
    else:
        installs -= changes.selected

    runtime_issues = len(selected_issues)
    for group in (updates, installs, dependents):
        runtime_issues += _count_runtime_issues(group, runtime_version)

    return ChangeReview(
        changes=changes,
        updating=updating,
        selected_runtime_issues=selected_issues,
        installs=installs,
        updates=updates,
        dependents=dependents,
        runtime_issues=runtime_issues,
    )


def review_uninstall(result: UninstallResult, downloading: Iterable[Package] = ()) -> UninstallReview:
    """Summarize an uninstall result for confirmation.

    Flags packages being downloaded that need something about to be removed.
    """
    forced = result.forced
    required = False
    for package in downloading:
        if any(d in forced or d in result.selected for d in package.dependency_ids):
            required = True
            break

    return UninstallReview(result=result, forced=forced, required_by_downloads=required)


def confirm_changes(review: ChangeReview, confirm: Callable[[ChangeReview], bool]) -> bool:
    """Ask for confirmation only when the changes go beyond the selection."""
    if not review.requires_confirmation:
        return True
    return bool(confirm(review))


def confirm_uninstall(review: UninstallReview, confirm: Callable[[UninstallReview], bool]) -> bool:
    return bool(confirm(review))
