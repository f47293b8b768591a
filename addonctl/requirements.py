from collections.abc import Iterable
from dataclasses import dataclass, field

from packaging.version import Version

from addonctl.catalog import PackageSet
from addonctl.packages import Dependency, Package


@dataclass(frozen=True)
class DependencyIssue:
    """A dependency that cannot be satisfied.

    found is the incompatible version present, or None if the dependency is
    missing altogether.
    """

    package: Package
    dependency: Dependency
    found: Package | None = None

    @property
    def is_missing(self) -> bool:
        return self.found is None


@dataclass
class RunRequirements:
    """What a package needs to run, evaluated against a set of packages."""

    package: Package
    dependencies: PackageSet = field(default_factory=PackageSet)
    issues: tuple[DependencyIssue, ...] = ()
    runtime_issues: PackageSet = field(default_factory=PackageSet)

    @property
    def has_dependency_issue(self) -> bool:
        return bool(self.issues)

    @property
    def newer_runtime_required(self) -> bool:
        return bool(self.runtime_issues)


def calculate_run_requirements(
    package: Package,
    universe: Iterable[Package],
    runtime_version: Version | None = None,
) -> RunRequirements:
    """Resolve the dependencies of a package against universe.

    Resolution is transitive: a dependency that is itself broken makes the
    package broken, and the runtime requirement of every resolved dependency
    counts. Cyclic declarations are followed once.
    """
    if not isinstance(universe, PackageSet):
        universe = PackageSet(universe)

    requirements = RunRequirements(package=package)
    issues = []
    visited = {package.id}
    pending = [package]

    while pending:
        current = pending.pop(0)
        if current.requires_newer_runtime(runtime_version):
            requirements.runtime_issues.add(current)

        for dependency in current.dependencies:
            found = universe.get(dependency.id)
            if found is None or not dependency.accepts(found.version):
                issues.append(DependencyIssue(current, dependency, found))
                continue
            if found.id in visited:
                continue
            visited.add(found.id)
            requirements.dependencies.add(found)
            pending.append(found)

    requirements.issues = tuple(issues)
    return requirements
