from collections.abc import Iterable

from packaging.version import Version

from addonctl.catalog import PackageCatalog, PackageSet, UnknownPackageError
from addonctl.dependents import find_dependents
from addonctl.packages import Package
from addonctl.plan import ChangeSet, UninstallResult, calculate_changes, calculate_uninstall_changes
from addonctl.review import ChangeReview, UninstallReview, review_changes, review_uninstall


class DependencyChecker:
    """Checks the dependency changes of installing, updating or uninstalling packages.

    Works on a single catalog snapshot; build a new checker when the
    installed or available packages change.
    """

    def __init__(self, catalog: PackageCatalog, runtime_version: Version | None = None):
        self.catalog = catalog
        self.runtime_version = runtime_version

    def _require_known(self, packages: Iterable[Package]) -> PackageSet:
        packages = PackageSet(packages)
        for package in packages:
            if self.catalog.get_package(package.id) is None:
                raise UnknownPackageError(f'Unknown package: {package.id}')
        return packages

    def _require_installed(self, packages: Iterable[Package]) -> PackageSet:
        packages = self._require_known(packages)
        for package in packages:
            if not self.catalog.is_installed(package.id):
                raise UnknownPackageError(f'Package not installed: {package.id}')
        return packages

    def calculate_install_changes(self, selected: Iterable[Package]) -> ChangeSet:
        selected = self._require_known(selected)
        return calculate_changes(self.catalog, selected, updating=False, runtime_version=self.runtime_version)

    def calculate_update_changes(self, selected: Iterable[Package]) -> ChangeSet:
        selected = self._require_installed(selected)
        return calculate_changes(self.catalog, selected, updating=True, runtime_version=self.runtime_version)

    def calculate_uninstall_changes(self, selected: Iterable[Package]) -> UninstallResult:
        selected = self._require_installed(selected)
        return calculate_uninstall_changes(self.catalog, selected, runtime_version=self.runtime_version)

    def find_dependents(self, updated: Iterable[Package], ignore: Iterable[Package] = ()) -> PackageSet:
        return find_dependents(self.catalog, updated, ignore)

    def review_install_changes(self, changes: ChangeSet) -> ChangeReview:
        return review_changes(self.catalog, changes, updating=False, runtime_version=self.runtime_version)

    def review_update_changes(self, changes: ChangeSet) -> ChangeReview:
        return review_changes(self.catalog, changes, updating=True, runtime_version=self.runtime_version)

    def review_uninstall_changes(
        self, result: UninstallResult, downloading: Iterable[Package] = ()
    ) -> UninstallReview:
        return review_uninstall(result, downloading)
