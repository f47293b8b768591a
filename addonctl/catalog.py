from collections.abc import Iterable, Iterator, MutableSet

from addonctl.packages import InstallationStatus, Package


class UnknownPackageError(LookupError):
    """Raised when a requested package is not in the catalog."""


class PackageSet(MutableSet):
    """Set of packages keyed by id.

    Two versions of the same package never coexist: adding a package whose id
    is already present keeps the existing member. Membership accepts either a
    package or a bare id.
    """

    def __init__(self, packages: Iterable[Package] = ()):
        self._packages: dict[str, Package] = {}
        for package in packages:
            self.add(package)

    @staticmethod
    def _key(item) -> str:
        return item.id if isinstance(item, Package) else item

    def __contains__(self, item) -> bool:
        return self._key(item) in self._packages

    def __iter__(self) -> Iterator[Package]:
        return iter(list(self._packages.values()))

    def __len__(self) -> int:
        return len(self._packages)

    def __repr__(self):
        return f'PackageSet({sorted(str(p) for p in self)})'

    def add(self, package: Package):
        self._packages.setdefault(package.id, package)

    def discard(self, item):
        self._packages.pop(self._key(item), None)

    def get(self, package_id: str) -> Package | None:
        return self._packages.get(package_id)

    def ids(self) -> set[str]:
        return set(self._packages)

    def sorted(self) -> list[Package]:
        """Members ordered by id, for stable output."""
        return [self._packages[k] for k in sorted(self._packages)]


class PackageCatalog:
    """Read-only snapshot of installed and available packages."""

    def __init__(self, installed: Iterable[Package] = (), available: Iterable[Package] = ()):
        self._installed = self._index(installed, 'installed')
        self._available = self._index(available, 'available')

    @staticmethod
    def _index(packages: Iterable[Package], role: str) -> PackageSet:
        result = PackageSet()
        for package in packages:
            if package in result:
                raise ValueError(f'Duplicate {role} package: {package.id}')
            result.add(package)
        return result

    @property
    def installed(self) -> PackageSet:
        """Copy of the installed packages."""
        return PackageSet(self._installed)

    @property
    def available(self) -> PackageSet:
        """Copy of the available packages."""
        return PackageSet(self._available)

    def list_installed(self) -> list[Package]:
        return list(self._installed)

    def list_available(self) -> list[Package]:
        return list(self._available)

    def get_installed(self, package_id: str) -> Package | None:
        return self._installed.get(package_id)

    def get_available(self, package_id: str) -> Package | None:
        return self._available.get(package_id)

    def get_package(self, package_id: str) -> Package | None:
        """Get a package by id, preferring the installed version."""
        return self.get_installed(package_id) or self.get_available(package_id)

    def is_installed(self, package_id: str) -> bool:
        return package_id in self._installed

    def get_installation_status(self, package: Package) -> InstallationStatus:
        """Get the status the catalog records for this exact package version."""
        installed = self.get_installed(package.id)
        if installed is not None and installed.version == package.version:
            return installed.status
        available = self.get_available(package.id)
        if available is not None and available.version == package.version:
            return available.status
        return InstallationStatus.NOT_INSTALLED
