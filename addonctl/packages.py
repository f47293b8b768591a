from dataclasses import dataclass, field
from enum import Enum

from packaging.requirements import Requirement
from packaging.specifiers import SpecifierSet
from packaging.version import Version


class InstallationStatus(Enum):
    """Installation status of a package."""

    AVAILABLE = 'available'
    NOT_INSTALLED = 'not_installed'
    DOWNLOADING = 'downloading'
    INSTALLED = 'installed'
    UNINSTALLATION_FAILED = 'uninstallation_failed'
    SOFT_UNINSTALLATION_FAILED = 'soft_uninstallation_failed'


@dataclass(frozen=True)
class Dependency:
    """A package id, optionally constrained to a range of versions."""

    id: str
    specifier: SpecifierSet | None = None

    def accepts(self, version: Version) -> bool:
        """Check if the given version satisfies this dependency."""
        if self.specifier is None:
            return True
        return self.specifier.contains(version, prereleases=True)

    def __str__(self):
        return f'{self.id}{self.specifier}' if self.specifier else self.id


@dataclass(frozen=True)
class Package:
    """Represents one version of a package."""

    id: str
    version: Version
    dependencies: tuple[Dependency, ...] = ()
    min_runtime_version: Version | None = None
    status: InstallationStatus = InstallationStatus.AVAILABLE
    name: str = field(default='', compare=False)

    @property
    def display_name(self) -> str:
        return self.name or self.id

    @property
    def dependency_ids(self) -> list[str]:
        return [d.id for d in self.dependencies]

    def is_same(self, other: 'Package') -> bool:
        """Check if other is the same package, regardless of version."""
        return self.id == other.id

    def depends_on(self, other: 'Package') -> bool:
        """Check if this package declares a dependency accepting other."""
        for dependency in self.dependencies:
            if dependency.id == other.id and dependency.accepts(other.version):
                return True
        return False

    def requires_newer_runtime(self, runtime_version: Version | None) -> bool:
        """Check if the package needs a newer runtime than the given one."""
        if runtime_version is None or self.min_runtime_version is None:
            return False
        return self.min_runtime_version > runtime_version

    def __str__(self):
        return f'{self.id} {self.version}'


def parse_version(value) -> Version:
    """Parse a version string.

    YAML reads an unquoted 1.10 as the number 1.1, so only strings are accepted.
    """
    if isinstance(value, Version):
        return value
    if not isinstance(value, str):
        raise ValueError(f'Version {value!r} must be quoted, e.g. "{value}"')
    return Version(value)


def parse_dependency(config) -> Dependency:
    """Parse dependency config (string or dict) into Dependency object.

    Strings use requirement syntax ('commonlib>=1.2'). Dicts take an 'id' and
    an optional 'version', where a bare version means a minimum version.
    """
    if isinstance(config, str):
        requirement = Requirement(config)
        return Dependency(id=requirement.name, specifier=requirement.specifier or None)

    if isinstance(config, dict):
        dep_id = config.get('id')
        if not dep_id:
            raise ValueError(f'Dependency without id: {config}')
        version = config.get('version')
        if version is None:
            return Dependency(id=dep_id)
        if not isinstance(version, str):
            raise ValueError(f'Version {version!r} of dependency {dep_id} must be quoted')
        version = version.strip()
        if not version:
            return Dependency(id=dep_id)
        if version[0].isdigit():
            version = f'>={version}'
        return Dependency(id=dep_id, specifier=SpecifierSet(version))

    raise ValueError(f'Invalid dependency: {config!r}')
