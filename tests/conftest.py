import pytest

from addonctl.catalog import PackageCatalog
from addonctl.config import parse_package
from addonctl.packages import InstallationStatus


def _entry(package_id, version, deps, runtime, status):
    entry = {'id': package_id, 'version': version, 'dependencies': list(deps)}
    if runtime is not None:
        entry['min_runtime_version'] = runtime
    if status is not None:
        entry['status'] = status
    return entry


@pytest.fixture
def installed_package():
    """Factory for packages as found in the installed catalog."""
    def factory(package_id, version='1.0', deps=(), runtime=None, status=None):
        entry = _entry(package_id, version, deps, runtime, status)
        return parse_package(entry, InstallationStatus.INSTALLED)
    return factory


@pytest.fixture
def available_package():
    """Factory for packages as found in the available catalog."""
    def factory(package_id, version='1.0', deps=(), runtime=None, status=None):
        entry = _entry(package_id, version, deps, runtime, status)
        return parse_package(entry, InstallationStatus.AVAILABLE)
    return factory


@pytest.fixture
def make_catalog():
    def factory(installed=(), available=()):
        return PackageCatalog(installed=installed, available=available)
    return factory
