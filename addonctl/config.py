import yaml
from pathlib import Path

from packaging.version import Version

from addonctl.catalog import PackageCatalog
from addonctl.constants import CATALOG_FILE, CONFIG_FILE
from addonctl.packages import InstallationStatus, Package, parse_dependency, parse_version


def load_config(path: Path = CONFIG_FILE) -> dict:
    """Load main config."""
    if not path.exists():
        return {}
    with open(path) as f:
        return yaml.safe_load(f) or {}


def get_runtime_version(config: dict, override: str | None = None) -> Version | None:
    """Get the host runtime version from CLI override or config."""
    value = override if override is not None else config.get('runtime_version')
    if value is None:
        return None
    return parse_version(value)


def get_catalog_path(config: dict, override: Path | None = None) -> Path:
    """Get the catalog snapshot path from CLI override or config."""
    if override is not None:
        return override
    if 'catalog' in config:
        return Path(config['catalog']).expanduser()
    return CATALOG_FILE


def parse_status(value, default: InstallationStatus) -> InstallationStatus:
    if value is None:
        return default
    try:
        return InstallationStatus(str(value).lower())
    except ValueError:
        raise ValueError(f'Unknown installation status: {value}') from None


def parse_package(config: dict, default_status: InstallationStatus = InstallationStatus.AVAILABLE) -> Package:
    """Parse a package entry into Package object."""
    if not isinstance(config, dict):
        raise ValueError(f'Invalid package entry: {config!r}')

    package_id = config.get('id')
    if not package_id:
        raise ValueError(f'Package without id: {config}')
    if 'version' not in config:
        raise ValueError(f'Package without version: {package_id}')

    min_runtime = config.get('min_runtime_version')

    return Package(
        id=package_id,
        version=parse_version(config['version']),
        dependencies=tuple(parse_dependency(d) for d in config.get('dependencies') or []),
        min_runtime_version=parse_version(min_runtime) if min_runtime is not None else None,
        status=parse_status(config.get('status'), default_status),
        name=config.get('name', ''),
    )


def parse_catalog(data: dict) -> PackageCatalog:
    """Build a catalog snapshot from its YAML form."""
    installed = [
        parse_package(entry, InstallationStatus.INSTALLED) for entry in data.get('installed') or []
    ]
    available = [
        parse_package(entry, InstallationStatus.AVAILABLE) for entry in data.get('available') or []
    ]
    return PackageCatalog(installed=installed, available=available)


def load_catalog(path: Path) -> PackageCatalog:
    """Load a catalog snapshot."""
    if not path.exists():
        raise FileNotFoundError(f'Catalog not found: {path}')
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f'Invalid catalog: {path}')
    return parse_catalog(data)
