from collections.abc import Iterable

from addonctl.catalog import PackageCatalog, PackageSet
from addonctl.packages import Package


def find_dependents(
    catalog: PackageCatalog,
    updated: Iterable[Package],
    ignore: Iterable[Package] = (),
) -> PackageSet:
    """Find installed packages that depend, directly or not, on updated ones.

    These keep running against the old versions until reloaded. Packages in
    ignore, and the updated packages themselves, are left out.
    """
    updated = PackageSet(updated)
    ignore = PackageSet(ignore)
    dependents = PackageSet()

    pending = list(updated)
    while pending:
        target = pending.pop(0)
        for candidate in catalog.list_installed():
            if candidate in ignore or candidate in updated or candidate in dependents:
                continue
            if candidate.depends_on(target):
                dependents.add(candidate)
                pending.append(candidate)

    return dependents
