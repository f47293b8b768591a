from addonctl.dependents import find_dependents


class TestFindDependents:

    def test_direct_and_indirect_dependents(self, installed_package, available_package, make_catalog):
        a = installed_package('a', '1.0')
        b = installed_package('b', deps=['a'])
        c = installed_package('c', deps=['b'])
        d = installed_package('d')
        new_a = available_package('a', '2.0')
        catalog = make_catalog(installed=[a, b, c, d], available=[new_a])

        found = find_dependents(catalog, [new_a])

        assert found.ids() == {'b', 'c'}

    def test_ignored_packages_are_skipped(self, installed_package, available_package, make_catalog):
        a = installed_package('a')
        b = installed_package('b', deps=['a'])
        c = installed_package('c', deps=['b'])
        new_a = available_package('a', '2.0')
        catalog = make_catalog(installed=[a, b, c], available=[new_a])

        found = find_dependents(catalog, [new_a], ignore=[b])

        assert not found

    def test_cyclic_dependents(self, installed_package, available_package, make_catalog):
        a = installed_package('a')
        b = installed_package('b', deps=['a', 'c'])
        c = installed_package('c', deps=['b'])
        new_a = available_package('a', '2.0')
        catalog = make_catalog(installed=[a, b, c], available=[new_a])

        found = find_dependents(catalog, [new_a])

        assert found.ids() == {'b', 'c'}

    def test_updated_packages_are_not_dependents(self, installed_package, available_package, make_catalog):
        a = installed_package('a')
        b = installed_package('b', deps=['a'])
        new_a = available_package('a', '2.0')
        new_b = available_package('b', '2.0', deps=['a'])
        catalog = make_catalog(installed=[a, b], available=[new_a, new_b])

        found = find_dependents(catalog, [new_a, new_b])

        assert not found

    def test_dependents_not_accepting_new_version(self, installed_package, available_package, make_catalog):
        a = installed_package('a')
        e = installed_package('e', deps=['a<2'])
        new_a = available_package('a', '2.0')
        catalog = make_catalog(installed=[a, e], available=[new_a])

        found = find_dependents(catalog, [new_a])

        assert not found
