from packaging.version import Version

from addonctl.catalog import PackageSet
from addonctl.requirements import calculate_run_requirements


class TestRunRequirements:

    def test_no_dependencies(self, available_package):
        a = available_package('a')

        requirements = calculate_run_requirements(a, [])

        assert not requirements.has_dependency_issue
        assert not requirements.dependencies
        assert not requirements.newer_runtime_required

    def test_satisfied_dependency(self, available_package):
        a = available_package('a', deps=['b>=1.0'])
        b = available_package('b', '1.2')

        requirements = calculate_run_requirements(a, PackageSet([b]))

        assert not requirements.has_dependency_issue
        assert requirements.dependencies.ids() == {'b'}

    def test_missing_dependency(self, available_package):
        a = available_package('a', deps=['b'])

        requirements = calculate_run_requirements(a, [a])

        assert requirements.has_dependency_issue
        assert isinstance(requirements.issues, tuple)
        issue = requirements.issues[0]
        assert issue.is_missing
        assert issue.dependency.id == 'b'
        assert issue.package is a

    def test_incompatible_version(self, available_package):
        a = available_package('a', deps=['b>=2.0'])
        b = available_package('b', '1.0')

        requirements = calculate_run_requirements(a, [b])

        assert requirements.has_dependency_issue
        assert requirements.issues[0].found is b
        assert not requirements.dependencies

    def test_transitive_issue(self, available_package):
        a = available_package('a', deps=['b'])
        b = available_package('b', deps=['c'])

        requirements = calculate_run_requirements(a, [b])

        assert requirements.has_dependency_issue
        assert requirements.issues[0].package is b

    def test_cycle_terminates(self, available_package):
        a = available_package('a', deps=['b'])
        b = available_package('b', deps=['a'])

        requirements = calculate_run_requirements(a, [a, b])

        assert not requirements.has_dependency_issue
        assert requirements.dependencies.ids() == {'b'}

    def test_runtime_requirement_propagates(self, available_package):
        a = available_package('a', deps=['b'])
        b = available_package('b', deps=['c'])
        c = available_package('c', runtime='17')

        requirements = calculate_run_requirements(a, [b, c], runtime_version=Version('11'))

        assert requirements.newer_runtime_required
        assert requirements.runtime_issues.ids() == {'c'}

    def test_unknown_runtime(self, available_package):
        a = available_package('a', runtime='17')

        requirements = calculate_run_requirements(a, [])

        assert not requirements.newer_runtime_required
