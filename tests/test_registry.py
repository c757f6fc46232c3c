"""
Unit tests for the import registry.
"""
import pytest

from engine.models import OutputMode
from engine.registry import ImportRegistry, carrier_name


@pytest.fixture
def registry():
    return ImportRegistry()


class TestCarrierName:

    @pytest.mark.parametrize("package_name, expected", [
        ('metautil', 'metautilIIFE'),
        ('metarhia-utils', 'metarhiautilsIIFE'),
        ('@metarhia/meta-utils', 'metautilsIIFE'),
        ('lodash.merge', 'lodashmergeIIFE'),
    ])
    def test_carrier_name(self, package_name, expected):
        assert carrier_name(package_name) == expected


class TestRecord:
    """Tests for merging bindings into the registry."""

    def test_first_occurrence_order(self, registry):
        """Later references never move a specifier."""
        registry.record('b', 'default', 'b')
        registry.record('a', 'default', 'a')
        registry.record('b', 'named', [('x', 'x')])
        assert registry.specifiers() == ['b', 'a']

    def test_named_deduplicated(self, registry):
        registry.record('x', 'named', [('a', 'a')])
        registry.record('x', 'named', [('a', 'a'), ('b', 'b')])
        assert list(registry.get('x').named) == [('a', 'a'), ('b', 'b')]

    def test_same_name_different_alias_kept(self, registry):
        registry.record('x', 'named', [('a', 'a')])
        registry.record('x', 'named', [('a', 'b')])
        assert list(registry.get('x').named) == [('a', 'a'), ('a', 'b')]

    def test_default_names_preserved(self, registry):
        registry.record('x', 'default', 'Foo')
        registry.record('x', 'default', 'Bar')
        registry.record('x', 'default', 'Foo')
        assert list(registry.get('x').default_names) == ['Foo', 'Bar']

    def test_side_effect(self, registry):
        entry = registry.record('x', 'side_effect')
        assert entry.side_effect
        assert not entry.has_bindings

    def test_unknown_kind(self, registry):
        with pytest.raises(ValueError):
            registry.record('x', 'namespace', 'ns')


class TestRenderImports:
    """Standard-module header statements."""

    def test_default_only(self, registry):
        registry.record('x', 'default', 'X')
        assert registry.render() == ["import X from 'x';"]

    def test_named_with_rename(self, registry):
        registry.record('x', 'named', [('a', 'a'), ('b', 'c')])
        assert registry.render() == ["import { a, b as c } from 'x';"]

    def test_default_and_named_combined(self, registry):
        registry.record('x', 'default', 'X')
        registry.record('x', 'named', [('a', 'a')])
        assert registry.render() == ["import X, { a } from 'x';"]

    def test_conflicting_defaults_expand(self, registry):
        """Two default aliases for one specifier give one statement each."""
        registry.record('x', 'default', 'Foo')
        registry.record('x', 'default', 'Bar')
        registry.record('x', 'named', [('a', 'a')])
        assert registry.render() == [
            "import Foo from 'x';",
            "import Bar from 'x';",
            "import { a } from 'x';",
        ]

    def test_side_effect_only(self, registry):
        registry.record('x', 'side_effect')
        assert registry.render() == ["import 'x';"]

    def test_side_effect_with_bindings(self, registry):
        """A binding import already evaluates the module."""
        registry.record('x', 'side_effect')
        registry.record('x', 'default', 'X')
        assert registry.render() == ["import X from 'x';"]

    def test_entries_in_registry_order(self, registry):
        registry.record('b', 'default', 'b')
        registry.record('a', 'side_effect')
        assert registry.render(OutputMode.STANDARD_MODULE) == [
            "import b from 'b';",
            "import 'a';",
        ]


class TestRenderCarrierBindings:
    """Global-wrapper local bindings."""

    def test_named_and_default(self, registry):
        registry.record('meta-util', 'named', [('a', 'a'), ('b', 'c')])
        registry.record('meta-util', 'default', 'metautil')
        assert registry.render(OutputMode.GLOBAL_WRAPPER) == [
            "const { a, b: c } = metautilIIFE;",
            "const metautil = metautilIIFE;",
        ]

    def test_side_effect_has_no_binding(self, registry):
        registry.record('x', 'side_effect')
        assert registry.render(OutputMode.GLOBAL_WRAPPER) == []

    def test_app_mode_renders_nothing(self, registry):
        registry.record('x', 'default', 'X')
        assert registry.render(OutputMode.APP_LINK) == []
