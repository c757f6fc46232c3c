"""
Unit tests for statement scanning (engine/scanner.py).
"""
import pytest

from engine.filters import DependencyFilter
from engine.models import Severity
from engine.registry import ImportRegistry
from engine.scanner import (
    COMBINED,
    DEFAULT,
    NAMED,
    RULES,
    SIDE_EFFECT,
    blank_statements,
    find_statements,
    find_unsupported,
    process_imports,
)


@pytest.fixture
def rules():
    """Recognizer rules by name."""
    return {rule.name: rule for rule in RULES}


class TestRecognizerRules:
    """Each rule recognizes exactly its own statement shape."""

    def test_require_destructuring(self, rules):
        statement = rules['require_destructuring'].match("const { a, b: c } = require('x');")
        assert statement.kind == NAMED
        assert statement.specifier == 'x'
        assert statement.named_pairs == [('a', 'a'), ('b', 'c')]

    def test_require_destructuring_multiline(self, rules):
        source = "const {\n  a,\n  b,\n} = require('pkg');\n"
        statement = rules['require_destructuring'].match(source)
        assert statement.specifier == 'pkg'
        assert statement.named_pairs == [('a', 'a'), ('b', 'b')]
        assert statement.line == 1
        assert statement.text.count('\n') == 3

    def test_require_default(self, rules):
        statement = rules['require_default'].match("const metautil = require('metautil');")
        assert statement.kind == DEFAULT
        assert statement.default_name == 'metautil'
        assert statement.specifier == 'metautil'

    def test_require_default_double_quotes_no_semicolon(self, rules):
        statement = rules['require_default'].match('let x = require("y")')
        assert statement.default_name == 'x'
        assert statement.specifier == 'y'

    def test_require_side_effect(self, rules):
        statement = rules['require_side_effect'].match("require('polyfill');")
        assert statement.kind == SIDE_EFFECT
        assert statement.specifier == 'polyfill'

    def test_import_named(self, rules):
        statement = rules['import_named'].match("import { a, b as c } from 'x';")
        assert statement.kind == NAMED
        assert statement.named_pairs == [('a', 'a'), ('b', 'c')]

    def test_import_default(self, rules):
        statement = rules['import_default'].match("import X from 'x';")
        assert statement.kind == DEFAULT
        assert statement.default_name == 'X'

    def test_import_combined(self, rules):
        statement = rules['import_combined'].match("import X, { a } from 'x';")
        assert statement.kind == COMBINED
        assert statement.default_name == 'X'
        assert statement.named_pairs == [('a', 'a')]

    def test_import_side_effect(self, rules):
        statement = rules['import_side_effect'].match("import 'x';")
        assert statement.kind == SIDE_EFFECT
        assert statement.specifier == 'x'

    def test_trailing_line_comment_allowed(self, rules):
        statement = rules['require_default'].match("const x = require('x'); // note")
        assert statement is not None

    def test_property_access_not_matched(self):
        """A require() followed by member access is not an inclusion statement shape."""
        assert find_statements("const y = require('x').y;") == []

    def test_nested_destructuring_not_matched(self):
        assert find_statements("const { a: { b } } = require('x');") == []

    def test_literal_binding_not_matched(self):
        """The regex matches but the grammar rejects the list."""
        assert find_statements("const { a: 1 } = require('x');") == []


class TestFindStatements:
    """Tests for find_statements() and friends."""

    def test_source_order(self):
        source = "import a from 'a';\nconst b = require('b');\nimport 'c';\n"
        statements = find_statements(source)
        assert [s.specifier for s in statements] == ['a', 'b', 'c']
        assert [s.line for s in statements] == [1, 2, 3]

    def test_line_numbers(self):
        statements = find_statements("\n\nconst a = require('a');")
        assert statements[0].line == 3

    def test_blank_statements_keeps_line_count(self):
        source = "const {\n  a,\n} = require('x');\nconst b = 1;\n"
        result = blank_statements(source, find_statements(source))
        assert result.count('\n') == source.count('\n')
        assert result == "\n\n\nconst b = 1;\n"

    def test_find_unsupported(self):
        source = "const y = require('x').y;\nconst z = 1;\n"
        assert find_unsupported(source) == [(1, "const y = require('x').y;")]

    def test_find_unsupported_ignores_comments(self):
        source = "// const z = require('z');\n * require('doc')\n"
        assert find_unsupported(source) == []

    def test_dynamic_import_not_reported(self):
        assert find_unsupported("const m = await import('x');\n") == []


class TestProcessImports:
    """Tests for process_imports()."""

    @pytest.fixture
    def registry(self):
        return ImportRegistry()

    @pytest.fixture
    def dependency_filter(self):
        return DependencyFilter()

    def test_registers_and_blanks(self, registry, dependency_filter):
        source = (
            "const { a } = require('x');\n"
            "const fs = require('fs');\n"
            "const util = require('./util.js');\n"
            "\n"
            "const run = () => a();\n"
        )
        diagnostics = []
        result = process_imports(source, 'a.js', registry, dependency_filter, diagnostics)

        assert registry.specifiers() == ['x']
        assert 'require' not in result
        assert 'const run = () => a();' in result
        assert result.count('\n') == source.count('\n')
        assert len(diagnostics) == 1
        assert diagnostics[0].severity == Severity.ERROR
        assert diagnostics[0].line == 2

    def test_rest_element_dropped_with_caution(self, registry, dependency_filter):
        diagnostics = []
        process_imports("const { a, ...rest } = require('x');", 'a.js', registry,
                        dependency_filter, diagnostics)
        assert list(registry.get('x').named) == [('a', 'a')]
        assert len(diagnostics) == 1
        assert diagnostics[0].severity == Severity.CAUTION
        assert '...rest' in diagnostics[0].message

    def test_rest_only_keeps_dependency(self, registry, dependency_filter):
        diagnostics = []
        process_imports("const { ...all } = require('x');", 'a.js', registry,
                        dependency_filter, diagnostics)
        assert 'x' in registry
        assert registry.render() == ["import 'x';"]

    def test_unsupported_left_in_place(self, registry, dependency_filter):
        diagnostics = []
        source = "const y = require('x').y;\n"
        result = process_imports(source, 'a.js', registry, dependency_filter, diagnostics)
        assert result == source
        assert len(registry) == 0
        assert diagnostics[0].severity == Severity.CAUTION
        assert diagnostics[0].line == 1

    def test_default_and_named_in_same_file(self, registry, dependency_filter):
        """Both bindings are kept independently."""
        source = "const X = require('x');\nconst { a } = require('x');\n"
        process_imports(source, 'a.js', registry, dependency_filter, [])
        entry = registry.get('x')
        assert list(entry.default_names) == ['X']
        assert list(entry.named) == [('a', 'a')]
