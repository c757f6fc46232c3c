"""
Statement scanning - finds require()/import statements in a source file.

There is no JavaScript parser here. Each statement shape has its own
recognizer rule: a regex anchored to whole lines, so a rule can never match
across another statement. Brace lists inside a match are handed to the
binding list grammar.
"""
import re

from lark.exceptions import LarkError

from engine.bindings import parse_bindings
from engine.errors import line_number_at
from engine.models import Diagnostic, Severity

IDENT = r'[A-Za-z_$][\w$]*'
QUOTED = r'''(?P<quote>['"])(?P<specifier>[^'"\n]+)(?P=quote)'''
TAIL = r'[ \t]*;?[ \t]*(?://[^\n]*)?$'

DEFAULT = 'default'
NAMED = 'named'
COMBINED = 'combined'
SIDE_EFFECT = 'side_effect'


class ImportStatement:
    """One recognized inclusion statement."""

    def __init__(self, rule, kind, specifier, start, end, text,
                 default_name=None, bindings=None, line=None):
        self.rule = rule
        self.kind = kind
        self.specifier = specifier
        self.start = start
        self.end = end
        self.text = text
        self.default_name = default_name
        self.bindings = bindings or []
        self.line = line

    @property
    def named_pairs(self):
        """(imported_name, local_name) pairs, rest elements excluded."""
        return [b.as_pair() for b in self.bindings if not b.is_rest]

    @property
    def rest_bindings(self):
        return [b for b in self.bindings if b.is_rest]

    def __repr__(self):
        return f"ImportStatement({self.rule}, {self.specifier!r}, line={self.line})"


class Rule:
    """A single statement shape: regex plus the kind of binding it yields."""

    def __init__(self, name, kind, pattern):
        self.name = name
        self.kind = kind
        self.regex = re.compile(pattern, re.MULTILINE)

    def _build(self, m, text):
        bindings = None
        if 'bindings' in m.groupdict():
            try:
                bindings = parse_bindings(m.group('bindings'))
            except LarkError:
                return None
        return ImportStatement(
            rule=self.name,
            kind=self.kind,
            specifier=m.group('specifier'),
            start=m.start(),
            end=m.end(),
            text=m.group(0),
            default_name=m.groupdict().get('name'),
            bindings=bindings,
            line=line_number_at(text, m.start()),
        )

    def match(self, text):
        """First statement of this shape in `text`, or None."""
        for statement in self.find_all(text):
            return statement
        return None

    def find_all(self, text):
        """
        Every statement of this shape in `text`.

        A match whose brace list the grammar rejects (nested destructuring,
        literal values) is not a statement of this shape and is skipped.
        """
        statements = []
        for m in self.regex.finditer(text):
            statement = self._build(m, text)
            if statement is not None:
                statements.append(statement)
        return statements


RULES = [
    Rule('require_destructuring', NAMED,
         r'^[ \t]*(?:const|let|var)[ \t]*\{(?P<bindings>[^{}]*)\}[ \t]*=[ \t]*'
         r'require\([ \t]*' + QUOTED + r'[ \t]*\)' + TAIL),
    Rule('require_default', DEFAULT,
         r'^[ \t]*(?:const|let|var)[ \t]+(?P<name>' + IDENT + r')[ \t]*=[ \t]*'
         r'require\([ \t]*' + QUOTED + r'[ \t]*\)' + TAIL),
    Rule('require_side_effect', SIDE_EFFECT,
         r'^[ \t]*require\([ \t]*' + QUOTED + r'[ \t]*\)' + TAIL),
    Rule('import_named', NAMED,
         r'^[ \t]*import[ \t]*\{(?P<bindings>[^{}]*)\}[ \t]*from[ \t]*' + QUOTED + TAIL),
    Rule('import_default', DEFAULT,
         r'^[ \t]*import[ \t]+(?P<name>' + IDENT + r')[ \t]+from[ \t]*' + QUOTED + TAIL),
    Rule('import_combined', COMBINED,
         r'^[ \t]*import[ \t]+(?P<name>' + IDENT + r')[ \t]*,[ \t]*'
         r'\{(?P<bindings>[^{}]*)\}[ \t]*from[ \t]*' + QUOTED + TAIL),
    Rule('import_side_effect', SIDE_EFFECT,
         r'^[ \t]*import[ \t]*' + QUOTED + TAIL),
]

INCLUSION_KEYWORD = re.compile(r'\brequire\s*\(|^\s*import\b(?!\s*[(.])')


def find_statements(text, rules=None):
    """All recognized statements in source order, overlapping matches dropped."""
    found = []
    for rule in rules or RULES:
        found.extend(rule.find_all(text))
    found.sort(key=lambda s: s.start)

    statements = []
    last_end = -1
    for statement in found:
        if statement.start < last_end:
            continue
        statements.append(statement)
        last_end = statement.end
    return statements


def find_unsupported(text):
    """
    Lines that still mention require()/import after recognized statements
    were blanked. Comment lines are ignored.

    Returns:
        List of (line_number, line) tuples
    """
    result = []
    for line_number, line in enumerate(text.split('\n'), 1):
        stripped = line.strip()
        if stripped.startswith(('//', '/*', '*')):
            continue
        if INCLUSION_KEYWORD.search(line):
            result.append((line_number, line))
    return result


def blank_statements(text, statements):
    """Replace each statement by empty lines, keeping the line count."""
    parts = []
    position = 0
    for statement in statements:
        parts.append(text[position:statement.start])
        parts.append('\n' * statement.text.count('\n'))
        position = statement.end
    parts.append(text[position:])
    return ''.join(parts)


def process_imports(content, filename, registry, dependency_filter, diagnostics):
    """
    Register every inclusion statement of one file and remove it from the text.

    Args:
        content: File text
        filename: File name used in diagnostics
        registry: ImportRegistry receiving accepted bindings
        dependency_filter: DependencyFilter deciding what is forwarded
        diagnostics: List receiving Diagnostic objects

    Returns:
        The file text with recognized statements replaced by empty lines
    """
    statements = find_statements(content)

    for statement in statements:
        accepted = dependency_filter.accept(
            statement.specifier, filename, diagnostics,
            line=statement.line, statement=statement.text,
        )
        if not accepted:
            continue

        for rest in statement.rest_bindings:
            diagnostics.append(Diagnostic(
                severity=Severity.CAUTION,
                message=f"Rest element '...{rest.source}' dropped from import of '{statement.specifier}'",
                filename=filename,
                line=statement.line,
                statement=statement.text.strip(),
            ))

        if statement.kind == SIDE_EFFECT:
            registry.record(statement.specifier, 'side_effect')
            continue

        registry.ensure(statement.specifier)
        if statement.default_name:
            registry.record(statement.specifier, 'default', statement.default_name)
        if statement.named_pairs:
            registry.record(statement.specifier, 'named', statement.named_pairs)

    result = blank_statements(content, statements)

    for line_number, line in find_unsupported(result):
        diagnostics.append(Diagnostic(
            severity=Severity.CAUTION,
            message="Unsupported require()/import usage left in place",
            filename=filename,
            line=line_number,
            statement=line.strip(),
        ))

    return result
