"""
Export normalization - rewrites the trailing exposure statement of a file.

Recognized at the end of a file:
    module.exports = { a, b: c };
    module.exports = run;
    export { a, b as c };
"""
import re

from lark.exceptions import LarkError

from engine.bindings import parse_bindings
from engine.errors import DuplicateExportError, line_number_at
from engine.models import Diagnostic, OutputMode, Severity
from engine.scanner import IDENT

EXPORT_PATTERN = re.compile(
    r'^[ \t]*(?:'
    r'module\.exports[ \t]*=[ \t]*(?:\{(?P<object>[^{}]*)\}|(?P<identifier>' + IDENT + r'))'
    r'|export[ \t]*\{(?P<list>[^{}]*)\}'
    r')[ \t]*;?[ \t]*$',
    re.MULTILINE,
)

TRAILER_PATTERN = re.compile(r'(?:\s|//[^\n]*|/\*[\s\S]*?\*/)*')


class ExportDeclaration:
    """Names exposed by one file, each with the local identifier it is bound from."""

    def __init__(self, entries, start, end, text, line=None):
        self.entries = entries  # [(name, local), ...] in source order
        self.start = start
        self.end = end
        self.text = text
        self.line = line

    @property
    def names(self):
        return [name for name, _ in self.entries]

    def __repr__(self):
        return f"ExportDeclaration({self.names})"


class ExposedNameSet:
    """Names exposed across a whole build, in first-exposure order."""

    def __init__(self):
        self._names = {}

    def add(self, name, local, filename):
        if name in self._names:
            first_file = self._names[name][1]
            raise DuplicateExportError(name, [first_file, filename])
        self._names[name] = (local, filename)

    def __contains__(self, name):
        return name in self._names

    def __len__(self):
        return len(self._names)

    def __iter__(self):
        return iter(self._names)

    def entries(self):
        return [(name, local) for name, (local, _) in self._names.items()]

    def owner(self, name):
        return self._names[name][1]


class UnsupportedExport(ValueError):
    """Exposure entries that cannot be expressed as a list of names."""


def _entries_from_match(m):
    if m.group('identifier'):
        return [(m.group('identifier'), m.group('identifier'))]
    bindings = parse_bindings(m.group('object') if m.group('object') is not None else m.group('list'))
    for b in bindings:
        if b.is_rest:
            raise UnsupportedExport(f"spread '...{b.source}' exposes members, not a name")
    if m.group('object') is not None:
        # { name: local }
        return [(b.source, b.target) for b in bindings]
    # { local as name }
    return [(b.target, b.source) for b in bindings]


def _is_trailing(text, end):
    rest = TRAILER_PATTERN.match(text, end)
    return rest.end() == len(text)


def find_export(text, filename=None):
    """
    Locate the trailing exposure statement.

    Args:
        text: File text
        filename: File name used in a DuplicateExportError

    Returns:
        ExportDeclaration, or None when the file does not end with one

    Raises:
        DuplicateExportError: If the statement lists a name twice
        lark.exceptions.LarkError: If the entries are not plain names
        UnsupportedExport: If an entry spreads another object
    """
    last = None
    for m in EXPORT_PATTERN.finditer(text):
        last = m
    if last is None or not _is_trailing(text, last.end()):
        return None

    entries = _entries_from_match(last)
    line = line_number_at(text, last.start())
    seen = set()
    for name, _ in entries:
        if name in seen:
            raise DuplicateExportError(name, [filename] if filename else [], line_number=line,
                                       context=last.group(0).strip())
        seen.add(name)
    return ExportDeclaration(entries, last.start(), last.end(), last.group(0), line=line)


def render_esm_export(declaration):
    """`export { a };` for one name, otherwise one name per line."""
    parts = [name if name == local else f"{local} as {name}" for name, local in declaration.entries]
    if not parts:
        return ''
    if len(parts) == 1:
        return f"export {{ {parts[0]} }};"
    listing = ",\n".join(f"  {part}" for part in parts)
    return f"export {{\n{listing},\n}};"


def render_carrier_exports(entries):
    """One assignment per exposed name onto the wrapper's `exports` object."""
    return "\n".join(f"exports.{name} = {local};" for name, local in entries)


def process_exports(content, filename, mode, exposed, diagnostics):
    """
    Rewrite the trailing exposure statement of one file for the output mode.

    In standard-module mode the statement is replaced by an `export` list.
    In global-wrapper mode it is blanked and its names are added to
    `exposed`, to be assigned after the wrapped body.

    Returns:
        The rewritten file text
    """
    for m in EXPORT_PATTERN.finditer(content):
        if not _is_trailing(content, m.end()):
            diagnostics.append(Diagnostic(
                severity=Severity.CAUTION,
                message="Export statement is not at the end of the file, left in place",
                filename=filename,
                line=line_number_at(content, m.start()),
                statement=m.group(0).strip(),
            ))

    try:
        declaration = find_export(content, filename)
    except (LarkError, UnsupportedExport):
        m = list(EXPORT_PATTERN.finditer(content))[-1]
        diagnostics.append(Diagnostic(
            severity=Severity.CAUTION,
            message="Unsupported export statement left in place",
            filename=filename,
            line=line_number_at(content, m.start()),
            statement=m.group(0).strip(),
        ))
        return content

    if declaration is None:
        return content

    if mode == OutputMode.GLOBAL_WRAPPER:
        for name, local in declaration.entries:
            exposed.add(name, local, filename)
        replacement = '\n' * declaration.text.count('\n')
    else:
        replacement = render_esm_export(declaration)

    return content[:declaration.start] + replacement + content[declaration.end:]
