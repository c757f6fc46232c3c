"""
Import registry - the deduplicated, order-stable set of external dependencies.
"""
import re

from engine.models import OutputMode

CARRIER_SUFFIX = 'IIFE'


def carrier_name(package_name):
    """
    Global variable name a wrapped bundle is bound to.

    The npm scope is dropped and every character that cannot appear in an
    identifier is removed: '@metarhia/meta-utils' -> 'metautilsIIFE'.
    """
    base = package_name.split('/')[-1]
    return re.sub(r'[^A-Za-z0-9_$]', '', base) + CARRIER_SUFFIX


class BindingSet:
    """Every binding requested for one specifier, merged across files."""

    def __init__(self):
        # dicts as insertion-ordered sets
        self.default_names = {}
        self.named = {}
        self.side_effect = False

    def add_default(self, local_name):
        self.default_names[local_name] = None

    def add_named(self, imported_name, local_name=None):
        self.named[(imported_name, local_name or imported_name)] = None

    @property
    def has_bindings(self):
        return bool(self.default_names or self.named)

    def named_list(self, rename_separator):
        parts = []
        for imported, local in self.named:
            parts.append(imported if imported == local else f"{imported}{rename_separator}{local}")
        return ", ".join(parts)


class ImportRegistry:
    """
    Ordered mapping of specifier -> BindingSet.

    A specifier keeps the position of its first occurrence; later merges
    never reorder it. Iteration order is the order of the rendered header.
    """

    def __init__(self):
        self._entries = {}

    def __contains__(self, specifier):
        return specifier in self._entries

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def get(self, specifier):
        return self._entries.get(specifier)

    def items(self):
        return self._entries.items()

    def specifiers(self):
        return list(self._entries)

    def ensure(self, specifier):
        entry = self._entries.get(specifier)
        if entry is None:
            entry = BindingSet()
            self._entries[specifier] = entry
        return entry

    def record(self, specifier, kind, payload=None):
        """
        Merge one scanned binding into the specifier's BindingSet.

        Args:
            specifier: External module name
            kind: 'default', 'named' or 'side_effect'
            payload: Local name for 'default'; iterable of
                (imported_name, local_name) pairs for 'named'; unused
                for 'side_effect'
        """
        entry = self.ensure(specifier)
        if kind == 'default':
            entry.add_default(payload)
        elif kind == 'named':
            for imported_name, local_name in payload or ():
                entry.add_named(imported_name, local_name)
        elif kind == 'side_effect':
            entry.side_effect = True
        else:
            raise ValueError(f"Unknown binding kind: {kind}")
        return entry

    def render(self, mode=OutputMode.STANDARD_MODULE):
        """Header statements for the output shape, one entry after another."""
        if mode == OutputMode.STANDARD_MODULE:
            return self._render_imports()
        if mode == OutputMode.GLOBAL_WRAPPER:
            return self._render_carrier_bindings()
        return []

    def _render_imports(self):
        statements = []
        for specifier, entry in self._entries.items():
            source = f"'{specifier}'"
            if not entry.has_bindings:
                statements.append(f"import {source};")
                continue

            named = entry.named_list(' as ')
            defaults = list(entry.default_names)

            # Files disagree on the default alias: keep every one of them
            if len(defaults) > 1:
                for default_name in defaults:
                    statements.append(f"import {default_name} from {source};")
                if named:
                    statements.append(f"import {{ {named} }} from {source};")
                continue

            if defaults and named:
                statements.append(f"import {defaults[0]}, {{ {named} }} from {source};")
            elif defaults:
                statements.append(f"import {defaults[0]} from {source};")
            else:
                statements.append(f"import {{ {named} }} from {source};")
        return statements

    def _render_carrier_bindings(self):
        statements = []
        for specifier, entry in self._entries.items():
            carrier = carrier_name(specifier)
            if entry.named:
                statements.append(f"const {{ {entry.named_list(': ')} }} = {carrier};")
            for default_name in entry.default_names:
                statements.append(f"const {default_name} = {carrier};")
        return statements
