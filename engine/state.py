"""
Per-build accumulator and build result.
"""

from engine.exports import ExposedNameSet
from engine.models import Severity
from engine.registry import ImportRegistry


class BuildState:
    """
    Everything one build accumulates while walking the file list.

    A new BuildState is created for every build and handed explicitly to
    each processing step; nothing is shared between builds.
    """

    def __init__(self, package_name, link_dir="application/static"):
        self.package_name = package_name
        self.link_dir = link_dir
        self.registry = ImportRegistry()
        self.exposed = ExposedNameSet()
        self.diagnostics = []
        self.bodies = []  # [(filename, transformed text), ...] in file order

    def add_body(self, filename, content):
        self.bodies.append((filename, content))


class BundleResult:
    """Output of a build: artifact text (esm/iife) or link requests (app)."""

    def __init__(self, mode, content=None, links=None, state=None):
        self.mode = mode
        self.content = content
        self.links = links or []
        self.registry = state.registry if state else ImportRegistry()
        self.exposed = state.exposed if state else ExposedNameSet()
        self.diagnostics = state.diagnostics if state else []

    def diagnostics_of(self, severity):
        severity = Severity(severity)
        return [d for d in self.diagnostics if d.severity == severity]

    @property
    def errors(self):
        return self.diagnostics_of(Severity.ERROR)

    @property
    def cautions(self):
        return self.diagnostics_of(Severity.CAUTION)
