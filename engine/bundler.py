"""
Bundler for JavaScript modules.

Walks the caller's file list in order, strips require()/import statements
into a shared import registry, rewrites each file's trailing export, and
hands the result to the generator of the selected output mode.
"""
import re

from engine.filters import DependencyFilter
from engine.models import OutputMode, SourceModule
from engine.modes import get_generator
from engine.scanner import process_imports
from engine.state import BuildState

# Only whitespace and comments may precede a file-level directive
USE_STRICT_PATTERN = re.compile(
    r'''\A(?P<prologue>(?:\s|//[^\n]*|/\*[\s\S]*?\*/)*?)'''
    r'''[ \t]*(['"])use strict\2;?[ \t]*(?=\n|\Z)'''
)


def normalize_newlines(content):
    return content.replace('\r\n', '\n')


def strip_use_strict(content):
    """Blank the file-level 'use strict' directive; the bundle decides its own mode."""
    return USE_STRICT_PATTERN.sub(r'\g<prologue>', content, count=1)


class Bundler:
    """
    Bundles an ordered list of source modules into one artifact.

    Args:
        mode: OutputMode (or its value: 'esm', 'iife', 'app')
        package_name: Name the global-wrapper carrier is derived from
        builtins: Platform built-in module names to reject
        link_dir: Target directory of app-mode link requests
    """

    def __init__(self, mode=OutputMode.STANDARD_MODULE, package_name="bundle",
                 builtins=None, link_dir="application/static"):
        self.mode = OutputMode(mode)
        self.package_name = package_name
        self.link_dir = link_dir
        self.dependency_filter = DependencyFilter(builtins)

    def process_module(self, module, generator, state):
        """Run one file through the shared pipeline and keep its body."""
        content = strip_use_strict(normalize_newlines(module.content))
        content = process_imports(content, module.name, state.registry,
                                  self.dependency_filter, state.diagnostics)
        content = generator.transform(module.name, content, state)
        state.add_body(module.name, content)

    def bundle(self, modules):
        """
        Bundle source modules in the given order.

        Args:
            modules: Iterable of SourceModule, or of (name, content) pairs

        Returns:
            BundleResult

        Raises:
            DuplicateExportError: If a name is exported twice in one file, or
                by two files of a global-wrapper build
        """
        generator = get_generator(self.mode)
        state = BuildState(self.package_name, link_dir=self.link_dir)
        for index, module in enumerate(modules):
            if not isinstance(module, SourceModule):
                name, content = module
                module = SourceModule(name=name, content=content, order_index=index)
            self.process_module(module, generator, state)
        return generator.generate(state)


def bundle(modules, mode=OutputMode.STANDARD_MODULE, package_name="bundle", builtins=None,
           link_dir="application/static"):
    """Convenience wrapper: Bundler(...).bundle(modules)."""
    bundler = Bundler(mode, package_name=package_name, builtins=builtins, link_dir=link_dir)
    return bundler.bundle(modules)
