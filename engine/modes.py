"""
Output generators - one strategy per output mode.

All modes share the same pipeline (scan, filter, register, normalize
exports); a generator decides how a file's exposure statement is rewritten
and how the accumulated build state becomes the final result.
"""
import os
import re
from abc import ABC, abstractmethod

from engine.exports import process_exports, render_carrier_exports
from engine.models import Diagnostic, LinkRequest, OutputMode, Severity
from engine.registry import carrier_name
from engine.state import BundleResult


def collapse_blank_lines(content):
    """Squash runs of blank lines left behind by removed statements."""
    return re.sub(r'\n{3,}', '\n\n', content)


def render_regions(bodies):
    """Concatenate file bodies, each inside //#region markers."""
    blocks = []
    for filename, body in bodies:
        blocks.append(f"//#region {filename}\n{body.strip(chr(10))}\n//#endregion\n")
    return "\n".join(blocks)


def dependency_file(specifier, extension):
    """File name a dependency's bundle is published under: 'pkg.iife.js'."""
    return specifier.split('/')[-1] + extension


class OutputGenerator(ABC):
    """Strategy interface for an output mode."""

    mode = None

    def transform(self, filename, content, state):
        """Rewrite one file's exposure statement for this mode."""
        return process_exports(content, filename, self.mode, state.exposed, state.diagnostics)

    @abstractmethod
    def generate(self, state) -> BundleResult:
        pass


class StandardModuleGenerator(OutputGenerator):
    """ES module: import header, then every file body with its own export list."""

    mode = OutputMode.STANDARD_MODULE

    def generate(self, state):
        header = state.registry.render(self.mode)
        body = render_regions(state.bodies)
        content = body
        if header:
            content = "\n".join(header) + "\n\n" + body
        return BundleResult(self.mode, content=collapse_blank_lines(content), state=state)


class GlobalWrapperGenerator(OutputGenerator):
    """Self-executing closure bound to one global carrier, for non-module hosts."""

    mode = OutputMode.GLOBAL_WRAPPER

    def dependency_checks(self, state):
        checks = []
        for specifier in state.registry:
            carrier = carrier_name(specifier)
            script = dependency_file(specifier, '.iife.js')
            state.diagnostics.append(Diagnostic(
                severity=Severity.INFO,
                message=(
                    f'IIFE module depends on "{specifier}". '
                    f'Ensure importScripts("{script}") in an app before this module.'
                ),
            ))
            checks.append(
                f"if (typeof {carrier} === 'undefined') {{\n"
                f"  throw new Error('Dependency \"{specifier}\" is not available. "
                f"Ensure {carrier} is loaded either in service worker "
                f"via importScripts(\"{script}\") "
                f"or in main thread via <script src=\"{script}\"></script> "
                f"before this module.');\n"
                f"}}"
            )
        return checks

    def generate(self, state):
        checks = self.dependency_checks(state)
        mappings = state.registry.render(self.mode)

        content = render_regions(state.bodies)
        exports_block = render_carrier_exports(state.exposed.entries())
        if exports_block:
            content += "\n" + exports_block
        content = collapse_blank_lines(content)

        parts = []
        if checks:
            parts.append("\n".join(checks))
        if mappings:
            parts.append("\n".join(mappings))
        parts.append(content.rstrip('\n'))

        wrapped = (
            f"const {carrier_name(state.package_name)} = (function (exports) {{\n"
            + "\n".join(parts)
            + "\nreturn exports;\n})({});\n"
        )
        return BundleResult(self.mode, content=wrapped, state=state)


class AppLinkGenerator(OutputGenerator):
    """No bundling: every dependency is linked into the application instead."""

    mode = OutputMode.APP_LINK

    def transform(self, filename, content, state):
        return content

    def generate(self, state):
        links = []
        for specifier in state.registry:
            module_file = dependency_file(specifier, '.mjs')
            links.append(LinkRequest(
                dependency=specifier,
                source_path=os.path.join('node_modules', specifier, module_file),
                target_path=os.path.join(state.link_dir, module_file),
            ))
        return BundleResult(self.mode, links=links, state=state)


def get_generator(mode):
    """Factory function to get the generator for an output mode."""
    mode = OutputMode(mode)
    if mode == OutputMode.GLOBAL_WRAPPER:
        return GlobalWrapperGenerator()
    if mode == OutputMode.APP_LINK:
        return AppLinkGenerator()
    return StandardModuleGenerator()
