# modbundle - Bundling Engine
"""
Core modules of the bundler:
- errors: Build errors (duplicate exports, configuration)
- models: Source modules, link requests, diagnostics, build config
- grammar: Lark grammar for binding lists
- scanner: require()/import statement recognition
- filters: Built-in and in-bundle specifier filtering
- registry: Deduplicated, order-stable import registry
- exports: Trailing export statement normalization
- modes: Output generators (esm, iife, app)
- bundler: Orchestrator
"""

from .errors import BundleError, DuplicateExportError, ConfigError
from .models import OutputMode, Severity, SourceModule, LinkRequest, Diagnostic, BuildConfig
from .grammar import binding_grammar
from .registry import ImportRegistry
from .bundler import Bundler, bundle

__all__ = [
    'BundleError',
    'DuplicateExportError',
    'ConfigError',
    'OutputMode',
    'Severity',
    'SourceModule',
    'LinkRequest',
    'Diagnostic',
    'BuildConfig',
    'binding_grammar',
    'ImportRegistry',
    'Bundler',
    'bundle',
]
