"""
Dependency filtering - decides which specifiers are forwarded to the output.
"""

from engine.models import Diagnostic, Severity

# Node.js built-in module names (require('node:module').builtinModules)
NODE_BUILTINS = frozenset([
    '_http_agent', '_http_client', '_http_common', '_http_incoming',
    '_http_outgoing', '_http_server', '_stream_duplex', '_stream_passthrough',
    '_stream_readable', '_stream_transform', '_stream_wrap', '_stream_writable',
    '_tls_common', '_tls_wrap', 'assert', 'assert/strict', 'async_hooks',
    'buffer', 'child_process', 'cluster', 'console', 'constants', 'crypto',
    'dgram', 'diagnostics_channel', 'dns', 'dns/promises', 'domain', 'events',
    'fs', 'fs/promises', 'http', 'http2', 'https', 'inspector',
    'inspector/promises', 'module', 'net', 'os', 'path', 'path/posix',
    'path/win32', 'perf_hooks', 'process', 'punycode', 'querystring',
    'readline', 'readline/promises', 'repl', 'stream', 'stream/consumers',
    'stream/promises', 'stream/web', 'string_decoder', 'sys', 'timers',
    'timers/promises', 'tls', 'trace_events', 'tty', 'url', 'util',
    'util/types', 'v8', 'vm', 'wasi', 'worker_threads', 'zlib',
])

BUILTIN_PREFIX = 'node:'
RELATIVE_PREFIXES = ('./', '../')
SOURCE_SUFFIXES = ('.js', '.mjs', '.cjs')


def is_builtin(specifier, builtins=NODE_BUILTINS):
    """True for `fs`, `node:fs`, `fs/promises` and any other `node:` name."""
    if specifier.startswith(BUILTIN_PREFIX):
        return True
    return specifier in builtins


def is_bundled_file(specifier):
    """True when the specifier points at a source file rather than a package."""
    return specifier.startswith(RELATIVE_PREFIXES) or specifier.endswith(SOURCE_SUFFIXES)


class DependencyFilter:
    """
    Accepts or rejects specifiers found by the scanner.

    Built-ins are rejected with an error diagnostic: a bundle entry must not
    depend on the host platform. Files of the bundle itself are rejected
    silently because their content is already inlined.
    """

    def __init__(self, builtins=None):
        self.builtins = frozenset(builtins) if builtins is not None else NODE_BUILTINS

    def accept(self, specifier, filename, diagnostics, line=None, statement=None):
        """
        Decide whether a specifier is forwarded to the import registry.

        Args:
            specifier: Module name from the inclusion statement
            filename: File the statement was found in
            diagnostics: List that receives any Diagnostic produced
            line: 1-based line of the statement (for the diagnostic)
            statement: Statement text (for the diagnostic)

        Returns:
            True if the specifier should be registered
        """
        if is_builtin(specifier, self.builtins):
            diagnostics.append(Diagnostic(
                severity=Severity.ERROR,
                message=f"Node built-in module '{specifier}' is not allowed in bundle sources",
                filename=filename,
                line=line,
                statement=statement.strip() if statement else None,
            ))
            return False

        if is_bundled_file(specifier):
            return False

        return True
