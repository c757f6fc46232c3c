import sys
import os
import json

from pydantic import ValidationError

from engine.bundler import Bundler
from engine.errors import ConfigError
from engine.models import BuildConfig, Diagnostic, OutputMode, Severity, SourceModule

BUILD_CONFIG = "build.json"
PACKAGE_FILE = "package.json"
LICENSE_FILE = "LICENSE"

BUNDLE_EXT = {
    OutputMode.STANDARD_MODULE: ".mjs",
    OutputMode.GLOBAL_WRAPPER: ".iife.js",
}

# Global verbose flag
_VERBOSE = False

def set_verbose(value):
    """Set the global verbose flag."""
    global _VERBOSE
    _VERBOSE = value

def debug_log(message):
    """Log a debug message to stderr if verbose mode is enabled."""
    if _VERBOSE:
        print(f"\033[94mDEBUG:\033[0m {message}", file=sys.stderr)

def _read_json(path):
    if not os.path.exists(path):
        raise ConfigError(f"File not found: {path}", filename=os.path.basename(path))
    with open(path, 'r', encoding='utf-8') as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Invalid JSON: {e.msg}",
                filename=os.path.basename(path),
                line_number=e.lineno,
                suggestion="Check for trailing commas and unquoted keys",
            )

def load_config(project_dir):
    """Read and validate build.json."""
    data = _read_json(os.path.join(project_dir, BUILD_CONFIG))
    try:
        return BuildConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid build configuration:\n{e}",
            filename=BUILD_CONFIG,
            suggestion='Expected e.g. { "order": ["a.js", "b.js"], "mode": "esm" }',
        )

def load_package(project_dir):
    """Return (name, version) from package.json; the npm scope is dropped."""
    package = _read_json(os.path.join(project_dir, PACKAGE_FILE))
    name = package.get("name")
    if not name:
        raise ConfigError("Package has no name", filename=PACKAGE_FILE)
    return name.split('/')[-1], package.get("version", "0.0.0")

def build_header(project_dir, package_name, version):
    """Two comment lines from LICENSE: copyright, then version and license name."""
    license_path = os.path.join(project_dir, LICENSE_FILE)
    if not os.path.exists(license_path):
        debug_log(f"No {LICENSE_FILE} found, header omitted")
        return ""
    with open(license_path, 'r', encoding='utf-8') as f:
        license_lines = f.read().split('\n')
    license_name = license_lines[0].strip()
    copyright_line = license_lines[2].strip() if len(license_lines) > 2 else ""
    return (
        f"// {copyright_line}\n"
        f"// Version {version} {package_name} {license_name}\n\n"
    )

def read_sources(lib_dir, order):
    """Read the files listed in build.json, in that order."""
    modules = []
    for index, filename in enumerate(order):
        path = os.path.join(lib_dir, filename)
        if not os.path.exists(path):
            raise ConfigError(
                f"Source file not found: {path}",
                filename=BUILD_CONFIG,
                suggestion=f"Remove '{filename}' from \"order\" or create it",
            )
        with open(path, 'r', encoding='utf-8') as f:
            modules.append(SourceModule(name=filename, content=f.read(), order_index=index))
        debug_log(f"Read {path}")
    return modules

def write_artifact(path, content):
    directory = os.path.dirname(path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(content)

def create_links(links, project_dir="."):
    """
    Create one symbolic link per LinkRequest.

    A failing link is reported and the remaining links are still attempted.

    Returns:
        List of (LinkRequest, error message or None)
    """
    results = []
    for link in links:
        source_path = os.path.join(project_dir, link.source_path)
        link_path = os.path.join(project_dir, link.target_path)
        try:
            os.makedirs(os.path.dirname(link_path), exist_ok=True)
            if os.path.lexists(link_path):
                os.unlink(link_path)
            os.symlink(os.path.relpath(source_path, os.path.dirname(link_path)), link_path)
            debug_log(f"Linked: {link}")
            results.append((link, None))
        except OSError as e:
            print(f"\033[31mError linking {link.dependency}:\033[0m {e}", file=sys.stderr)
            results.append((link, str(e)))
    return results

def run_build(project_dir=".", mode=None):
    """
    Build the project in `project_dir`.

    Args:
        project_dir: Directory holding build.json, package.json and LICENSE
        mode: Output mode overriding build.json

    Returns:
        (BundleResult, output path or None)
    """
    config = load_config(project_dir)
    mode = OutputMode(mode) if mode else config.mode
    package_name, version = load_package(project_dir)
    debug_log(f"Building {package_name} {version} ({mode.value}, {len(config.order)} files)")

    modules = read_sources(os.path.join(project_dir, config.lib_dir), config.order)
    bundler = Bundler(mode, package_name=package_name, link_dir=config.link_dir)
    result = bundler.bundle(modules)
    if config.require:
        result.diagnostics.append(Diagnostic(
            severity=Severity.CAUTION,
            message="\"require\" libraries are not inlined; import them from the sources instead",
            filename=BUILD_CONFIG,
            statement=", ".join(config.require),
        ))

    if mode == OutputMode.APP_LINK:
        create_links(result.links, project_dir)
        return result, None

    header = build_header(project_dir, package_name, version)
    output_file = os.path.join(project_dir, config.output_dir, package_name + BUNDLE_EXT[mode])
    write_artifact(output_file, header + result.content)
    return result, output_file
