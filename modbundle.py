import argparse
import sys
import os
from builder import run_build, read_sources, set_verbose
from engine.errors import BundleError
from engine.models import OutputMode, Severity
from engine.bundler import Bundler

SEVERITY_STYLE = {
    Severity.INFO: "\033[92m\033[1mINFO:\033[0m",
    Severity.CAUTION: "\033[33mCaution:\033[0m",
    Severity.ERROR: "\033[31mError:\033[0m",
}

def log(message):
    """Log informational messages to stderr."""
    print(f"\033[92m\033[1mINFO:\033[0m {message}", file=sys.stderr)

def report(diagnostics):
    """Print build diagnostics to stderr, one per line."""
    for diagnostic in diagnostics:
        print(f"{SEVERITY_STYLE[diagnostic.severity]} {diagnostic}", file=sys.stderr)

def cmd_build(args):
    set_verbose(args.verbose)
    try:
        result, output_file = run_build(args.dir, mode=args.mode)
    except BundleError as e:
        print(f"Error: Build Failed:{e}", file=sys.stderr)
        sys.exit(1)

    report(result.diagnostics)
    if output_file:
        log(f"Bundle created: {output_file}")
    else:
        log(f"Linked {len(result.links)} dependencies")

def cmd_scan(args):
    """Print the import header the given files would produce, without writing anything."""
    set_verbose(args.verbose)
    for filename in args.files:
        if not os.path.exists(filename):
            print(f"Error: File '{filename}' not found.", file=sys.stderr)
            sys.exit(1)
    try:
        modules = read_sources(".", args.files)
        result = Bundler(OutputMode.STANDARD_MODULE).bundle(modules)
    except BundleError as e:
        print(f"Error: Scan Failed:{e}", file=sys.stderr)
        sys.exit(1)

    report(result.diagnostics)
    for statement in result.registry.render(OutputMode.STANDARD_MODULE):
        print(statement)
    log(f"{len(result.registry)} dependencies found")

def main():
    parser = argparse.ArgumentParser(description="Bundle CommonJS/ES module sources into one file")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output (sent to stderr)")
    subparsers = parser.add_subparsers(dest="command")

    build = subparsers.add_parser("build", help="Bundle the files listed in build.json")
    build.add_argument("--mode", choices=[m.value for m in OutputMode], help="Output mode (default: from build.json)")
    build.add_argument("--dir", default=".", help="Project directory (default: current directory)")

    scan = subparsers.add_parser("scan", help="List the dependencies of source files")
    scan.add_argument("files", nargs="+")

    args = parser.parse_args()

    if args.command == "build": cmd_build(args)
    elif args.command == "scan": cmd_scan(args)
    else: parser.print_help()

if __name__ == "__main__":
    main()
