"""
Error handling utilities for the bundler.
"""


class BundleError(Exception):
    """Build-aborting error with file, line number and a hint on how to fix it."""
    def __init__(self, message, filename=None, line_number=None, context=None, suggestion=None):
        self.message = message
        self.filename = filename
        self.line_number = line_number
        self.context = context  # The offending statement
        self.suggestion = suggestion  # How to fix it
        super().__init__(self._format_error())

    def _format_error(self):
        """Format the error message with location, context and suggestion."""
        lines = ["\n❌ Build Error"]
        if self.filename:
            lines.append(f" in {self.filename}")
            if self.line_number:
                lines.append(f":{self.line_number}")
        lines.append(":\n")

        lines.append(f"   {self.message}\n")

        if self.context:
            lines.append(f"   > {self.context}\n")

        if self.suggestion:
            lines.append(f"   💡 {self.suggestion}\n")

        return "".join(lines)


class DuplicateExportError(BundleError):
    """The same name is exposed twice, within one file or across a wrapped build."""
    def __init__(self, name, filenames, line_number=None, context=None):
        self.name = name
        self.filenames = list(filenames)
        if len(set(self.filenames)) > 1:
            message = f"Duplicate export '{name}' in {' and '.join(self.filenames)}"
            suggestion = "Rename one of the exports; a wrapped bundle exposes every name once"
        else:
            message = f"Duplicate export '{name}'"
            suggestion = f"Remove the second '{name}' from the export list"
        super().__init__(
            message,
            filename=self.filenames[-1] if self.filenames else None,
            line_number=line_number,
            context=context,
            suggestion=suggestion,
        )


class ConfigError(BundleError):
    """Missing or invalid build.json, package.json or source file."""


def line_number_at(source_code, offset):
    """1-based line number of a character offset."""
    return source_code.count('\n', 0, offset) + 1
