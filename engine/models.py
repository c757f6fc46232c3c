"""
Data models shared by the bundling engine and its collaborators.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class OutputMode(str, Enum):
    """Shape of the delivered artifact."""
    STANDARD_MODULE = "esm"
    GLOBAL_WRAPPER = "iife"
    APP_LINK = "app"


class Severity(str, Enum):
    INFO = "info"
    CAUTION = "caution"
    ERROR = "error"


class SourceModule(BaseModel):
    """One source file as read from storage; identity is the file name."""
    model_config = ConfigDict(frozen=True)

    name: str
    content: str
    order_index: int = 0


class LinkRequest(BaseModel):
    """Declarative link for app mode; created on disk by the builder."""
    dependency: str
    source_path: str
    target_path: str

    def __str__(self):
        return f"{self.source_path} -> {self.target_path}"


class Diagnostic(BaseModel):
    """Non-fatal finding reported while scanning a file."""
    severity: Severity
    message: str
    filename: Optional[str] = None
    line: Optional[int] = None
    statement: Optional[str] = None

    def __str__(self):
        location = ""
        if self.filename:
            location = self.filename
            if self.line:
                location += f":{self.line}"
            location += ": "
        result = location + self.message
        if self.statement:
            result += f": {self.statement}"
        return result


class BuildConfig(BaseModel):
    """Contents of build.json."""
    model_config = ConfigDict(populate_by_name=True)

    order: List[str]
    lib_dir: str = Field(default="lib", alias="libDir")
    mode: OutputMode = OutputMode.STANDARD_MODULE
    output_dir: str = Field(default=".", alias="outputDir")
    link_dir: str = Field(default="application/static", alias="linkDir")
    # Accepted only to report that library inlining is not performed
    require: List[str] = Field(default_factory=list)
