"""
Conversion pipeline exceptions
"""

from pathlib import Path
from typing import Optional


class ConversionError(Exception):
    """Base exception for the conversion pipeline"""
    pass


class MalformedRouteError(ConversionError):
    """Request path cannot be parsed into a route"""
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Malformed route {path!r}: {reason}")


class TemplateMissingError(ConversionError):
    """No conversion template available for a host"""
    def __init__(self, hostname: str, template_name: str):
        self.hostname = hostname
        self.template_name = template_name
        super().__init__(f"No template {template_name!r} for host {hostname!r}")


class TemplateRenderError(ConversionError):
    """Template failed while rendering a model"""
    pass


class ContentReadError(ConversionError):
    """Content item exists but its files cannot be read"""
    def __init__(self, path: Path, cause: BaseException):
        self.path = path
        super().__init__(f"Cannot read content {path}: {cause}")


class ArtifactIOError(ConversionError):
    """Temporary artifact could not be created, written or read"""
    def __init__(self, path: Path, operation: str, cause: Optional[BaseException] = None):
        self.path = path
        self.operation = operation
        detail = f": {cause}" if cause else ""
        super().__init__(f"Cannot {operation} {path}{detail}")


class ConverterLaunchError(ConversionError):
    """Converter executable could not be started"""
    def __init__(self, tool: str, cause: BaseException):
        self.tool = tool
        super().__init__(f"Could not start {tool!r}: {cause}")


class ConverterExitError(ConversionError):
    """Converter exited unsuccessfully"""
    def __init__(self, tool: str, returncode: Optional[int], message: Optional[str] = None):
        self.tool = tool
        self.returncode = returncode
        super().__init__(message or f"{tool!r} exited with status {returncode}")


class ConverterTimeoutError(ConverterExitError):
    """Converter exceeded the configured timeout and was killed"""
    def __init__(self, tool: str, timeout_seconds: float, returncode: Optional[int] = None):
        self.timeout_seconds = timeout_seconds
        super().__init__(
            tool, returncode,
            f"{tool!r} did not finish within {timeout_seconds:g}s and was killed",
        )
