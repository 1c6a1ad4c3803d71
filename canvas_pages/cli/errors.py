"""Typed exception hierarchy for CLI-related errors."""

from canvas_pages.sharepoint_client.errors import CanvasPagesError


class CLIError(CanvasPagesError):
    """Base exception for all CLI-related errors."""
    pass


class InputFileError(CLIError):
    """Raised when a markup file cannot be read or written."""

    def __init__(self, file_path: str, operation: str, reason: str):
        super().__init__(f"Cannot {operation} {file_path}: {reason}")
        self.file_path = file_path
        self.operation = operation
        self.reason = reason
