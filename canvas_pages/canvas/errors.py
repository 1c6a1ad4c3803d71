"""Exceptions raised while parsing, encoding and configuring page canvases."""

from typing import Optional

from ..sharepoint_client.errors import CanvasPagesError


class CanvasError(CanvasPagesError):
    """Base exception for all canvas model errors."""
    pass


class MalformedMarkupError(CanvasError):
    """Raised when canvas markup cannot be split into balanced div blocks.

    This aborts the parse of the whole page: the tree built so far would
    be inconsistent.
    """

    def __init__(self, message: str, depth: Optional[int] = None):
        super().__init__(message)
        self.depth = depth


class CodecError(CanvasError):
    """Raised when an attribute value is not valid escaped JSON."""

    def __init__(self, message: str, value: Optional[str] = None):
        super().__init__(message)
        self.value = value


class ConfigError(CanvasError):
    """Raised when a canvas configuration file is invalid."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Config error in field '{config_field}': {message}"
        else:
            full_message = f"Config error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message
