"""Page canvas document model.

This module converts the canvas markup stored for a modern page into a
tree of sections, columns and controls, and renders that tree back into
markup the host platform accepts.

Key classes:
    ClientSidePage: Page document with parse/render/load/save
    CanvasSection: Ordered container of columns
    CanvasColumn: Ordered container of controls (and empty-column marker)
    ClientSideText: Rich text control
    ClientSideWebpart: Embedded client side component
    CanvasConfig: Construction-time rendering configuration
"""

from .codec import escaped_string_to_json, json_to_escaped_string
from .config import CanvasConfig, ConfigLoader, DEFAULT_CONFIG
from .controls import CanvasColumn, CanvasControl, ClientSideText, ClientSideWebpart
from .errors import CanvasError, CodecError, ConfigError, MalformedMarkupError
from .models import (
    COLUMN_FACTORS,
    ComponentDefinition,
    ControlPosition,
    ControlType,
    PageLayoutType,
    PromotedState,
    ServerProcessedContent,
)
from .page import ClientSidePage
from .scanner import get_attr_value, get_bounded_div_markup
from .section import CanvasSection

__all__ = [
    # Main interface
    "ClientSidePage",
    "CanvasSection",
    "CanvasColumn",
    "CanvasControl",
    "ClientSideText",
    "ClientSideWebpart",
    # Configuration
    "CanvasConfig",
    "ConfigLoader",
    "DEFAULT_CONFIG",
    # Primitives
    "get_bounded_div_markup",
    "get_attr_value",
    "json_to_escaped_string",
    "escaped_string_to_json",
    # Data models
    "COLUMN_FACTORS",
    "ComponentDefinition",
    "ControlPosition",
    "ControlType",
    "PageLayoutType",
    "PromotedState",
    "ServerProcessedContent",
    # Errors
    "CanvasError",
    "CodecError",
    "ConfigError",
    "MalformedMarkupError",
]
