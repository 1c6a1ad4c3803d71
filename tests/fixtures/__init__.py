"""Test fixtures for canvas page tests.

This module provides test fixtures for:
- Canvas markup samples as stored in CanvasContent1
- Component catalogue entries for web part tests
"""

from .sample_canvas import (
    TEXT_CONTROL_ID,
    WEBPART_INSTANCE_ID,
    EMBED_WEBPART_ID,
    SAMPLE_CANVAS_HELLO,
    SAMPLE_CANVAS_TWO_SECTIONS,
    SAMPLE_CANVAS_OUT_OF_ORDER,
    SAMPLE_CANVAS_UNKNOWN_CONTROL,
    SAMPLE_CANVAS_UNTERMINATED,
    SAMPLE_COMPONENT,
    SAMPLE_COMPONENT_MANIFEST,
)

__all__ = [
    "TEXT_CONTROL_ID",
    "WEBPART_INSTANCE_ID",
    "EMBED_WEBPART_ID",
    "SAMPLE_CANVAS_HELLO",
    "SAMPLE_CANVAS_TWO_SECTIONS",
    "SAMPLE_CANVAS_OUT_OF_ORDER",
    "SAMPLE_CANVAS_UNKNOWN_CONTROL",
    "SAMPLE_CANVAS_UNTERMINATED",
    "SAMPLE_COMPONENT",
    "SAMPLE_COMPONENT_MANIFEST",
]
