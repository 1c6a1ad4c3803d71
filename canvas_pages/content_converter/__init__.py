"""Content conversion module for canvas -> markdown export.

This module provides the MarkdownConverter, which turns the controls of
a page canvas into markdown using markdownify.
"""

from .markdown_converter import MarkdownConverter

__all__ = ['MarkdownConverter']
