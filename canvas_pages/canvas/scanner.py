"""Lenient scanner for div-bounded blocks of canvas markup.

Canvas markup is not parsed with an HTML parser: control content is
passed through verbatim and must come back byte for byte. Instead the
scanner finds the opening tag of a block and counts nested <div> and
</div> tags until the block is balanced again.
"""

import logging
import re
from typing import Callable, List, Optional, Pattern, TypeVar, Union

from .errors import MalformedMarkupError

logger = logging.getLogger(__name__)

T = TypeVar('T')

DEFAULT_MAX_DEPTH = 1000

_DIV_OPEN = re.compile(r"<div\b[^>]*>", re.IGNORECASE)
_DIV_CLOSE = re.compile(r"</div>", re.IGNORECASE)
_WHITESPACE = re.compile(r"[\t\r\n]")


def regex_index_of(text: str, pattern: Union[Pattern, str], start: int = 0) -> int:
    """Find the first match of pattern in text at or after start.

    Args:
        text: Text to search
        pattern: Compiled regex or regex source
        start: Position to begin searching from

    Returns:
        Index of the match, or -1 if there is none
    """
    if isinstance(pattern, str):
        pattern = re.compile(pattern, re.IGNORECASE)
    match = pattern.search(text, start)
    return match.start() if match else -1


def get_attr_value(html: str, attr_name: str) -> Optional[str]:
    """Get the first value of a double-quoted attribute in an html string.

    Args:
        html: HTML to search
        attr_name: The attribute name

    Returns:
        The raw (still escaped) attribute value, or None if absent
    """
    match = re.search(rf'{re.escape(attr_name)}="([^"]*?)"', html, re.IGNORECASE)
    return match.group(1) if match else None


def get_bounded_div_markup(
    html: Optional[str],
    boundary_start_pattern: Union[Pattern, str],
    collector: Callable[[str], T],
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> List[T]:
    """Find blocks that start at boundary_start_pattern and end at their matching </div>.

    Tabs, carriage returns and newlines are removed first. Blocks are
    reported in document order and never overlap: the search for the
    next block starts after the end of the previous one.

    Args:
        html: Markup to search; None or empty gives no blocks
        boundary_start_pattern: Regex matching the opening tag of a block
        collector: Applied to each block's markup to form the result items
        max_depth: Nesting depth treated as runaway markup

    Returns:
        List of collector results, one per block

    Raises:
        MalformedMarkupError: If nesting exceeds max_depth, goes negative,
            or a block is never closed
    """
    blocks: List[T] = []

    if not html:
        return blocks

    if isinstance(boundary_start_pattern, str):
        boundary_start_pattern = re.compile(boundary_start_pattern, re.IGNORECASE)

    cleaned = _WHITESPACE.sub("", html)

    start_index = regex_index_of(cleaned, boundary_start_pattern)

    while start_index > -1:
        # the boundary's own opening tag
        open_counter = 1
        search_index = start_index + 1

        while True:
            next_open = _DIV_OPEN.search(cleaned, search_index)
            next_close = _DIV_CLOSE.search(cleaned, search_index)

            if next_close is None:
                raise MalformedMarkupError(
                    f"Unterminated block starting at position {start_index}",
                    depth=open_counter,
                )

            if next_open is not None and next_open.start() < next_close.start():
                open_counter += 1
                search_index = next_open.start() + 1
            else:
                open_counter -= 1
                search_index = next_close.start() + 1

            if open_counter > max_depth or open_counter < 0:
                raise MalformedMarkupError(
                    f"Div nesting exceeded depth parameters ({open_counter}) "
                    f"in block starting at position {start_index}",
                    depth=open_counter,
                )

            if open_counter == 0:
                end_index = next_close.end()
                blocks.append(collector(cleaned[start_index:end_index].strip()))
                break

        start_index = regex_index_of(cleaned, boundary_start_pattern, end_index)

    logger.debug(f"Found {len(blocks)} bounded blocks")
    return blocks
