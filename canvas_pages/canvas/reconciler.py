"""Rebuilds the section/column/control tree from controls found in markup.

Canvas markup is flat: every control carries the zone index (section)
and section index (column) it belongs to. Controls arrive here in
document order and are attached to the matching section and column,
which are created the first time they are referenced.
"""

import logging
from typing import TYPE_CHECKING, List, Optional

from .controls import CanvasColumn, CanvasControl
from .models import COLUMN_FACTORS, ControlPosition
from .section import CanvasSection

if TYPE_CHECKING:
    from .page import ClientSidePage

logger = logging.getLogger(__name__)


def _insert_by_order(collection: list, item) -> None:
    """Insert item after every element whose order is <= item.order.

    Keeps the collection sorted by structural index while preserving
    discovery order among equal indexes.
    """
    position = len(collection)
    while position > 0 and collection[position - 1].order > item.order:
        position -= 1
    collection.insert(position, item)


def _find_or_create_section(
    sections: List[CanvasSection],
    zone_index: int,
    page: Optional["ClientSidePage"],
) -> CanvasSection:
    for section in sections:
        if section.order == zone_index:
            return section

    section = CanvasSection(page, zone_index)
    _insert_by_order(sections, section)
    logger.debug(f"Created section for zone {zone_index}")
    return section


def merge_control_to_tree(
    sections: List[CanvasSection],
    control: CanvasControl,
    page: Optional["ClientSidePage"] = None,
    default_factor: int = 12,
) -> CanvasColumn:
    """Attach a parsed non-column control to its section and column.

    Args:
        sections: The page's sections, updated in place
        control: Control whose metadata has been parsed
        page: Page that owns new sections
        default_factor: Factor for new columns when the metadata has none

    Returns:
        The column the control was added to

    Raises:
        ValueError: If the control carries no position metadata
    """
    if not control.control_data or "position" not in control.control_data:
        raise ValueError(f"Control {control.id} has no position metadata")
    position = ControlPosition.from_dict(control.control_data["position"], default_factor)

    section = _find_or_create_section(sections, position.zone_index, page)

    for column in section.columns:
        if column.order == position.section_index:
            break
    else:
        factor = position.section_factor
        if factor not in COLUMN_FACTORS:
            factor = default_factor
        column = CanvasColumn(section, position.section_index, factor)
        _insert_by_order(section.columns, column)

    column.add_control(control)
    return column


def merge_column_to_tree(
    sections: List[CanvasSection],
    column: CanvasColumn,
    page: Optional["ClientSidePage"] = None,
) -> CanvasSection:
    """Attach a parsed empty-column marker to its section.

    Args:
        sections: The page's sections, updated in place
        column: Column whose metadata has been parsed
        page: Page that owns new sections

    Returns:
        The section the column was added to

    Raises:
        ValueError: If the column carries no position metadata
    """
    position = column.position
    if position is None:
        raise ValueError("Column marker has no position metadata")

    section = _find_or_create_section(sections, position.zone_index, page)
    column.section = section
    _insert_by_order(section.columns, column)
    return section
