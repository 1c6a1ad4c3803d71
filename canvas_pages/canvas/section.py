"""Canvas sections: the horizontal bands of a page holding columns."""

from typing import TYPE_CHECKING, Iterator, List, Optional, Sequence

from .config import DEFAULT_CONFIG, CanvasConfig
from .controls import CanvasColumn, CanvasControl
from .models import ControlPosition, validate_factor

if TYPE_CHECKING:
    from .page import ClientSidePage


def get_next_order(collection: Sequence) -> int:
    """Next 1-based order value for a collection of ordered things."""
    if not collection:
        return 1
    return max(item.order for item in collection) + 1


class CanvasSection:
    """An ordered container of columns within a page.

    Attributes:
        page: Page this section belongs to
        order: 1-based position among the page's sections (the zone index)
        columns: Columns in document order
    """

    def __init__(
        self,
        page: Optional["ClientSidePage"] = None,
        order: int = 1,
        columns: Optional[List[CanvasColumn]] = None,
    ):
        self.page = page
        self.order = order
        self.columns: List[CanvasColumn] = []
        for column in columns or []:
            column.section = self
            self.columns.append(column)

    @property
    def default_column(self) -> CanvasColumn:
        """First column of this section, created full width if there is none."""
        if not self.columns:
            self.add_column()
        return self.columns[0]

    def add_column(self, factor: int = 12) -> CanvasColumn:
        """Add a new column to the end of this section.

        Raises:
            ValueError: If factor is not a valid column width
        """
        column = CanvasColumn(self, get_next_order(self.columns), validate_factor(factor))
        self.columns.append(column)
        return column

    def add_control(self, control: CanvasControl) -> "CanvasSection":
        """Add a control to this section's default column."""
        self.default_column.add_control(control)
        return self

    def iter_controls(self) -> Iterator[CanvasControl]:
        for column in self.columns:
            yield from column.controls

    def render(self, config: CanvasConfig = DEFAULT_CONFIG) -> str:
        return "".join(
            column.render(
                config=config,
                position=ControlPosition(
                    zone_index=self.order,
                    section_index=column.order,
                    section_factor=column.factor,
                ),
            )
            for column in self.columns
        )
