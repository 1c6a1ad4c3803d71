"""Client side page document.

ClientSidePage owns the section/column/control tree of a modern page.
It parses the page's canvas markup into that tree, renders the tree
back into markup, and loads/saves the markup through a page store.
"""

import logging
import re
from typing import TYPE_CHECKING, Callable, Dict, Iterator, List, Optional, Type

from .config import DEFAULT_CONFIG, CanvasConfig
from .controls import CanvasColumn, CanvasControl, ClientSideText, ClientSideWebpart
from .models import ControlType, PageLayoutType
from .reconciler import merge_column_to_tree, merge_control_to_tree
from .scanner import get_attr_value, get_bounded_div_markup
from .section import CanvasSection, get_next_order

if TYPE_CHECKING:
    from ..page_operations.models import UpdateResult
    from ..page_operations.page_store import PageStore

logger = logging.getLogger(__name__)

CONTROL_BOUNDARY = re.compile(r"<div\b[^>]*data-sp-canvascontrol[^>]*?>", re.IGNORECASE)

_CONTROL_TYPE = re.compile(r"controlType&quot;&#58;(\d+)", re.IGNORECASE)

_CONTROL_CLASSES: Dict[int, Type[CanvasControl]] = {
    ControlType.COLUMN: CanvasColumn,
    ControlType.WEBPART: ClientSideWebpart,
    ControlType.TEXT: ClientSideText,
}


def reindex(sections: List[CanvasSection]) -> None:
    """Renumber sections, columns and controls 1, 2, 3... by position.

    Back-references are reset on the way so that items appended
    directly to the lists point at their real parents.
    """
    for i, section in enumerate(sections, start=1):
        section.order = i
        for j, column in enumerate(section.columns, start=1):
            column.order = j
            column.section = section
            for k, control in enumerate(column.controls, start=1):
                control.order = k
                control.column = column


class ClientSidePage:
    """A modern page's canvas as a tree of sections, columns and controls.

    Usage:
        page = ClientSidePage.from_store(store, "/sites/dev/SitePages/home.aspx")
        page.add_section().add_control(ClientSideText("Hello"))
        page.save()

    Attributes:
        store: Backing store used by load/save (optional for offline use)
        page_ref: Server-relative URL of the page file
        sections: Sections in document order
        comments_disabled: Whether comments are disabled on the page
        config: Rendering configuration
        skipped_controls: Controls of unsupported type dropped by the last parse
    """

    def __init__(
        self,
        store: Optional["PageStore"] = None,
        page_ref: Optional[str] = None,
        sections: Optional[List[CanvasSection]] = None,
        comments_disabled: bool = False,
        config: Optional[CanvasConfig] = None,
    ):
        self.store = store
        self.page_ref = page_ref
        self.sections: List[CanvasSection] = sections if sections is not None else []
        for section in self.sections:
            section.page = self
        self.comments_disabled = comments_disabled
        self.config = config or DEFAULT_CONFIG
        self.skipped_controls = 0

    @classmethod
    def create(
        cls,
        store: "PageStore",
        library: str,
        page_name: str,
        title: str,
        layout_type: PageLayoutType = PageLayoutType.ARTICLE,
        config: Optional[CanvasConfig] = None,
    ) -> "ClientSidePage":
        """Create a new, empty page in a library.

        Raises:
            PageAlreadyExistsError: If the library already has a file named page_name
        """
        result = store.create_page(library, page_name, title, layout_type)
        return cls(
            store,
            result.page_ref,
            comments_disabled=result.comments_disabled,
            config=config,
        )

    @classmethod
    def from_store(
        cls,
        store: "PageStore",
        page_ref: str,
        config: Optional[CanvasConfig] = None,
    ) -> "ClientSidePage":
        """Create a page instance and load its content from the store."""
        page = cls(store, page_ref, config=config)
        page.load()
        return page

    def add_section(self) -> CanvasSection:
        """Add a section to the end of this page."""
        section = CanvasSection(self, get_next_order(self.sections))
        self.sections.append(section)
        return section

    def render(self) -> str:
        """Convert this page's content to canvas markup.

        The whole tree is reindexed first, so order values match
        positions after this call.
        """
        reindex(self.sections)

        html = ["<div>"]
        for section in self.sections:
            html.append(section.render(self.config))
        html.append("</div>")

        return "".join(html)

    def parse(self, markup: Optional[str]) -> "ClientSidePage":
        """Replace this page's content with the tree found in markup.

        On error the existing tree is left untouched.

        Raises:
            MalformedMarkupError: If the markup's divs cannot be balanced
            CodecError: If a control's metadata cannot be decoded
        """
        controls = get_bounded_div_markup(
            markup,
            CONTROL_BOUNDARY,
            self._control_from_markup,
            self.config.max_nesting_depth,
        )

        sections: List[CanvasSection] = []
        counter = 0
        skipped = 0
        for control in controls:
            if control is None:
                skipped += 1
                continue
            if isinstance(control, CanvasColumn):
                merge_column_to_tree(sections, control, self)
            else:
                # transient id in discovery order; replaced by the next reindex
                counter += 1
                control.order = counter
                merge_control_to_tree(
                    sections, control, self, self.config.default_column_factor
                )

        self.sections = sections
        self.skipped_controls = skipped
        logger.debug(
            f"Parsed {counter} controls into {len(sections)} sections"
        )
        return self

    def load(self) -> None:
        """Load this page's content and comments flag from the store."""
        store, page_ref = self._require_store()
        content = store.fetch_page_content(page_ref)
        self.parse(content.markup)
        self.comments_disabled = content.comments_disabled

    def save(self) -> "UpdateResult":
        """Persist the sections, columns and controls to the store."""
        store, page_ref = self._require_store()
        result = store.write_page_content(page_ref, self.render())
        logger.info(f"Saved canvas content of {page_ref}")
        return result

    def enable_comments(self) -> "UpdateResult":
        return self._set_comments_disabled(False)

    def disable_comments(self) -> "UpdateResult":
        return self._set_comments_disabled(True)

    def iter_controls(self) -> Iterator[CanvasControl]:
        """Yield every control on the page in document order."""
        for section in self.sections:
            yield from section.iter_controls()

    def find_control(self, predicate: Callable[[CanvasControl], bool]) -> Optional[CanvasControl]:
        """First control for which predicate is true, or None."""
        for control in self.iter_controls():
            if predicate(control):
                return control
        return None

    def find_control_by_id(self, control_id: str) -> Optional[CanvasControl]:
        return self.find_control(lambda c: c.id == control_id)

    def _control_from_markup(self, markup: str) -> Optional[CanvasControl]:
        """Instantiate and parse the control a canvas block describes."""
        control_data = get_attr_value(markup, "data-sp-controldata") or ""
        match = _CONTROL_TYPE.search(control_data)
        # no controlType means an empty column
        control_type = int(match.group(1)) if match else ControlType.COLUMN

        control_class = _CONTROL_CLASSES.get(control_type)
        if control_class is None:
            logger.warning(f"Skipping control with unsupported type {control_type}")
            return None

        control = control_class()
        control.parse(markup, self.config)
        return control

    def _set_comments_disabled(self, disabled: bool) -> "UpdateResult":
        store, page_ref = self._require_store()
        result = store.set_comments_disabled(page_ref, disabled)
        self.comments_disabled = disabled
        return result

    def _require_store(self):
        if self.store is None or not self.page_ref:
            raise ValueError("Page has no store or page reference to load from or save to")
        return self.store, self.page_ref
