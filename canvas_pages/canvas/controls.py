"""Canvas controls: column markers, text blocks and web parts.

Every control renders itself to canvas markup given its final position
and can populate itself from a block of markup found by the scanner.
The positional metadata is not kept up to date while the tree is being
edited; it is computed from the tree shape each time a control renders.
"""

import json
import logging
import re
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from bs4 import BeautifulSoup

from .codec import escaped_string_to_json, json_to_escaped_string
from .config import DEFAULT_CONFIG, CanvasConfig
from .errors import CodecError, MalformedMarkupError
from .models import (
    COLUMN_FACTORS,
    ComponentDefinition,
    ControlPosition,
    ControlType,
    ServerProcessedContent,
    validate_factor,
)
from .scanner import get_attr_value, get_bounded_div_markup

if TYPE_CHECKING:
    from .section import CanvasSection

logger = logging.getLogger(__name__)

_RTE_START = re.compile(r"<div\b[^>]*data-sp-rte[^>]*?>", re.IGNORECASE)
_HTML_PROPERTIES_START = re.compile(r"<div\b[^>]*data-sp-htmlproperties[^>]*?>", re.IGNORECASE)
_TRAILING_CLOSE = re.compile(r"</div>$", re.IGNORECASE)


def _inner_markup(start_pattern):
    """Build a collector that strips a block's opening tag and final </div>."""
    def collect(markup: str) -> str:
        return _TRAILING_CLOSE.sub("", start_pattern.sub("", markup, count=1))
    return collect


class CanvasControl(ABC):
    """Base class of everything that can sit on a page canvas.

    Attributes:
        data_version: data-sp-canvasdataversion of this control; None
            means the rendering config's version is used
        id: Instance id of the control
        order: 1-based order, authoritative only after a render
        column: Column this control belongs to (None until attached)
        control_data: Metadata decoded by the last parse, if any
    """

    control_type = ControlType.COLUMN

    def __init__(self, data_version: Optional[str] = None, control_id: Optional[str] = None):
        self.data_version = data_version
        self.id = control_id if control_id is not None else str(uuid.uuid4())
        self.order = 1
        self.column: Optional["CanvasColumn"] = None
        self.control_data: Optional[Dict[str, Any]] = None

    @property
    def position(self) -> Optional[ControlPosition]:
        """Position decoded from the last parsed markup."""
        if not self.control_data or "position" not in self.control_data:
            return None
        return ControlPosition.from_dict(self.control_data["position"])

    def json_data(self, position: ControlPosition, config: CanvasConfig = DEFAULT_CONFIG) -> str:
        """Escaped value of this control's data-sp-controldata attribute."""
        return json_to_escaped_string(self.get_control_data(position, config))

    def parse(self, markup: str, config: CanvasConfig = DEFAULT_CONFIG) -> None:
        """Populate the common fields from a block of canvas markup.

        Raises:
            CodecError: If the control metadata is missing or invalid
        """
        control_data = escaped_string_to_json(get_attr_value(markup, "data-sp-controldata"))
        if not isinstance(control_data, dict):
            raise CodecError("Control data must be a JSON object", value=str(control_data))

        self.control_data = control_data
        version = get_attr_value(markup, "data-sp-canvasdataversion")
        if version is not None:
            self.data_version = version
        if "id" in control_data:
            self.id = control_data["id"]

    @abstractmethod
    def render(
        self,
        index: int,
        config: CanvasConfig = DEFAULT_CONFIG,
        position: Optional[ControlPosition] = None,
    ) -> str:
        """Render this control as canvas markup at the given 1-based order."""

    @abstractmethod
    def get_control_data(self, position: ControlPosition, config: CanvasConfig) -> Dict[str, Any]:
        """Build the metadata stored in data-sp-controldata."""

    def _version(self, config: CanvasConfig) -> str:
        return self.data_version or config.data_version

    def _resolve_position(self, index: int, position: Optional[ControlPosition]) -> ControlPosition:
        if position is not None:
            return position
        if self.column is None:
            raise ValueError("Control must be added to a column before it can render")
        return self.column.child_position(index)

    def _open_tag(self, position: ControlPosition, config: CanvasConfig) -> str:
        return (
            f'<div data-sp-canvascontrol="" data-sp-canvasdataversion="{self._version(config)}" '
            f'data-sp-controldata="{self.json_data(position, config)}">'
        )


class CanvasColumn(CanvasControl):
    """A column within a section; also the empty-column marker control.

    A column with controls renders only its controls. A column without
    controls renders an empty marker div so it survives a reload.
    """

    control_type = ControlType.COLUMN

    def __init__(
        self,
        section: Optional["CanvasSection"] = None,
        order: int = 1,
        factor: int = 12,
        controls: Optional[List[CanvasControl]] = None,
        data_version: Optional[str] = None,
    ):
        super().__init__(data_version)
        self.section = section
        self.order = order
        self.factor = validate_factor(factor)
        self.controls: List[CanvasControl] = []
        for control in controls or []:
            self.add_control(control)

    def add_control(self, control: CanvasControl) -> "CanvasColumn":
        """Append a control to this column."""
        control.column = self
        self.controls.append(control)
        return self

    def get_control(self, index: int) -> CanvasControl:
        """Get a control by its 0-based position in this column."""
        return self.controls[index]

    def child_position(self, index: int, zone_index: Optional[int] = None) -> ControlPosition:
        """Position metadata for the control rendered at 1-based index."""
        if zone_index is None:
            zone_index = self.section.order if self.section is not None else 1
        return ControlPosition(
            zone_index=zone_index,
            section_index=self.order,
            section_factor=self.factor,
            control_index=index,
        )

    def get_control_data(self, position: ControlPosition, config: CanvasConfig) -> Dict[str, Any]:
        return {
            "displayMode": config.column_display_mode,
            "position": ControlPosition(
                zone_index=position.zone_index,
                section_index=position.section_index,
                section_factor=position.section_factor,
            ).to_dict(),
        }

    def render(
        self,
        index: Optional[int] = None,
        config: CanvasConfig = DEFAULT_CONFIG,
        position: Optional[ControlPosition] = None,
    ) -> str:
        if index is not None:
            self.order = index

        if position is None:
            zone_index = self.section.order if self.section is not None else 1
        else:
            zone_index = position.zone_index

        if not self.controls:
            own = ControlPosition(
                zone_index=zone_index,
                section_index=self.order,
                section_factor=self.factor,
            )
            return self._open_tag(own, config) + "</div>"

        return "".join(
            control.render(i, config, self.child_position(i, zone_index))
            for i, control in enumerate(self.controls, start=1)
        )

    def parse(self, markup: str, config: CanvasConfig = DEFAULT_CONFIG) -> None:
        super().parse(markup, config)
        position = ControlPosition.from_dict(
            self.control_data.get("position", {}), config.default_column_factor
        )
        if position.section_factor not in COLUMN_FACTORS:
            logger.warning(
                f"Column has unexpected factor {position.section_factor}, keeping it as is"
            )
        self.factor = position.section_factor
        self.order = position.section_index


class ClientSideText(CanvasControl):
    """A rich text block. Its content is always wrapped in a paragraph."""

    control_type = ControlType.TEXT

    def __init__(self, text: str = "", data_version: Optional[str] = None, control_id: Optional[str] = None):
        super().__init__(data_version, control_id)
        self.text = text

    @property
    def text(self) -> str:
        """The text markup of this control."""
        return self._text

    @text.setter
    def text(self, text: str) -> None:
        text = text or ""
        if not text.startswith("<p>"):
            text = f"<p>{text}</p>"
        self._text = text

    @property
    def plain_text(self) -> str:
        """Text content with all markup removed."""
        return BeautifulSoup(self._text, "lxml").get_text(separator=" ", strip=True)

    def get_control_data(self, position: ControlPosition, config: CanvasConfig) -> Dict[str, Any]:
        return {
            "controlType": int(self.control_type),
            "editorType": config.text_editor_type,
            "id": self.id,
            "position": position.to_dict(),
        }

    def render(
        self,
        index: int,
        config: CanvasConfig = DEFAULT_CONFIG,
        position: Optional[ControlPosition] = None,
    ) -> str:
        self.order = index
        position = self._resolve_position(index, position)

        html = [
            self._open_tag(position, config),
            '<div data-sp-rte="">',
            self.text,
            "</div>",
            "</div>",
        ]
        return "".join(html)

    def parse(self, markup: str, config: CanvasConfig = DEFAULT_CONFIG) -> None:
        """Populate this text control from its canvas markup.

        A missing content holder gives empty text unless the config asks
        for strict parsing.

        Raises:
            CodecError: If the control metadata is invalid
            MalformedMarkupError: If strict and the content holder is missing
        """
        super().parse(markup, config)

        holders = get_bounded_div_markup(
            markup, _RTE_START, _inner_markup(_RTE_START), config.max_nesting_depth
        )
        if holders:
            self.text = holders[0]
        elif config.strict_text_content:
            raise MalformedMarkupError(f"Text control {self.id} has no content holder")
        else:
            logger.debug(f"Text control {self.id} has no content holder, using empty text")
            self.text = ""


class ClientSideWebpart(CanvasControl):
    """An embedded client side component ("web part").

    Attributes:
        title: Display title
        description: Description text
        properties: Component property bag, passed through untouched
        webpart_id: Component id (without braces)
        html_properties: Raw data-sp-htmlproperties body from the last parse
        server_processed_content: Server-rendered content to re-emit, if any
    """

    control_type = ControlType.WEBPART

    def __init__(
        self,
        title: str = "",
        description: str = "",
        properties: Optional[Dict[str, Any]] = None,
        webpart_id: str = "",
        html_properties: str = "",
        server_processed_content: Optional[ServerProcessedContent] = None,
        data_version: Optional[str] = None,
        control_id: Optional[str] = None,
    ):
        super().__init__(data_version, control_id)
        self.title = title
        self.description = description
        self.properties: Dict[str, Any] = properties if properties is not None else {}
        self.webpart_id = webpart_id
        self.html_properties = html_properties
        self.server_processed_content = server_processed_content

    @classmethod
    def from_component_def(cls, definition: ComponentDefinition) -> "ClientSideWebpart":
        """Create a web part initialized from a catalogue component."""
        part = cls()
        part.import_component(definition)
        return part

    def import_component(self, definition: ComponentDefinition) -> None:
        """Take id, defaults and properties from a component definition.

        Raises:
            CodecError: If the manifest is not valid JSON
            ValueError: If the manifest has no preconfigured entries
        """
        self.webpart_id = re.sub(r"^\{|\}$", "", definition.id)

        try:
            manifest = json.loads(definition.manifest)
        except (TypeError, ValueError) as e:
            raise CodecError(f"Component manifest is not valid JSON: {e}") from e

        entries = manifest.get("preconfiguredEntries") or []
        if not entries:
            raise ValueError(f"Component {self.webpart_id} has no preconfigured entries")

        entry = entries[0]
        self.title = entry.get("title", {}).get("default", "")
        self.description = entry.get("description", {}).get("default", "")
        self.properties = self._parse_json_properties(entry.get("properties") or {})

    def set_properties(self, properties: Dict[str, Any]) -> "ClientSideWebpart":
        self.properties = properties
        return self

    def get_properties(self) -> Dict[str, Any]:
        return self.properties

    def get_control_data(self, position: ControlPosition, config: CanvasConfig) -> Dict[str, Any]:
        return {
            "controlType": int(self.control_type),
            "id": self.id,
            "position": position.to_dict(),
            "webPartId": self.webpart_id,
        }

    def render(
        self,
        index: int,
        config: CanvasConfig = DEFAULT_CONFIG,
        position: Optional[ControlPosition] = None,
    ) -> str:
        self.order = index
        position = self._resolve_position(index, position)
        version = self._version(config)

        # value of the data-sp-webpartdata attribute
        data = {
            "dataVersion": version,
            "description": self.description,
            "id": self.webpart_id,
            "instanceId": self.id,
            "properties": self.properties,
            "title": self.title,
        }

        html = [
            self._open_tag(position, config),
            f'<div data-sp-webpart="" data-sp-canvasdataversion="{version}" '
            f'data-sp-webpartdata="{json_to_escaped_string(data)}">',
            "<div data-sp-componentid>",
            self.webpart_id,
            "</div>",
            '<div data-sp-htmlproperties="">',
            self.render_html_properties(),
            "</div>",
            "</div>",
            "</div>",
        ]
        return "".join(html)

    def parse(self, markup: str, config: CanvasConfig = DEFAULT_CONFIG) -> None:
        super().parse(markup, config)

        webpart_data = escaped_string_to_json(get_attr_value(markup, "data-sp-webpartdata"))
        if not isinstance(webpart_data, dict):
            raise CodecError("Web part data must be a JSON object", value=str(webpart_data))

        self.title = webpart_data.get("title", "")
        self.description = webpart_data.get("description", "")
        self.webpart_id = webpart_data.get("id", "")
        self.set_properties(webpart_data.get("properties") or {})

        if "serverProcessedContent" in webpart_data:
            self.server_processed_content = ServerProcessedContent.from_dict(
                webpart_data["serverProcessedContent"] or {}
            )

        html_props = get_bounded_div_markup(
            markup,
            _HTML_PROPERTIES_START,
            _inner_markup(_HTML_PROPERTIES_START),
            config.max_nesting_depth,
        )
        self.html_properties = html_props[0] if html_props else ""

    def render_html_properties(self) -> str:
        """Body of the data-sp-htmlproperties div.

        Server-processed content is synthesized into markup when present;
        otherwise the body captured by the last parse is used verbatim.
        """
        content = self.server_processed_content
        if content is None:
            return self.html_properties

        html = []
        for prop in content.searchable_plain_texts or []:
            html.append(f'<div data-sp-prop-name="{prop["Name"]}" data-sp-searchableplaintext="true">')
            html.append(str(prop["Value"]))
            html.append("</div>")

        for prop in content.image_sources or []:
            html.append(f'<img data-sp-prop-name="{prop["Name"]}" src="{prop["Value"]}" />')

        for prop in content.links or []:
            html.append(f'<a data-sp-prop-name="{prop["Name"]}" href="{prop["Value"]}"></a>')

        return "".join(html)

    def _parse_json_properties(self, props: Dict[str, Any]) -> Dict[str, Any]:
        """Pick the effective property bag out of manifest properties.

        Server-processed content is kept as well since it may be needed
        to render the web part's html properties later on.
        """
        webpart_data = props.get("webPartData")
        if isinstance(webpart_data, dict) and "serverProcessedContent" in webpart_data:
            self.server_processed_content = ServerProcessedContent.from_dict(
                webpart_data["serverProcessedContent"] or {}
            )
        elif "serverProcessedContent" in props:
            self.server_processed_content = ServerProcessedContent.from_dict(
                props["serverProcessedContent"] or {}
            )
        else:
            self.server_processed_content = None

        if isinstance(webpart_data, dict) and "properties" in webpart_data:
            return webpart_data["properties"]
        elif "properties" in props:
            return props["properties"]
        return props
