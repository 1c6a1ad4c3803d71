"""Data models for the page canvas.

Enumerations and plain data holders shared by the control model, the
tree reconciler and the page document.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional


# Column width weights; 12 is a full-width column
COLUMN_FACTORS = (0, 2, 4, 6, 8, 12)


def validate_factor(factor: int) -> int:
    """Return factor unchanged if it is a valid column width weight.

    Raises:
        ValueError: If factor is not one of COLUMN_FACTORS
    """
    if isinstance(factor, bool) or factor not in COLUMN_FACTORS:
        raise ValueError(
            f"Invalid column factor: {factor!r}. "
            f"Must be one of {', '.join(str(f) for f in COLUMN_FACTORS)}."
        )
    return factor


class ControlType(IntEnum):
    """Discriminant stored as controlType in a control's metadata."""

    COLUMN = 0
    WEBPART = 3
    TEXT = 4


class PromotedState(IntEnum):
    """Page promotion state of the hosting list item."""

    NOT_PROMOTED = 0
    PROMOTE_ON_PUBLISH = 1
    PROMOTED = 2


class PageLayoutType(str, Enum):
    """Layout types available for client side pages."""

    ARTICLE = "Article"
    HOME = "Home"


@dataclass
class ControlPosition:
    """Positional metadata written into every control.

    Attributes:
        zone_index: Order of the owning section
        section_index: Order of the owning column
        section_factor: Width factor of the owning column
        control_index: Order within the column (None for column markers)
    """

    zone_index: int
    section_index: int
    section_factor: int = 12
    control_index: Optional[int] = None

    def to_dict(self) -> Dict[str, int]:
        data = {}
        if self.control_index is not None:
            data["controlIndex"] = self.control_index
        data["sectionFactor"] = self.section_factor
        data["sectionIndex"] = self.section_index
        data["zoneIndex"] = self.zone_index
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], default_factor: int = 12) -> "ControlPosition":
        return cls(
            zone_index=int(data.get("zoneIndex", 1)),
            section_index=int(data.get("sectionIndex", 1)),
            section_factor=int(data.get("sectionFactor", default_factor)),
            control_index=data.get("controlIndex"),
        )


@dataclass
class ServerProcessedContent:
    """Server-rendered content of a web part.

    Each list holds {"Name": ..., "Value": ...} entries in the order the
    server produced them. A field that was absent stays None.
    """

    searchable_plain_texts: Optional[List[Dict[str, Any]]] = None
    image_sources: Optional[List[Dict[str, Any]]] = None
    links: Optional[List[Dict[str, Any]]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ServerProcessedContent":
        return cls(
            searchable_plain_texts=data.get("searchablePlainTexts"),
            image_sources=data.get("imageSources"),
            links=data.get("links"),
        )


@dataclass
class ComponentDefinition:
    """A client side component as listed by the site's web part catalogue.

    Attributes:
        id: Component id, usually wrapped in curly braces
        manifest: JSON manifest text
        name: Component name
        component_type: Component type code
        manifest_type: Manifest type code
        status: Component status code
    """

    id: str
    manifest: str
    name: str = ""
    component_type: int = 0
    manifest_type: int = 0
    status: int = 0

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ComponentDefinition":
        return cls(
            id=data.get("Id", ""),
            manifest=data.get("Manifest", ""),
            name=data.get("Name", ""),
            component_type=data.get("ComponentType", 0),
            manifest_type=data.get("ManifestType", 0),
            status=data.get("Status", 0),
        )
