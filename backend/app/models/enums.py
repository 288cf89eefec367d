"""Closed enumerations shared by the schemas and the pipeline."""

import enum


class ComponentType(str, enum.Enum):
    """UI role of a text element, used for artifact styling."""

    BUTTON = "button"
    HEADING = "heading"
    TEXT = "text"
    LINK = "link"
    LABEL = "label"
    PLACEHOLDER = "placeholder"
    TOOLTIP = "tooltip"
    MENU = "menu"
    FORM = "form"
    NAVIGATION = "navigation"
    CONTENT = "content"
    UNKNOWN = "unknown"


class ScreenSection(str, enum.Enum):
    """Region of the screen a text element sits in."""

    HEADER = "header"
    FOOTER = "footer"
    SIDEBAR = "sidebar"
    MAIN = "main"
    MODAL = "modal"
    NAVIGATION = "navigation"
    FORM = "form"
    CONTENT = "content"
    UNKNOWN = "unknown"


class Priority(str, enum.Enum):
    """Editorial priority derived from position, size and importance."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ExtractionSource(str, enum.Enum):
    """Kind of input a text element was extracted from."""

    HTML = "html"
    IMAGE = "image"
    CODE = "code"
    JSON = "json"
    API = "api"


class PrototypeSource(str, enum.Enum):
    """Design tool the prototype was imported from."""

    BOLT = "bolt"
    FIGMA = "figma"
    CURSOR = "cursor"


class ChangeType(str, enum.Enum):
    """Classification of one element in a diff."""

    MODIFIED = "modified"
    UNCHANGED = "unchanged"
