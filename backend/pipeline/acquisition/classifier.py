"""Rule-based classification of extracted text.

Each classifier is an ordered list of ``ClassificationRule`` entries. Rules
are evaluated top to bottom and the first match decides; when nothing
matches, the classifier's documented default is returned. Every function here
is pure so the rule tables can be tested in isolation.

The heuristics mirror what design-tool exports make available: the layer
(node) name, the text itself, vertical position and font size.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from app.models.enums import ComponentType, Priority, ScreenSection

L = TypeVar("L")


@dataclass(frozen=True)
class TextFeatures:
    """Inputs available to the classification rules."""

    name: str = ""
    text: str = ""
    y: float | None = None
    font_size: float | None = None
    is_interactive: bool = False

    @property
    def lower_name(self) -> str:
        return self.name.lower()

    @property
    def lower_text(self) -> str:
        return self.text.lower()


@dataclass(frozen=True)
class ClassificationRule(Generic[L]):
    """A labelled predicate. The first rule whose predicate holds wins."""

    label: L
    predicate: Callable[[TextFeatures], bool]
    description: str


def first_match(
    rules: Sequence[ClassificationRule[L]], features: TextFeatures, default: L
) -> L:
    """Return the label of the first matching rule, else ``default``."""
    for rule in rules:
        if rule.predicate(features):
            return rule.label
    return default


def _name_has(*needles: str) -> Callable[[TextFeatures], bool]:
    return lambda f: any(needle in f.lower_name for needle in needles)


def _text_has(*needles: str) -> Callable[[TextFeatures], bool]:
    return lambda f: any(needle in f.lower_text for needle in needles)


# =============================================================================
# Component type
# =============================================================================

COMPONENT_TYPE_RULES: list[ClassificationRule[ComponentType]] = [
    ClassificationRule(
        ComponentType.BUTTON,
        lambda f: _name_has("button")(f) or _text_has("click", "submit")(f),
        "Layer named button, or call-to-action wording",
    ),
    ClassificationRule(
        ComponentType.NAVIGATION,
        lambda f: _name_has("nav", "menu")(f) or _text_has("home")(f),
        "Layer named nav/menu, or a home link",
    ),
    ClassificationRule(
        ComponentType.HEADING,
        lambda f: _name_has("head")(f) or 0 < len(f.text) < 50 and ":" not in f.text,
        "Layer named head*, or short text without a colon",
    ),
    ClassificationRule(
        ComponentType.LABEL,
        lambda f: _name_has("label")(f) or ":" in f.text,
        "Layer named label, or text containing a colon",
    ),
    ClassificationRule(
        ComponentType.LINK,
        lambda f: _name_has("link")(f) or _text_has("read more")(f),
        "Layer named link, or read-more wording",
    ),
]
DEFAULT_COMPONENT_TYPE = ComponentType.CONTENT


def classify_component_type(name: str, text: str) -> ComponentType:
    """Infer the UI role of a text layer. Defaults to CONTENT."""
    return first_match(
        COMPONENT_TYPE_RULES,
        TextFeatures(name=name, text=text),
        DEFAULT_COMPONENT_TYPE,
    )


# =============================================================================
# Screen section
# =============================================================================

HEADER_BAND = 100  # px from the top of the frame

SCREEN_SECTION_RULES: list[ClassificationRule[ScreenSection]] = [
    ClassificationRule(
        ScreenSection.HEADER,
        lambda f: _name_has("header")(f) or (f.y is not None and f.y < HEADER_BAND),
        "Layer named header, or positioned in the top band",
    ),
    ClassificationRule(
        ScreenSection.FOOTER,
        _name_has("footer", "bottom"),
        "Layer named footer/bottom",
    ),
    ClassificationRule(
        ScreenSection.NAVIGATION,
        _name_has("nav", "menu"),
        "Layer named nav/menu",
    ),
    ClassificationRule(
        ScreenSection.MODAL,
        _name_has("modal", "dialog"),
        "Layer named modal/dialog",
    ),
    ClassificationRule(
        ScreenSection.FORM,
        _name_has("form", "input"),
        "Layer named form/input",
    ),
]
DEFAULT_SCREEN_SECTION = ScreenSection.MAIN


def classify_screen_section(
    name: str, text: str = "", y: float | None = None
) -> ScreenSection:
    """Infer the screen region of a text layer. Defaults to MAIN."""
    return first_match(
        SCREEN_SECTION_RULES,
        TextFeatures(name=name, text=text, y=y),
        DEFAULT_SCREEN_SECTION,
    )


# =============================================================================
# Interactivity and priority
# =============================================================================

INTERACTIVE_NAME_PARTS = ("button", "link", "nav")


def is_interactive_name(name: str) -> bool:
    """Layers named like buttons, links or navigation are interactive."""
    lowered = name.lower()
    return any(part in lowered for part in INTERACTIVE_NAME_PARTS)


PRIORITY_RULES: list[ClassificationRule[Priority]] = [
    ClassificationRule(
        Priority.HIGH,
        lambda f: (f.font_size or 16) > 24 or _name_has("title", "head")(f),
        "Large type, or a title/heading layer",
    ),
    ClassificationRule(
        Priority.HIGH,
        lambda f: _name_has("button")(f) or f.is_interactive,
        "Buttons and other interactive layers",
    ),
    ClassificationRule(
        Priority.MEDIUM,
        lambda f: len(f.text) < 30,
        "Short text",
    ),
]
DEFAULT_PRIORITY = Priority.LOW


def classify_priority(
    name: str,
    text: str,
    font_size: float | None = None,
    is_interactive: bool = False,
) -> Priority:
    """Rank a text layer for editorial attention. Defaults to LOW."""
    return first_match(
        PRIORITY_RULES,
        TextFeatures(
            name=name, text=text, font_size=font_size, is_interactive=is_interactive
        ),
        DEFAULT_PRIORITY,
    )


# =============================================================================
# User-facing text filter
# =============================================================================

TECHNICAL_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"^[a-f0-9]{8,}$", re.IGNORECASE),  # hex ids
    re.compile(r"^[0-9]+px$", re.IGNORECASE),  # css sizes
    re.compile(r"^#[a-f0-9]{3,6}$", re.IGNORECASE),  # colors
    re.compile(r"^[a-z_]+$", re.IGNORECASE),  # identifiers
    re.compile(r"^\d+$"),  # bare numbers
    re.compile(r"^[a-z]+:[a-z]+$", re.IGNORECASE),  # css declarations
    re.compile(r"^/[/\w]*$"),  # paths
    re.compile(r"^https?://", re.IGNORECASE),  # urls
    re.compile(r"^[a-z]+\([^)]*\)$", re.IGNORECASE),  # function calls
]

# Single words that would otherwise be rejected as identifiers.
COMMON_WORDS = frozenset(
    {"home", "about", "contact", "help", "login", "signup", "settings", "profile", "dashboard"}
)


def is_user_facing_text(text: str) -> bool:
    """Reject strings that look like ids, css values, paths or code."""
    stripped = text.strip()
    if stripped.lower() in COMMON_WORDS:
        return True
    return not any(pattern.search(stripped) for pattern in TECHNICAL_PATTERNS)
