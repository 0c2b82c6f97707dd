# =============================================================================
# Tab Segment Rendering (powerline style)
# =============================================================================

from dataclasses import dataclass
from enum import Enum

from powertabs.config_loader import Separators
from powertabs.host import TabBarColors

BOLD = "Bold"


@dataclass(frozen=True)
class Background:
    color: str


@dataclass(frozen=True)
class Foreground:
    color: str


@dataclass(frozen=True)
class Attribute:
    intensity: str


@dataclass(frozen=True)
class Text:
    text: str


class TabPosition(Enum):
    ACTIVE = "active"
    INACTIVE_FIRST = "inactive_first"
    INACTIVE_MIDDLE = "inactive_middle"
    INACTIVE_LAST = "inactive_last"


def classify_tab(index: int, count: int, is_active: bool) -> TabPosition:
    """Position state of a tab; being last wins over being first."""
    if is_active:
        return TabPosition.ACTIVE
    if index == count:
        return TabPosition.INACTIVE_LAST
    if index == 1:
        return TabPosition.INACTIVE_FIRST
    return TabPosition.INACTIVE_MIDDLE


def format_tab_text(meta: str, title: str, separators: Separators) -> str:
    return f" {meta} {separators.arrow_thin_left}{title}"


def render_tab(
    index: int,
    tabs: list,
    is_active: bool,
    text: str,
    colors: TabBarColors,
    separators: Separators,
) -> list:
    """
    Build the format items for one tab.

    The tab block is followed by two solid separators. The second one's
    background blends into whatever is drawn next: the bar background after
    the last tab, otherwise the next tab's colour.

    Args:
        index: 1-based position of the tab in ``tabs`` (0 if not found)
        tabs: All tabs, in bar order
        is_active: Whether this tab is the active one
        text: Tab block text (see format_tab_text)
        colors: Resolved tab bar colours
        separators: Separator glyphs

    Returns:
        Ordered list of Background/Foreground/Attribute/Text items
    """
    position = classify_tab(index, len(tabs), is_active)
    solid = separators.arrow_solid_left
    is_last = index == len(tabs)

    if position is TabPosition.ACTIVE:
        return [
            Background(colors.active_bg),
            Foreground(colors.active_fg),
            Attribute(BOLD),
            Text(text),
            Background(colors.background),
            Foreground(colors.active_bg),
            Text(solid),
            Background(colors.background if is_last else colors.inactive_bg),
            Foreground(colors.background),
            Text(solid),
        ]

    if position is TabPosition.INACTIVE_LAST:
        next_bg = colors.background
    else:
        next_bg = colors.active_bg if tabs[index].is_active else colors.inactive_bg

    return [
        Background(colors.inactive_bg),
        Foreground(colors.inactive_fg),
        Text(text),
        Background(colors.background),
        Foreground(colors.inactive_bg),
        Text(solid),
        Background(next_bg),
        Foreground(colors.background),
        Text(solid),
    ]


def flatten_text(items: list) -> str:
    """Concatenate the Text items, for hosts that cannot draw colours."""
    return "".join(item.text for item in items if isinstance(item, Text))


def block_background(items: list) -> str | None:
    """Background colour of the tab block (the first Background item)."""
    for item in items:
        if isinstance(item, Background):
            return item.color
    return None
