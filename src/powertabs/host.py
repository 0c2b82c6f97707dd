# =============================================================================
# Host Model (tabs, panes, colour schemes, host config, event hub)
# =============================================================================
# The plugin only reads these. A host adapter (see iterm2_host.py) fills
# them in from the terminal it drives.

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Callable, Protocol, runtime_checkable

from loguru import logger

FORMAT_TAB_TITLE = "format-tab-title"
DEFAULT_COLOR_SCHEME = "powertabs-dark"


@dataclass(frozen=True)
class PaneInformation:
    pane_id: int | str
    title: str = ""
    is_active: bool = False
    is_zoomed: bool = False


@dataclass(frozen=True)
class TabInformation:
    tab_id: int | str
    tab_index: int
    is_active: bool
    active_pane: PaneInformation
    tab_title: str = ""


@dataclass(frozen=True)
class TabColors:
    bg_color: str
    fg_color: str


@dataclass(frozen=True)
class TabBar:
    background: str
    active_tab: TabColors
    inactive_tab: TabColors


@dataclass(frozen=True)
class ColorScheme:
    tab_bar: TabBar


@dataclass(frozen=True)
class TabBarColors:
    """Flattened tab bar colours for one render pass."""

    background: str
    active_bg: str
    active_fg: str
    inactive_bg: str
    inactive_fg: str


DEFAULT_TAB_BAR = TabBar(
    background="#1a1b26",
    active_tab=TabColors(bg_color="#7aa2f7", fg_color="#1a1b26"),
    inactive_tab=TabColors(bg_color="#292e42", fg_color="#a9b1d6"),
)


def _default_color_schemes() -> dict:
    return {DEFAULT_COLOR_SCHEME: ColorScheme(tab_bar=DEFAULT_TAB_BAR)}


@dataclass
class HostConfig:
    """Mutable host configuration; apply_to_config writes the tab bar fields."""

    color_scheme: str = DEFAULT_COLOR_SCHEME
    color_schemes: dict = field(default_factory=_default_color_schemes)
    use_fancy_tab_bar: bool = True
    tab_bar_at_bottom: bool = False
    hide_tab_bar_if_only_one_tab: bool = False
    tab_max_width: int = 16
    unzoom_on_switch_pane: bool = False


def field_of(obj, name: str):
    """Read a field from either a mapping or an attribute-style object."""
    if isinstance(obj, Mapping):
        return obj[name]
    return getattr(obj, name)


def resolve_tab_bar_colors(host_config) -> TabBarColors:
    """Resolve the active colour scheme's tab bar colours.

    Missing schemes or fields raise KeyError/AttributeError; the host is
    expected to always supply them.
    """
    schemes = field_of(host_config, "color_schemes")
    scheme = schemes[field_of(host_config, "color_scheme")]
    tab_bar = field_of(scheme, "tab_bar")
    active = field_of(tab_bar, "active_tab")
    inactive = field_of(tab_bar, "inactive_tab")
    return TabBarColors(
        background=field_of(tab_bar, "background"),
        active_bg=field_of(active, "bg_color"),
        active_fg=field_of(active, "fg_color"),
        inactive_bg=field_of(inactive, "bg_color"),
        inactive_fg=field_of(inactive, "fg_color"),
    )


def tab_bar_from_dict(colors: dict) -> TabBar:
    """Build a TabBar from a flat table, falling back to DEFAULT_TAB_BAR.

    Keys: background, active_bg, active_fg, inactive_bg, inactive_fg.
    """
    return TabBar(
        background=colors.get("background", DEFAULT_TAB_BAR.background),
        active_tab=TabColors(
            bg_color=colors.get("active_bg", DEFAULT_TAB_BAR.active_tab.bg_color),
            fg_color=colors.get("active_fg", DEFAULT_TAB_BAR.active_tab.fg_color),
        ),
        inactive_tab=TabColors(
            bg_color=colors.get("inactive_bg", DEFAULT_TAB_BAR.inactive_tab.bg_color),
            fg_color=colors.get("inactive_fg", DEFAULT_TAB_BAR.inactive_tab.fg_color),
        ),
    )


# =============================================================================
# Multiplexer and Event Hub
# =============================================================================


@runtime_checkable
class Mux(Protocol):
    def panes_with_info(self, tab_id) -> list[PaneInformation]:
        """Current panes of a tab, queried at call time."""
        ...


class StaticMux:
    """Mux backed by a tab_id -> panes mapping, replaced wholesale on update."""

    def __init__(self, panes_by_tab: dict | None = None):
        self._panes_by_tab = dict(panes_by_tab or {})

    def update(self, panes_by_tab: dict):
        self._panes_by_tab = dict(panes_by_tab)

    def panes_with_info(self, tab_id) -> list[PaneInformation]:
        return list(self._panes_by_tab.get(tab_id, []))


class EventHub:
    """Named callback registry, modelled on the host's event API."""

    def __init__(self):
        self._handlers: dict[str, list[Callable]] = {}

    def on(self, event: str, callback: Callable):
        self._handlers.setdefault(event, []).append(callback)
        logger.debug("Handler registered", operation="event_hub_on", event=event)

    def handlers(self, event: str) -> list[Callable]:
        return list(self._handlers.get(event, []))

    def emit(self, event: str, *args):
        """Call handlers in registration order; return the first non-None result."""
        for callback in self._handlers.get(event, []):
            result = callback(*args)
            if result is not None:
                return result
        return None
