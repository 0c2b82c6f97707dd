# =============================================================================
# Plugin Setup and Tab Formatter
# =============================================================================
"""
Tab bar plugin entry point.

Example:

    host_config = HostConfig()
    hub = EventHub()
    apply_to_config(
        host_config,
        {
            "tabs": {"tab_max_width": 24},
            "ui": {"tab": {"zoom_indicator": {"enabled": True, "type": "number"}}},
        },
        hub=hub,
        mux=mux,
    )
    items = hub.emit(FORMAT_TAB_TITLE, tab, tabs, panes, host_config, False, 24)
"""

from collections.abc import Mapping, MutableMapping

from loguru import logger

from powertabs.config_loader import Settings, merge_settings
from powertabs.errors import SetupError
from powertabs.host import FORMAT_TAB_TITLE, EventHub, HostConfig, Mux, resolve_tab_bar_colors
from powertabs.segments import format_tab_text, render_tab
from powertabs.titles import tab_title
from powertabs.zoom import tab_meta

# Host fields written from settings.tabs
HOST_TAB_FIELDS = (
    "tab_bar_at_bottom",
    "hide_tab_bar_if_only_one_tab",
    "tab_max_width",
    "unzoom_on_switch_pane",
)


def tab_current_idx(tabs: list, tab) -> int:
    """1-based position of tab in tabs, matched by tab_id; 0 if absent."""
    for i, t in enumerate(tabs, start=1):
        if t.tab_id == tab.tab_id:
            return i
    return 0


class TabFormatter:
    """Render callback bound to one set of settings.

    Call signature matches the host's "format-tab-title" event:
    (tab, tabs, panes, host_config, hover, max_width).
    """

    def __init__(self, settings: Settings, mux: Mux | None = None):
        self.settings = settings
        self.mux = mux

    def live_panes(self, tab, panes: list) -> list:
        # Pane zoom state changes between redraws, so ask the mux each time
        if self.mux is None:
            return panes
        return self.mux.panes_with_info(tab.tab_id)

    def __call__(self, tab, tabs, panes, host_config, hover, max_width) -> list:
        colors = resolve_tab_bar_colors(host_config)
        ui = self.settings.ui

        title = tab_title(tab, max_width, ui.icons)
        idx = tab_current_idx(tabs, tab)
        meta = tab_meta(idx, self.live_panes(tab, panes), ui.tab.zoom_indicator)

        return render_tab(
            idx,
            tabs,
            tab.is_active,
            format_tab_text(meta, title, ui.separators),
            colors,
            ui.separators,
        )


def _set_host_field(host_config, name: str, value):
    if isinstance(host_config, MutableMapping):
        host_config[name] = value
    else:
        setattr(host_config, name, value)


def apply_to_config(
    host_config,
    opts: dict | None = None,
    *,
    hub: EventHub | None = None,
    mux: Mux | None = None,
) -> TabFormatter:
    """
    Apply tab bar settings to the host configuration.

    Args:
        host_config: HostConfig (or mutable mapping) to modify
        opts: Optional partial overrides, same shape as DEFAULT_CONFIG
        hub: Optional EventHub to register the formatter on
        mux: Optional Mux used to query live panes per tab

    Returns:
        TabFormatter bound to the merged settings

    Raises:
        SetupError: host_config or opts is not a structured object
        ConfigShapeError: a known override key has the wrong shape
    """
    if not isinstance(host_config, (HostConfig, MutableMapping)):
        raise SetupError(
            f"host_config must be a HostConfig or mapping, got {type(host_config).__name__}"
        )
    if opts is not None and not isinstance(opts, Mapping):
        raise SetupError(f"opts must be a mapping, got {type(opts).__name__}")

    settings = merge_settings(dict(opts or {}))

    _set_host_field(host_config, "use_fancy_tab_bar", False)
    for name in HOST_TAB_FIELDS:
        _set_host_field(host_config, name, getattr(settings.tabs, name))

    formatter = TabFormatter(settings, mux=mux)
    if hub is not None:
        hub.on(FORMAT_TAB_TITLE, formatter)

    logger.debug(
        "Tab bar settings applied",
        operation="apply_to_config",
        status="success",
        tab_max_width=settings.tabs.tab_max_width,
        zoom_indicator=settings.ui.tab.zoom_indicator.enabled,
        registered=hub is not None,
        metrics={"icons": len(settings.ui.icons), "extra_keys": len(settings.extra)}
    )
    return formatter
