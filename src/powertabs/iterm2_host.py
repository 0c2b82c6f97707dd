# =============================================================================
# iTerm2 Host Adapter
# =============================================================================
"""
Runs the tab formatter against iTerm2 through its Python API.

iTerm2 draws its own tab bar, so each rendered segment list is applied as:
- the tab title: the concatenated Text items
- the tab colour: the tab block's background

Configuration: ~/.config/powertabs/config.toml (platformdirs user config dir)

    [tabs]
    tab_max_width = 24

    [ui.tab.zoom_indicator]
    enabled = true
    type = "number"

    [colors]            # tab bar colours for this host
    active_bg = "#7aa2f7"
"""

import asyncio
from uuid import uuid4

import iterm2
from loguru import logger

from powertabs.config_loader import CONFIG_PATH, load_overrides_from_path
from powertabs.errors import ConfigShapeError, Error, ErrorReport, ErrorType
from powertabs.host import (
    DEFAULT_COLOR_SCHEME,
    FORMAT_TAB_TITLE,
    ColorScheme,
    EventHub,
    HostConfig,
    PaneInformation,
    StaticMux,
    TabInformation,
    tab_bar_from_dict,
)
from powertabs.logging_config import setup_logger, trace_id_var
from powertabs.plugin import apply_to_config
from powertabs.segments import block_background, flatten_text

COLORS_TABLE = "colors"

# Errors raised by the iTerm2 API for vanished or unreachable objects
ITERM2_ERRORS = (iterm2.RPCException, AttributeError, TypeError)


def hex_to_color(value: str) -> iterm2.Color:
    """Convert "#rrggbb" into an iterm2.Color."""
    digits = value.lstrip("#")
    if len(digits) != 6:
        raise ValueError(f"Expected #rrggbb colour, got {value!r}")
    r, g, b = (int(digits[i:i + 2], 16) for i in (0, 2, 4))
    return iterm2.Color(r, g, b)


def escape_interpolation(text: str) -> str:
    """Escape backslashes so iTerm2 does not read "\\(" as interpolation."""
    return text.replace("\\", "\\\\")


def split_overrides(overrides: dict) -> tuple[dict, object]:
    """Separate the host [colors] table from the plugin overrides."""
    plugin_overrides = {k: v for k, v in overrides.items() if k != COLORS_TABLE}
    colors = overrides.get(COLORS_TABLE, {})
    return plugin_overrides, colors


def check_colors(colors, report: ErrorReport) -> dict:
    """
    Keep only the [colors] entries iTerm2 can use.

    A non-table [colors] value or a field that is not "#rrggbb" is reported
    as a warning and left out, so tab_bar_from_dict uses DEFAULT_TAB_BAR
    for it.

    Returns:
        Valid colour fields, by key
    """
    if not isinstance(colors, dict):
        error = ConfigShapeError(COLORS_TABLE, "a table", colors)
        report.add_warning(Error(
            error_type=ErrorType.VALIDATION_ERROR,
            message=f"Invalid colours, using defaults: {error}",
            context={"key": error.path},
            original_exception=error,
        ))
        return {}

    valid = {}
    for key, value in colors.items():
        try:
            if not isinstance(value, str):
                raise ValueError(f"Expected #rrggbb colour, got {value!r}")
            hex_to_color(value)
        except ValueError as e:
            report.add_warning(Error(
                error_type=ErrorType.VALIDATION_ERROR,
                message=f"Invalid colour, using default: {e}",
                context={"key": f"{COLORS_TABLE}.{key}"},
                original_exception=e,
            ))
            continue
        valid[key] = value
    return valid


async def session_title(session) -> str:
    """Session name as iTerm2 shows it, falling back to the job name."""
    for variable in ("name", "jobName"):
        try:
            value = await session.async_get_variable(variable)
        except ITERM2_ERRORS:
            logger.debug(
                "Could not query session variable",
                operation="session_title",
                variable=variable,
                session_id=getattr(session, "session_id", "unknown"),
            )
            continue
        if value:
            return value
    return ""


async def collect_window_tabs(window) -> tuple[list[TabInformation], dict]:
    """
    Snapshot a window's tabs and panes as host descriptors.

    iTerm2 does not report pane maximization, so every pane has
    is_zoomed=False.

    Returns:
        Tuple of (tabs in bar order, tab_id -> list of PaneInformation)
    """
    current_tab = window.current_tab
    active_tab_id = current_tab.tab_id if current_tab else None

    tabs: list[TabInformation] = []
    panes_by_tab: dict = {}

    for index, tab in enumerate(window.tabs):
        current_session = tab.current_session
        current_id = current_session.session_id if current_session else None

        panes = []
        for session in tab.sessions:
            panes.append(PaneInformation(
                pane_id=session.session_id,
                title=await session_title(session),
                is_active=session.session_id == current_id,
            ))

        active_pane = next(
            (pane for pane in panes if pane.is_active),
            panes[0] if panes else PaneInformation(pane_id=""),
        )
        tabs.append(TabInformation(
            tab_id=tab.tab_id,
            tab_index=index,
            is_active=tab.tab_id == active_tab_id,
            active_pane=active_pane,
        ))
        panes_by_tab[tab.tab_id] = panes

    return tabs, panes_by_tab


async def apply_tab_items(tab, items: list) -> None:
    """Set the iTerm2 tab title and tab colour from rendered items."""
    await tab.async_set_title(escape_interpolation(flatten_text(items)))

    color = block_background(items)
    if not color:
        return

    profile = iterm2.LocalWriteOnlyProfile()
    profile.set_tab_color(hex_to_color(color))
    profile.set_use_tab_color(True)
    for session in tab.sessions:
        await session.async_set_profile_properties(profile)


class TabBarRenderer:
    """Re-renders every iTerm2 tab through the registered formatter."""

    def __init__(self, host_config: HostConfig, hub: EventHub, mux: StaticMux):
        self.host_config = host_config
        self.hub = hub
        self.mux = mux

    async def render_window(self, window) -> int:
        tabs, panes_by_tab = await collect_window_tabs(window)
        self.mux.update(panes_by_tab)

        tabs_by_id = {tab.tab_id: tab for tab in window.tabs}
        rendered = 0
        for info in tabs:
            items = self.hub.emit(
                FORMAT_TAB_TITLE,
                info,
                tabs,
                panes_by_tab[info.tab_id],
                self.host_config,
                False,
                self.host_config.tab_max_width,
            )
            if items is None:
                continue
            try:
                await apply_tab_items(tabs_by_id[info.tab_id], items)
                rendered += 1
            except ITERM2_ERRORS as e:
                # Tab closed between snapshot and update
                logger.debug(
                    "Could not update tab",
                    operation="render_window",
                    status="skip",
                    tab_id=info.tab_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
        return rendered

    async def render_app(self, app) -> int:
        trace_id_var.set(str(uuid4()))
        rendered = 0
        for window in app.terminal_windows:
            rendered += await self.render_window(window)
        logger.debug(
            "Tab bar rendered",
            operation="render_app",
            status="success",
            metrics={"tabs": rendered},
        )
        return rendered


def build_renderer(overrides: dict, report: ErrorReport) -> TabBarRenderer:
    """Create host config, mux and hub and register the formatter."""
    plugin_overrides, colors = split_overrides(overrides)

    host_config = HostConfig()
    host_config.color_schemes[DEFAULT_COLOR_SCHEME] = ColorScheme(
        tab_bar=tab_bar_from_dict(check_colors(colors, report))
    )
    hub = EventHub()
    mux = StaticMux()

    try:
        apply_to_config(host_config, plugin_overrides, hub=hub, mux=mux)
    except ConfigShapeError as e:
        report.add_warning(Error(
            error_type=ErrorType.VALIDATION_ERROR,
            message=f"Invalid settings, using defaults: {e}",
            context={"key": e.path},
            original_exception=e,
        ))
        apply_to_config(host_config, None, hub=hub, mux=mux)

    return TabBarRenderer(host_config, hub, mux)


async def watch_layout(connection, app, renderer: TabBarRenderer):
    async with iterm2.LayoutChangeMonitor(connection) as monitor:
        while True:
            await monitor.async_get()
            await renderer.render_app(app)


async def watch_focus(connection, app, renderer: TabBarRenderer):
    async with iterm2.FocusMonitor(connection) as monitor:
        while True:
            update = await monitor.async_get_next_update()
            if update.selected_tab_changed or update.active_session_changed:
                await renderer.render_app(app)


async def main(connection):
    """
    Load settings, render all tabs once, then re-render on layout and
    focus changes until iTerm2 disconnects.
    """
    main_trace_id = str(uuid4())
    report = ErrorReport()

    logger.info(
        "powertabs starting",
        operation="main",
        status="started",
        trace_id=main_trace_id,
        config_path=str(CONFIG_PATH),
    )

    result = load_overrides_from_path(CONFIG_PATH)
    overrides = {}
    if result.is_ok():
        overrides = result.value
    elif result.error.error_type is not ErrorType.FILE_NOT_FOUND:
        report.collect_result(result)

    renderer = build_renderer(overrides, report)
    report.log_summary(main_trace_id)

    app = await iterm2.async_get_app(connection)
    await renderer.render_app(app)

    await asyncio.gather(
        watch_layout(connection, app, renderer),
        watch_focus(connection, app, renderer),
    )


def run():
    """Console entry point: powertabs-iterm2."""
    setup_logger()
    iterm2.run_forever(main)


if __name__ == "__main__":
    run()
