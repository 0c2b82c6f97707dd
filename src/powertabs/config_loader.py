# =============================================================================
# Configuration Loading
# =============================================================================

import re
import time
import tomllib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import platformdirs
from loguru import logger

from powertabs.errors import ConfigShapeError, Error, ErrorType, Result
from powertabs.icons import DEFAULT_ICONS, NERD_FONTS

CONFIG_DIR = Path(platformdirs.user_config_dir("powertabs"))
CONFIG_PATH = CONFIG_DIR / "config.toml"

# Default configuration - every key a user override may replace
DEFAULT_CONFIG = {
    "tabs": {
        "tab_bar_at_bottom": True,
        "hide_tab_bar_if_only_one_tab": False,
        "tab_max_width": 32,
        "unzoom_on_switch_pane": True,
    },
    "ui": {
        "separators": {
            "arrow_solid_left": NERD_FONTS["pl_left_hard_divider"],
            "arrow_solid_right": NERD_FONTS["pl_right_hard_divider"],
            "arrow_thin_left": NERD_FONTS["pl_left_soft_divider"],
            "arrow_thin_right": NERD_FONTS["pl_right_soft_divider"],
        },
        "icons": dict(DEFAULT_ICONS),
        "tab": {
            "zoom_indicator": {
                "enabled": False,
                "type": "icon",
            },
        },
    },
}

# Known nested tables, by dotted path. "ui.icons" is open-ended on purpose
# (any process name may be added) and is not listed.
_KNOWN_KEYS = {
    "": {"tabs", "ui"},
    "tabs": {
        "tab_bar_at_bottom",
        "hide_tab_bar_if_only_one_tab",
        "tab_max_width",
        "unzoom_on_switch_pane",
    },
    "ui": {"separators", "icons", "tab"},
    "ui.separators": {
        "arrow_solid_left",
        "arrow_solid_right",
        "arrow_thin_left",
        "arrow_thin_right",
    },
    "ui.tab": {"zoom_indicator"},
    "ui.tab.zoom_indicator": {"enabled", "type"},
}


# =============================================================================
# Typed Settings
# =============================================================================


class ZoomIndicatorType(Enum):
    ICON = "icon"
    NUMBER = "number"


@dataclass(frozen=True)
class TabSettings:
    tab_bar_at_bottom: bool
    hide_tab_bar_if_only_one_tab: bool
    tab_max_width: int
    unzoom_on_switch_pane: bool


@dataclass(frozen=True)
class Separators:
    arrow_solid_left: str
    arrow_solid_right: str
    arrow_thin_left: str
    arrow_thin_right: str


@dataclass(frozen=True)
class ZoomIndicator:
    enabled: bool
    type: ZoomIndicatorType


@dataclass(frozen=True)
class TabUISettings:
    zoom_indicator: ZoomIndicator


@dataclass(frozen=True)
class UISettings:
    separators: Separators
    icons: dict[str, str]
    tab: TabUISettings


@dataclass(frozen=True)
class Settings:
    tabs: TabSettings
    ui: UISettings
    # Unknown keys from overrides, by dotted path, kept verbatim
    extra: dict = field(default_factory=dict)


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base dictionary.

    Mappings merge key by key; anything else (including a scalar meeting a
    mapping, in either direction) replaces the base value outright.
    Neither input is mutated.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _table(config: dict, path: str) -> dict:
    value = config
    walked = ""
    for part in path.split("."):
        walked = _join(walked, part)
        value = value[part]
        if not isinstance(value, dict):
            raise ConfigShapeError(walked, "a table", value)
    return value


def _bool(table: dict, path: str, key: str) -> bool:
    value = table[key]
    if not isinstance(value, bool):
        raise ConfigShapeError(_join(path, key), "a boolean", value)
    return value


def _str(table: dict, path: str, key: str) -> str:
    value = table[key]
    if not isinstance(value, str):
        raise ConfigShapeError(_join(path, key), "a string", value)
    return value


def collect_unknown_keys(config: dict, path: str = "") -> dict:
    """Return {dotted_path: value} for every key outside the known layout."""
    unknown = {}
    known = _KNOWN_KEYS.get(path, set())
    for key, value in config.items():
        key_path = _join(path, key)
        if key not in known:
            unknown[key_path] = value
        elif key_path in _KNOWN_KEYS and isinstance(value, dict):
            unknown.update(collect_unknown_keys(value, key_path))
    return unknown


def build_settings(config: dict) -> Settings:
    """Convert a merged configuration dict into typed Settings.

    Raises:
        ConfigShapeError: a known key holds a value of the wrong shape.
    """
    tabs = _table(config, "tabs")
    max_width = tabs["tab_max_width"]
    if isinstance(max_width, bool) or not isinstance(max_width, int) or max_width <= 0:
        raise ConfigShapeError("tabs.tab_max_width", "a positive integer", max_width)

    separators = _table(config, "ui.separators")
    icons = _table(config, "ui.icons")
    for name, glyph in icons.items():
        if not isinstance(glyph, str):
            raise ConfigShapeError(f"ui.icons.{name}", "a string", glyph)

    zoom = _table(config, "ui.tab.zoom_indicator")
    try:
        zoom_type = ZoomIndicatorType(zoom["type"])
    except ValueError:
        raise ConfigShapeError(
            "ui.tab.zoom_indicator.type", "one of 'icon', 'number'", zoom["type"]
        ) from None

    extra = collect_unknown_keys(config)
    if extra:
        logger.debug(
            "Unknown settings keys kept verbatim",
            operation="build_settings",
            keys=sorted(extra),
        )

    return Settings(
        tabs=TabSettings(
            tab_bar_at_bottom=_bool(tabs, "tabs", "tab_bar_at_bottom"),
            hide_tab_bar_if_only_one_tab=_bool(tabs, "tabs", "hide_tab_bar_if_only_one_tab"),
            tab_max_width=max_width,
            unzoom_on_switch_pane=_bool(tabs, "tabs", "unzoom_on_switch_pane"),
        ),
        ui=UISettings(
            separators=Separators(
                arrow_solid_left=_str(separators, "ui.separators", "arrow_solid_left"),
                arrow_solid_right=_str(separators, "ui.separators", "arrow_solid_right"),
                arrow_thin_left=_str(separators, "ui.separators", "arrow_thin_left"),
                arrow_thin_right=_str(separators, "ui.separators", "arrow_thin_right"),
            ),
            icons={name.lower(): glyph for name, glyph in icons.items()},
            tab=TabUISettings(
                zoom_indicator=ZoomIndicator(
                    enabled=_bool(zoom, "ui.tab.zoom_indicator", "enabled"),
                    type=zoom_type,
                ),
            ),
        ),
        extra=extra,
    )


def merge_settings(overrides: dict | None = None) -> Settings:
    """Merge overrides over DEFAULT_CONFIG and return typed Settings."""
    return build_settings(deep_merge(DEFAULT_CONFIG, overrides or {}))


# =============================================================================
# TOML Overrides File
# =============================================================================


def extract_toml_error_context(error: tomllib.TOMLDecodeError, file_path: Path) -> dict:
    """
    Extract line context from TOML parse error.

    Args:
        error: The TOMLDecodeError exception
        file_path: Path to the TOML file

    Returns:
        Dict with line_number, line_content, and formatted_message
    """
    error_str = str(error)
    line_number = None
    line_content = None

    # Common formats: "line 15", "at line 15", "(line 15)"
    line_match = re.search(r'line\s+(\d+)', error_str, re.IGNORECASE)
    if line_match:
        line_number = int(line_match.group(1))

    if line_number and file_path.exists():
        try:
            lines = file_path.read_text().splitlines()
            if 0 < line_number <= len(lines):
                line_content = lines[line_number - 1].rstrip()
        except OSError:
            pass

    if line_number:
        formatted = f"Error on line {line_number}"
        if line_content:
            display_line = line_content[:50] + "..." if len(line_content) > 50 else line_content
            formatted += f": {display_line}"
        formatted += f"\n\nDetails: {error_str}"
    else:
        formatted = f"TOML parse error: {error_str}"

    return {
        "line_number": line_number,
        "line_content": line_content,
        "formatted_message": formatted
    }


def load_overrides_from_path(config_path: Path = CONFIG_PATH) -> Result[dict]:
    """
    Load user overrides from a TOML file.

    Args:
        config_path: Path to the overrides file

    Returns:
        Result[dict]: Ok with the raw override tables, or Err with details
    """
    start_time = time.perf_counter()

    if not config_path.exists():
        logger.debug(
            "Overrides file not found",
            operation="load_overrides_from_path",
            status="missing",
            config_path=str(config_path)
        )
        return Result.err(Error(
            error_type=ErrorType.FILE_NOT_FOUND,
            message=f"Config file not found: {config_path}",
            context={"config_path": str(config_path)}
        ))

    try:
        with open(config_path, "rb") as f:
            overrides = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        error_context = extract_toml_error_context(e, config_path)
        logger.error(
            "Invalid TOML syntax in configuration file",
            operation="load_overrides_from_path",
            status="failed",
            file=str(config_path),
            line_number=error_context["line_number"],
            line_content=error_context["line_content"],
            error=error_context["formatted_message"]
        )
        return Result.err(Error(
            error_type=ErrorType.PARSE_ERROR,
            message=error_context["formatted_message"],
            context={"config_path": str(config_path), "line_number": error_context["line_number"]},
            original_exception=e
        ))
    except OSError as e:
        return Result.err(Error(
            error_type=ErrorType.FILE_NOT_FOUND,
            message=f"Config file unreadable: {config_path}",
            context={"config_path": str(config_path)},
            original_exception=e
        ))

    duration_ms = int((time.perf_counter() - start_time) * 1000)
    logger.debug(
        "Overrides loaded",
        operation="load_overrides_from_path",
        status="success",
        config_path=str(config_path),
        metrics={"tables": len(overrides), "duration_ms": duration_ms}
    )
    return Result.ok(overrides)
