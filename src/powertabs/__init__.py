"""powertabs - powerline-style tab titles for terminal tab bars."""

from powertabs.config_loader import DEFAULT_CONFIG, Settings, ZoomIndicatorType, merge_settings
from powertabs.errors import ConfigShapeError, SetupError
from powertabs.host import FORMAT_TAB_TITLE, EventHub, HostConfig, StaticMux
from powertabs.plugin import TabFormatter, apply_to_config

__version__ = "0.3.0"

__all__ = [
    "DEFAULT_CONFIG",
    "FORMAT_TAB_TITLE",
    "ConfigShapeError",
    "EventHub",
    "HostConfig",
    "SetupError",
    "Settings",
    "StaticMux",
    "TabFormatter",
    "ZoomIndicatorType",
    "apply_to_config",
    "merge_settings",
]
