import copy
import tomllib

import pytest

from powertabs.config_loader import (
    DEFAULT_CONFIG,
    ZoomIndicatorType,
    collect_unknown_keys,
    deep_merge,
    extract_toml_error_context,
    load_overrides_from_path,
    merge_settings,
)
from powertabs.errors import ConfigShapeError, ErrorReport, ErrorType
from powertabs.icons import DEFAULT_ICONS


def test_deep_merge_replaces_leaves_and_merges_tables():
    base = {"a": {"x": 1, "y": 2}, "b": 3}
    merged = deep_merge(base, {"a": {"y": 20, "z": 30}, "c": 4})
    assert merged == {"a": {"x": 1, "y": 20, "z": 30}, "b": 3, "c": 4}


def test_deep_merge_scalar_replaces_table_and_back():
    base = {"a": {"x": 1}, "b": 2}
    merged = deep_merge(base, {"a": "flat", "b": {"nested": True}})
    assert merged == {"a": "flat", "b": {"nested": True}}


def test_deep_merge_does_not_mutate_inputs():
    before = copy.deepcopy(DEFAULT_CONFIG)
    override = {"tabs": {"tab_max_width": 20}, "ui": {"icons": {"htop": "H"}}}
    deep_merge(DEFAULT_CONFIG, override)
    assert DEFAULT_CONFIG == before
    assert override == {"tabs": {"tab_max_width": 20}, "ui": {"icons": {"htop": "H"}}}


def test_deep_merge_is_idempotent():
    override = {
        "tabs": {"tab_max_width": 20, "hide_tab_bar_if_only_one_tab": True},
        "ui": {"tab": {"zoom_indicator": {"enabled": True}}, "icons": {"htop": "H"}},
        "custom": {"anything": [1, 2]},
    }
    once = deep_merge(DEFAULT_CONFIG, override)
    twice = deep_merge(once, override)
    assert twice == once


def test_merge_settings_defaults():
    settings = merge_settings()
    assert settings.tabs.tab_bar_at_bottom is True
    assert settings.tabs.hide_tab_bar_if_only_one_tab is False
    assert settings.tabs.tab_max_width == 32
    assert settings.tabs.unzoom_on_switch_pane is True
    assert settings.ui.separators.arrow_solid_left == "\ue0b0"
    assert settings.ui.separators.arrow_thin_left == "\ue0b1"
    assert settings.ui.tab.zoom_indicator.enabled is False
    assert settings.ui.tab.zoom_indicator.type is ZoomIndicatorType.ICON
    assert settings.ui.icons == DEFAULT_ICONS
    assert settings.extra == {}


def test_merge_settings_applies_overrides():
    settings = merge_settings({
        "tabs": {"tab_max_width": 20},
        "ui": {
            "icons": {"HTop": "H"},
            "tab": {"zoom_indicator": {"enabled": True, "type": "number"}},
        },
    })
    assert settings.tabs.tab_max_width == 20
    assert settings.ui.icons["htop"] == "H"
    assert settings.ui.icons["git"] == DEFAULT_ICONS["git"]
    assert settings.ui.tab.zoom_indicator.type is ZoomIndicatorType.NUMBER


def test_unknown_keys_are_kept_verbatim():
    settings = merge_settings({
        "theme": {"accent": "#fff"},
        "tabs": {"fancy": 1},
        "ui": {"tab": {"zoom_indicator": {"blink": True}}},
    })
    assert settings.extra == {
        "theme": {"accent": "#fff"},
        "tabs.fancy": 1,
        "ui.tab.zoom_indicator.blink": True,
    }


def test_collect_unknown_keys_ignores_icon_names():
    config = deep_merge(DEFAULT_CONFIG, {"ui": {"icons": {"whatever": "W"}}})
    assert collect_unknown_keys(config) == {}


@pytest.mark.parametrize(
    "override, path",
    [
        ({"tabs": "wide"}, "tabs"),
        ({"ui": {"tab": {"zoom_indicator": True}}}, "ui.tab.zoom_indicator"),
        ({"tabs": {"tab_max_width": "32"}}, "tabs.tab_max_width"),
        ({"tabs": {"tab_max_width": 0}}, "tabs.tab_max_width"),
        ({"tabs": {"tab_max_width": True}}, "tabs.tab_max_width"),
        ({"tabs": {"tab_bar_at_bottom": "yes"}}, "tabs.tab_bar_at_bottom"),
        ({"ui": {"icons": {"git": 7}}}, "ui.icons.git"),
        ({"ui": {"separators": {"arrow_thin_left": None}}}, "ui.separators.arrow_thin_left"),
        ({"ui": {"tab": {"zoom_indicator": {"type": "emoji"}}}}, "ui.tab.zoom_indicator.type"),
    ],
)
def test_shape_mismatch_raises(override, path):
    with pytest.raises(ConfigShapeError) as excinfo:
        merge_settings(override)
    assert excinfo.value.path == path
    assert path in str(excinfo.value)


def test_load_overrides_missing_file(tmp_path):
    result = load_overrides_from_path(tmp_path / "missing.toml")
    assert result.is_err()
    assert result.error.error_type is ErrorType.FILE_NOT_FOUND


def test_load_overrides_parse_error_has_line_context(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[tabs]\ntab_max_width = 24\nbroken = = 1\n')
    result = load_overrides_from_path(path)
    assert result.is_err()
    assert result.error.error_type is ErrorType.PARSE_ERROR
    assert result.error.context["line_number"] == 3
    assert "broken" in result.error.message


def test_load_overrides_reads_tables(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        '[tabs]\ntab_max_width = 24\n\n'
        '[ui.tab.zoom_indicator]\nenabled = true\ntype = "number"\n'
    )
    result = load_overrides_from_path(path)
    assert result.is_ok()
    settings = merge_settings(result.value)
    assert settings.tabs.tab_max_width == 24
    assert settings.ui.tab.zoom_indicator.type is ZoomIndicatorType.NUMBER


def test_error_report_collects_failed_results(tmp_path):
    report = ErrorReport()
    assert report.collect_result(load_overrides_from_path(tmp_path / "missing.toml")) is False
    assert [error.error_type for error in report.errors] == [ErrorType.FILE_NOT_FOUND]

    path = tmp_path / "config.toml"
    path.write_text("[tabs]\n")
    assert report.collect_result(load_overrides_from_path(path)) is True
    assert len(report.errors) == 1


def test_extract_toml_error_context_fields(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("[tabs]\nbroken = = 1\n")
    with pytest.raises(tomllib.TOMLDecodeError) as excinfo:
        tomllib.loads(path.read_text())
    context = extract_toml_error_context(excinfo.value, path)
    assert set(context) == {"line_number", "line_content", "formatted_message"}
    assert context["line_number"] == 2
    assert context["line_content"] == "broken = = 1"
