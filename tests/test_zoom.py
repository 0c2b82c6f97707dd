import pytest
from conftest import make_panes

from powertabs.config_loader import ZoomIndicator, ZoomIndicatorType
from powertabs.icons import ZOOM_ICON
from powertabs.zoom import subscript_count, tab_meta

ICON = ZoomIndicator(enabled=True, type=ZoomIndicatorType.ICON)
NUMBER = ZoomIndicator(enabled=True, type=ZoomIndicatorType.NUMBER)
DISABLED = ZoomIndicator(enabled=False, type=ZoomIndicatorType.NUMBER)


@pytest.mark.parametrize(
    "count, expected",
    [(1, "₍₁₎"), (3, "₍₃₎"), (9, "₍₉₎"), (10, "₍x₎"), (42, "₍x₎")],
)
def test_subscript_count(count, expected):
    assert subscript_count(count) == expected


def test_disabled_indicator_shows_plain_index():
    assert tab_meta(2, make_panes(3, zoomed=1), DISABLED) == "2"


@pytest.mark.parametrize("indicator", [ICON, NUMBER, DISABLED])
def test_single_pane_shows_plain_index(indicator):
    assert tab_meta(4, make_panes(1), indicator) == "4"
    assert tab_meta(4, make_panes(1, zoomed=0), indicator) == "4"


def test_zoomed_icon_drops_index():
    assert tab_meta(2, make_panes(3, zoomed=0), ICON) == ZOOM_ICON


def test_zoomed_number_shows_zoom_glyph_and_count():
    assert tab_meta(2, make_panes(3, zoomed=2), NUMBER) == ZOOM_ICON + "₍₃₎"


def test_unzoomed_multi_pane_shows_index_and_count():
    assert tab_meta(5, make_panes(2), ICON) == "5₍₂₎"
    assert tab_meta(5, make_panes(12), NUMBER) == "5₍x₎"
