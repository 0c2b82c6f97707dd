# =============================================================================
# Zoom Indicator / Pane Count Annotation
# =============================================================================

from powertabs.config_loader import ZoomIndicator, ZoomIndicatorType
from powertabs.icons import ZOOM_ICON

SUBSCRIPT_DIGITS = {
    1: "₁",
    2: "₂",
    3: "₃",
    4: "₄",
    5: "₅",
    6: "₆",
    7: "₇",
    8: "₈",
    9: "₉",
}
SUBSCRIPT_MANY = "x"


def subscript_count(count: int) -> str:
    """Subscripted pane count, e.g. 3 -> "₍₃₎"; 10 and above -> "₍x₎"."""
    digit = SUBSCRIPT_MANY if count > 9 else SUBSCRIPT_DIGITS[count]
    return f"₍{digit}₎"


def tab_meta(index: int, panes: list, indicator: ZoomIndicator) -> str:
    """
    Text shown before the tab's thin separator.

    Rules, first match wins:
    1. indicator disabled -> plain index
    2. a single pane -> plain index
    3. some pane zoomed -> zoom glyph (ICON) or zoom glyph + count (NUMBER)
    4. otherwise -> index + count

    Args:
        index: 1-based tab position
        panes: Live panes of the tab (objects with an ``is_zoomed`` flag)
        indicator: Zoom indicator settings

    Returns:
        Short annotation text
    """
    if not indicator.enabled:
        return str(index)

    npanes = len(panes)
    if npanes <= 1:
        return str(index)

    if any(pane.is_zoomed for pane in panes):
        # The ICON form drops the index
        if indicator.type is ZoomIndicatorType.ICON:
            return ZOOM_ICON
        return ZOOM_ICON + subscript_count(npanes)

    return f"{index}{subscript_count(npanes)}"
