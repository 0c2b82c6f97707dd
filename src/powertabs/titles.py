# =============================================================================
# Tab Title Resolution
# =============================================================================

import wcwidth

from powertabs.icons import lookup_icon

UNKNOWN_PROCESS = "unknown"

# Cells reserved next to the title for the index, decoration and padding
TITLE_RESERVED_CELLS = 3


def parse_title(title: str) -> tuple[str, str]:
    """Split a raw title into (process, custom).

    The first whitespace-delimited token is the process name. A custom title
    follows only when the remainder starts with a literal "-":

        >>> parse_title("nvim - notes")
        ('nvim', 'notes')
        >>> parse_title("nvim notes.md")
        ('nvim', '')
        >>> parse_title("")
        ('unknown', '')
    """
    parts = title.split(None, 1)
    if not parts:
        return UNKNOWN_PROCESS, ""

    process = parts[0]
    rest = parts[1].lstrip() if len(parts) > 1 else ""
    if rest.startswith("-"):
        return process, rest[1:].strip()
    return process, ""


def cell_width(text: str) -> int:
    """Display width of text in terminal cells."""
    return sum(max(wcwidth.wcwidth(char), 0) for char in text)


def truncate_right(text: str, max_cells: int) -> str:
    """Drop characters from the right until text fits in max_cells cells."""
    if max_cells <= 0:
        return ""

    width = 0
    for i, char in enumerate(text):
        width += max(wcwidth.wcwidth(char), 0)
        if width > max_cells:
            return text[:i]
    return text


def resolve_title(tab) -> str:
    """Pick the tab's own title, or its active pane's title when empty."""
    if tab.tab_title:
        return tab.tab_title
    return tab.active_pane.title


def tab_title(tab, max_width: int, icons: dict[str, str]) -> str:
    """
    Build the padded label for a tab: " <icon> <title> ".

    Args:
        tab: Host tab descriptor (TabInformation)
        max_width: Maximum tab width in cells
        icons: Lowercase process name -> glyph table

    Returns:
        Label with the title truncated to max_width - 3 cells
    """
    title = resolve_title(tab)
    process, custom = parse_title(title)
    icon = lookup_icon(icons, process)

    if custom:
        title = custom

    title = truncate_right(title, max_width - TITLE_RESERVED_CELLS)
    return f" {icon} {title} "
