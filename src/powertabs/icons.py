# =============================================================================
# Nerd Font Glyphs and Process Icon Lookup
# =============================================================================
# Glyph names follow the Nerd Fonts cheat sheet (nf-<set>-<name>).

NERD_FONTS = {
    "cod_debug_console": "\ueb8e",
    "cod_terminal_bash": "\uebca",
    "cod_workspace_unknown": "\ueb32",
    "cod_zoom_in": "\ueb81",
    "custom_vim": "\ue62b",
    "dev_git": "\ue702",
    "dev_github_alt": "\ue708",
    "dev_github_badge": "\ue709",
    "dev_rust": "\ue7a8",
    "dev_terminal": "\ue795",
    "dev_vim": "\ue7c5",
    "fa_hashtag": "\uf292",
    "linux_docker": "\uf308",
    "md_arrow_down_box": "\U000f06c0",
    "md_hexagon": "\U000f02d8",
    "md_waves": "\U000f078d",
    "seti_go": "\ue627",
    "seti_lua": "\ue620",
    "seti_makefile": "\ue673",
    "pl_left_hard_divider": "\ue0b0",
    "pl_left_soft_divider": "\ue0b1",
    "pl_right_hard_divider": "\ue0b2",
    "pl_right_soft_divider": "\ue0b3",
}

UNKNOWN_PROCESS_ICON = NERD_FONTS["cod_workspace_unknown"]
ZOOM_ICON = NERD_FONTS["cod_zoom_in"]

# Process name (lowercase) -> glyph
DEFAULT_ICONS = {
    "debug": NERD_FONTS["cod_debug_console"],
    "bash": NERD_FONTS["cod_terminal_bash"],
    "cargo": NERD_FONTS["dev_rust"],
    "curl": NERD_FONTS["md_waves"],
    "docker": NERD_FONTS["linux_docker"],
    "docker-compose": NERD_FONTS["linux_docker"],
    "gh": NERD_FONTS["dev_github_badge"],
    "git": NERD_FONTS["dev_git"],
    "go": NERD_FONTS["seti_go"],
    "kubectl": NERD_FONTS["linux_docker"],
    "lua": NERD_FONTS["seti_lua"],
    "make": NERD_FONTS["seti_makefile"],
    "node": NERD_FONTS["md_hexagon"],
    "nvim": NERD_FONTS["custom_vim"],
    "sudo": NERD_FONTS["fa_hashtag"],
    "vim": NERD_FONTS["dev_vim"],
    "wget": NERD_FONTS["md_arrow_down_box"],
    "zsh": NERD_FONTS["dev_terminal"],
    "lazygit": NERD_FONTS["dev_github_alt"],
}


def lookup_icon(icons: dict[str, str], process: str) -> str:
    """Return the glyph for a process name, or the unknown-process glyph.

    Matching is exact on the lowercased name; user-supplied keys are
    lowercased when settings are built, so "Git" and "git" resolve the same.
    """
    return icons.get(process.lower(), UNKNOWN_PROCESS_ICON)
