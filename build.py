#!/usr/bin/env python3
"""
Build script for the powertabs iTerm2 AutoLaunch script.

Concatenates src/powertabs/*.py modules into a single powertabs-autolaunch.py
file, since iTerm2 AutoLaunch requires a single .py file.

Usage:
    python build.py           # Build powertabs-autolaunch.py
    python build.py --check   # Verify output matches (for CI)

Module order matters for dependencies:
1. errors.py         - Error/Result types (no deps)
2. logging_config.py - Loguru JSONL setup
3. icons.py          - Nerd Font glyphs and icon lookup
4. config_loader.py  - Defaults, deep merge, typed settings, TOML loading
5. host.py           - Tab/pane descriptors, colour schemes, event hub
6. titles.py         - Title parsing and truncation
7. zoom.py           - Zoom/pane count annotation
8. segments.py       - Powerline segment rendering
9. plugin.py         - apply_to_config + TabFormatter
10. iterm2_host.py   - iTerm2 adapter and entry point
"""

import re
import sys
from pathlib import Path

# Module order (dependencies flow downward)
MODULE_ORDER = [
    "errors.py",
    "logging_config.py",
    "icons.py",
    "config_loader.py",
    "host.py",
    "titles.py",
    "zoom.py",
    "segments.py",
    "plugin.py",
    "iterm2_host.py",
]

ROOT = Path(__file__).parent
SRC_DIR = ROOT / "src" / "powertabs"
OUTPUT_FILE = ROOT / "powertabs-autolaunch.py"
PACKAGE = "powertabs"

HEADER = '''#!/usr/bin/env python3
# ruff: noqa: F401
# /// script
# requires-python = ">=3.11"
# dependencies = ["iterm2", "loguru", "platformdirs", "wcwidth"]
# ///
"""
powertabs - powerline-style tab titles for iTerm2

Generated by build.py from src/powertabs/. Do not edit.

Configuration: ~/.config/powertabs/config.toml
"""
'''


def split_imports(content: str) -> tuple[list[str], str]:
    """
    Pull top-level import statements out of a module.

    Parenthesized imports spanning several lines are kept whole.
    Imports of the package itself are dropped (everything ends up in one
    namespace).

    Returns:
        Tuple of (external import statements, remaining source)
    """
    imports = []
    body = []
    pending: list[str] | None = None

    for line in content.split("\n"):
        if pending is not None:
            pending.append(line)
            if ")" in line:
                statement = "\n".join(pending)
                if not _is_package_import(statement):
                    imports.append(statement)
                pending = None
            continue

        if line.startswith(("import ", "from ")):
            if line.rstrip().endswith("("):
                pending = [line]
                continue
            if not _is_package_import(line):
                imports.append(line.rstrip())
            continue

        body.append(line)

    return imports, "\n".join(body)


def _is_package_import(statement: str) -> bool:
    return bool(re.match(rf"(from|import)\s+{PACKAGE}(\.|\s)", statement))


def strip_module_docstring(content: str) -> str:
    """Remove module-level docstring (the header carries the main one)."""
    # Match docstring at start of file (after optional comments)
    pattern = r'^((?:#[^\n]*\n)*)\s*(?:\'\'\'[\s\S]*?\'\'\'|"""[\s\S]*?""")\s*\n'
    return re.sub(pattern, r'\1', content)


def process_module(path: Path) -> tuple[list[str], str]:
    """Process a single module file for concatenation."""
    content = path.read_text()

    if content.startswith("#!"):
        content = "\n".join(content.split("\n")[1:])

    content = strip_module_docstring(content)
    imports, body = split_imports(content)
    return imports, body.strip()


def build() -> str:
    """Build the concatenated output."""
    all_imports: list[str] = []
    parts = []

    for module_name in MODULE_ORDER:
        module_path = SRC_DIR / module_name
        if not module_path.exists():
            print(f"ERROR: Missing module: {module_path}", file=sys.stderr)
            sys.exit(1)

        imports, body = process_module(module_path)
        for statement in imports:
            if statement not in all_imports:
                all_imports.append(statement)

        if body:
            separator = f"\n\n# {'=' * 77}\n# Module: {module_name}\n# {'=' * 77}\n\n"
            parts.append(separator)
            parts.append(body)

    return HEADER + "\n" + "\n".join(all_imports) + "".join(parts) + "\n"


def main():
    check_mode = "--check" in sys.argv

    if not SRC_DIR.exists():
        print(f"ERROR: src directory not found: {SRC_DIR}", file=sys.stderr)
        sys.exit(1)

    output = build()

    if check_mode:
        if not OUTPUT_FILE.exists():
            print(f"ERROR: Output file not found: {OUTPUT_FILE}", file=sys.stderr)
            sys.exit(1)

        existing = OUTPUT_FILE.read_text()
        if existing != output:
            print("ERROR: Built output differs from existing file.", file=sys.stderr)
            print("Run 'python build.py' to regenerate.", file=sys.stderr)
            sys.exit(1)

        print("OK: Output matches.")
        sys.exit(0)

    OUTPUT_FILE.write_text(output)

    # Verify syntax
    import py_compile
    try:
        py_compile.compile(str(OUTPUT_FILE), doraise=True)
        print(f"Built: {OUTPUT_FILE} ({len(output)} bytes, syntax OK)")
    except py_compile.PyCompileError as e:
        print(f"ERROR: Syntax error in output: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
