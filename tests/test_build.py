import importlib.util
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def load_build_module():
    spec = importlib.util.spec_from_file_location("build_script", ROOT / "build.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


build = load_build_module()


def test_split_imports_drops_package_imports():
    source = "\n".join([
        "import re",
        "from loguru import logger",
        "from powertabs.errors import Error",
        "from powertabs.host import (",
        "    EventHub,",
        "    HostConfig,",
        ")",
        "",
        "def f():",
        "    import json",
        "    return json",
    ])
    imports, body = build.split_imports(source)
    assert imports == ["import re", "from loguru import logger"]
    assert "powertabs" not in body
    assert "    import json" in body


def test_split_imports_keeps_parenthesized_external_imports():
    source = "from typing import (\n    Callable,\n    Protocol,\n)\nX = 1"
    imports, body = build.split_imports(source)
    assert imports == ["from typing import (\n    Callable,\n    Protocol,\n)"]
    assert body.strip() == "X = 1"


def test_strip_module_docstring_keeps_banner():
    source = '# banner\n"""Doc."""\n\nX = 1\n'
    assert build.strip_module_docstring(source) == "# banner\nX = 1\n"


def test_build_bundles_every_module():
    output = build.build()
    assert output.startswith("#!/usr/bin/env python3")
    assert "# /// script" in output
    assert "from powertabs" not in output
    for module_name in build.MODULE_ORDER:
        assert f"# Module: {module_name}" in output
    assert output.count("from loguru import logger") == 1
    assert "def apply_to_config(" in output
    assert output.rstrip().endswith("run()")
