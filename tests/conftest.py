# ruff: noqa: E402

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from powertabs.host import HostConfig, PaneInformation, TabInformation


def make_tab(tab_id, index=0, active=False, title="", pane_title="zsh") -> TabInformation:
    return TabInformation(
        tab_id=tab_id,
        tab_index=index,
        is_active=active,
        active_pane=PaneInformation(pane_id=f"p{tab_id}", title=pane_title, is_active=True),
        tab_title=title,
    )


def make_panes(count: int, zoomed: int | None = None) -> list[PaneInformation]:
    return [
        PaneInformation(pane_id=i, title="zsh", is_zoomed=(i == zoomed))
        for i in range(count)
    ]


@pytest.fixture
def host_config() -> HostConfig:
    return HostConfig()
