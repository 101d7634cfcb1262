# tests/conftest.py
"""Pytest configuration with shared fixtures for the wee editor tests.

Every editor built here uses an internal-only clipboard (no pyperclip
backend probing) and a manual clock, so history debounce and status message
expiry are deterministic.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence

import pytest

from wee.core.Syntax import HL_HIGHLIGHT_NUMBERS, HL_HIGHLIGHT_STRINGS, SyntaxProfile
from wee.core.Wee import Wee
from wee.utils.utils import DEFAULT_CONFIG, deep_merge


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config() -> dict[str, Any]:
    """Built-in configuration with the system clipboard switched off."""
    return deep_merge(DEFAULT_CONFIG, {"editor": {"use_system_clipboard": False}})


@pytest.fixture
def c_profile() -> SyntaxProfile:
    """Small C-like profile used by highlighting tests."""
    return SyntaxProfile(
        language="c",
        filematch=(".c", ".h"),
        keywords=("if", "return", "int|", "char|"),
        singleline_comment_start="//",
        multiline_comment_start="/*",
        multiline_comment_end="*/",
        flags=HL_HIGHLIGHT_NUMBERS | HL_HIGHLIGHT_STRINGS,
    )


@pytest.fixture
def editor(config: dict[str, Any], clock: FakeClock) -> Wee:
    return Wee(config=config, clock=clock)


@pytest.fixture
def make_editor(
    config: dict[str, Any], clock: FakeClock
) -> Callable[..., Wee]:
    """Factory: an editor with ``lines`` loaded (history empty, buffer clean)."""

    def _make(
        lines: Sequence[str] = (),
        filename: Optional[str] = None,
        **overrides: Any,
    ) -> Wee:
        cfg = deep_merge(config, overrides) if overrides else config
        ed = Wee(config=cfg, clock=clock)
        ed.open_document(filename, list(lines))
        return ed

    return _make
