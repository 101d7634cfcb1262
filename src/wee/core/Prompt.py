# wee/core/Prompt.py
"""Prompt requests raised by editor actions.

When an action needs a line of text from the user (a search query, a file
name, a line number...) the editor stores one of these objects in
``Wee.pending_prompt``. The host collects the text and hands it back through
``Wee.submit_prompt(prompt, text)``, which dispatches on the prompt's type.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class SearchPrompt:
    message: str = "Search: %s (Use ESC/Arrows/Enter)"
    direction: int = 1


@dataclass(frozen=True, slots=True)
class ReplacePrompt:
    needle: str
    message: str = "Replace with: %s (ESC to cancel)"


@dataclass(frozen=True, slots=True)
class SaveAsPrompt:
    message: str = "Save as: %s (ESC to cancel)"


@dataclass(frozen=True, slots=True)
class JumpToLinePrompt:
    message: str = "Go to line: %s (ESC to cancel)"


@dataclass(frozen=True, slots=True)
class GenericPrompt:
    message: str


Prompt = Union[SearchPrompt, ReplacePrompt, SaveAsPrompt, JumpToLinePrompt, GenericPrompt]
