# wee/core/Syntax.py
"""wee.core.Syntax
==================

Per-character syntax classification for rows of text.

The engine works on the *render* form of a row (tabs already expanded) and
assigns one `Highlight` class to every rendered character. Classification is
driven by a `SyntaxProfile`: keywords of two classes, a single-line comment
marker, a pair of multi-line comment markers and two feature flags (numbers
and strings).

Multi-line comments are the only state that crosses row boundaries. Each row
stores the state it *exits* with in ``hl_open_comment``; the next row starts
from that value. When a recomputed row exits with a different value than
before, the following row is recomputed too, and so on until the state
stabilises. That cascade is a plain loop over row indices.

Classes:
    Highlight: Integer enumeration of highlight classes.
    SyntaxProfile: Immutable language description.
    SyntaxEngine: Classifies rows and cascades multi-line comment state.

Functions:
    is_separator(ch): Token boundary test used by numbers and keywords.
    syntax_to_color(hl): ANSI SGR colour number for a highlight class.
"""

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Optional, Sequence

if TYPE_CHECKING:
    from wee.core.RowStore import Row


HL_HIGHLIGHT_NUMBERS = 1 << 0
HL_HIGHLIGHT_STRINGS = 1 << 1

SEPARATOR_CHARS = ",.()+-/*=~%<>[];"


class Highlight(IntEnum):
    NORMAL = 0
    COMMENT = 1
    MLCOMMENT = 2
    KEYWORD1 = 3
    KEYWORD2 = 4
    STRING = 5
    NUMBER = 6
    MATCH = 7
    SELECTION = 8


# ANSI SGR colour numbers used by terminal renderers.
HIGHLIGHT_COLORS: dict[Highlight, int] = {
    Highlight.COMMENT: 36,
    Highlight.MLCOMMENT: 36,
    Highlight.KEYWORD1: 33,
    Highlight.KEYWORD2: 32,
    Highlight.STRING: 35,
    Highlight.NUMBER: 31,
    Highlight.MATCH: 34,
    Highlight.SELECTION: 7,
}


def syntax_to_color(hl: int) -> int:
    """Maps a highlight class to the SGR colour a renderer should emit (37 = default)."""
    return HIGHLIGHT_COLORS.get(Highlight(hl), 37)


def is_separator(ch: str) -> bool:
    """True for whitespace, NUL, the empty string (end of row) and punctuation separators."""
    return ch == "" or ch == "\0" or ch.isspace() or ch in SEPARATOR_CHARS


@dataclass(frozen=True, slots=True)
class SyntaxProfile:
    """Language description consumed by `SyntaxEngine`.

    Keywords ending with ``|`` belong to the secondary class (KEYWORD2); the
    bar itself is not part of the matched text.
    """

    language: str
    filematch: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    singleline_comment_start: str = ""
    multiline_comment_start: str = ""
    multiline_comment_end: str = ""
    flags: int = 0
    _compiled_keywords: tuple[tuple[str, Highlight], ...] = field(
        init=False, repr=False, compare=False, default=()
    )

    def __post_init__(self) -> None:
        compiled = []
        for keyword in self.keywords:
            if keyword.endswith("|"):
                if len(keyword) > 1:
                    compiled.append((keyword[:-1], Highlight.KEYWORD2))
            elif keyword:
                compiled.append((keyword, Highlight.KEYWORD1))
        object.__setattr__(self, "_compiled_keywords", tuple(compiled))

    @property
    def highlight_numbers(self) -> bool:
        return bool(self.flags & HL_HIGHLIGHT_NUMBERS)

    @property
    def highlight_strings(self) -> bool:
        return bool(self.flags & HL_HIGHLIGHT_STRINGS)

    @property
    def compiled_keywords(self) -> tuple[tuple[str, Highlight], ...]:
        """``(text, class)`` pairs in declaration order."""
        return self._compiled_keywords

    def matches_filename(self, filename: str) -> bool:
        """True if an extension pattern (``.c``) ends the name or a plain pattern occurs in it."""
        for pattern in self.filematch:
            if pattern.startswith("."):
                if filename.endswith(pattern):
                    return True
            elif pattern in filename:
                return True
        return False

    @classmethod
    def from_dict(cls, data: dict[str, Any], name: str = "") -> "SyntaxProfile":
        """Builds a profile from a rule mapping (configuration or JSON rule file keys).

        Raises:
            ValueError: If the mapping carries neither ``language`` nor a name.
        """
        language = str(data.get("language") or name)
        if not language:
            raise ValueError("syntax profile requires a language name")
        flags = data.get("flags")
        if flags is None:
            flags = 0
            if data.get("highlight_numbers", False):
                flags |= HL_HIGHLIGHT_NUMBERS
            if data.get("highlight_strings", False):
                flags |= HL_HIGHLIGHT_STRINGS
        return cls(
            language=language,
            filematch=tuple(str(p) for p in data.get("filematch", ())),
            keywords=tuple(str(k) for k in data.get("keywords", ())),
            singleline_comment_start=str(data.get("singleline_comment_start") or ""),
            multiline_comment_start=str(data.get("multiline_comment_start") or ""),
            multiline_comment_end=str(data.get("multiline_comment_end") or ""),
            flags=int(flags),
        )


## ==================== SyntaxEngine Class ====================
class SyntaxEngine:
    """
    Class SyntaxEngine
    ==================
    Computes highlight classes for rows using the active `SyntaxProfile`.

    Attributes:
        profile (Optional[SyntaxProfile]): Active language profile. ``None``
            classifies everything as NORMAL.

    Methods:
        highlight_line(render, in_comment):
            Pure classification of one rendered row.
        update(rows, start):
            Recomputes ``rows[start]`` and cascades to following rows while
            the open-comment state keeps changing. Returns the count of rows
            recomputed.
        update_all(rows):
            Recomputes every row, e.g. after a profile change.
    """

    def __init__(self, profile: Optional[SyntaxProfile] = None) -> None:
        self.profile = profile

    def set_profile(self, profile: Optional[SyntaxProfile]) -> None:
        self.profile = profile
        logging.debug(
            f"SyntaxEngine: profile set to {profile.language if profile else 'none'}"
        )

    def highlight_line(
        self, render: str, in_comment: bool = False
    ) -> tuple[list[Highlight], bool]:
        """Classifies every character of ``render``.

        Args:
            render: Tab-expanded row text.
            in_comment: Whether the row starts inside a multi-line comment.

        Returns:
            ``(classes, open_comment)`` where ``open_comment`` is True if the
            row ends inside an unterminated multi-line comment.
        """
        size = len(render)
        hl = [Highlight.NORMAL] * size
        syntax = self.profile
        if syntax is None:
            return hl, False

        scs = syntax.singleline_comment_start
        mcs = syntax.multiline_comment_start
        mce = syntax.multiline_comment_end
        has_ml = bool(mcs and mce)

        prev_sep = True
        in_string = ""
        i = 0
        while i < size:
            c = render[i]
            prev_hl = hl[i - 1] if i > 0 else Highlight.NORMAL

            if scs and not in_string and not in_comment:
                if render.startswith(scs, i):
                    for j in range(i, size):
                        hl[j] = Highlight.COMMENT
                    break

            if has_ml and not in_string:
                if in_comment:
                    hl[i] = Highlight.MLCOMMENT
                    if render.startswith(mce, i):
                        for j in range(i, i + len(mce)):
                            hl[j] = Highlight.MLCOMMENT
                        i += len(mce)
                        in_comment = False
                        prev_sep = True
                    else:
                        i += 1
                    continue
                elif render.startswith(mcs, i):
                    for j in range(i, i + len(mcs)):
                        hl[j] = Highlight.MLCOMMENT
                    i += len(mcs)
                    in_comment = True
                    continue

            if syntax.highlight_strings:
                if in_string:
                    hl[i] = Highlight.STRING
                    if c == "\\" and i + 1 < size:
                        hl[i + 1] = Highlight.STRING
                        i += 2
                        continue
                    if c == in_string:
                        in_string = ""
                    i += 1
                    prev_sep = True
                    continue
                elif c in ('"', "'"):
                    in_string = c
                    hl[i] = Highlight.STRING
                    i += 1
                    continue

            if syntax.highlight_numbers:
                if (c.isdigit() and (prev_sep or prev_hl == Highlight.NUMBER)) or (
                    c == "." and prev_hl == Highlight.NUMBER
                ):
                    hl[i] = Highlight.NUMBER
                    i += 1
                    prev_sep = False
                    continue

            if prev_sep:
                matched = False
                for keyword, klass in syntax.compiled_keywords:
                    klen = len(keyword)
                    if render.startswith(keyword, i) and is_separator(
                        render[i + klen : i + klen + 1]
                    ):
                        for j in range(i, i + klen):
                            hl[j] = klass
                        i += klen
                        matched = True
                        break
                if matched:
                    prev_sep = False
                    continue

            prev_sep = is_separator(c)
            i += 1

        return hl, in_comment

    def update(self, rows: Sequence["Row"], start: int, min_rows: int = 1) -> int:
        """Recomputes ``rows[start]`` and cascades while the exit state changes.

        Each row starts from the stored ``hl_open_comment`` of the row before
        it. After at least ``min_rows`` rows the loop stops at the first row
        whose exit state is unchanged, or at the end of the document.

        Returns:
            Number of rows recomputed.
        """
        count = 0
        idx = max(start, 0)
        while idx < len(rows):
            row = rows[idx]
            entering = rows[idx - 1].hl_open_comment if idx > 0 else False
            hl, open_comment = self.highlight_line(row.render, entering)
            changed = open_comment != row.hl_open_comment
            row.hl = hl
            row.hl_open_comment = open_comment
            count += 1
            if not changed and count >= min_rows:
                break
            idx += 1
        if count > 1:
            logging.debug(
                f"SyntaxEngine: comment state cascaded over {count} rows from row {start}"
            )
        return count

    def update_all(self, rows: Sequence["Row"]) -> None:
        """Recomputes every row in order, ignoring the early stop of `update`."""
        in_comment = False
        for row in rows:
            row.hl, row.hl_open_comment = self.highlight_line(row.render, in_comment)
            in_comment = row.hl_open_comment
