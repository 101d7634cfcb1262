# wee/core/SyntaxRules.py
"""wee.core.SyntaxRules
=======================

Resolves the `SyntaxProfile` for a file name.

Profiles come from the ``[syntax]`` section of the configuration, one table per
language using the keys of the classic rule files (``filematch``,
``keywords``, ``singleline_comment_start``, ``multiline_comment_start``,
``multiline_comment_end``, ``flags``).

Lookup order:
    1. A profile whose ``filematch`` claims the file name.
    2. Pygments' lexer registry: the lexer matching the file name is
       resolved and its name and aliases are compared against the profile
       names and languages. This lets ``setup.pyi`` or ``run.ksh`` find the
       python and shell profiles without listing every extension.
"""

import logging
import os
from typing import Any, Optional

from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound

from wee.core.Syntax import SyntaxProfile


class SyntaxRuleProvider:
    """Builds profiles from configuration and picks one per opened file."""

    def __init__(self, config: Optional[dict[str, Any]] = None) -> None:
        self.profiles: dict[str, SyntaxProfile] = {}
        for name, data in (config or {}).get("syntax", {}).items():
            if not isinstance(data, dict):
                logging.warning(f"SyntaxRules: ignoring non-table syntax entry '{name}'")
                continue
            try:
                self.profiles[name.lower()] = SyntaxProfile.from_dict(data, name)
            except (TypeError, ValueError) as e:
                logging.error(f"SyntaxRules: invalid syntax profile '{name}': {e}")
        logging.debug(f"SyntaxRules: loaded profiles {sorted(self.profiles)}")

    def get(self, name: str) -> Optional[SyntaxProfile]:
        key = name.lower()
        if key in self.profiles:
            return self.profiles[key]
        for profile in self.profiles.values():
            if profile.language.lower() == key:
                return profile
        return None

    def profile_for(self, filename: Optional[str]) -> Optional[SyntaxProfile]:
        """Returns the profile for ``filename``, or None for plain text."""
        if not filename:
            return None
        base_name = os.path.basename(filename)

        for profile in self.profiles.values():
            if profile.matches_filename(base_name):
                return profile

        try:
            lexer = get_lexer_for_filename(base_name)
        except ClassNotFound:
            logging.debug(f"SyntaxRules: no lexer known for '{base_name}'")
            return None

        for candidate in (lexer.name, *lexer.aliases):
            profile = self.get(candidate)
            if profile is not None:
                logging.debug(
                    f"SyntaxRules: '{base_name}' resolved through lexer '{lexer.name}' to {profile.language}"
                )
                return profile
        return None
