# src/wee/core/__init__.py
"""Public facade for wee.core: re-export main classes from CamelCase modules.

Keeps the CamelCase file names (RowStore.py, History.py, ...),
but provides flat imports for convenience and stability.
"""

# Re-export classes/symbols from CamelCase modules
from .Clipboard import Clipboard  # noqa: F401
from .History import History, Snapshot  # noqa: F401
from .RowStore import InvalidPositionError, Row, RowStore  # noqa: F401
from .Selection import EditMode, Selection  # noqa: F401
from .SelectionManager import SelectionManager  # noqa: F401
from .Syntax import Highlight, SyntaxEngine, SyntaxProfile  # noqa: F401
from .SyntaxRules import SyntaxRuleProvider  # noqa: F401
from .Wee import Wee  # noqa: F401


__all__ = [
    "Clipboard",
    "EditMode",
    "Highlight",
    "History",
    "InvalidPositionError",
    "Row",
    "RowStore",
    "Selection",
    "SelectionManager",
    "Snapshot",
    "SyntaxEngine",
    "SyntaxProfile",
    "SyntaxRuleProvider",
    "Wee",
]
