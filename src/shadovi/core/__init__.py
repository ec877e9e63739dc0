# src/shadovi/core/__init__.py
"""Public facade for shadovi.core: re-export main classes from CamelCase modules.

Keeps Java-like file names (Document.py, Line.py, ...),
but provides flat imports for convenience and stability.
"""

# Re-export the buffer engine. Editor depends on shadovi.ui and is imported
# from shadovi.core.Editor directly.
from .Highlighter import HighlightingOptions, HighlightType  # noqa: F401
from .Line import Line, SearchDirection, StyleRun  # noqa: F401
from .FileType import FileType  # noqa: F401
from .Document import Document, Position  # noqa: F401
from .Viewport import Motion, ScrollOffset, ViewportSize  # noqa: F401


__all__ = [
    "Document",
    "FileType",
    "HighlightType",
    "HighlightingOptions",
    "Line",
    "Motion",
    "Position",
    "ScrollOffset",
    "SearchDirection",
    "StyleRun",
    "ViewportSize",
]
