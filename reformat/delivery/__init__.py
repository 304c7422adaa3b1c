"""
Delivery Module - terminal rendering of transformed documents.
"""

from reformat.delivery.views import (
    ViewMode,
    ViewTheme,
    mindmap_tree,
    render_header,
    render_view,
    run_practice,
    theme_for,
)

__all__ = [
    "ViewMode",
    "ViewTheme",
    "mindmap_tree",
    "render_header",
    "render_view",
    "run_practice",
    "theme_for",
]
