"""
Per-wedding dashboard widget layout.
"""

from .layout import DEFAULT_WIDGET_TYPES, merge_order, move_item  # noqa: F401
