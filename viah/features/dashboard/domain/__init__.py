"""
Domain subpackage for dashboard widgets.
"""

from .models import DashboardWidget, WidgetReorderRequest, WidgetUpdate

__all__ = [
    "DashboardWidget",
    "WidgetReorderRequest",
    "WidgetUpdate",
]
