"""
Python client for the Viah API: HTTP wrapper, typed query cache and the
stateful controllers behind the messaging inbox, dashboard and header badge.
"""

from viah.client.api_client import ViahApiClient
from viah.client.errors import ApiError, ConversationClosedError, DuplicateVendorError
from viah.client.messages import MessagesController, NavigationState
from viah.client.notifications import NotificationPoller
from viah.client.query_cache import QueryCache
from viah.client.widgets import WidgetBoard

__all__ = [
    "ApiError",
    "ConversationClosedError",
    "DuplicateVendorError",
    "MessagesController",
    "NavigationState",
    "NotificationPoller",
    "QueryCache",
    "ViahApiClient",
    "WidgetBoard",
]
