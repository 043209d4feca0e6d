"""
Domain subpackage for wedding planning records.
"""

from .models import Event, EventCreate, EventUpdate, Wedding, WeddingCreate, WeddingUpdate

__all__ = [
    "Event",
    "EventCreate",
    "EventUpdate",
    "Wedding",
    "WeddingCreate",
    "WeddingUpdate",
]
