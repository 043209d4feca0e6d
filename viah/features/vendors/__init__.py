"""
Vendor directory, duplicate detection on submission, and booking requests.
"""

from .duplicates import find_duplicate_vendors  # noqa: F401
