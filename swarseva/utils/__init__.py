"""
Utility functions for the SwarSeva service directory
"""

from .validators import (
    is_object_id,
    page_window,
    resolve_sort_field
)

__all__ = [
    "is_object_id",
    "page_window",
    "resolve_sort_field"
]
