"""
Utility functions for identifier and pagination handling
"""
import re
from typing import Tuple

from ..config import settings

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")

# Public sort keys and the stored fields they map to
SORT_FIELDS = {
    "priority": "priority",
    "name": "name.en",
    "shortName": "shortName",
    "category": "category",
    "createdAt": "createdAt",
    "updatedAt": "updatedAt",
}


def is_object_id(value: str) -> bool:
    """
    Check whether an identifier looks like a MongoDB ObjectId

    Only the 24-character hex form counts; anything else is treated as a
    shortName.
    """
    return bool(value) and bool(OBJECT_ID_PATTERN.match(value))


def page_window(page: int, limit: int) -> Tuple[int, int]:
    """
    Clamp pagination parameters

    Returns:
        (skip, limit) suitable for a database cursor
    """
    page = max(page, 1)
    limit = min(max(limit, 1), settings.max_page_size)
    return (page - 1) * limit, limit


def resolve_sort_field(sort: str) -> str:
    """Map a public sort key to the stored field, defaulting to priority"""
    return SORT_FIELDS.get(sort, "priority")
