"""
Pagination utilities.
Provides consistent pagination across list operations.
"""
from typing import TypeVar, List

T = TypeVar("T")


def create_paginated_response(
    items: List[T], 
    total: int, 
    page: int, 
    limit: int
) -> dict:
    """
    Create a paginated response dictionary.
    
    Args:
        items: List of items for current page
        total: Total count of all items
        page: Current page number
        limit: Items per page
    
    Returns:
        Dictionary with pagination metadata
    """
    pages = (total + limit - 1) // limit if limit > 0 else 0
    
    return {
        "items": items,
        "total": total,
        "page": page,
        "limit": limit,
        "pages": pages,
        "has_next": page < pages,
        "has_prev": page > 1
    }
