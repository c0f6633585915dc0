"""
Helpers for object-list payloads returned by the objects API.

Each item looks like ``{"id": "7", "name": "Apple iPad", "data": {...} | None}``.
"""

from typing import Any, Dict, List, Optional

from loguru import logger


def extract_names(items: List[Dict[str, Any]]) -> List[str]:
    """Return the ``name`` of every item, in order."""
    return [item.get("name") for item in items]


def get_by_id(items: List[Dict[str, Any]], item_id: Any) -> Optional[Dict[str, Any]]:
    """Return the first item whose id equals ``item_id``, or None."""
    for item in items:
        if item.get("id") == item_id:
            return item
    return None


def filter_by_keyword(items: List[Dict[str, Any]], keyword: str) -> List[Dict[str, Any]]:
    """Items whose name contains ``keyword``, ignoring case."""
    needle = keyword.lower()
    return [item for item in items if needle in str(item.get("name") or "").lower()]


def format_products(items: List[Dict[str, Any]]) -> str:
    """
    Render items as a readable block and log it at debug level.

    Returns:
        The rendered text
    """
    lines: List[str] = []
    for item in items:
        lines.append(f"ID: {item.get('id')}")
        lines.append(f"Name: {item.get('name')}")
        data = item.get("data")
        if not data:
            lines.append("Data: null")
        else:
            lines.append("Data:")
            for key, value in data.items():
                lines.append(f"  {key}: {value}")
        lines.append("-" * 40)

    text = "\n".join(lines)
    logger.debug(f"Products:\n{text}")
    return text


__all__ = [
    "extract_names",
    "filter_by_keyword",
    "format_products",
    "get_by_id",
]
