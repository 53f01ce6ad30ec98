"""
Utility functions for the application.
"""
import json
import math
from typing import Any, Dict, List, Optional


def page_offset(page: int, limit: int) -> int:
    """Translate a 1-based page number into a row offset."""
    return (max(page, 1) - 1) * limit


def paginate(query, page: int, limit: int) -> List[Any]:
    """Apply offset/limit pagination to a SQLAlchemy query."""
    return query.offset(page_offset(page, limit)).limit(limit).all()


def pagination_meta(total: int, page: int, limit: int) -> Dict[str, Any]:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
        "has_more": page * limit < total,
    }


def normalize_tags(tags: Optional[List[str]]) -> List[str]:
    """Lower-case, strip and de-duplicate tags, keeping first-seen order."""
    seen = []
    for tag in tags or []:
        cleaned = tag.strip().lower()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


def estimate_read_time(content: str, words_per_minute: int = 200) -> Dict[str, int]:
    """Word count and read time in minutes (at least one minute)."""
    word_count = len(content.split())
    return {
        "word_count": word_count,
        "read_time": max(1, math.ceil(word_count / words_per_minute)),
    }


def json_element_pattern(value: str) -> str:
    """
    LIKE pattern (escape character ``\\``) matching ``value`` as a string
    element of a JSON-serialized list. The value is encoded the way the JSON
    column stores it, so non-ASCII text matches its ``\\uXXXX`` form.
    """
    encoded = json.dumps(value)
    escaped = encoded.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
