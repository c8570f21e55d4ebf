"""Pagination helpers."""


def clamp_limit(limit: int | None, default: int = 50, max_limit: int = 200) -> int:
    """Missing or non-positive limit -> default; otherwise cap at max_limit."""
    if not limit or limit < 1:
        return default
    return min(limit, max_limit)
