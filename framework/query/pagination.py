from typing import Tuple


def normalize_pagination(page: int, limit: int) -> Tuple[int, int]:
    """Coerce non-positive page/limit to 1. No upper bound is applied here."""
    return (page if page > 0 else 1, limit if limit > 0 else 1)


def paginate(statement, page: int, limit: int):
    """Window the statement to rows [(page-1)*limit, page*limit)."""
    page, limit = normalize_pagination(page, limit)
    return statement.offset((page - 1) * limit).limit(limit)
