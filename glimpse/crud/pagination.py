from typing import List, Optional, Tuple

from sqlalchemy.orm import Query


def paginate(query: Query, page: Optional[int] = None, page_size: Optional[int] = None) -> Tuple[List, int]:
    """Return (items, total). Without a page size the full result set is returned."""
    if page_size is None:
        items = query.all()
        return items, len(items)
    page = page or 1
    total = query.order_by(None).count()
    items = query.offset((page - 1) * page_size).limit(page_size).all()
    return items, total
