"""Full scans over a repository query, fetched one page at a time."""

from storefront.domain import setting


def scan(query, order_by="id") -> list:
    """Return every record matching ``query``.

    Pages are ``scan_limit`` records long. ``order_by`` must give a stable
    order across pages; pass ``None`` to keep the store's own order.
    """
    page_size = int(setting("scan_limit", 5000))
    if order_by is not None:
        query = query.order_by(order_by)

    records, offset = [], 0
    while True:
        page = query.offset(offset).limit(page_size).all().items
        records.extend(page)
        if len(page) < page_size:
            return records
        offset += page_size
