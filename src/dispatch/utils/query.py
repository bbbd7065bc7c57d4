"""Paged reads over a repository DAO.

Protean query sets are limited by default, so full-collection scans walk
the results page by page.
"""

PAGE_SIZE = 500


def fetch_all(dao, **filters) -> list:
    """Return every record matching ``filters`` (all records when none are given)."""
    records = []
    offset = 0
    while True:
        query = dao.query.filter(**filters) if filters else dao.query
        page = query.offset(offset).limit(PAGE_SIZE).all()
        records.extend(page.items)
        if len(page.items) < PAGE_SIZE:
            return records
        offset += PAGE_SIZE
