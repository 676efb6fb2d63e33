"""
Database helper utilities for the Student Records API
"""

MAX_PER_PAGE = 100

def _positive_int(value, default):
    try:
        number = int(value)
    except (ValueError, TypeError):
        return default
    return number if number > 0 else default

def parse_pagination(args, default_per_page):
    """Read page and limit query parameters, falling back to defaults"""
    page = _positive_int(args.get('page'), 1)
    per_page = min(_positive_int(args.get('limit'), default_per_page), MAX_PER_PAGE)
    return page, per_page

def paginate_query(query, page=1, per_page=20):
    """Paginate query results; pages past the end come back empty"""
    return query.paginate(page=page, per_page=per_page, error_out=False)
