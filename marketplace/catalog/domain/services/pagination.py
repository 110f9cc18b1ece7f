from typing import Any, Dict

from django.core.paginator import Paginator

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def parse_page_params(page: Any, limit: Any) -> tuple:
    """Coerce raw query parameters into a sane (page, limit) pair."""
    try:
        page = max(int(page or 1), 1)
    except (TypeError, ValueError):
        page = 1
    try:
        limit = int(limit or DEFAULT_PAGE_SIZE)
    except (TypeError, ValueError):
        limit = DEFAULT_PAGE_SIZE
    return page, min(max(limit, 1), MAX_PAGE_SIZE)


def paginate(queryset, page: Any = 1, limit: Any = DEFAULT_PAGE_SIZE) -> Dict[str, Any]:
    """
    Slice a queryset into one page.

    Returns ``results`` plus the counters the API exposes: ``count`` (items on
    this page), ``total``, ``totalPages`` and ``currentPage``.
    """
    page, limit = parse_page_params(page, limit)
    paginator = Paginator(queryset, limit)
    page_obj = paginator.get_page(page)
    results = list(page_obj.object_list)
    return {
        "results": results,
        "count": len(results),
        "total": paginator.count,
        "totalPages": paginator.num_pages if paginator.count else 0,
        "currentPage": page_obj.number,
    }
