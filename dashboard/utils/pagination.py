import math

from dashboard.core.config import ITEMS_PER_PAGE


def page_offset(page: int, per_page: int = ITEMS_PER_PAGE) -> int:
    """Смещение первой строки страницы (страницы нумеруются с 1)"""
    if page < 1:
        raise ValueError(f"Номер страницы должен быть не меньше 1: {page}")
    return (page - 1) * per_page


def total_pages(count: int, per_page: int = ITEMS_PER_PAGE) -> int:
    return math.ceil(count / per_page)
