from typing import Optional

from dashboard.core.config import CURRENCY_SYMBOL


def format_currency(amount: Optional[int], symbol: str = CURRENCY_SYMBOL) -> str:
    """
    Форматирует сумму в центах для отображения: 123456 -> "$1,234.56".

    Args:
        amount: сумма в минимальных единицах валюты (None считается нулем)
        symbol: символ валюты

    Returns:
        str: отформатированная сумма
    """
    amount = int(amount or 0)
    sign = "-" if amount < 0 else ""
    units, cents = divmod(abs(amount), 100)
    return f"{sign}{symbol}{units:,}.{cents:02d}"
