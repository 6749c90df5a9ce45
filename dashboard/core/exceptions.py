class StoreError(RuntimeError):
    """Ошибка обращения к хранилищу с фиксированным сообщением операции"""


class NotFoundError(StoreError):
    """Уникальный поиск не вернул ни одной строки"""
