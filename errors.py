from typing import Optional


class ApiError(Exception):
    """Базовая ошибка API, превращается в JSON-ответ в middleware"""
    status_code = 500

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class ValidationError(ApiError):
    """Ошибка клиента: неверное значение поля"""
    status_code = 400


class NotFoundError(ApiError):
    """Запись (или связанная категория) не найдена"""
    status_code = 404


class StorageError(ApiError):
    """Любая ошибка базы данных, сообщение передаётся как есть"""
    status_code = 500
