from typing import Any, Optional
from models import Pagination


def success(data: Any = None, meta: Optional[Pagination] = None, message: Optional[str] = None) -> dict:
    """Конверт успешного ответа: {success, data, meta?, message?}"""
    body = {"success": True, "data": data}
    if meta is not None:
        body["meta"] = meta.model_dump(by_alias=True)
    if message is not None:
        body["message"] = message
    return body


def failure(error: str, field: Optional[str] = None, message: Optional[str] = None) -> dict:
    body = {"success": False, "error": error}
    if field is not None:
        body["field"] = field
    if message is not None:
        body["message"] = message
    return body
