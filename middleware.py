from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from config import CORS_ORIGINS
from errors import ApiError, StorageError
from logger import logger
from responses import failure


async def api_error_handler(request: Request, exc: ApiError):
    if isinstance(exc, StorageError):
        body = failure("Er is een serverfout opgetreden", field=exc.field, message=exc.message)
    else:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
        body = failure(exc.message, field=exc.field)
    return JSONResponse(status_code=exc.status_code, content=body)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    field = None
    if errors:
        loc = [str(part) for part in errors[0].get("loc", ()) if part not in ("body", "path", "query")]
        field = ".".join(loc) or None
    logger.warning(f"{request.method} {request.url.path} -> 400: malformed request ({field})")
    return JSONResponse(status_code=400, content=failure("Ongeldig verzoek", field=field))


def setup_middleware(app):
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
