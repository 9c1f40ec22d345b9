# app/core/handlers.py
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.core.exceptions import BaseAPIException, RosterException
from app.core.logging import logger


def _error_response(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {
                "code": code,
                "message": message,
                "details": details
            }
        },
    )

def _notify_error(request: Request, message: str) -> None:
    # Lỗi đầu vào cũng được báo cho người dùng qua khung thông báo
    notifier = getattr(request.app.state, "notifier", None)
    if notifier is not None:
        notifier.notify(message, kind="error")

# 1. Handle Custom Logic Errors (Do mình throw ra)
async def custom_api_exception_handler(request: Request, exc: BaseAPIException):
    if isinstance(exc, RosterException):
        logger.warning(f"Roster operation rejected: {exc.code} - {exc.message}")
        _notify_error(request, exc.message)

    return _error_response(exc.status_code, exc.code, exc.message, exc.details)

# 2. Handle Validation Errors (Do Pydantic throw ra khi FE gửi sai kiểu dữ liệu)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = {}
    for error in exc.errors():
        field = ".".join(str(x) for x in error["loc"] if x != "body")
        details[field] = error["msg"]

    _notify_error(request, "Input validation failed")
    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "VALIDATION_ERROR",
        "Input validation failed",
        details,
    )

# 3. Handle Standard HTTP Errors (404 Not Found do gõ sai URL, v.v.)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(exc.status_code, "HTTP_ERROR", str(exc.detail))

# 4. Handle General System Errors (Crash, Bug code, Library lỗi ngầm)
async def general_exception_handler(request: Request, exc: Exception):
    # Log lỗi chi tiết để Dev sửa
    logger.critical(f"Unhandled Exception: {exc}", exc_info=True)

    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        "An unexpected error occurred. Please contact support.",
        str(exc) if request.app.debug else None,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseAPIException, custom_api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
