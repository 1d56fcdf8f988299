"""Application errors and their HTTP mapping.

Services raise these; routers let them propagate and the handlers installed
by ``install_exception_handlers`` turn them into JSON responses.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppException(Exception):
    status_code = 500
    code = "internal_error"
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message}


class ValidationError(AppException):
    status_code = 400
    code = "validation_error"
    default_message = "Invalid input"


class AuthError(AppException):
    status_code = 401
    code = "auth_error"
    default_message = "Unauthorized"


class AuthorizationError(AppException):
    status_code = 403
    code = "forbidden"
    default_message = "Forbidden"


class NotFoundError(AppException):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class NoPendingSession(NotFoundError):
    code = "no_pending_session"
    default_message = "No pending checkout session"


class PreconditionFailed(AppException):
    status_code = 400
    code = "precondition_failed"
    default_message = "Precondition failed"


class PaymentNotCompleted(AppException):
    status_code = 400
    code = "payment_not_completed"
    default_message = "Payment not completed"


class GatewayError(AppException):
    status_code = 502
    code = "gateway_error"
    default_message = "Payment gateway error"


class ConflictError(AppException):
    status_code = 409
    code = "conflict"
    default_message = "Conflict"


def install_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.warning("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.code)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning("%s %s -> invalid request: %s", request.method, request.url.path, exc.errors())
        error = ValidationError("Invalid request")
        content = error.to_dict()
        content["details"] = [
            {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()
        ]
        return JSONResponse(status_code=error.status_code, content=content)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content=AppException().to_dict())
