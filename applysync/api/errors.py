import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from applysync.api.subscribe import outcome_response
from applysync.core.config import settings
from applysync.core.errors import StoreFailure
from applysync.schemas.subscriber import INTERNAL_ERROR_MESSAGE, MessageResponse
from applysync.services.subscriptions import Outcome

logger = logging.getLogger(__name__)


def _detail(exc: Exception):
    # Internal error text only leaves the process outside production.
    return None if settings.is_production else str(exc)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    # The only request body this API accepts is {"email": "..."}.
    return outcome_response(Outcome.invalid_input)


async def store_failure_handler(request: Request, exc: StoreFailure):
    logger.error("Subscription error on %s %s: %s", request.method, request.url.path, exc)
    return outcome_response(Outcome.store_failure, error=_detail(exc))


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    body = MessageResponse(success=False, message=str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    body = MessageResponse(success=False, message=INTERNAL_ERROR_MESSAGE, error=_detail(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(exclude_none=True),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StoreFailure, store_failure_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
