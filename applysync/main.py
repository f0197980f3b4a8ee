import asyncio
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from applysync.api.errors import register_exception_handlers
from applysync.api.subscribe import router as subscribe_router
from applysync.core.config import settings
from applysync.core.log import configure_logging
from applysync.db.session import SubscriberStore, connect_store, get_store
from applysync.schemas.subscriber import (
    CORS_REJECTED_MESSAGE, HealthRead, MessageResponse, RootRead,
)
from applysync.services.health import HealthReporter

logger = logging.getLogger(__name__)


def _log_loop_exception(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    # Background task failures are logged; the server keeps running.
    logger.error(
        "Unhandled async error: %s",
        context.get("message", "unknown"),
        exc_info=context.get("exception"),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    asyncio.get_running_loop().set_exception_handler(_log_loop_exception)
    # StartupFailure propagates: the server refuses to start without a store.
    app.state.store = await connect_store(settings)
    try:
        yield
    finally:
        app.state.store.close()


app = FastAPI(
    title="ApplySync API",
    version="1.0.0",
    description="Newsletter subscription backend for ApplySync.",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


# Requests without an Origin header (curl, mobile apps) are always allowed.
@app.middleware("http")
async def reject_unknown_origins(request: Request, call_next):
    origin = request.headers.get("origin")
    if origin is not None and origin not in settings.CORS_ORIGINS:
        logger.warning("Rejected request from origin %s", origin)
        body = MessageResponse(success=False, message=CORS_REJECTED_MESSAGE)
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content=body.model_dump(exclude_none=True),
        )
    return await call_next(request)


register_exception_handlers(app)
app.include_router(subscribe_router)


@app.get("/", response_model=RootRead, tags=["meta"])
async def root():
    return RootRead(
        message="ApplySync API is running",
        version=app.version,
        endpoints=[
            "POST /subscribe - Subscribe to newsletter",
            "GET /health - Check API status",
        ],
    )


@app.get("/health", response_model=HealthRead, tags=["meta"])
async def health_check(store: SubscriberStore = Depends(get_store)):
    return HealthRead.from_report(HealthReporter(store).report())


def run() -> None:
    configure_logging(settings.LOG_LEVEL)
    logger.info("Server starting on port %s", settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
