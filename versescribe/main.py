import time
import uuid

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from versescribe.core.config import get_settings
from versescribe.core.exceptions import (
    AppError,
    app_exception_handler,
    generic_exception_handler,
    validation_exception_handler,
)
from versescribe.core.logging import bind_request_id, configure_logging, get_logger
from versescribe.db.init import init_db
from versescribe.routers import bible, profile, sessions, stats, topics, transcriptions
from versescribe.services.session import SessionRegistry

settings = get_settings()
configure_logging(debug=settings.debug)
log = get_logger(__name__)

app = FastAPI(
    title="versescribe API",
    version="1.0.0",
)
app.state.sessions = SessionRegistry()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_id_middleware(request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    bind_request_id(request_id)
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    log.info(
        "request",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round(duration_ms, 2),
    )
    response.headers["X-Request-ID"] = request_id
    return response


app.add_exception_handler(AppError, app_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Routers
app.include_router(profile.router, prefix="/v1/user", tags=["user"])
app.include_router(transcriptions.router, prefix="/v1/transcription", tags=["transcription"])
app.include_router(stats.router, prefix="/v1", tags=["stats"])
app.include_router(bible.router, prefix="/v1/bible", tags=["bible"])
app.include_router(topics.router, prefix="/v1/topics", tags=["topics"])
app.include_router(sessions.router, prefix="/v1/sessions", tags=["sessions"])


@app.on_event("startup")
async def startup():
    if settings.sentry_dsn:
        import sentry_sdk
        sentry_sdk.init(dsn=settings.sentry_dsn, environment=settings.env, traces_sample_rate=0.1)
        log.info("startup", msg="Sentry enabled")
    if settings.store_backend == "mongo":
        await init_db()
        log.info("startup", msg="DB connected")
    else:
        log.info("startup", msg="Using in-memory stores")


@app.on_event("shutdown")
async def shutdown():
    app.state.sessions.close_all()


@app.get("/health")
async def health():
    """Health check for load balancers and monitoring."""
    return {"status": "ok"}
