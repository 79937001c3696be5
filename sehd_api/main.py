import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from sqlmodel import Session

from .config import settings
from .db import engine, init_db
from .errors import AppError
from .seed import ensure_default_users, ensure_demo_data
from .routers import admissions, auth, departments, health, programs, terms
from .routers.health import count_entities


logger = logging.getLogger("sehd_api")


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def seed_for_environment() -> None:
    # Production accounts come from scripts/manage.py
    if settings.is_production:
        logger.info("Production environment, skipping demo data and default accounts")
    elif settings.seed_demo_data:
        ensure_demo_data()
    else:
        ensure_default_users()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    settings.validate_for_startup()
    init_db()
    seed_for_environment()
    with Session(engine) as session:
        counts = count_entities(session)
    logger.info("Database initialized with: %s", ", ".join(f"{v} {k}" for k, v in counts.items()))
    yield


app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        logger.exception(
            "request_failed request_id=%s method=%s path=%s duration_ms=%s",
            req_id,
            request.method,
            request.url.path,
            elapsed_ms,
        )
        raise
    response.headers["X-Request-ID"] = req_id
    if request.url.path.startswith("/api"):
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        logger.info(
            "request_done request_id=%s method=%s path=%s status=%s duration_ms=%s",
            req_id,
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
    return response


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(health.router, prefix="/api")
if settings.debug:
    app.include_router(health.diagnostics_router, prefix="/api")
app.include_router(auth.router, prefix="/api")
app.include_router(departments.router, prefix="/api")
app.include_router(programs.router, prefix="/api")
app.include_router(terms.router, prefix="/api")
app.include_router(admissions.router, prefix="/api")
