# mediaplanner/main.py
from contextlib import asynccontextmanager

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy.exc import SQLAlchemyError

from mediaplanner.config import settings
from mediaplanner.core.errors import PlannerError
from mediaplanner.core.logging import get_logger
from mediaplanner.core.observability import ObservabilityMiddleware
from mediaplanner.db.core import init_db
from mediaplanner.api.v1.routers import ai, chat, csv_mapping, planner, reference

log = get_logger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    log.info("startup", extra={"env": settings.app_env})
    yield


app = FastAPI(title="Media Budget Planner", lifespan=lifespan)

# CORS: set CORS_ORIGINS (comma-separated)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ObservabilityMiddleware)

Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)


@app.exception_handler(PlannerError)
async def planner_error_handler(request: Request, exc: PlannerError):
    level = log.error if exc.status_code >= 500 else log.warning
    level("request_failed", extra={"path": request.url.path, "error": exc.error, "status": exc.status_code})
    return JSONResponse(status_code=exc.status_code, content={"error": exc.error, "detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    log.warning("invalid_request", extra={"path": request.url.path})
    detail = "; ".join(f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors())
    return JSONResponse(status_code=400, content={"error": "invalid_input", "detail": detail})


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    log.error("storage_failed", extra={"path": request.url.path, "error": type(exc).__name__})
    return JSONResponse(status_code=503, content={"error": "storage_unavailable", "detail": "Database unavailable"})


# Routers
app.include_router(planner.router,     prefix="/api/v1")
app.include_router(chat.router,        prefix="/api/v1")
app.include_router(csv_mapping.router, prefix="/api/v1")
app.include_router(ai.router,          prefix="/api/v1")
app.include_router(reference.router,   prefix="/api/v1")


@app.get("/health")
def health():
    return {"ok": True}
