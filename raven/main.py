import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import models  # noqa: F401
from .config import CORS_ORIGINS, EXPOSE_ERROR_DETAILS
from .database import Base, engine
from .domain.approvals import admin_router as approvals_admin_router
from .domain.approvals import router as approvals_router
from .domain.clients import router as clients_router
from .domain.scheduling import router as scheduling_router
from .errors import ErrorKind, InternalError, RavenError
from .security_headers import SecurityHeadersMiddleware

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("passlib").setLevel(logging.ERROR)

SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise
    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Raven Community API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(RavenError)
async def raven_error_handler(request: Request, exc: RavenError):
    if exc.status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path} - {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} - {exc.kind.value}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Request body/query problems are reported as 400 validation errors"""
    fields = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        fields.append({"field": ".".join(loc), "message": error.get("msg", "Invalid value")})

    logger.warning(f"Validation error for {request.url.path}: {fields}")
    return JSONResponse(
        status_code=400,
        content={
            "error": ErrorKind.VALIDATION.value,
            "message": "Missing or invalid fields.",
            "fields": fields,
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}: {exc}")
    error = InternalError(str(exc) if EXPOSE_ERROR_DETAILS else None)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


if SECURITY_HEADERS_ENABLED:
    app.add_middleware(
        SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"]
    )
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

logger.info(f"CORS allowed origins: {CORS_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# Routes
app.include_router(scheduling_router, prefix="/api")
app.include_router(clients_router, prefix="/api")
app.include_router(approvals_router, prefix="/api")
app.include_router(approvals_admin_router, prefix="/api")


@app.get("/")
def root():
    return {"message": "Raven Community API is running"}


@app.get("/health")
def health():
    return {"status": "ok"}
