import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.middleware.base import BaseHTTPMiddleware

from . import __version__
from .config import settings
from .database import create_tables
from .exceptions import (
    InvalidPropertyError,
    InvalidRuleError,
    MissingDefaultError,
    PropertyNotFoundError,
    RuleNotFoundError,
)
from .utils.logging_config import clear_request_context, set_request_context, setup_logging

from .routers import availability, availability_rules, health, properties

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    setup_logging(level=settings.log_level, json_format=settings.log_json)

    logger.info(f"Starting stayrules {__version__} ({settings.environment})")
    create_tables()
    yield
    logger.info("Shutting down stayrules")


app = FastAPI(
    title="stayrules API",
    description="Availability rules, pricing overrides and stay checks for rental properties",
    version=__version__,
    lifespan=lifespan
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])
        request.state.request_id = request_id
        set_request_context(request_id)
        try:
            response = await call_next(request)
        finally:
            clear_request_context()
        response.headers["X-Request-ID"] = request_id
        return response


app.add_middleware(RequestIdMiddleware)


@app.exception_handler(PropertyNotFoundError)
async def property_not_found_handler(request: Request, exc: PropertyNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(RuleNotFoundError)
async def rule_not_found_handler(request: Request, exc: RuleNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(MissingDefaultError)
async def missing_default_handler(request: Request, exc: MissingDefaultError):
    logger.error(f"Cannot evaluate availability: {exc}")
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "property_id": exc.property_id, "field": exc.field}
    )


@app.exception_handler(InvalidRuleError)
async def invalid_rule_handler(request: Request, exc: InvalidRuleError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(InvalidPropertyError)
async def invalid_property_handler(request: Request, exc: InvalidPropertyError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


# ValidationError subclasses ValueError and must not fall through to the 400 below
@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


app.include_router(health.router)
app.include_router(properties.router)
app.include_router(availability_rules.router)
app.include_router(availability.router)


@app.get("/")
async def root():
    return {
        "message": "stayrules API",
        "version": __version__,
        "docs": "/docs",
        "status": "running"
    }
