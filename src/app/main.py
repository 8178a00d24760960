# app/main.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.app.core.config import settings
from src.app.core.errors import StoreError, SurveyError, store_error_response, validation_details
from src.app.core.logging import get_logs_writer_logger
from src.app.core.middleware import RequestSizeLimitMiddleware, SecurityHeadersMiddleware
from src.app.core.rate_limiter import limiter, rate_limit_exceeded_handler
from src.app.routers import api, catalog, results, wizard
from src.db import Base
from src.db.session import engine
import src.db.models  # noqa: F401  (registers tables on Base.metadata)

logger = get_logs_writer_logger()

app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# last added runs first
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.MAX_BODY_BYTES)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api.router)
app.include_router(api.router, prefix="/api", include_in_schema=False)
app.include_router(catalog.router)
app.include_router(results.router)
app.include_router(wizard.router)


@app.on_event("startup")
async def on_startup():
    Base.metadata.create_all(bind=engine)
    logger.info("%s started (database: %s)", settings.APP_NAME, engine.url.render_as_string(hide_password=True))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = validation_details(exc.errors())
    logger.warning("Validation failed for %s %s: %s", request.method, request.url.path, details)
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Validation failed", "details": details},
    )


@app.exception_handler(SurveyError)
async def survey_exception_handler(request: Request, exc: SurveyError):
    if isinstance(exc, StoreError):
        return store_error_response(exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse(
            status_code=404,
            content={"success": False, "error": "Endpoint not found", "code": "NOT_FOUND"},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s: %r", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error", "code": "UNHANDLED_ERROR"},
    )
