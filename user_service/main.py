"""FastAPI application entrypoint. No business logic; only wiring, middleware and error mapping."""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from user_service.api.v1 import router as v1_router
from user_service.core.config import settings
from user_service.core.errors import InternalError, ServiceError, ValidationError
from user_service.core.ratelimit import FixedWindowRateLimiter, RateLimitMiddleware
from user_service.schemas.response import SUCCESS, error_body

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="User Service API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS is added last so it wraps the rate limiter.
rate_limiter = FixedWindowRateLimiter(
    settings.RATE_LIMIT_MAX_REQUESTS,
    settings.RATE_LIMIT_WINDOW_SECONDS,
)
app.state.rate_limiter = rate_limiter
if settings.RATE_LIMIT_ENABLED:
    app.add_middleware(RateLimitMiddleware, limiter=rate_limiter)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
    allow_headers=["Content-Type", "Authorization", "x-service-name", "x-request-at", "x-api-key"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Business and auth errors surface their own message; server-side ones are logged."""
    if exc.status_code >= 500:
        logger.error(
            "Request failed",
            extra={"path": request.url.path, "error_type": type(exc).__name__},
            exc_info=exc.__cause__,
        )
    else:
        logger.info(
            "Request rejected",
            extra={"path": request.url.path, "error_type": type(exc).__name__, "reason": exc.message},
        )
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.details))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Invalid request bodies/params: 422 with one {field, message} entry per problem."""
    fields = [
        {
            "field": ".".join(str(p) for p in err.get("loc", ())[1:]),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    error = ValidationError(details=fields)
    logger.info("Request validation failed", extra={"path": request.url.path, "errors": len(fields)})
    return JSONResponse(status_code=error.status_code, content=error_body(error.message, error.details))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = f"Path {exc.detail}" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content=error_body(message), headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Recover from any unexpected fault with a generic 500; details go to the log only."""
    logger.exception("Unhandled error", extra={"path": request.url.path})
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content=error_body(error.message))


app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"status": SUCCESS, "message": "Welcome to User Service"}
