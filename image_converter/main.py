import logging
from pathlib import Path
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from .core.config import settings
from .core.database import create_db_and_tables
from .core.storage import ensure_uploads_dir
from .routers import conversion, frontend

BASE_DIR = Path(__file__).resolve().parent

logger = logging.getLogger(__name__)


# Security Headers Middleware
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        # Prevent clickjacking
        response.headers["X-Frame-Options"] = "DENY"
        # Referrer policy
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Local previews are blob: URLs
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "script-src 'self'; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data: blob:; "
            "connect-src 'self'"
        )
        # HSTS (only in production with HTTPS)
        if settings.ENVIRONMENT == "production":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


# Disable OpenAPI docs in production
docs_url = "/docs" if settings.DEBUG or settings.ENVIRONMENT != "production" else None
redoc_url = "/redoc" if settings.DEBUG or settings.ENVIRONMENT != "production" else None
openapi_url = "/openapi.json" if settings.DEBUG or settings.ENVIRONMENT != "production" else None

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
## Image Converter API

Convert uploaded images to JPEG, PNG or WebP and keep a short history of past conversions.

### Features
- **Conversion**: Upload one image (up to 5MB) and pick a target format
- **History**: List the 10 most recent conversions, newest first
- **Deletion**: Remove a conversion record and its converted file
- **Download**: Converted files are served under `/uploads`

### Errors
Every error response has the shape `{"error": "<message>"}`.
""",
    version="1.0.0",
    license_info={
        "name": "MIT",
    },
    docs_url=docs_url,
    redoc_url=redoc_url,
    openapi_url=openapi_url,
)

# Add security headers middleware
app.add_middleware(SecurityHeadersMiddleware)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["Content-Type"],
)

# Rate limiting setup
app.state.limiter = conversion.limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # A form field sent in place of the upload counts as a missing file
    for error in exc.errors():
        if tuple(error.get("loc", ()))[:2] == ("body", "image"):
            return JSONResponse(status_code=400, content={"error": "No image file uploaded"})
    return JSONResponse(status_code=422, content={"error": "Invalid request"})


@app.on_event("startup")
def on_startup():
    # The app still starts without a reachable store; handlers report 500 until it is
    try:
        create_db_and_tables()
    except Exception as e:
        logger.error(f"Database connection error: {e}", exc_info=True)


# The static mount needs the directory before the server accepts connections
UPLOADS_DIR = ensure_uploads_dir()

app.include_router(conversion.router, tags=["conversion"])
app.mount("/uploads", StaticFiles(directory=UPLOADS_DIR), name="uploads")
app.mount("/static", StaticFiles(directory=BASE_DIR / "static"), name="static")
app.include_router(frontend.router)


def run():
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
