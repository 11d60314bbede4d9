"""
FastAPI backend for yaskin.club birthday posters.

Features:
- Health check
- Poster generation from an uploaded photo and a birthday message using Gemini,
  falling back to a written poster design when image generation is unavailable
"""
import time
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import Config
from poster.models import HealthResponse
from poster.routes import router as poster_router
from utils.logger import get_logger
from common.error_messages import (
    ErrorCode,
    PosterRequestError,
    error_envelope,
    get_error_response
)

# Initialize logger
logger = get_logger("main")

# Validate configuration on startup
try:
    Config.validate()
    logger.info("Configuration validated successfully")
except ValueError as e:
    logger.error(f"Configuration error: {e}")
    logger.error("Please set required environment variables in .env file")

# Create FastAPI app
app = FastAPI(
    title="yaskin.club Poster API",
    description="Turns a photo and a birthday message into a poster with Gemini, with a text description fallback.",
    version="1.0.0"
)


# Upload size guard - registered before CORS so its rejections still carry CORS headers
@app.middleware("http")
async def limit_upload_size(request: Request, call_next):
    """Reject oversized bodies from Content-Length before the multipart form is parsed."""
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit():
        limit = Config.MAX_UPLOAD_BYTES + Config.UPLOAD_FORM_ALLOWANCE_BYTES
        if int(content_length) > limit:
            logger.warning(f"Rejected {request.method} {request.url.path}: body of {content_length} bytes exceeds {limit}")
            message, status_code = get_error_response(ErrorCode.PAYLOAD_TOO_LARGE)
            return JSONResponse(status_code=status_code, content=error_envelope(message))
    return await call_next(request)


# CORS middleware - wraps the size guard and the routes so every response carries CORS headers
app.add_middleware(
    CORSMiddleware,
    allow_origins=[Config.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PosterRequestError)
async def poster_request_error_handler(request: Request, exc: PosterRequestError):
    """Render validation failures in the {success, error} envelope."""
    logger.warning(f"Rejected {request.method} {request.url.path}: {exc.error_code.value}"
                   + (f" ({exc.detail})" if exc.detail else ""))
    return JSONResponse(status_code=exc.status_code, content=error_envelope(exc.message))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Form fields FastAPI could not bind are reported like any other bad request."""
    logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    message, status_code = get_error_response(ErrorCode.INVALID_REQUEST)
    return JSONResponse(status_code=status_code, content=error_envelope(message))


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions globally."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    message, status_code = get_error_response(ErrorCode.INTERNAL_ERROR)
    return JSONResponse(
        status_code=status_code,
        content=error_envelope(str(exc) or message)
    )


# Request logging middleware - outermost, so size guard rejections are logged too
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests with timing. Bodies are not logged; uploads are binary."""
    start_time = time.time()
    full_url = str(request.url)

    logger.info(f"→ {request.method} {full_url} - Client: {request.client.host if request.client else 'unknown'}")

    try:
        response = await call_next(request)
    except Exception as e:
        process_time = (time.time() - start_time) * 1000
        logger.error(f"← {request.method} {full_url} - Error: {str(e)} - Time: {process_time:.2f}ms")
        raise

    process_time = (time.time() - start_time) * 1000
    logger.info(f"← {request.method} {full_url} - Status: {response.status_code} - Time: {process_time:.2f}ms")
    return response


app.include_router(poster_router)
logger.info("Poster router included")


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@app.get("/api/health", response_model=HealthResponse)
def health():
    """Health check endpoint."""
    logger.debug("Health check requested")
    return HealthResponse(
        status="OK",
        message="yaskin.club backend is running!",
        timestamp=utc_timestamp()
    )


# Run server directly
if __name__ == "__main__":
    logger.info(f"yaskin.club backend running on port {Config.PORT}")
    logger.info(f"Health check: http://localhost:{Config.PORT}/api/health")
    logger.info(f"AI Poster Generation: http://localhost:{Config.PORT}/api/generate-poster")
    uvicorn.run(
        "app:app",
        host=Config.HOST,
        port=Config.PORT,
        log_level="info"
    )
