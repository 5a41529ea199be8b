"""
FastAPI application for BioFace avatar generation with Gemini AI.

Features:
- Avatar generation: describe the portrait, check it shows a person,
  then render a styled headshot
- Creative style suggestions for an uploaded portrait

Errors are returned as plain-text bodies so the browser client can show
them directly.
"""
import time

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Config
from avatars.routes import router as avatars_router
from styles.routes import router as styles_router
from providers import ProviderConfigurationError
from utils.logger import get_logger
from common.error_messages import ErrorCode, get_error_response

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
    title="BioFace Avatar API",
    description="Turns a portrait photo into a stylized AI-generated avatar and suggests creative styles for it.",
    version="1.0.0"
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors (400/404/405 and route-raised ones) as plain text."""
    detail = exc.detail
    if exc.status_code == 404 and request.url.path.startswith("/api/"):
        detail, _ = get_error_response(ErrorCode.ROUTE_NOT_FOUND)
    elif exc.status_code == 405:
        detail, _ = get_error_response(ErrorCode.METHOD_NOT_ALLOWED)
    return PlainTextResponse(str(detail), status_code=exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed JSON or wrongly typed fields."""
    logger.warning(f"Invalid request body for {request.url.path}: {exc.errors()}")
    message, status_code = get_error_response(ErrorCode.INVALID_FORMAT)
    return PlainTextResponse(message, status_code=status_code)


@app.exception_handler(ProviderConfigurationError)
async def provider_configuration_handler(request: Request, exc: ProviderConfigurationError):
    logger.error(f"Model provider unavailable: {exc}")
    message, status_code = get_error_response(ErrorCode.MISSING_API_KEY)
    return PlainTextResponse(message, status_code=status_code)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions globally."""
    logger.error(f"API Error in {request.url.path}: {exc}", exc_info=True)
    message, status_code = get_error_response(ErrorCode.UNKNOWN_ERROR)
    return PlainTextResponse(message, status_code=status_code)


# Request logging middleware. Bodies are not logged: they carry image data.
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests with timing."""
    start_time = time.time()
    client_host = request.client.host if request.client else "unknown"
    logger.info(f"→ {request.method} {request.url.path} - Client: {client_host}")

    try:
        response = await call_next(request)
    except Exception as e:
        process_time = (time.time() - start_time) * 1000
        logger.error(f"← {request.method} {request.url.path} - Error: {e} - Time: {process_time:.2f}ms")
        raise

    process_time = (time.time() - start_time) * 1000
    logger.info(f"← {request.method} {request.url.path} - Status: {response.status_code} - Time: {process_time:.2f}ms")
    return response


# Include routers
app.include_router(avatars_router)
logger.info("Avatars router included")

app.include_router(styles_router)
logger.info("Styles router included")


@app.on_event("startup")
async def startup_event():
    """Log startup event."""
    logger.info("=" * 80)
    logger.info("BioFace API starting up")
    logger.info(f"Models: describe={Config.DESCRIPTION_MODEL}, validate={Config.VALIDATION_MODEL}, "
                f"suggest={Config.SUGGESTION_MODEL}, image={Config.IMAGE_MODEL}")
    logger.info(f"Host: {Config.HOST}:{Config.PORT}")
    logger.info("=" * 80)


@app.on_event("shutdown")
async def shutdown_event():
    """Log shutdown event."""
    logger.info("BioFace API shutting down")


@app.get("/healthz")
def health():
    """Health check endpoint."""
    logger.debug("Health check requested")
    return {"status": "ok"}


# Run server directly
if __name__ == "__main__":
    logger.info(f"Starting server on {Config.HOST}:{Config.PORT}")
    uvicorn.run(
        "app:app",
        host=Config.HOST,
        port=Config.PORT,
        reload=True,
        log_level="info"
    )
