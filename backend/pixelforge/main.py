# backend/pixelforge/main.py
import traceback
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .database import engine
from . import models
from .api import auth, projects, documents, users
from .config import settings
from .exceptions import AppException
from .utils.logging import api_logger

# Create all tables on startup
models.Base.metadata.create_all(bind=engine)

app = FastAPI(title="PixelForge Nexus API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials="*" not in settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
    expose_headers=["Content-Disposition"],
)

# Include routers
app.include_router(auth.router)
app.include_router(projects.router)
app.include_router(documents.router)
app.include_router(users.router)


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"success": False, "message": message, **extra})
    )


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    api_logger.warning("Request rejected", extra={
        "path": request.url.path,
        "code": exc.code,
        "status_code": exc.status_code,
        "reason": exc.message
    })
    return error_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Validation failed for field '{field}': {first.get('msg')}" if field else "Invalid request"
    api_logger.warning("Request validation failed", extra={"path": request.url.path, "reason": message})
    return error_response(400, message, errors=[
        {"field": ".".join(str(part) for part in err.get("loc", ())), "message": err.get("msg")}
        for err in errors
    ])


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and exc.detail == "Not Found":
        return error_response(404, f"Route not found: {request.url.path}")
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    api_logger.error("Unhandled error", extra={"path": request.url.path, "error": str(exc)}, exc_info=exc)

    # Internals only leave the server in development
    if settings.is_development:
        return error_response(500, str(exc) or "Internal Server Error", stack=traceback.format_exception(exc))
    return error_response(500, "Internal Server Error")


@app.get("/")
async def root():
    return {"success": True, "message": "PixelForge Nexus API is running"}


@app.get("/health")
async def health():
    return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}
