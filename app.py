#!/usr/bin/env python3
"""
FastAPI application for the Liquid News newsroom API
"""

import os
import time
from contextlib import asynccontextmanager
from datetime import datetime

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pymongo.errors import PyMongoError
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException

from database import db, ensure_indexes, get_connection_status, get_db, masked_uri
from logging_config import get_logger

# Import routers
from users import router as auth_router
from articles import UPLOAD_DIR, router as articles_router
from brand_voices import router as brand_voices_router
from process import router as process_router
from distribution import router as distribution_router
from socket_service import router as socket_router

load_dotenv()

logger = get_logger(__name__)

ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
STARTED_AT = time.time()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Connecting to MongoDB at {masked_uri()}")
    try:
        ensure_indexes(db)
        logger.info("MongoDB indexes ensured")
    except PyMongoError as e:
        logger.error(f"MongoDB index setup failed: {e}")
    yield


# Initialize FastAPI app
app = FastAPI(title="Liquid News API", version="1.0.0", lifespan=lifespan)

# Rate limiting per client IP
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[os.getenv("RATE_LIMIT", "100 per 15 minutes")],
    enabled=os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true",
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# CORS configuration (added last so it wraps rate limit responses too)
extra_origins = [o.strip() for o in os.getenv("CLIENT_URL", "").split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:5173",
        *extra_origins,
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Error envelope
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = f"Route {request.method} {request.url.path} not found"
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": message},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(part) for part in err.get("loc", [])[1:]), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Validation failed", "errors": errors},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": str(exc) or "Internal server error"},
    )


# Include routers
app.include_router(auth_router)
app.include_router(articles_router)
app.include_router(brand_voices_router)
app.include_router(process_router)
app.include_router(distribution_router)
app.include_router(socket_router)

# Uploaded source files
UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=str(UPLOAD_DIR)), name="uploads")


@app.get("/api/health")
async def health(database=Depends(get_db)):
    """Liveness plus database reachability"""
    return {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "uptime": round(time.time() - STARTED_AT, 3),
        "environment": ENVIRONMENT,
        "database": get_connection_status(database),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "5000")))
