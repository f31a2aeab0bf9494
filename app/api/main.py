"""
FastAPI Application

HTTP API server for the chatbot authoring methods (slots, responses, users).
"""

import os

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_config
from app.db.indexes import ensure_indexes
from app.db.mongo import get_database
from app.utils.exceptions import MethodError
from app.utils.logger import get_logger

logger = get_logger(__name__)
config = get_config()

# Create FastAPI app
app = FastAPI(
    title="Bot Authoring API",
    description="API for NLU slots, bot responses and user management",
    version="1.0.0",
)


async def method_error_handler(request: Request, exc: MethodError) -> JSONResponse:
    """Render a MethodError as {"error", "reason"} with its status code."""
    if exc.status_code >= 500:
        logger.error(f"[API] {request.method} {request.url.path} failed: {exc!r}")
    else:
        logger.info(f"[API] {request.method} {request.url.path} rejected: {exc!r}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.add_exception_handler(MethodError, method_error_handler)

# CORS middleware: with allow_credentials=True, origins cannot be "*" (must be explicit).
_cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
if config.server.frontend_url:
    _cors_origins.append(config.server.frontend_url.rstrip("/"))
# Extra origins from env (comma-separated), e.g. CORS_ORIGINS=http://192.168.1.5:3000,http://10.0.0.1:3000
_extra_origins = os.getenv("CORS_ORIGINS", "")
if _extra_origins:
    for o in _extra_origins.split(","):
        o = o.strip().rstrip("/")
        if o and o not in _cors_origins:
            _cors_origins.append(o)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def startup_log_db():
    """Log MongoDB database name and ensure indexes exist."""
    db = get_database(config)
    logger.info(f"[API] MongoDB database in use: {db.name}")
    try:
        ensure_indexes(db)
    except Exception as e:
        logger.warning(f"[API] Index creation skipped or partial: {e}")


@app.get("/health")
async def health():
    """Liveness probe: returns 200 if the process is running."""
    return {"status": "ok"}


@app.get("/ready")
def ready():
    """Readiness probe: returns 200 if MongoDB answers a ping."""
    try:
        db = get_database(config)
        db.client.admin.command("ping")
        return {"status": "ready"}
    except Exception as e:
        logger.warning(f"[API] Readiness check failed: {e}")
        raise HTTPException(status_code=503, detail="Service not ready")


@app.get("/")
async def root():
    """Health check endpoint"""
    return {"status": "ok", "service": "bot-authoring-api"}
