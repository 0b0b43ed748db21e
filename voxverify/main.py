import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv

# Load environment variables at the very beginning
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from voxverify.config import get_api_key, settings

# Set up logging
logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)

from voxverify.api import analysis, system  # noqa: E402
from voxverify.core.errors import UpstreamAnalysisError  # noqa: E402
from voxverify.core.payload import sanitize_log_message  # noqa: E402
from voxverify.core.request_limits import BodySizeLimitMiddleware  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info(f"[STARTUP] {settings.service_name} bridge using model {settings.gemini_model}")
    if not get_api_key():
        # Not fatal: the key is re-read on every request and may be set later.
        logger.warning("[STARTUP] API_KEY is not set; /analyze will answer 500 until it is")
    if not os.path.isdir(settings.static_dir):
        logger.warning(f"[STARTUP] Static dir {settings.static_dir} not found; UI routes will 404")
    yield
    logger.info("[SHUTDOWN] Bridge stopped")


app = FastAPI(title="VoxVerify Voice Forensics Bridge", lifespan=lifespan)


# ---- Exception Handlers ----
# Bridge errors carry their JSON body as a dict detail; plain HTTP errors
# (404 etc.) are wrapped into the same {"error": ...} shape.
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, dict):
        response_data = exc.detail
    else:
        response_data = {"error": str(exc.detail)}

    logger.info(
        f"[ERROR HANDLER] {request.method} {request.url.path} -> {exc.status_code}: "
        f"{sanitize_log_message(str(response_data))}"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=response_data,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"[ERROR HANDLER] Unhandled error on {request.url.path}: {exc}", exc_info=True)
    fallback = UpstreamAnalysisError(details=str(exc) or type(exc).__name__)
    return JSONResponse(status_code=fallback.status_code, content=fallback.detail)


# ---- Middleware ----
# Added last = outermost, so CORS headers reach 413 responses too.
app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_body_bytes)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# ---- Routes ----
# The system router holds the catch-alls, so it goes last.
app.include_router(analysis.router)
app.include_router(system.router)


def run() -> None:
    import uvicorn

    logger.info(f"[STARTUP] Listening on {settings.host}:{settings.port}")
    uvicorn.run("voxverify.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
