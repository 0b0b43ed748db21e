"""
System routes: health, robots, static single-page UI and the catch-alls.

Routing contract:
  GET  /health       -> service info
  GET  /{path}       -> static asset, else the SPA entry document
  OPTIONS /{path}    -> 200
  anything else      -> 404 (include this router after the action routes)
"""

import os

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse, PlainTextResponse, Response

from voxverify.config import settings
from voxverify.schemas.detection import HealthResponse
from voxverify.services.analysis_service import now_ms

router = APIRouter(tags=["System"])


@router.get("/health", response_model=HealthResponse)
async def health():
    return {"status": "healthy", "service": settings.service_name, "timestamp": now_ms()}


@router.get("/robots.txt", response_class=PlainTextResponse)
def robots():
    return "User-agent: *\nDisallow: /"


def resolve_static_path(requested: str) -> str | None:
    """Map a URL path onto a file inside the static dir; None if absent or outside it."""
    root = os.path.realpath(settings.static_dir)
    candidate = os.path.realpath(os.path.join(root, requested.lstrip("/")))
    if os.path.commonpath([root, candidate]) != root:
        return None
    if os.path.isfile(candidate):
        return candidate
    return None


@router.get("/{full_path:path}", include_in_schema=False)
async def serve_ui(full_path: str):
    path = resolve_static_path(full_path) if full_path else None
    if path is None:
        path = resolve_static_path(settings.spa_entry_document)
    if path is None:
        raise HTTPException(status_code=404, detail="Not Found")
    return FileResponse(path)


@router.options("/{full_path:path}", include_in_schema=False)
async def preflight(full_path: str):
    return Response(status_code=200)


@router.api_route("/{full_path:path}", methods=["POST", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def not_found(full_path: str):
    raise HTTPException(status_code=404, detail="Not Found")
