"""
Analysis route: POST /analyze

Accepts a JSON object, a URL-encoded form or multipart/form-data carrying
base64 audio under 'Audio Base64 Format', 'audioBase64', 'audio' or 'file'.
Multipart file parts are encoded on the fly.

Returns the validated DetectionResult stamped with the server clock.
"""

import base64
import json
import logging

from fastapi import APIRouter, Request
from starlette.datastructures import UploadFile

from voxverify.core.errors import InvalidRequestBody
from voxverify.core.payload import decode_audio, extract_audio_field
from voxverify.schemas.detection import DetectionResult, ErrorResponse
from voxverify.services.analysis_service import analyze_audio

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Analysis"])


async def read_body(request: Request) -> dict:
    """Parse the request body into a flat dict; unknown content types yield {}."""
    content_type = request.headers.get("content-type", "")

    if "application/json" in content_type:
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise InvalidRequestBody()
        return payload if isinstance(payload, dict) else {}

    if "application/x-www-form-urlencoded" in content_type or "multipart/form-data" in content_type:
        form = await request.form()
        body = {}
        for key, value in form.items():
            if isinstance(value, UploadFile):
                raw = await value.read()
                if raw:
                    body[key] = base64.b64encode(raw).decode("ascii")
            else:
                body[key] = value
        return body

    logger.info(f"[ANALYZE] Unsupported content type '{content_type}', treating body as empty")
    return {}


@router.post(
    "/analyze",
    response_model=DetectionResult,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def analyze(request: Request):
    """
    Classify an uploaded voice sample as AI_GENERATED or HUMAN.
    """
    logger.info(f"[POST] Request received at {request.url.path}")

    body = await read_body(request)
    audio_b64 = extract_audio_field(body)
    audio_bytes = decode_audio(audio_b64)

    result = await analyze_audio(audio_bytes)
    return result
