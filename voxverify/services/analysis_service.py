"""
Analysis bridge core: credential check, Gemini dispatch, reply validation
and server-side timestamping.

Flow per request: VALIDATED (payload decoded by the route) -> DISPATCHED ->
PARSED -> RESPONDED, or FAILED on any upstream problem.
"""

import asyncio
import json
import logging
import os
import time

import psutil
from pydantic import ValidationError

from voxverify.config import get_api_key
from voxverify.core.errors import MalformedUpstreamResult, ServerMisconfigured, UpstreamAnalysisError
from voxverify.core.payload import sanitize_log_message
from voxverify.integrations.gemini.client import analyze_voice_sample
from voxverify.schemas.detection import DetectionResult

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


def log_memory(stage: str) -> None:
    """Log current process and system memory usage. Only runs when DEBUG logging is active."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    process = psutil.Process(os.getpid())
    mem_info = process.memory_info()
    sys_mem = psutil.virtual_memory()
    logger.debug(
        f"[MEMORY] {stage} | "
        f"PID: {os.getpid()} | "
        f"Process RSS: {mem_info.rss / 1024 / 1024:.2f} MB | "
        f"System Available: {sys_mem.available / 1024 / 1024:.2f} MB / {sys_mem.total / 1024 / 1024:.2f} MB"
    )


def parse_verdict(raw_text: str, timestamp: int) -> DetectionResult:
    """
    Turn the model's reply text into a DetectionResult.

    Any model-supplied `timestamp` is discarded in favour of ours. Non-JSON
    replies and out-of-set classification/language values are reported as
    MalformedUpstreamResult instead of being forwarded.
    """
    try:
        data = json.loads(raw_text)
    except (json.JSONDecodeError, TypeError) as e:
        logger.error(f"[ANALYZE] Upstream reply is not JSON: {sanitize_log_message(str(raw_text)[:200])}")
        raise MalformedUpstreamResult(details=f"Reply is not valid JSON: {e}")

    if not isinstance(data, dict):
        raise MalformedUpstreamResult(details=f"Expected a JSON object, got {type(data).__name__}")

    data["timestamp"] = timestamp
    try:
        return DetectionResult.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        logger.error(f"[ANALYZE] Upstream reply failed validation on: {fields}")
        raise MalformedUpstreamResult(details=f"Invalid fields: {fields}")


async def analyze_audio(audio_bytes: bytes) -> DetectionResult:
    """Classify one voice sample. Raises a BridgeError subclass on every failure path."""
    api_key = get_api_key()
    if not api_key:
        logger.error("[ANALYZE] API_KEY is not configured; refusing to dispatch")
        raise ServerMisconfigured()

    log_memory(f"Pre-Dispatch: {len(audio_bytes)} bytes")
    start_time = time.time()
    try:
        raw_text = await asyncio.to_thread(analyze_voice_sample, audio_bytes, api_key)
    except Exception as e:
        logger.error(f"[ANALYZE] Upstream call failed: {sanitize_log_message(str(e))}", exc_info=True)
        raise UpstreamAnalysisError(details=str(e) or type(e).__name__)
    duration = time.time() - start_time
    log_memory("Post-Dispatch")

    result = parse_verdict(raw_text, timestamp=now_ms())
    logger.info(
        f"[ANALYZE] {result.classification} ({result.confidence:.2f}, {result.language}) in {duration:.2f}s"
    )
    return result
