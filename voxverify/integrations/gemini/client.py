"""
Gemini API client — one forensic classification call per voice sample.

A fresh `genai.Client` is built on every call from the credential passed in
by the caller, so a rotated API_KEY takes effect without a restart.

No timeout or retry options are set: a single attempt runs to completion or
failure on the SDK's transport defaults, and every failure propagates.
"""

import json
import logging
import sys
import time

from google import genai
from google.genai import types

from voxverify.config import settings
from voxverify.integrations.gemini.prompts import EXECUTION_QUERY, get_system_instruction
from voxverify.schemas.detection import VoiceVerdict

logger = logging.getLogger(__name__)


def build_config() -> types.GenerateContentConfig:
    return types.GenerateContentConfig(
        system_instruction=get_system_instruction(),
        thinking_config=types.ThinkingConfig(thinking_budget=settings.gemini_thinking_budget),
        response_mime_type="application/json",
        response_schema=VoiceVerdict,
    )


def analyze_voice_sample(audio_bytes: bytes, api_key: str) -> str:
    """
    Send the raw MP3 bytes to Gemini and return the model's JSON reply text.

    Blocking; call it through asyncio.to_thread from async code.
    """
    client = genai.Client(api_key=api_key)

    start = time.perf_counter()
    response = client.models.generate_content(
        model=settings.gemini_model,
        contents=[
            types.Part.from_bytes(data=audio_bytes, mime_type=settings.gemini_audio_mime_type),
            EXECUTION_QUERY,
        ],
        config=build_config(),
    )
    elapsed = time.perf_counter() - start

    usage = getattr(response, "usage_metadata", None)
    if usage is not None:
        logger.info(
            f"[GEMINI] {settings.gemini_model} answered in {elapsed:.2f}s | "
            f"prompt={usage.prompt_token_count} completion={usage.candidates_token_count} "
            f"total={usage.total_token_count}"
        )
    else:
        logger.info(f"[GEMINI] {settings.gemini_model} answered in {elapsed:.2f}s")

    return response.text or ""


if __name__ == "__main__":
    import os

    if len(sys.argv) > 1:
        path = sys.argv[1]
        print(f"Analyzing: {path}...")
        with open(path, "rb") as f:
            data = f.read()
        start = time.perf_counter()
        text = analyze_voice_sample(data, os.getenv("API_KEY", ""))
        end = time.perf_counter()
        print(f"Result: {json.dumps(json.loads(text or '{}'), indent=2)}")
        print(f"Latency: {end - start:.4f}s")
