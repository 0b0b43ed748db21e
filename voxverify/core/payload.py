"""
Audio payload extraction, normalization and log sanitization.

The bridge accepts the base64 audio under several historical field names;
the first non-empty string wins, in the order of ACCEPTED_AUDIO_FIELDS.
"""

import base64
import binascii
import logging
import re
from typing import Any, Mapping, Optional

from voxverify.core.errors import (
    ACCEPTED_AUDIO_FIELDS,
    InvalidAudioData,
    InvalidFileType,
    MissingAudioData,
)

logger = logging.getLogger(__name__)

ACCEPTED_MIME_TYPES = ("audio/mpeg", "audio/mp3")

_BASE64_RUN = re.compile(r"[A-Za-z0-9+/=]{80,}")


def extract_audio_field(body: Mapping[str, Any]) -> str:
    """Return the first non-empty audio string from the request body."""
    for key in ACCEPTED_AUDIO_FIELDS:
        value = body.get(key)
        if isinstance(value, str) and value:
            logger.debug(f"[PAYLOAD] Audio found under '{key}' ({len(value)} chars)")
            return value
    logger.warning(f"[PAYLOAD] No audio data found in body keys: {list(body.keys())}")
    raise MissingAudioData()


def strip_data_url_prefix(value: str) -> str:
    """Drop a `data:<mime>;base64,` header (everything up to the first comma)."""
    if value.startswith("data:") and "," in value:
        return value.split(",", 1)[1]
    return value


def normalize_base64(value: str) -> str:
    # URL-encoded form bodies turn '+' into ' '; base64 never contains spaces.
    value = strip_data_url_prefix(value.replace(" ", "+"))
    value = re.sub(r"[\r\n\t]", "", value)
    missing_padding = -len(value) % 4
    if missing_padding in (1, 2):
        value += "=" * missing_padding
    return value


def decode_audio(value: str) -> bytes:
    """Normalize and decode a base64 audio payload into raw bytes."""
    normalized = normalize_base64(value)
    try:
        audio_bytes = base64.b64decode(normalized, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.warning(f"[PAYLOAD] Undecodable audio payload: {e}")
        raise InvalidAudioData(details=str(e))
    if not audio_bytes:
        raise InvalidAudioData(details="Decoded audio is empty.")
    return audio_bytes


def validate_mime_type(mime_type: Optional[str]) -> str:
    """Only MP3 uploads are accepted: exactly audio/mpeg or audio/mp3."""
    if mime_type not in ACCEPTED_MIME_TYPES:
        raise InvalidFileType(mime_type)
    return mime_type


def sanitize_log_message(message: str) -> str:
    """Replace long base64 runs so audio payloads never end up in logs."""
    return _BASE64_RUN.sub(lambda m: f"[BASE64 {len(m.group(0))} chars]", message)
