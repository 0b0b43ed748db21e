"""
Client uploader: pick one MP3, encode it, send it to the bridge, keep the verdict.

State lives on the VoiceUploader instance:
  sample / encoded   current selection and its base64 payload
  result             last DetectionResult (cleared on a new selection)
  error              single user-visible error slot, cleared by the next action
  busy               True only while a POST to the bridge is in flight

Run as a script:
  python -m voxverify.client sample.mp3 [--copy] [--url URL]
"""

import asyncio
import base64
import json
import logging
import mimetypes
import os
import sys
import time
from typing import Callable, Optional

import aiohttp
import pyperclip
from pydantic import ValidationError

from voxverify.config import settings
from voxverify.core.errors import InvalidFileType
from voxverify.core.payload import strip_data_url_prefix, validate_mime_type
from voxverify.integrations import http_client as http_module
from voxverify.schemas.detection import DetectionResult

logger = logging.getLogger(__name__)

NO_FILE_ERROR = "Please select an audio file first."
READ_ERROR = "Could not read the selected audio file."


class BridgeRequestError(Exception):
    """The bridge answered with a non-200 status or an unusable body."""

    def __init__(self, status: int, error: str, details: Optional[str] = None):
        self.status = status
        self.error = error
        self.details = details
        message = f"{error}: {details}" if details else error
        super().__init__(message)


class UploadedSample:
    """One audio file picked by the user. Bytes are read on demand."""

    def __init__(self, name: str, mime_type: Optional[str], path: Optional[str] = None, data: Optional[bytes] = None):
        self.name = name
        self.mime_type = mime_type
        self.path = path
        self._data = data

    @classmethod
    def from_path(cls, path: str) -> "UploadedSample":
        mime_type, _ = mimetypes.guess_type(path)
        return cls(name=os.path.basename(path), mime_type=mime_type, path=path)

    def read_bytes(self) -> bytes:
        if self._data is not None:
            return self._data
        with open(self.path, "rb") as f:
            return f.read()


class VoiceUploader:
    def __init__(
        self,
        bridge_url: Optional[str] = None,
        clipboard: Optional[Callable[[str], None]] = None,
    ):
        self.bridge_url = bridge_url or settings.bridge_url
        self._clipboard = clipboard or pyperclip.copy

        self.sample: Optional[UploadedSample] = None
        self.encoded: Optional[str] = None
        self.result: Optional[DetectionResult] = None
        self.error: Optional[str] = None
        self.busy = False
        self._copied_at: Optional[float] = None

    # ------------------------------------------------------------------ #
    # Selection & encoding                                                #
    # ------------------------------------------------------------------ #
    async def select_file(self, sample: UploadedSample) -> bool:
        """
        Accept an MP3 and encode it. Anything else only sets the error slot;
        the previous selection and result stay untouched.
        """
        try:
            validate_mime_type(sample.mime_type)
        except InvalidFileType as e:
            logger.info(f"[UPLOADER] Rejected {sample.name} ({e.mime_type})")
            self.error = str(e)
            return False

        self.sample = sample
        self.encoded = None
        self.result = None
        self.error = None

        try:
            self.encoded = await self.encode(sample)
        except OSError as e:
            logger.error(f"[UPLOADER] Failed to read {sample.name}: {e}")
            self.error = READ_ERROR
            return False

        logger.info(f"[UPLOADER] Encoded {sample.name}: {len(self.encoded)} base64 chars")
        return True

    async def encode(self, sample: UploadedSample) -> str:
        """Read the whole file off the event loop and return bare base64 (no data-URL header)."""
        raw = await asyncio.to_thread(sample.read_bytes)
        return strip_data_url_prefix(base64.b64encode(raw).decode("ascii"))

    # ------------------------------------------------------------------ #
    # Analysis                                                            #
    # ------------------------------------------------------------------ #
    async def analyze(self) -> Optional[DetectionResult]:
        if self.sample is None or not self.encoded:
            self.error = NO_FILE_ERROR
            return None

        self.busy = True
        self.error = None
        try:
            self.result = await self._post(self.encoded)
            return self.result
        except BridgeRequestError as e:
            logger.warning(f"[UPLOADER] Bridge rejected analysis ({e.status}): {e}")
            self.error = str(e)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"[UPLOADER] Bridge unreachable: {e}")
            self.error = f"Analysis request failed: {e}" if str(e) else "Analysis request failed."
        finally:
            self.busy = False
        return None

    async def _post(self, encoded: str) -> DetectionResult:
        async with http_module.request_session() as session:
            async with session.post(self.bridge_url, json={"audioBase64": encoded}) as response:
                try:
                    body = await response.json(content_type=None)
                except (json.JSONDecodeError, aiohttp.ContentTypeError):
                    raise BridgeRequestError(response.status, "Bridge returned a non-JSON response")

                if response.status != 200:
                    if isinstance(body, dict):
                        raise BridgeRequestError(response.status, body.get("error", "Analysis failed"), body.get("details"))
                    raise BridgeRequestError(response.status, "Analysis failed")

                try:
                    return DetectionResult.model_validate(body)
                except ValidationError as e:
                    raise BridgeRequestError(response.status, "Unexpected analysis result", str(e))

    # ------------------------------------------------------------------ #
    # Clipboard                                                           #
    # ------------------------------------------------------------------ #
    def copy_encoded_payload(self) -> bool:
        if not self.encoded:
            return False
        self._clipboard(self.encoded)
        self._copied_at = time.monotonic()
        return True

    @property
    def copied(self) -> bool:
        """True for settings.copy_ack_sec after the last successful copy."""
        if self._copied_at is None:
            return False
        return time.monotonic() - self._copied_at < settings.copy_ack_sec


async def _run(path: str, copy: bool, url: Optional[str]) -> int:
    uploader = VoiceUploader(bridge_url=url)
    if not await uploader.select_file(UploadedSample.from_path(path)):
        print(f"Error: {uploader.error}")
        return 1
    if copy:
        uploader.copy_encoded_payload()
        print("Base64 payload copied to clipboard.")

    print(f"Analyzing: {path}...")
    await http_module.initialize()
    try:
        start = time.perf_counter()
        result = await uploader.analyze()
        end = time.perf_counter()
    finally:
        await http_module.close()
    if result is None:
        print(f"Error: {uploader.error}")
        return 1
    print(f"Result: {json.dumps(result.model_dump(), indent=2)}")
    print(f"Latency: {end - start:.4f}s")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    copy = "--copy" in args
    if copy:
        args.remove("--copy")
    url = None
    if "--url" in args:
        idx = args.index("--url")
        if idx + 1 >= len(args):
            print("Usage: python -m voxverify.client FILE [--copy] [--url URL]")
            return 2
        url = args[idx + 1]
        del args[idx:idx + 2]
    if len(args) != 1:
        print("Usage: python -m voxverify.client FILE [--copy] [--url URL]")
        return 2

    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
    return asyncio.run(_run(args[0], copy, url))


if __name__ == "__main__":
    sys.exit(main())
