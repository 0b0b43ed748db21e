"""
Bridge error taxonomy.

Every error is an HTTPException whose `detail` is the JSON body sent to the
client: `{"error": <message>, "details": <optional string>}`. The app-level
handler in `voxverify.main` renders dict details verbatim.

`InvalidFileType` never reaches the bridge; it is raised and caught inside
the client uploader.
"""

from typing import Optional

from fastapi import HTTPException

ACCEPTED_AUDIO_FIELDS = ("Audio Base64 Format", "audioBase64", "audio", "file")


class BridgeError(HTTPException):
    status_code = 500
    message = "Internal Analysis Error"

    def __init__(self, details: Optional[str] = None, message: Optional[str] = None):
        body = {"error": message or self.message}
        if details:
            body["details"] = details
        super().__init__(status_code=self.status_code, detail=body)

    @property
    def error(self) -> str:
        return self.detail["error"]

    @property
    def details(self) -> Optional[str]:
        return self.detail.get("details")


class MissingAudioData(BridgeError):
    status_code = 400
    message = (
        "Missing audio data. Use 'Audio Base64 Format' key "
        "(also accepted: 'audioBase64', 'audio', 'file')."
    )


class InvalidAudioData(BridgeError):
    status_code = 400
    message = "Audio data is not valid base64."


class InvalidRequestBody(BridgeError):
    status_code = 400
    message = "Invalid JSON body"


class PayloadTooLarge(BridgeError):
    status_code = 413
    message = "Payload too large"


class ServerMisconfigured(BridgeError):
    status_code = 500
    message = "Server API Key missing"


class UpstreamAnalysisError(BridgeError):
    status_code = 500
    message = "Internal Analysis Error"


class MalformedUpstreamResult(BridgeError):
    status_code = 502
    message = "Malformed analysis result from upstream model"


class InvalidFileType(ValueError):
    """Client-side: the selected file is not an MP3."""

    def __init__(self, mime_type: Optional[str]):
        self.mime_type = mime_type
        super().__init__("Please upload a valid MP3 file.")
