from voxverify.schemas.detection import (
    CLASSIFICATIONS,
    SUPPORTED_LANGUAGES,
    Classification,
    DetectionResult,
    ErrorResponse,
    HealthResponse,
    SupportedLanguage,
    VoiceVerdict,
)

__all__ = [
    "CLASSIFICATIONS",
    "SUPPORTED_LANGUAGES",
    "Classification",
    "DetectionResult",
    "ErrorResponse",
    "HealthResponse",
    "SupportedLanguage",
    "VoiceVerdict",
]
