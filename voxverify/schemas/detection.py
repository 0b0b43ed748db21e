from typing import Literal, Optional

from pydantic import BaseModel, Field

Classification = Literal["AI_GENERATED", "HUMAN"]
SupportedLanguage = Literal["English", "Tamil", "Hindi", "Malayalam", "Telugu"]

SUPPORTED_LANGUAGES: list[str] = ["English", "Tamil", "Hindi", "Malayalam", "Telugu"]
CLASSIFICATIONS: list[str] = ["AI_GENERATED", "HUMAN"]


class VoiceVerdict(BaseModel):
    """Gemini structured output schema — one verdict per voice sample."""
    classification: str = Field(description="Must be AI_GENERATED or HUMAN")
    confidence: float = Field(description="Confidence score between 0.0 and 1.0")
    language: str = Field(description="Spoken language: English, Tamil, Hindi, Malayalam or Telugu")
    explanation: str = Field(description="Detailed forensic reasoning based on acoustic micro-artifacts")


class DetectionResult(BaseModel):
    classification: Classification
    confidence: float           # expected 0.0 - 1.0, not enforced
    language: SupportedLanguage
    explanation: str
    timestamp: int              # ms since epoch, stamped by the bridge


class HealthResponse(BaseModel):
    status: str
    service: str
    timestamp: int


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
