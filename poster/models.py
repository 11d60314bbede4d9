"""Pydantic models for poster requests and generation outcomes."""
from typing import Literal, Union, Dict, Any
from pydantic import BaseModel, ConfigDict, Field

from common.error_messages import ErrorCode, error_envelope


class PosterRequest(BaseModel):
    """Validated inbound request. Built once per call and consumed by the generator."""
    prompt: str = Field(..., min_length=1, description="Birthday message to put on the poster")
    image_bytes: bytes = Field(..., repr=False, description="Raw uploaded photo")
    mime_type: str = Field(..., pattern=r"^image/", description="Declared MIME type of the photo")


class ImageResult(BaseModel):
    """Poster image returned by the image-capable model."""
    model_config = ConfigDict(populate_by_name=True)

    image_base64: str = Field(..., alias="imageBase64", description="Base64-encoded poster image")
    description: str = Field("Birthday poster generated successfully!", description="Caption returned alongside the image")
    prompt: str = Field(..., description="Original birthday message")
    message: str = Field("AI poster generated successfully!", description="Status message")
    mime_type: str = Field("image/png", alias="mimeType", description="MIME type of the poster image")


class DescriptionResult(BaseModel):
    """Textual poster design, used whenever no image could be produced."""
    model_config = ConfigDict(populate_by_name=True)

    description: str = Field(..., description="Poster design description")
    prompt: str = Field(..., description="Original birthday message")
    message: str = Field(..., description="Status message explaining the fallback")
    fallback_mode: Literal[True] = Field(True, alias="fallbackMode")


class FailureResult(BaseModel):
    """Classified provider failure."""
    category: ErrorCode
    message: str
    details: str
    status_code: int = 500

    def to_response(self) -> Dict[str, Any]:
        return error_envelope(self.message, self.details)


SuccessResult = Union[ImageResult, DescriptionResult]
GenerationOutcome = Union[ImageResult, DescriptionResult, FailureResult]


class PosterResponse(BaseModel):
    """Success envelope for /api/generate-poster."""
    success: Literal[True] = True
    data: SuccessResult

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class HealthResponse(BaseModel):
    """Response model for the health check."""
    status: str = Field("OK", description="Service status")
    message: str = Field(..., description="Human readable status message")
    timestamp: str = Field(..., description="ISO-8601 UTC timestamp")
