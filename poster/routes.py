"""Poster generation routes."""
from typing import Optional, Union

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from config import Config
from common.error_messages import ErrorCode, PosterRequestError
from poster.models import PosterRequest, PosterResponse, FailureResult
from poster.provider import PosterProvider, get_poster_provider
from poster.services import PosterGenerator
from utils.logger import get_logger

logger = get_logger("poster.routes")
router = APIRouter(prefix="/api", tags=["poster"])


async def accept_poster_upload(
    prompt: Optional[str] = Form(None),
    image: Union[UploadFile, str, None] = File(None)
) -> PosterRequest:
    """
    Upload intake for /api/generate-poster.

    The image part is filtered by content type and size first, the way an
    upload filter rejects a file while the body is parsed; the prompt and
    image presence checks follow. A plain text field named image is not an
    upload and counts as a missing image.
    """
    if isinstance(image, str):
        image = None

    image_bytes = None
    if image is not None:
        if not image.content_type or not image.content_type.startswith("image/"):
            raise PosterRequestError(ErrorCode.UNSUPPORTED_MEDIA_TYPE, detail=image.content_type)

        image_bytes = await image.read(Config.MAX_UPLOAD_BYTES + 1)
        if len(image_bytes) > Config.MAX_UPLOAD_BYTES:
            raise PosterRequestError(ErrorCode.PAYLOAD_TOO_LARGE)

    if not prompt:
        raise PosterRequestError(ErrorCode.MISSING_PROMPT)

    if image is None:
        raise PosterRequestError(ErrorCode.MISSING_IMAGE)

    return PosterRequest(prompt=prompt, image_bytes=image_bytes, mime_type=image.content_type)


def get_poster_generator(provider: PosterProvider = Depends(get_poster_provider)) -> PosterGenerator:
    return PosterGenerator(provider)


@router.post("/generate-poster")
async def generate_poster(
    request: PosterRequest = Depends(accept_poster_upload),
    generator: PosterGenerator = Depends(get_poster_generator)
):
    """
    Generate a birthday poster from a photo and a message.

    Accepts multipart form data:
      prompt: birthday message
      image: photo (image/*, max 5MB)

    Returns {success: true, data} with either the poster image or a text
    description (fallbackMode), or {success: false, error, details}.
    """
    logger.info(f"Poster requested ({request.mime_type}, {len(request.image_bytes)} bytes): {request.prompt[:50]}")

    outcome = await generator.generate(request)

    if isinstance(outcome, FailureResult):
        return JSONResponse(status_code=outcome.status_code, content=outcome.to_response())

    return PosterResponse(data=outcome).to_response()
