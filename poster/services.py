"""Poster generation services - the two-tier Gemini fallback pipeline."""
import base64
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from config import Config
from common.error_messages import ERROR_DETAILS, classify_error_message, get_error_response
from poster.models import (
    PosterRequest,
    ImageResult,
    DescriptionResult,
    FailureResult,
    GenerationOutcome
)
from poster.provider import PosterProvider
from utils.logger import get_logger

logger = get_logger("poster.services")

IMAGE_MODALITIES = ["TEXT", "IMAGE"]

POSTER_MIME_TYPE = "image/png"
DEFAULT_DESCRIPTION = "AI poster description generated successfully!"

NO_IMAGE_MESSAGE = "Poster description generated successfully! (Image generation not available)"
FALLBACK_MESSAGE = "Poster description generated successfully! (Image generation temporarily unavailable)"


def build_poster_prompt(message: str) -> str:
    """Instruction for the image-capable model: render a poster around the photo."""
    return f"""Create a beautiful birthday poster that incorporates this person's photo with the following message: "{message}".

Design requirements:
- Use the person's photo as the central element
- Add festive birthday elements: balloons, confetti, party hats, cake
- Use bright, celebratory colors (purple, pink, gold, blue)
- Include the birthday message prominently and stylishly
- Make it professional yet fun for workplace celebrations
- Add birthday-themed decorative borders
- Ensure high visual impact and readability

Generate a beautiful birthday poster image."""


def build_description_prompt(message: str) -> str:
    """Instruction for the text model: describe the poster instead of drawing it."""
    return (
        f'Based on this uploaded image and the message "{message}", create a detailed description '
        "for a beautiful birthday poster design. Include specific details about layout, colors, "
        "decorative elements (balloons, confetti, cake), and how to incorporate the person's photo "
        "effectively. Make it professional yet fun for workplace celebrations."
    )


def build_contents(instruction: str, request: PosterRequest) -> List[Dict[str, Any]]:
    """Instruction text followed by the uploaded photo as an inline attachment."""
    return [
        {"text": instruction},
        {"inline_data": {"mime_type": request.mime_type, "data": request.image_bytes}},
    ]


def response_parts(response: Any) -> List[Any]:
    """Parts of the first candidate, or an empty list when the response has none."""
    candidates = getattr(response, "candidates", None)
    if not candidates:
        return []
    content = getattr(candidates[0], "content", None)
    return list(getattr(content, "parts", None) or [])


def extract_text_and_image(response: Any) -> Tuple[Optional[str], Optional[Any]]:
    """
    Scan response parts in order.

    Returns the first text part and the first inline-data blob; either may be None.
    """
    description = None
    image = None
    for part in response_parts(response):
        text = getattr(part, "text", None)
        inline = getattr(part, "inline_data", None)
        if text and description is None:
            description = text
        elif inline is not None and getattr(inline, "data", None) and image is None:
            image = inline
    return description, image


def extract_text(response: Any) -> str:
    """Concatenate every text part of the response."""
    texts = [getattr(part, "text", None) for part in response_parts(response)]
    return "".join(t for t in texts if t)


def encode_image_data(data: Any) -> str:
    """The SDK hands back raw bytes; the client expects base64 text."""
    if isinstance(data, (bytes, bytearray)):
        return base64.b64encode(bytes(data)).decode("ascii")
    return str(data)


def classify_provider_error(error: Exception) -> FailureResult:
    """
    Turn the terminal provider error into the failure the client sees.

    Logs the provider error; only the classified envelope leaves the service.
    """
    logger.error(f"Error generating poster: {error}", exc_info=error)

    raw_message = str(error)
    category = classify_error_message(raw_message)
    message, status_code = get_error_response(category)

    return FailureResult(
        category=category,
        message=message,
        details=ERROR_DETAILS.get(category, raw_message),
        status_code=status_code
    )


@dataclass
class AttemptResult:
    """Tagged outcome of one provider call: either a response or the error it raised."""
    model: str
    response: Any = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def run_attempt(
    provider: PosterProvider,
    model: str,
    contents: List[Dict[str, Any]],
    config: Optional[Dict[str, Any]] = None
) -> AttemptResult:
    """Issue a single provider call and capture its outcome instead of raising."""
    try:
        response = await provider.generate_content(model=model, contents=contents, config=config)
    except Exception as e:
        return AttemptResult(model=model, error=e)
    return AttemptResult(model=model, response=response)


class PosterGenerator:
    """
    Runs the poster pipeline against an injected provider.

    The image model is tried first with TEXT and IMAGE modalities. If that call
    fails, the text model is asked once for a written poster design. If that
    also fails, the error is classified into a FailureResult.
    """

    def __init__(
        self,
        provider: PosterProvider,
        image_model: Optional[str] = None,
        text_model: Optional[str] = None
    ) -> None:
        self.provider = provider
        self.image_model = image_model or Config.POSTER_IMAGE_MODEL
        self.text_model = text_model or Config.POSTER_TEXT_MODEL

    async def generate(self, request: PosterRequest) -> GenerationOutcome:
        logger.info("Generating poster with Gemini AI...")

        primary = await self.primary_attempt(request)
        if primary.ok:
            return self.shape_primary(primary.response, request)

        logger.warning(f"Image generation failed, trying text-only mode: {primary.error}")

        fallback = await self.fallback_attempt(request)
        if fallback.ok:
            return self.shape_fallback(fallback.response, request)

        return classify_provider_error(fallback.error)

    async def primary_attempt(self, request: PosterRequest) -> AttemptResult:
        contents = build_contents(build_poster_prompt(request.prompt), request)
        return await run_attempt(
            self.provider,
            self.image_model,
            contents,
            config={"response_modalities": IMAGE_MODALITIES}
        )

    async def fallback_attempt(self, request: PosterRequest) -> AttemptResult:
        contents = build_contents(build_description_prompt(request.prompt), request)
        return await run_attempt(self.provider, self.text_model, contents)

    def shape_primary(self, response: Any, request: PosterRequest) -> GenerationOutcome:
        description, image = extract_text_and_image(response)

        if image is not None:
            logger.info("Image generated successfully!")
            fields = {
                "image_base64": encode_image_data(image.data),
                "prompt": request.prompt,
                "mime_type": POSTER_MIME_TYPE,
            }
            if description:
                fields["description"] = description
            return ImageResult(**fields)

        logger.warning("No image generated, falling back to description mode")
        return DescriptionResult(
            description=description or DEFAULT_DESCRIPTION,
            prompt=request.prompt,
            message=NO_IMAGE_MESSAGE
        )

    def shape_fallback(self, response: Any, request: PosterRequest) -> DescriptionResult:
        logger.info(f"Poster description generated by {self.text_model}")
        return DescriptionResult(
            description=extract_text(response) or DEFAULT_DESCRIPTION,
            prompt=request.prompt,
            message=FALLBACK_MESSAGE
        )
