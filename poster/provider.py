"""Generative provider boundary - the Gemini client behind a small protocol."""
from functools import lru_cache
from typing import Any, Dict, List, Optional, Protocol

from google import genai
from google.genai import types

from config import Config
from utils.logger import get_logger

logger = get_logger("poster.provider")


class PosterProvider(Protocol):
    """
    Anything that can answer a generate-content request.

    contents is a list of plain parts, either {"text": str} or
    {"inline_data": {"mime_type": str, "data": bytes}}; config is an optional
    dict such as {"response_modalities": ["TEXT", "IMAGE"]}. The returned
    object exposes candidates[0].content.parts like a Gemini response.
    """

    async def generate_content(
        self,
        model: str,
        contents: List[Dict[str, Any]],
        config: Optional[Dict[str, Any]] = None
    ) -> Any:
        ...


def to_gemini_parts(contents: List[Dict[str, Any]]) -> List:
    """Convert plain part dicts into google-genai Part objects."""
    parts = []
    for item in contents:
        if "text" in item:
            parts.append(types.Part.from_text(text=item["text"]))
        elif "inline_data" in item:
            inline = item["inline_data"]
            parts.append(types.Part(
                inline_data=types.Blob(
                    mime_type=inline["mime_type"],
                    data=inline["data"]
                )
            ))
        else:
            raise ValueError(f"Unsupported content part: {sorted(item)}")
    return parts


class GeminiPosterProvider:
    """google-genai SDK backed provider using the asyncio client."""

    def __init__(self, api_key: str, client: Optional[Any] = None) -> None:
        self.client = client or genai.Client(api_key=api_key)

    async def generate_content(
        self,
        model: str,
        contents: List[Dict[str, Any]],
        config: Optional[Dict[str, Any]] = None
    ) -> Any:
        generate_content_config = None
        if config:
            generate_content_config = types.GenerateContentConfig(**config)

        logger.info(f"Calling Gemini model: {model}")
        return await self.client.aio.models.generate_content(
            model=model,
            contents=[types.Content(role="user", parts=to_gemini_parts(contents))],
            config=generate_content_config,
        )


@lru_cache()
def get_poster_provider() -> PosterProvider:
    """Return the process-wide Gemini provider, created on first use."""
    return GeminiPosterProvider(api_key=Config.get_gemini_api_key())
