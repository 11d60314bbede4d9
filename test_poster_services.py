"""Unit tests for the poster fallback pipeline, driven by a scripted provider."""
import asyncio
import base64

from common.error_messages import ErrorCode
from conftest import ScriptedProvider, gemini_response, image_part, text_part
from poster.models import DescriptionResult, FailureResult, ImageResult, PosterRequest
from poster.services import (
    PosterGenerator,
    build_description_prompt,
    classify_provider_error,
    build_poster_prompt,
    extract_text_and_image,
    run_attempt,
)


def make_request(prompt="Happy 30th, Dana!"):
    return PosterRequest(prompt=prompt, image_bytes=b"\xff\xd8photo", mime_type="image/jpeg")


def generate(provider, request=None):
    generator = PosterGenerator(provider, image_model="image-model", text_model="text-model")
    return asyncio.run(generator.generate(request or make_request()))


def test_poster_prompt_embeds_message_and_directives():
    prompt = build_poster_prompt("Happy 30th, Dana!")

    assert '"Happy 30th, Dana!"' in prompt
    assert "balloons, confetti, party hats, cake" in prompt
    assert "central element" in prompt
    assert "decorative borders" in prompt


def test_description_prompt_asks_for_text():
    prompt = build_description_prompt("Happy 30th, Dana!")

    assert '"Happy 30th, Dana!"' in prompt
    assert "detailed description" in prompt
    assert "layout, colors" in prompt


def test_first_text_and_first_image_win():
    response = gemini_response(
        text_part("first caption"),
        image_part(b"first", "image/jpeg"),
        text_part("second caption"),
        image_part(b"second"),
    )

    description, image = extract_text_and_image(response)

    assert description == "first caption"
    assert image.data == b"first"


def test_extract_handles_empty_response():
    assert extract_text_and_image(gemini_response()) == (None, None)
    assert extract_text_and_image(object()) == (None, None)


def test_run_attempt_captures_errors():
    error = ValueError("nope")
    provider = ScriptedProvider(error)

    attempt = asyncio.run(run_attempt(provider, "m", []))

    assert not attempt.ok
    assert attempt.error is error
    assert attempt.model == "m"


def test_image_result_always_reports_png():
    provider = ScriptedProvider(gemini_response(image_part(b"jpeg-poster", "image/jpeg")))

    outcome = generate(provider)

    assert isinstance(outcome, ImageResult)
    assert outcome.mime_type == "image/png"
    assert base64.b64decode(outcome.image_base64) == b"jpeg-poster"
    assert provider.calls[0]["model"] == "image-model"


def test_empty_primary_response_defaults_description():
    outcome = generate(ScriptedProvider(gemini_response()))

    assert isinstance(outcome, DescriptionResult)
    assert outcome.description == "AI poster description generated successfully!"
    assert outcome.fallback_mode is True


def test_fallback_joins_text_parts():
    provider = ScriptedProvider(
        RuntimeError("image model unavailable"),
        gemini_response(text_part("Layout: "), text_part("photo centred.")),
    )

    outcome = generate(provider)

    assert isinstance(outcome, DescriptionResult)
    assert outcome.description == "Layout: photo centred."
    assert [call["model"] for call in provider.calls] == ["image-model", "text-model"]


def test_fallback_receives_same_photo():
    provider = ScriptedProvider(RuntimeError("x"), gemini_response(text_part("ok")))

    generate(provider)

    primary, fallback = provider.calls
    assert primary["contents"][1] == fallback["contents"][1]


def test_both_attempts_failing_yields_single_failure():
    provider = ScriptedProvider(Exception("quota exceeded"), Exception("quota exceeded"))

    outcome = generate(provider)

    assert isinstance(outcome, FailureResult)
    assert outcome.category == ErrorCode.QUOTA
    assert outcome.status_code == 429
    assert len(provider.calls) == 2


def test_primary_success_never_calls_fallback():
    provider = ScriptedProvider(gemini_response(text_part("only text")))

    generate(provider)

    assert len(provider.calls) == 1


def test_models_default_to_config(monkeypatch):
    monkeypatch.setattr("config.Config.POSTER_IMAGE_MODEL", "configured-image")
    monkeypatch.setattr("config.Config.POSTER_TEXT_MODEL", "configured-text")

    generator = PosterGenerator(ScriptedProvider())

    assert generator.image_model == "configured-image"
    assert generator.text_model == "configured-text"


def test_empty_fallback_response_defaults_description():
    provider = ScriptedProvider(RuntimeError("image model unavailable"), gemini_response())

    outcome = generate(provider)

    assert isinstance(outcome, DescriptionResult)
    assert outcome.description == "AI poster description generated successfully!"
    assert outcome.message == "Poster description generated successfully! (Image generation temporarily unavailable)"


def test_classify_provider_error_unknown_keeps_message():
    failure = classify_provider_error(RuntimeError("socket closed"))

    assert failure.category == ErrorCode.UNKNOWN
    assert failure.status_code == 500
    assert failure.to_response() == {
        "success": False,
        "error": "Failed to generate poster",
        "details": "socket closed",
    }


def test_classify_provider_error_auth():
    failure = classify_provider_error(Exception("API key expired"))

    assert failure.status_code == 401
    assert failure.message == "API authentication failed."
