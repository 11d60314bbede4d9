"""Shared pytest fixtures: a scripted Gemini stand-in and a TestClient wired to it."""
import io
import os
import tempfile
from types import SimpleNamespace

import pytest

# Must be set before config / logger are imported
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")
os.environ.setdefault("LOGS_DIR", tempfile.mkdtemp(prefix="poster-logs-"))

from fastapi.testclient import TestClient
from PIL import Image

from app import app
from poster.provider import get_poster_provider


def text_part(text):
    return SimpleNamespace(text=text, inline_data=None)


def image_part(data, mime_type="image/png"):
    return SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type=mime_type))


def gemini_response(*parts):
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=list(parts)))])


class ScriptedProvider:
    """Replays one scripted outcome per call; exceptions in the script are raised."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def generate_content(self, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if not self.outcomes:
            raise AssertionError("provider called more times than scripted")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def jpeg_bytes(size=None):
    """A real JPEG, optionally padded with trailing bytes up to size."""
    buf = io.BytesIO()
    Image.new("RGB", (64, 64), (200, 80, 160)).save(buf, format="JPEG")
    data = buf.getvalue()
    if size is not None and size > len(data):
        data += b"\0" * (size - len(data))
    return data


@pytest.fixture
def provider():
    return ScriptedProvider()


@pytest.fixture
def client(provider):
    app.dependency_overrides[get_poster_provider] = lambda: provider
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
