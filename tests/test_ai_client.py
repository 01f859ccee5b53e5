import asyncio
from types import SimpleNamespace

import pytest

from ai_client import GeminiClient
from errors import RequestError
from schemas.problems import MathProblem


class _Models:
    def __init__(self, text=None, exc=None):
        self.text = text
        self.exc = exc
        self.calls = []

    async def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.exc is not None:
            raise self.exc
        return SimpleNamespace(text=self.text)


def _client_with(models):
    c = GeminiClient(api_key="test-key", model="gemini-test")
    c._client = SimpleNamespace(aio=SimpleNamespace(models=models))
    return c


def test_missing_key_raises_request_error():
    c = GeminiClient(api_key="")
    with pytest.raises(RequestError):
        asyncio.run(c.generate_text("hello"))


def test_returns_text_and_passes_model():
    models = _Models(text="Great work!")
    out = asyncio.run(_client_with(models).generate_text("feedback please"))
    assert out == "Great work!"
    assert models.calls[0]["model"] == "gemini-test"
    assert models.calls[0]["contents"] == "feedback please"
    assert models.calls[0]["config"] is None


def test_schema_requests_json():
    models = _Models(text='{"problem_text": "1 + 1?", "final_answer": 2}')
    asyncio.run(_client_with(models).generate_text("problem", response_schema=MathProblem))
    config = models.calls[0]["config"]
    assert config["response_mime_type"] == "application/json"
    assert config["response_schema"] is MathProblem


def test_sdk_errors_are_wrapped():
    models = _Models(exc=ConnectionError("network down"))
    with pytest.raises(RequestError) as exc:
        asyncio.run(_client_with(models).generate_text("x"))
    assert isinstance(exc.value.__cause__, ConnectionError)


@pytest.mark.parametrize("text", [None, "", "   "])
def test_empty_reply_is_an_error(text):
    with pytest.raises(RequestError):
        asyncio.run(_client_with(_Models(text=text)).generate_text("x"))
