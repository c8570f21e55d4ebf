import random
from types import SimpleNamespace

import httpx
import pytest
from google.genai import errors as genai_errors
from google.genai import types

from storyforge.core.exceptions import AIGenerationError, BadRequestError
from storyforge.services import story
from storyforge.services.ai import PROFILE_DEFAULTS, GeminiClient, get_ai_client, parse_profile


def _response(*parts: types.Part) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=list(parts)))]
    )


def _text(text: str) -> types.GenerateContentResponse:
    return _response(types.Part(text=text))


def _image(data: bytes, mime_type: str = "image/png") -> types.Part:
    return types.Part(inline_data=types.Blob(mime_type=mime_type, data=data))


class FakeModels:
    """Stands in for client.aio.models; records each call."""

    def __init__(self, handler):
        self.handler = handler
        self.calls = []

    async def generate_content(self, *, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        return self.handler(model, contents, config)


def _client(handler) -> tuple[GeminiClient, FakeModels]:
    models = FakeModels(handler)
    sdk = SimpleNamespace(aio=SimpleNamespace(models=models))
    client = GeminiClient(api_key="test-key", text_model="text-model", image_model="image-model", client=sdk)
    return client, models


def _raise(exc):
    def handler(*args):
        raise exc
    return handler


def test_parse_profile_fills_missing_fields():
    profile = parse_profile('Sure! {"name": "Kael", "archetype": "Rebel", "flaw": ""} Enjoy.')
    assert profile["name"] == "Kael"
    assert profile["archetype"] == "Rebel"
    assert profile["flaw"] == PROFILE_DEFAULTS["flaw"]
    assert profile["motivation"] == PROFILE_DEFAULTS["motivation"]


@pytest.mark.parametrize("text", ["no json here", "{not: valid json}"])
def test_parse_profile_falls_back_to_defaults(text):
    assert parse_profile(text) == PROFILE_DEFAULTS


async def test_profile_request_and_parse():
    client, models = _client(lambda *a: _text('```json\n{"name": "Ilsa", "archetype": "Mentor"}\n```'))
    profile = await client.generate_character_profile()

    call = models.calls[0]
    assert call["model"] == "text-model"
    assert "character profile" in call["contents"]
    assert call["config"] is None
    assert profile["name"] == "Ilsa"
    assert profile["background"] == PROFILE_DEFAULTS["background"]


async def test_empty_text_is_an_error():
    client, _ = _client(lambda *a: types.GenerateContentResponse(candidates=[]))
    with pytest.raises(AIGenerationError):
        await client.generate_character_profile()


async def test_provider_error_is_an_error():
    error = genai_errors.ServerError(503, {"error": {"code": 503, "message": "overloaded", "status": "UNAVAILABLE"}})
    client, _ = _client(_raise(error))
    with pytest.raises(AIGenerationError):
        await client.generate_character_profile()


async def test_network_error_is_an_error():
    client, _ = _client(_raise(httpx.ConnectError("connection refused")))
    with pytest.raises(AIGenerationError):
        await client.generate_character_profile()


async def test_missing_api_key():
    client = GeminiClient(api_key="", text_model="t", image_model="i")
    with pytest.raises(AIGenerationError):
        await client.generate_character_profile()


async def test_image_returns_data_url():
    client, models = _client(
        lambda *a: _response(types.Part(text="Here is the portrait."), _image(b"ABC", "image/jpeg"))
    )
    url = await client.generate_character_image("Kael", "Rebel")

    call = models.calls[0]
    assert call["model"] == "image-model"
    assert call["config"].response_modalities == ["IMAGE", "TEXT"]
    assert "Name: Kael" in call["contents"]
    assert url == "data:image/jpeg;base64,QUJD"


async def test_image_without_inline_data_is_an_error():
    client, _ = _client(lambda *a: _text("I cannot draw that."))
    with pytest.raises(AIGenerationError):
        await client.generate_character_image("Kael", "Rebel")


async def test_image_requires_name_and_archetype():
    client, models = _client(lambda *a: _text("unused"))
    with pytest.raises(BadRequestError):
        await client.generate_character_image("", "Rebel")
    assert models.calls == []


async def test_ai_routes(auth_client):
    from storyforge.main import app

    def handler(model, contents, config):
        if model == "image-model":
            return _response(_image(b"XYZ"))
        return _text('{"name": "Tamsin"}')

    app.dependency_overrides[get_ai_client] = lambda: _client(handler)[0]

    r = await auth_client.post("/v1/ai/character-profile")
    assert r.status_code == 200
    assert r.json()["name"] == "Tamsin"
    assert r.json()["archetype"] == PROFILE_DEFAULTS["archetype"]

    r = await auth_client.post("/v1/ai/character-image", json={"name": "Tamsin", "archetype": "Sage"})
    assert r.json() == {"image_url": "data:image/png;base64,WFla"}

    r = await auth_client.post("/v1/ai/character-image", json={"name": "Tamsin"})
    assert r.status_code == 400


async def test_ai_failure_maps_to_500(auth_client):
    from storyforge.main import app

    error = genai_errors.ServerError(500, {"error": {"code": 500, "message": "boom", "status": "INTERNAL"}})
    app.dependency_overrides[get_ai_client] = lambda: _client(_raise(error))[0]
    r = await auth_client.post("/v1/ai/character-profile")
    assert r.status_code == 500
    assert r.json()["code"] == "AI_GENERATION_FAILED"


async def test_story_helpers(auth_client):
    r = await auth_client.post("/v1/ai/story/continuation", json={"context": "Night fell."})
    assert r.json()["text"] in story.CONTINUATIONS

    r = await auth_client.post("/v1/ai/story/choices", json={})
    picks = r.json()["choices"]
    assert 2 <= len(picks) <= 3
    assert len(set(picks)) == len(picks)

    r = await auth_client.post("/v1/ai/story/tone", json={"context": "She wept."})
    assert r.json()["tone"] in story.TONES


def test_story_choices_are_seedable():
    assert story.choices(rng=random.Random(7)) == story.choices(rng=random.Random(7))
