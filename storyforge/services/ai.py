"""Gemini client: character profiles and portraits, one request per action."""

import base64
import json
import re

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from storyforge.core.config import get_settings
from storyforge.core.exceptions import AIGenerationError, BadRequestError
from storyforge.core.logging import get_logger

log = get_logger(__name__)

PROFILE_DEFAULTS = {
    "name": "Unknown",
    "archetype": "Hero",
    "background": "A mysterious past",
    "personality": "Enigmatic and reserved",
    "motivation": "Seeking purpose",
    "flaw": "Struggles with trust",
    "trait": "Keen intuition",
}

PROFILE_PROMPT = """Generate a unique character profile for a narrative story. Return ONLY a JSON object with these exact fields:
{
  "name": "A unique fantasy/sci-fi name",
  "archetype": "One of: Hero, Mentor, Shadow, Trickster, Lover, Caregiver, Innocent, Sage, Explorer, Rebel",
  "background": "2-3 sentences about their origin and history",
  "personality": "2-3 sentences describing their temperament and behavior",
  "motivation": "What drives this character (1-2 sentences)",
  "flaw": "Their main weakness or vulnerability (1-2 sentences)",
  "trait": "A special skill or defining characteristic (1-2 sentences)"
}

Be creative and make the character compelling and unique."""

_JSON_BLOCK_RE = re.compile(r"\{.*\}", re.DOTALL)


def build_portrait_prompt(name: str, archetype: str, personality: str = "", background: str = "") -> str:
    return (
        "Create a detailed character portrait for a narrative story character:\n"
        f"Name: {name}\n"
        f"Archetype: {archetype}\n"
        f"Personality: {personality}\n"
        f"Background: {background}\n\n"
        "Style: Digital art, fantasy character portrait, dramatic lighting, detailed features, "
        "cinematic quality. The character should be shown from shoulders up, facing slightly to "
        "the side with an engaging expression that reflects their personality."
    )


def extract_text(response: types.GenerateContentResponse) -> str:
    if not response.candidates or not response.candidates[0].content:
        return ""
    return "".join(p.text for p in response.candidates[0].content.parts or [] if p.text)


def extract_inline_image(response: types.GenerateContentResponse) -> str | None:
    """First inline image part as a data URL."""
    if not response.candidates or not response.candidates[0].content:
        return None
    for part in response.candidates[0].content.parts or []:
        blob = part.inline_data
        if blob and blob.data:
            mime = blob.mime_type or "image/png"
            return f"data:{mime};base64,{base64.b64encode(blob.data).decode('ascii')}"
    return None


def parse_profile(text: str) -> dict[str, str]:
    """Pull the JSON object out of free-form text. Unparseable text yields the
    defaults; blank or missing fields get their default individually."""
    match = _JSON_BLOCK_RE.search(text or "")
    parsed = None
    if match:
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError:
            parsed = None
    if not isinstance(parsed, dict):
        log.warning("gemini_profile_unparseable", text_len=len(text or ""))
        return dict(PROFILE_DEFAULTS)
    profile = {}
    for field, default in PROFILE_DEFAULTS.items():
        value = parsed.get(field)
        profile[field] = str(value).strip() if value else default
    return profile


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        text_model: str,
        image_model: str,
        base_url: str | None = None,
        timeout: float = 60.0,
        client: genai.Client | None = None,
    ):
        self.api_key = api_key
        self.text_model = text_model
        self.image_model = image_model
        self.base_url = base_url
        self.timeout = timeout
        self._client = client

    def _sdk(self) -> genai.Client:
        if self._client is None:
            if not self.api_key:
                raise AIGenerationError("AI generation is not configured")
            self._client = genai.Client(
                api_key=self.api_key,
                http_options=types.HttpOptions(base_url=self.base_url, timeout=int(self.timeout * 1000)),
            )
        return self._client

    async def _generate(
        self, model: str, prompt: str, modalities: list[str] | None = None
    ) -> types.GenerateContentResponse:
        config = types.GenerateContentConfig(response_modalities=modalities) if modalities else None
        try:
            return await self._sdk().aio.models.generate_content(model=model, contents=prompt, config=config)
        except genai_errors.APIError as e:
            log.error("gemini_api_error", model=model, status_code=e.code, error=e.message)
            raise AIGenerationError("AI provider returned an error") from e
        except httpx.HTTPError as e:
            log.error("gemini_request_failed", model=model, error=str(e))
            raise AIGenerationError("AI provider unreachable") from e

    async def generate_character_profile(self) -> dict[str, str]:
        response = await self._generate(self.text_model, PROFILE_PROMPT)
        text = extract_text(response)
        if not text:
            raise AIGenerationError("No text in AI response")
        return parse_profile(text)

    async def generate_character_image(
        self, name: str, archetype: str, personality: str = "", background: str = ""
    ) -> str:
        if not name or not archetype:
            raise BadRequestError("Name and archetype are required")
        prompt = build_portrait_prompt(name, archetype, personality, background)
        response = await self._generate(self.image_model, prompt, modalities=["IMAGE", "TEXT"])
        image = extract_inline_image(response)
        if not image:
            raise AIGenerationError("No image generated in response")
        return image


def get_ai_client() -> GeminiClient:
    """FastAPI dependency; overridden in tests."""
    s = get_settings()
    return GeminiClient(
        api_key=s.gemini_api_key,
        text_model=s.gemini_text_model,
        image_model=s.gemini_image_model,
        base_url=s.gemini_base_url,
        timeout=s.gemini_timeout_seconds,
    )
