"""Google Gemini API wrapper with error handling.

The API key is injected at construction and can be swapped at runtime via
``reconfigure``; nothing reads the credential from global state after that.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from google import genai
from google.genai import types

from config import settings
from services.errors import GenerationError, MissingCredentialError

logger = logging.getLogger(__name__)


@dataclass
class Attachment:
    """Inline file sent alongside a prompt (resume PDF, recorded answer)."""
    data: bytes
    mime_type: str


def _strip_code_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()
    return text


class GeminiClient:
    def __init__(
        self,
        api_key: str = "",
        *,
        model: str = "gemini-2.5-flash",
        temperature: float = 0.3,
        max_output_tokens: int = 8192,
    ) -> None:
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self._api_key = api_key.strip()
        self._client: genai.Client | None = None

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def reconfigure(self, api_key: str) -> None:
        """Replace the credential; the next call builds a fresh client."""
        self._api_key = api_key.strip()
        self._client = None
        logger.info("Gemini credential %s", "updated" if self._api_key else "cleared")

    def _get_client(self) -> genai.Client:
        if not self._api_key:
            logger.warning("No Gemini API key set - generation unavailable")
            raise MissingCredentialError()
        if self._client is None:
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    def _generate(self, contents: Any, *, model: str | None, json_output: bool) -> str:
        client = self._get_client()
        config = types.GenerateContentConfig(
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
            response_mime_type="application/json" if json_output else None,
        )
        try:
            response = client.models.generate_content(
                model=model or self.model,
                contents=contents,
                config=config,
            )
        except Exception as e:
            logger.error("Gemini API error: %s", e)
            raise GenerationError(f"Gemini API error: {e}") from e

        text = response.text or ""
        if not text.strip():
            raise GenerationError("Empty response from Gemini")
        return text

    async def generate_json(
        self,
        prompt: str,
        *,
        attachment: Attachment | None = None,
        model: str | None = None,
    ) -> Any:
        """Send a prompt (plus optional inline file) and parse the JSON response."""
        contents: Any = prompt
        if attachment is not None:
            contents = [
                types.Part.from_bytes(data=attachment.data, mime_type=attachment.mime_type),
                prompt,
            ]

        text = self._generate(contents, model=model, json_output=True)
        try:
            return json.loads(_strip_code_fences(text))
        except json.JSONDecodeError as e:
            logger.error("Failed to parse Gemini response as JSON: %s", e)
            raise GenerationError("Gemini returned malformed JSON") from e

    async def generate_text(self, prompt: str, *, model: str | None = None) -> str:
        return self._generate(prompt, model=model, json_output=False).strip()

    async def ping(self) -> bool:
        """Cheap round trip to check the key is valid and has quota."""
        try:
            await self.generate_text("ping")
            return True
        except (MissingCredentialError, GenerationError):
            return False


_client: GeminiClient | None = None


def get_client() -> GeminiClient:
    """Process-wide client seeded from settings; reconfigured via the settings API."""
    global _client
    if _client is None:
        _client = GeminiClient(
            settings.gemini_api_key,
            model=settings.gemini_model,
            temperature=settings.gemini_temperature,
            max_output_tokens=settings.gemini_max_output_tokens,
        )
    return _client
