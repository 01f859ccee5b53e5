"""
Thin async wrapper around the Gemini client.

One attempt per call; every failure surfaces as RequestError so the
workflow layer only has to know about our own error types.
"""
from __future__ import annotations

import logging
from typing import Optional

from google import genai
from pydantic import BaseModel

from config import settings
from errors import RequestError

logger = logging.getLogger(__name__)


class GeminiClient:
    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None) -> None:
        self.api_key = api_key if api_key is not None else settings.GOOGLE_API_KEY
        self.model = model or settings.GEMINI_MODEL
        self._client: Optional[genai.Client] = None

    def _get_client(self) -> genai.Client:
        """
        Build the SDK client on first use, so importing the app never needs a key.
        """
        if self._client is None:
            if not self.api_key:
                raise RequestError("GOOGLE_API_KEY is not configured")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def generate_text(
        self, prompt: str, *, response_schema: Optional[type[BaseModel]] = None
    ) -> str:
        """
        Send one prompt and return the model's text.

        Args:
            prompt: The full prompt text
            response_schema: Optional Pydantic model; when given the model is
                asked for JSON in that shape

        Returns:
            str: The generated text
        """
        client = self._get_client()

        config = None
        if response_schema is not None:
            config = {
                "response_mime_type": "application/json",
                "response_schema": response_schema,
            }

        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
            text = response.text
        except Exception as e:
            raise RequestError(f"Gemini request failed: {type(e).__name__}: {e}") from e

        if not text or not text.strip():
            raise RequestError("Gemini returned an empty response")
        logger.debug("gemini model=%s chars=%d", self.model, len(text))
        return text
