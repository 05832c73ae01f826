"""
Gemini Client using the google-genai SDK.

Thin async wrapper used by AIClient when the gemini provider is selected.
"""
import logging
from typing import Optional

from google import genai
from google.genai import types

import config

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"


class GeminiClient:
    """Gemini client using the google-genai SDK."""

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key or config.GEMINI_API_KEY
        if not self.api_key:
            raise ValueError("GEMINI_API_KEY not found in environment")

        self.client = genai.Client(api_key=self.api_key)
        logger.info("GeminiClient initialized with google-genai SDK")

    async def generate(
        self,
        prompt: str,
        model: str = DEFAULT_GEMINI_MODEL,
        temperature: float = 0.7,
        max_tokens: int = 2000,
    ) -> str:
        """Generate text for a single prompt."""
        response = await self.client.aio.models.generate_content(
            model=model,
            contents=prompt,
            config=types.GenerateContentConfig(
                temperature=temperature,
                max_output_tokens=max_tokens,
            ),
        )
        return response.text or ""

