"""
Unified AI Client - one text-completion interface over OpenAI and Gemini.

OpenAI is the default provider; Gemini is reached through GeminiClient.
"""
import logging
from typing import Dict, List, Optional

import config

logger = logging.getLogger(__name__)


class AIClientError(RuntimeError):
    """Provider call failed."""


class AIConfigurationError(AIClientError):
    """Provider selected but not configured (missing key or package)."""


MODEL_CONFIGS: Dict[str, Dict] = {
    "openai": {
        "default": "gpt-4o-mini",
        "models": ["gpt-4o", "gpt-4o-mini", "gpt-4-turbo", "gpt-3.5-turbo"],
    },
    "gemini": {
        "default": "gemini-2.0-flash",
        "models": ["gemini-2.5-flash", "gemini-2.0-flash", "gemini-pro"],
    },
}


def get_available_models(provider: str = config.LLM_PROVIDER) -> List[str]:
    """List model names for a provider ([] when unknown)."""
    provider_config = MODEL_CONFIGS.get(provider.lower())
    if not provider_config:
        return []
    return list(provider_config["models"])


class AIClient:
    """Provider-agnostic completion client.

    Provider SDK clients are created on first use so that a deployment with
    only one API key configured still works for that provider.
    """

    def __init__(
        self,
        default_provider: str = config.LLM_PROVIDER,
        openai_api_key: Optional[str] = None,
        gemini_api_key: Optional[str] = None,
    ):
        self.default_provider = default_provider.lower()
        self.openai_api_key = openai_api_key or config.OPENAI_API_KEY
        self.gemini_api_key = gemini_api_key or config.GEMINI_API_KEY
        self._openai = None
        self._gemini = None

    def configured_providers(self) -> Dict[str, bool]:
        return {
            "openai": bool(self.openai_api_key),
            "gemini": bool(self.gemini_api_key),
        }

    def _resolve(self, provider: Optional[str], model: Optional[str]):
        provider = (provider or self.default_provider).lower()
        if provider not in MODEL_CONFIGS:
            raise ValueError(
                f"Unsupported AI provider: {provider}. Supported: {', '.join(MODEL_CONFIGS)}"
            )
        return provider, model or MODEL_CONFIGS[provider]["default"]

    def _openai_client(self):
        if self._openai is None:
            if not self.openai_api_key:
                raise AIConfigurationError("OpenAI API key not configured. Set OPENAI_API_KEY in environment.")
            from openai import AsyncOpenAI
            self._openai = AsyncOpenAI(api_key=self.openai_api_key, timeout=120.0)
        return self._openai

    def _gemini_client(self):
        if self._gemini is None:
            if not self.gemini_api_key:
                raise AIConfigurationError("Gemini API key not configured. Set GEMINI_API_KEY in environment.")
            from gemini_client import GeminiClient
            self._gemini = GeminiClient(api_key=self.gemini_api_key)
        return self._gemini

    async def generate_content(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        provider: Optional[str] = None,
        model: Optional[str] = None,
    ) -> str:
        """Generate text for a single user prompt."""
        provider, model = self._resolve(provider, model)

        try:
            if provider == "openai":
                completion = await self._openai_client().chat.completions.create(
                    model=model,
                    messages=[{"role": "user", "content": prompt}],
                    temperature=temperature,
                    max_tokens=max_tokens,
                )
                return completion.choices[0].message.content or ""

            return await self._gemini_client().generate(
                prompt,
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except AIConfigurationError:
            raise
        except Exception as e:
            logger.error(f"Error generating content with {provider}: {e}")
            raise AIClientError(f"Failed to generate content: {e}") from e


# Lazy module-level instance for the HTTP layer
_ai_client = None

def get_ai_client() -> AIClient:
    """Get AI client instance (lazy initialization)."""
    global _ai_client
    if _ai_client is None:
        _ai_client = AIClient()
    return _ai_client
