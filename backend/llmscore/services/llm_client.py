"""Free-text LLM completions via OpenAI or Anthropic."""

import asyncio
import logging

from llmscore.config import Settings

logger = logging.getLogger(__name__)


class LLMClient:
    """Sends single-message prompts to the configured provider."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._openai_client = None
        self._anthropic_client = None

    def _get_openai_client(self):
        """Lazy load OpenAI client."""
        if self._openai_client is None:
            from openai import OpenAI
            self._openai_client = OpenAI(
                api_key=self.settings.openai_api_key,
                timeout=self.settings.llm_timeout_seconds,
            )
        return self._openai_client

    def _get_anthropic_client(self):
        """Lazy load Anthropic client."""
        if self._anthropic_client is None:
            from anthropic import Anthropic
            self._anthropic_client = Anthropic(
                api_key=self.settings.anthropic_api_key,
                timeout=self.settings.llm_timeout_seconds,
            )
        return self._anthropic_client

    def _call_openai(self, prompt: str, model: str, temperature: float, max_tokens: int) -> str:
        """Call OpenAI chat completions."""
        client = self._get_openai_client()

        response = client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
            max_tokens=max_tokens,
        )

        return response.choices[0].message.content or ""

    def _call_anthropic(self, prompt: str, model: str, temperature: float, max_tokens: int) -> str:
        """Call Anthropic messages API."""
        client = self._get_anthropic_client()

        response = client.messages.create(
            model=model,
            max_tokens=max_tokens,
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
        )

        return response.content[0].text if response.content else ""

    def _call_llm(self, prompt: str, temperature: float, max_tokens: int) -> str:
        """Call configured LLM provider."""
        provider = self.settings.llm_provider
        model = self.settings.llm_model

        logger.info(f"Calling {provider} {model}...")

        if provider == "openai":
            return self._call_openai(prompt, model, temperature, max_tokens)
        elif provider == "anthropic":
            return self._call_anthropic(prompt, model, temperature, max_tokens)
        else:
            raise ValueError(f"Unknown LLM provider: {provider}")

    async def complete(self, prompt: str, temperature: float = 0.7, max_tokens: int = 300) -> str:
        """Return the model's completion for a single user message.

        The response is untrusted free text; callers parse it themselves.
        """
        return await asyncio.to_thread(self._call_llm, prompt, temperature, max_tokens)
