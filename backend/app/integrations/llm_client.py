"""
Language model clients.

Every client exposes `generate(prompt, json_mode=True) -> str` and raises
UpstreamAPIError for transport, quota, or empty-reply failures. Calls are
blocking; the service runs them in a worker thread.
"""

import logging
from typing import Optional, Protocol

from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types
from openai import OpenAI, OpenAIError

from app.config import Settings
from app.integrations.exceptions import IntegrationError, UpstreamAPIError

logger = logging.getLogger(__name__)


class LLMClient(Protocol):
    model: str

    def generate(self, prompt: str, json_mode: bool = True) -> str:
        ...


class OpenAIClient:
    def __init__(self, api_key: str, model: str = "gpt-4o-mini", timeout: Optional[float] = None):
        kwargs = {"api_key": api_key}
        if timeout is not None:
            kwargs["timeout"] = timeout
        self._client = OpenAI(**kwargs)
        self.model = model

    def generate(self, prompt: str, json_mode: bool = True) -> str:
        kwargs = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": 0.7,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            resp = self._client.chat.completions.create(**kwargs)
        except OpenAIError as e:
            raise UpstreamAPIError(f"OpenAI call failed: {e}") from e

        content = resp.choices[0].message.content if resp.choices else None
        if not content:
            raise UpstreamAPIError("OpenAI returned an empty reply")
        return content


class GeminiClient:
    def __init__(self, api_key: str, model: str = "gemini-1.5-flash", timeout: Optional[float] = None):
        kwargs = {"api_key": api_key}
        if timeout is not None:
            # google-genai takes milliseconds
            kwargs["http_options"] = genai_types.HttpOptions(timeout=int(timeout * 1000))
        self._client = genai.Client(**kwargs)
        self.model = model

    def generate(self, prompt: str, json_mode: bool = True) -> str:
        config = genai_types.GenerateContentConfig(
            temperature=1.0,
            top_p=0.95,
            max_output_tokens=8192,
            response_mime_type="application/json" if json_mode else "text/plain",
        )
        try:
            response = self._client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except genai_errors.APIError as e:
            raise UpstreamAPIError(f"Gemini call failed: {e}") from e

        text = response.text
        if not text:
            raise UpstreamAPIError("Gemini returned an empty reply")
        return text


def build_llm_client(settings: Settings) -> LLMClient:
    """Create the configured provider client. Missing credentials are fatal."""
    if settings.llm_provider == "gemini":
        if not settings.gemini_api_key:
            raise IntegrationError(
                "GOOGLE_GEMINI_AI_API_KEY not set. Please add it to your .env file."
            )
        client = GeminiClient(settings.gemini_api_key, settings.gemini_model, settings.llm_timeout_seconds)
    else:
        if not settings.openai_api_key:
            raise IntegrationError("OPENAI_API_KEY not set. Please add it to your .env file.")
        client = OpenAIClient(settings.openai_api_key, settings.openai_model, settings.llm_timeout_seconds)

    logger.info(f"LLM client initialized: provider={settings.llm_provider} model={client.model}")
    return client
