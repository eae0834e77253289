# newsdigest/llm.py
"""
Chat-completion providers shared by the remote summary backend, the trust
classifier and the conversational assistant.

Every provider returns the raw reply text. SDK and transport failures are
converted to ``RemoteUnavailable`` so callers only deal with one error type.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from newsdigest.config import Settings
from newsdigest.summarizer.errors import RemoteUnavailable

logger = logging.getLogger(__name__)

DEFAULT_MODELS = {
    "openai": "deepseek-ai/DeepSeek-R1:fireworks-ai",
    "anthropic": "claude-3-haiku-20240307",
    "ollama": "llama3.2",
}


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    model: str

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        json_mode: bool = False,
        max_tokens: int = 500,
        temperature: float = 0.3,
    ) -> str:
        """Generate a single reply from the LLM."""
        pass


class OpenAIProvider(LLMProvider):
    """OpenAI-compatible chat completions (OpenAI, Hugging Face router, ...)."""

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: Optional[str] = None,
        timeout: float = 60.0,
    ):
        try:
            from openai import AsyncOpenAI
        except ImportError:
            raise ImportError(
                "OpenAI package not installed. Install with: pip install openai"
            )

        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout)
        self.model = model

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        json_mode: bool = False,
        max_tokens: int = 500,
        temperature: float = 0.3,
    ) -> str:
        import openai

        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self.client.chat.completions.create(**kwargs)
        except openai.APIError as exc:
            logger.warning(f"OpenAI-compatible call failed: {exc!r}")
            raise RemoteUnavailable(str(exc)) from exc

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


class AnthropicProvider(LLMProvider):
    """Anthropic Claude API provider."""

    def __init__(self, api_key: str, model: str, timeout: float = 60.0):
        try:
            from anthropic import AsyncAnthropic
        except ImportError:
            raise ImportError(
                "Anthropic package not installed. Install with: pip install anthropic"
            )

        self.client = AsyncAnthropic(api_key=api_key, timeout=timeout)
        self.model = model

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        json_mode: bool = False,
        max_tokens: int = 500,
        temperature: float = 0.3,
    ) -> str:
        import anthropic

        if json_mode:
            system_prompt += "\n\nRespond with a single valid JSON object only."

        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except anthropic.APIError as exc:
            logger.warning(f"Anthropic call failed: {exc!r}")
            raise RemoteUnavailable(str(exc)) from exc

        return "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )


class OllamaProvider(LLMProvider):
    """Ollama local LLM provider."""

    def __init__(
        self,
        model: str = "llama3.2",
        base_url: str = "http://localhost:11434",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Ollama provider.

        Args:
            model: Ollama model name (e.g., llama3.2, mistral)
            base_url: Ollama server URL (default: http://localhost:11434)
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        logger.info(f"Initialized Ollama provider with model: {model} at {base_url}")

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        json_mode: bool = False,
        max_tokens: int = 500,
        temperature: float = 0.3,
    ) -> str:
        payload: Dict[str, Any] = {
            "model": self.model,
            "system": system_prompt,
            "prompt": user_prompt,
            "stream": False,
            "options": {
                "temperature": temperature,
                "num_predict": max_tokens,
            },
        }
        if json_mode:
            payload["format"] = "json"

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.post(f"{self.base_url}/api/generate", json=payload)
                response.raise_for_status()
                result = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(f"Ollama call failed: {exc!r}")
            raise RemoteUnavailable(str(exc)) from exc

        return str(result.get("response", "")) if isinstance(result, dict) else ""


def build_llm_provider(settings: Settings) -> Optional[LLMProvider]:
    """Create the configured provider, or ``None`` when it cannot be used."""
    name = settings.llm_provider
    if name == "none":
        return None

    model = settings.llm_model or DEFAULT_MODELS.get(name, "")
    timeout = settings.remote_timeout_seconds
    try:
        if name == "openai":
            if not settings.openai_api_key:
                logger.warning("OpenAI API key not configured, LLM features disabled")
                return None
            return OpenAIProvider(
                api_key=settings.openai_api_key,
                model=model,
                base_url=settings.openai_base_url,
                timeout=timeout,
            )

        if name == "anthropic":
            if not settings.anthropic_api_key:
                logger.warning("Anthropic API key not configured, LLM features disabled")
                return None
            return AnthropicProvider(
                api_key=settings.anthropic_api_key, model=model, timeout=timeout
            )

        if name == "ollama":
            return OllamaProvider(
                model=model, base_url=settings.ollama_base_url, timeout=timeout
            )
    except ImportError as e:
        logger.error(f"Failed to initialize LLM provider {name}: {e}")
        return None

    logger.warning(f"Unknown LLM provider: {name}")
    return None


# Reasoning models (e.g. DeepSeek-R1) prepend their chain of thought.
_THINK_BLOCK = re.compile(r"<think>.*?(?:</think>|$)", re.DOTALL | re.IGNORECASE)


def strip_reasoning(reply: str) -> str:
    return _THINK_BLOCK.sub("", reply or "").strip()
