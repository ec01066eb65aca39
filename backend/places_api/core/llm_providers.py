"""
LLM Provider Implementations
Supports multiple generative-AI providers with a unified interface.
"""
import json
import httpx
import logging
from abc import ABC, abstractmethod
from places_api.core.logger import logs

class BaseLLMProvider(ABC):
    """Base class for all LLM providers"""

    @abstractmethod
    async def generate(self, prompt: str, response_schema: dict | None = None, timeout: float = 30.0) -> str:
        """
        Generate a response from the LLM.
        When `response_schema` is given the provider is asked for JSON matching it.
        """
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the name of the provider"""
        pass


class GeminiProvider(BaseLLMProvider):
    """Google Gemini Provider (REST generateContent with native JSON schema support)"""

    def __init__(self, api_key: str, model: str):
        self.api_key = api_key
        self.model = model
        self.base_url = f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
        self.headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json"
        }

    async def generate(self, prompt: str, response_schema: dict | None = None, timeout: float = 30.0) -> str:
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}]
        }
        if response_schema:
            payload["generationConfig"] = {
                "responseMimeType": "application/json",
                "responseSchema": response_schema
            }

        async with httpx.AsyncClient() as client:
            try:
                response = await client.post(
                    self.base_url,
                    json=payload,
                    headers=self.headers,
                    timeout=timeout
                )
                response.raise_for_status()
                data = response.json()
                parts = data["candidates"][0]["content"]["parts"]
                return "".join(part.get("text", "") for part in parts).strip()
            except Exception as e:
                logs.log(logging.ERROR, f"Gemini API error: {str(e)}")
                raise

    def get_provider_name(self) -> str:
        return "Google Gemini"


class ChatCompletionsProvider(BaseLLMProvider):
    """
    Providers speaking the OpenAI chat-completions dialect.
    They have no array-schema mode, so the schema is spelled out in a system message.
    """

    base_url = ""
    provider_name = ""

    def __init__(self, api_key: str, model: str):
        self.api_key = api_key
        self.model = model
        self.headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

    def _build_messages(self, prompt: str, response_schema: dict | None) -> list:
        messages = []
        if response_schema:
            messages.append({
                "role": "system",
                "content": (
                    "Respond ONLY with valid JSON, no markdown or explanation. "
                    f"The JSON must match this schema: {json.dumps(response_schema)}"
                )
            })
        messages.append({"role": "user", "content": prompt})
        return messages

    async def generate(self, prompt: str, response_schema: dict | None = None, timeout: float = 30.0) -> str:
        payload = {
            "model": self.model,
            "messages": self._build_messages(prompt, response_schema),
            "temperature": 0.3
        }

        async with httpx.AsyncClient() as client:
            try:
                response = await client.post(
                    self.base_url,
                    json=payload,
                    headers=self.headers,
                    timeout=timeout
                )
                response.raise_for_status()
                data = response.json()
                return data["choices"][0]["message"]["content"].strip()
            except Exception as e:
                logs.log(logging.ERROR, f"{self.provider_name} API error: {str(e)}")
                raise

    def get_provider_name(self) -> str:
        return self.provider_name


class OpenAIProvider(ChatCompletionsProvider):
    """OpenAI Provider (GPT-4o, GPT-4o-mini, etc.)"""

    base_url = "https://api.openai.com/v1/chat/completions"
    provider_name = "OpenAI"


class MistralProvider(ChatCompletionsProvider):
    """Mistral AI Provider"""

    base_url = "https://api.mistral.ai/v1/chat/completions"
    provider_name = "Mistral AI"
