import json
import logging
from places_api.core.config import settings
from places_api.core.logger import logs
from places_api.core.exceptions import LLMResponseError
from places_api.core.llm_providers import (
    BaseLLMProvider,
    GeminiProvider,
    OpenAIProvider,
    MistralProvider
)

PLACE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "name": {"type": "STRING", "description": "The name of the place."},
        "rating": {"type": "NUMBER", "description": "A numerical rating out of 5, e.g., 4.5."},
        "description": {"type": "STRING", "description": "A brief, one-sentence description of the place."},
        "address": {"type": "STRING", "description": "Approximate address or distance, e.g., '123 Main St, 1.2 mi'."},
        "categoryTag": {"type": "STRING", "description": "A single, relevant category tag, e.g., 'Café', 'Italian', 'Park'."},
    },
    "required": ["name", "rating", "description", "address", "categoryTag"],
}

PLACES_SCHEMA = {"type": "ARRAY", "items": PLACE_SCHEMA}


def strip_code_fences(content: str) -> str:
    """Remove a surrounding ```json ... ``` block if the model added one."""
    content = content.strip()
    if content.startswith("```"):
        lines = content.split("\n")
        # Drop the opening fence line and the closing fence
        content = "\n".join(lines[1:-1]) if lines[-1].strip() == "```" else "\n".join(lines[1:])
    return content.strip()


class LLMService:
    def __init__(self, provider: BaseLLMProvider | None = None):
        self.provider = provider or self._initialize_provider()
        logs.log(logging.INFO, f"🤖 LLM Provider initialized: {self.provider.get_provider_name()}")

    def _initialize_provider(self) -> BaseLLMProvider:
        """Initialize the selected LLM provider based on settings"""
        provider = settings.LLM_PROVIDER.lower()

        if provider == "gemini":
            return GeminiProvider(
                api_key=settings.API_KEY,
                model=settings.GEMINI_MODEL
            )
        elif provider == "openai":
            return OpenAIProvider(
                api_key=settings.OPENAI_API_KEY,
                model=settings.OPENAI_MODEL
            )
        elif provider == "mistral":
            return MistralProvider(
                api_key=settings.MISTRAL_API_KEY,
                model=settings.MISTRAL_MODEL
            )
        else:
            logs.log(logging.WARNING, f"Unknown provider '{provider}', defaulting to Gemini")
            return GeminiProvider(
                api_key=settings.API_KEY,
                model=settings.GEMINI_MODEL
            )

    async def find_nearby_places(self, location: str, category: str) -> list:
        """
        Ask the model for popular places of one category around a location.
        Returns the decoded JSON array; items follow PLACE_SCHEMA.
        """
        prompt = f"Find {settings.PLACES_PER_CATEGORY} popular {category} near {location}."

        content = await self.provider.generate(
            prompt, response_schema=PLACES_SCHEMA, timeout=settings.LLM_TIMEOUT
        )

        try:
            places = json.loads(strip_code_fences(content))
        except json.JSONDecodeError as e:
            raise LLMResponseError(f"Model returned invalid JSON for {category} near {location}") from e

        if not isinstance(places, list):
            raise LLMResponseError(f"Model returned {type(places).__name__} instead of a list")

        logs.log(logging.INFO, f"LLM suggested {len(places)} {category} near {location}")
        return places

    async def get_place_details(self, place_name: str, location: str) -> str:
        """Short free-text description of one place, used for the expanded card."""
        prompt = (
            f'Provide a more detailed, 2-3 sentence description for a place called "{place_name}", '
            f'which is located around "{location}". Focus on its ambiance, popular items, or what '
            "makes it unique. Do not repeat the name of the place in the response."
        )

        content = await self.provider.generate(prompt, timeout=settings.LLM_TIMEOUT)
        return content.strip()

# Singleton instance
llm_client = LLMService()
