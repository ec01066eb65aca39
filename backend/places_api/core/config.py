from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Secret key for the default provider; checked on every gateway request
    API_KEY: str = ""

    LOGGER: int = 20
    LOG_DIR: str = "logs"

    # LLM Provider Selection
    LLM_PROVIDER: str = "gemini"  # Options: gemini, openai, mistral
    LLM_TIMEOUT: float = 30.0

    # Gemini Configuration (uses API_KEY)
    GEMINI_MODEL: str = "gemini-2.5-flash"

    # OpenAI Configuration
    OPENAI_API_KEY: str = "your-key-here"
    OPENAI_MODEL: str = "gpt-4o-mini"

    # Mistral Configuration
    MISTRAL_API_KEY: str = "your-key-here"
    MISTRAL_MODEL: str = "mistral-small-latest"

    # How many places the model is asked for per category
    PLACES_PER_CATEGORY: int = 5

    model_config = SettingsConfigDict(
        # Look for .env in the current folder OR the parent folder
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore"
    )

    def missing_api_key(self) -> str | None:
        """Name of the env variable the selected provider needs but lacks, if any."""
        provider = self.LLM_PROVIDER.lower()
        if provider == "openai":
            name, value = "OPENAI_API_KEY", self.OPENAI_API_KEY
        elif provider == "mistral":
            name, value = "MISTRAL_API_KEY", self.MISTRAL_API_KEY
        else:
            name, value = "API_KEY", self.API_KEY

        if not value or value == "your-key-here":
            return name
        return None

settings = Settings()
