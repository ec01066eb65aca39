from pydantic_settings import BaseSettings, SettingsConfigDict

class ClientSettings(BaseSettings):
    # Backend gateway
    BACKEND_URL: str = "http://localhost:8000"
    GATEWAY_PATH: str = "/api/gemini"

    # Transition pacing (seconds). The reveal delay must outlast the 1.5s map zoom.
    MAP_SWAP_DELAY: float = 0.1
    RESULTS_REVEAL_DELAY: float = 1.6

    LOGGER: int = 20

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = ClientSettings()
