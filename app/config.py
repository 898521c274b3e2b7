from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Mantle Copilot"
    log_level: str = "INFO"
    log_json: bool = False

    # completion collaborator (any OpenAI-compatible endpoint, e.g. Groq)
    llm_enabled: bool = True
    llm_provider: str = "openai"
    llm_model: str = "llama-3.1-8b-instant"
    llm_api_key: str | None = None
    llm_base_url: str | None = None
    llm_temperature: float = 0.7
    llm_max_tokens: int = 400
    llm_timeout_s: int = 30

    default_chain_id: int = 5000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def LLM_ENABLED(self) -> bool:
        return self.llm_enabled and bool(self.llm_api_key)

    @property
    def LLM_MODEL(self) -> str:
        return self.llm_model


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader (process-level).
    """
    return Settings()
