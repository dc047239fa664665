"""Application configuration loaded from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration — reads from environment / .env file."""

    # Mode selection
    resolution_mode: str = "auto"
    search_provider: str = "auto"
    generation_provider: str = "auto"

    # Search providers
    serper_api_key: str = ""
    serpapi_api_key: str = ""
    max_search_results: int = 5

    # Generation providers
    gemini_api_key: str = ""
    gemini_model: str = "gemini-1.5-flash"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    cohere_api_key: str = ""
    cohere_model: str = "command"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-6"

    # Retrieval endpoint (Flowise prediction URL)
    flowise_url: str = ""
    flowise_api_key: str = ""

    # Sampling defaults
    llm_temperature: float = 0.7
    llm_top_k: int = 40
    llm_top_p: float = 0.95
    llm_max_output_tokens: int = 1024

    # Database (empty disables history persistence)
    database_url: str = ""

    # Identity provider
    supabase_url: str = ""
    supabase_anon_key: str = ""

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    http_timeout_seconds: float = 30.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def has_database(self) -> bool:
        return bool(self.database_url)

    @property
    def has_identity_provider(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    @property
    def search_result_limit(self) -> int:
        return max(1, min(self.max_search_results, 10))


settings = Settings()
