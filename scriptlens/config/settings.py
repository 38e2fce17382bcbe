from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    pdf_engine: str = "pdfplumber"

    llm_provider: str = "ollama"
    llm_base_url: str = ""
    llm_api_key: str = "ollama"
    llm_model_name: str = ""
    llm_timeout_seconds: int = 300
    llm_max_retries: int = 3
    llm_retry_base_delay_seconds: float = 1.0
    llm_default_temperature: float = 0.7
    llm_default_max_tokens: int = 2000
