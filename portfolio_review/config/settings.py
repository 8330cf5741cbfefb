from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8000

    session_store_backend: str = "memory"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "portfolio_review"
    db_username: str = "portfolio_review"
    db_password: str = "secret"

    storage_root: str = "/app/files"
    max_upload_bytes: int = 10 * 1024 * 1024

    pdf_engine: str = "pdfplumber"

    require_phone_verification: bool = False

    interpretation_provider: str = "openai"
    interpretation_api_key: str = ""
    interpretation_model_name: str = "gpt-4o-mini"
    interpretation_base_url: str = ""
    interpretation_timeout_seconds: int = 30
    interpretation_temperature: float = 0.2
    interpretation_max_input_chars: int = 20000

    azure_openai_endpoint: str = ""
    azure_openai_api_key: str = ""
    azure_openai_api_version: str = "2024-10-21"
    azure_openai_deployment: str = "gpt-35-turbo"
