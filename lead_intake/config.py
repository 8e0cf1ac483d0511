"""Application configuration."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # so DB_HOST works regardless of case
    )

    # Database fields (read from .env)
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "lead_intake"
    db_user: str = "postgres"
    db_password: str = "postgres"

    # Construct database URL dynamically
    @property
    def database_url(self) -> str:
        return f"postgresql+asyncpg://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    # OpenAI (or compatible API)
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str | None = None  # For Gemini/Azure/OpenRouter
    openai_temperature: float = 0.2

    # Microsoft Graph mail delivery (app-only client credentials)
    azure_tenant_id: str = ""
    azure_client_id: str = ""
    azure_client_secret: str = ""
    sender_email_address: str = ""
    login_base_url: str = "https://login.microsoftonline.com"
    graph_base_url: str = "https://graph.microsoft.com/v1.0"

    # Prompt set / branding
    agency_name: str = "Advancify"
    sender_name: str = "Yousef Yasser"
    sender_title: str = "Senior Growth Strategist"
    agency_tagline: str = "Scalable AI Automation for Industry Leaders"
    calendar_link: str = "https://cal.com/advancify"

    # Pipeline policy
    not_a_fit_policy: Literal["soft_touch", "suppress"] = "soft_touch"
    reject_duplicate_leads: bool = False

    # App
    port: int = 3000
    log_level: str = "INFO"


settings = Settings()
