"""Application configuration."""
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_MAPPING_FILE = Path(__file__).resolve().parent.parent / "data" / "user_mapping.yaml"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Microsoft Teams (Graph API, client credentials)
    teams_tenant_id: Optional[str] = None
    teams_client_id: Optional[str] = None
    teams_client_secret: Optional[str] = None

    # OpenPhone
    openphone_api_key: Optional[str] = None
    # Empty disables signature verification (insecure unless configured)
    openphone_webhook_secret: Optional[str] = None
    openphone_api_url: str = "https://api.openphone.com/v1"

    # Graph endpoints
    graph_base_url: str = "https://graph.microsoft.com/v1.0"
    login_base_url: str = "https://login.microsoftonline.com"

    # Provider user id -> Teams user mapping
    user_mapping_file: str = str(DEFAULT_USER_MAPPING_FILE)

    # Outbound HTTP
    http_timeout: float = 10.0
    http_retries: int = 1

    # Server
    base_url: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def teams_configured(self) -> bool:
        """Whether all Teams client credentials are present."""
        return bool(self.teams_tenant_id and self.teams_client_id and self.teams_client_secret)


settings = Settings()
