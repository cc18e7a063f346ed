"""Configuration management using Pydantic Settings."""

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # PagerDuty REST API v2
    pagerduty_api_key: SecretStr | None = None
    pagerduty_base_url: str = "https://api.pagerduty.com"
    pagerduty_page_size: int = 25
    pagerduty_timeout_seconds: float = 30.0

    # Logstash UDP input
    logstash_host: str = "127.0.0.1"
    logstash_port: int = 5000

    # Pacing between datagrams
    send_delay_seconds: float = 0.5

    # Default window when --from is not given
    default_lookback_hours: float = 1.0


settings = Settings()
