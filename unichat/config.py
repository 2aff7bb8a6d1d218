from pathlib import Path
from functools import lru_cache

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict

from pydantic import SecretStr


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # API Keys
    openai_api_key: SecretStr = SecretStr("")
    anthropic_api_key: SecretStr = SecretStr("")
    google_api_key: SecretStr = SecretStr("")

    # Database
    database_url: str = "./data/unichat.db"

    # Logging
    log_level: str = "INFO"

    # Deployment
    allowed_origins: str = ""

    # Quota
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 3600

    # Usage report
    history_days: int = 30
    history_limit: int = 100

    # Loaded from YAML
    yaml_config: dict = {}

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        yaml_path = Path(__file__).parent.parent / "config" / "settings.yaml"
        if yaml_path.exists():
            with open(yaml_path, "r", encoding="utf-8") as f:
                self.yaml_config = yaml.safe_load(f) or {}

    @property
    def models_config(self) -> list[dict]:
        return self.yaml_config.get("models", {}).get("available", [])

    @property
    def pricing_config(self) -> list[dict]:
        return self.yaml_config.get("pricing", [])


@lru_cache
def get_settings() -> Settings:
    return Settings()
