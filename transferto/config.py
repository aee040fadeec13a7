from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENDPOINT = "https://fm.transfer-to.com/cgi-bin/shop/topup"


class Settings(BaseSettings):
    login: str = ""
    token: str = Field("", repr=False)
    endpoint: str = DEFAULT_ENDPOINT
    timeout_seconds: float = 30.0
    default_currency: str = "USD"

    log_level: str = "INFO"
    service_name: str = "transferto-client"

    model_config = SettingsConfigDict(
        env_prefix="TRANSFERTO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("timeout_seconds")
    @classmethod
    def check_timeout(cls, v):
        if v <= 0:
            raise ValueError("timeout_seconds must be positive")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        return str(v).upper()


_settings = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
