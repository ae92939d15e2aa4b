from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, AliasChoices, model_validator


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "Baba Club"
    ENV: str = Field(default="lab", validation_alias=AliasChoices("BABA_ENV", "ENV"))  # lab|prod

    # API remota (toda persistência e regra de negócio mora lá)
    API_URL: str = Field(default="http://localhost:3000", validation_alias=AliasChoices("BABA_API_URL", "API_URL"))
    API_TIMEOUT_S: float = Field(default=15.0, validation_alias=AliasChoices("BABA_API_TIMEOUT_S", "API_TIMEOUT_S"))

    # Storage durável do cliente (equivalente ao localStorage)
    STORAGE_URL: str = Field(default="sqlite:///./babaclub.db", validation_alias=AliasChoices("BABA_STORAGE_URL", "STORAGE_URL"))
    STORAGE_NAMESPACE: str = Field(default="", validation_alias=AliasChoices("BABA_STORAGE_NAMESPACE", "STORAGE_NAMESPACE"))

    LOG_LEVEL: str = Field(default="INFO", validation_alias=AliasChoices("BABA_LOG_LEVEL", "LOG_LEVEL"))

    @model_validator(mode="after")
    def _invariants(self):
        url = (self.API_URL or "").strip().rstrip("/")
        if not url:
            raise ValueError("API_URL vazio")
        if self.ENV == "prod" and not url.startswith("https://"):
            raise ValueError("SECURITY: ENV=prod requer API_URL com https")
        self.API_URL = url

        if self.API_TIMEOUT_S <= 0:
            raise ValueError("API_TIMEOUT_S deve ser maior que 0")

        self.STORAGE_NAMESPACE = (self.STORAGE_NAMESPACE or "").strip()
        self.LOG_LEVEL = (self.LOG_LEVEL or "INFO").strip().upper()
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
