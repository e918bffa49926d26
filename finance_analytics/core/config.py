from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App settings
    PROJECT_NAME: str = "FinanceAnalytics"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")

    # Analytics defaults
    DEFAULT_CURRENCY: str = Field(default="USD")
    REPORT_TITLE: str = Field(default="Financial Report")

    # CORS
    CORS_ORIGINS: List[str] = Field(default=["http://localhost:3000", "http://localhost:8000"])

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()
