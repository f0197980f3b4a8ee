from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    APP_ENV: str = "production"
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Database
    MONGO_URI: str = "mongodb://localhost:27017/appsync"
    MONGO_DB: Optional[str] = None
    MONGO_TIMEOUT_MS: int = 5000

    # CORS
    CORS_ORIGINS: list[str] = [
        "http://127.0.0.1:5500",
        "http://localhost:5500",
        "http://127.0.0.1:3000",
        "http://localhost:3000",
        "https://applysync.netlify.app",
    ]

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"


settings = Settings()
