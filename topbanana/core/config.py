from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    ENVIRONMENT: str = "development"
    PROJECT_NAME: str = "topbanana"

    # HTTP server
    HOST: str = "localhost"
    PORT: int = 8080

    # Database
    DATABASE_URL: str = "sqlite:///./topbanana.sqlite"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 0
    DB_POOL_RECYCLE: int = 300  # seconds
    DB_ECHO: bool = False

    # Migrations
    MIGRATIONS_PATH: str = "alembic"

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @model_validator(mode="after")
    def require_database_url_in_production(self):
        # Production must name its database explicitly
        if self.ENVIRONMENT == "production" and "DATABASE_URL" not in self.model_fields_set:
            raise ValueError("DATABASE_URL must be set in production")
        return self


settings = Settings()
