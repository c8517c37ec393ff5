from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Database Connection
    DATABASE_URL: str = "postgresql://localhost/lunchly"
    SQL_ECHO: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    # Site
    APP_TITLE: str = "Lunchly"

    class Config:
        env_file = ".env"

settings = Settings()
