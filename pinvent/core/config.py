from pydantic_settings import BaseSettings
from pathlib import Path


class Settings(BaseSettings):
    APP_NAME: str = "Pinvent"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = f"sqlite:///{Path(__file__).resolve().parent.parent.parent / 'data' / 'pinvent.db'}"
    DB_TIMEOUT_SECONDS: int = 15

    # Auth
    SECRET_KEY: str = "pinvent-dev-secret-change-in-production"
    ALGORITHM: str = "HS256"
    SESSION_EXPIRE_MINUTES: int = 1440  # 1 day
    SESSION_COOKIE_NAME: str = "token"
    MIN_PASSWORD_LENGTH: int = 4
    RESET_TOKEN_EXPIRE_MINUTES: int = 30

    # Frontend (CORS origin and reset links)
    FRONTEND_URL: str = "http://localhost:3000"

    # Product images
    UPLOAD_DIR: str = str(Path(__file__).resolve().parent.parent.parent / "data" / "uploads")
    MAX_UPLOAD_SIZE_MB: int = 5
    DEFAULT_AVATAR_URL: str = "https://i.ibb.co/4pDNDk1/avatar.png"

    # SMTP (reset links and contact form)
    SMTP_SERVER: str = ""
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_TIMEOUT_SECONDS: int = 20
    EMAIL_FROM: str = ""

    class Config:
        env_file = ".env"


settings = Settings()
