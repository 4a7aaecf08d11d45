# backend/pixelforge/config.py
from typing import List, Literal
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./pixelforge.db"  # Default if not in .env

    # Storage Paths
    STORAGE_PATH: Path = Path("storage")
    UPLOADS_PATH: Path | None = None  # Will be set based on STORAGE_PATH
    LOGS_PATH: Path | None = None  # Will be set based on STORAGE_PATH

    # Runtime
    ENVIRONMENT: Literal["development", "production", "test"] = "development"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # Authentication
    JWT_SECRET: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60 * 24 * 7
    BCRYPT_ROUNDS: int = 12

    # Uploads
    MAX_UPLOAD_SIZE: int = 5 * 1024 * 1024

    # First admin created by seed_admin.py
    SEED_ADMIN_NAME: str = "Admin"
    SEED_ADMIN_EMAIL: str = "admin@pixelforge.com"
    SEED_ADMIN_PASSWORD: str = "Admin@123"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    def model_post_init(self, __context) -> None:
        """Post initialization hook to set derived paths"""
        if isinstance(self.STORAGE_PATH, str):
            self.STORAGE_PATH = Path(self.STORAGE_PATH)

        self.UPLOADS_PATH = Path(self.UPLOADS_PATH) if self.UPLOADS_PATH else self.STORAGE_PATH / "uploads"
        self.LOGS_PATH = Path(self.LOGS_PATH) if self.LOGS_PATH else self.STORAGE_PATH / "logs"

        self.create_storage_dirs()

    def create_storage_dirs(self) -> None:
        """Create necessary storage directories if they don't exist"""
        for path in [self.STORAGE_PATH, self.UPLOADS_PATH, self.LOGS_PATH]:
            path.mkdir(parents=True, exist_ok=True)

settings = Settings()
