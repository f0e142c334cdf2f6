from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # API Settings
    PROJECT_NAME: str = "Snap Banana Lens"
    VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Image generation - Gemini
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MODEL: str = "gemini-2.0-flash-preview-image-generation"

    # Image editing - fal.ai Nano Banana
    FAL_API_KEY: Optional[str] = None
    FAL_EDIT_URL: str = "https://fal.run/fal-ai/nano-banana/edit"

    # Database / Storage - Supabase (optional, disables persistence when unset)
    SUPABASE_URL: Optional[str] = None
    SUPABASE_KEY: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None

    # Storage Configuration
    STORAGE_BUCKET: str = "snap-banana-images"
    DEVICE_INFO: str = "Spectacles"

    # Remote call timeout
    HTTP_TIMEOUT_SECONDS: float = 60.0

    @property
    def edit_enabled(self) -> bool:
        return bool(self.FAL_API_KEY)

    @property
    def storage_enabled(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_KEY)


# Global settings instance
settings = Settings()
