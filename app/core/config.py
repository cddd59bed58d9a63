from pydantic_settings import BaseSettings
from typing import List
import os

class Settings(BaseSettings):
    # API Configuration
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Bansuri Flute Finder"
    VERSION: str = "1.0.0"

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False

    # CORS Configuration
    ALLOWED_ORIGINS: List[str] = ["*"]

    # Finder Configuration
    MAX_REVEALED: int = 12
    MAX_MIDI_BYTES: int = 1_000_000

    # Display preference (stored by the CLI, never by the service)
    DEFAULT_THEME: str = "light"
    THEME_KEY: str = "bansuri-theme"
    PREFERENCES_FILE: str = os.path.join(os.path.expanduser("~"), ".bansuri_preferences.json")

    # Rendering
    OUTPUT_DIR: str = "output"

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True

# Create settings instance
settings = Settings()
