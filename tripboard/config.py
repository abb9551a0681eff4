# tripboard/config.py
import os
from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import List
from dotenv import load_dotenv
load_dotenv()

class Settings(BaseSettings):
    # Remote trip-planning backend
    api_base_url: str = "http://localhost:8080/api"
    api_token: str = ""
    request_timeout_seconds: float = 30

    # Notices
    notice_error_duration_ms: int = 4000
    notice_success_duration_ms: int = 3000
    max_notices: int = 20

    # Application Settings
    allowed_origins: List[str] = ["http://localhost:3000"]
    port: int = 8080

    # Pydantic V2 configuration (Python 3.13 compatible)
    model_config = ConfigDict(
        env_file=".env",
        extra="ignore"  # Allow extra environment variables without validation errors
    )

class CloudRunConfig:
    """Configuration for Cloud Run deployment"""

    # Environment Detection
    IS_CLOUD_RUN: bool = os.getenv("K_SERVICE") is not None
    PORT: int = int(os.getenv("PORT", "8080"))

settings = Settings()
cloud_config = CloudRunConfig()
