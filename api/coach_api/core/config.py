from pydantic_settings import BaseSettings
from dotenv import load_dotenv
from pathlib import Path
import logging
import os

_logger = logging.getLogger(__name__)

# Look for .env in api directory (parent of coach_api directory)
api_dir = Path(__file__).parent.parent.parent
env_path = api_dir / ".env"

if env_path.exists():
    load_dotenv(env_path, override=False)
    _logger.info(f"Loaded .env file from: {env_path}")
elif Path(".env").exists():
    load_dotenv(Path(".env"), override=False)
    _logger.info(f"Loaded .env file from: {Path('.env').absolute()}")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database - hosting providers expose DATABASE_URL (uppercase)
    database_url: str = ""

    # API
    api_prefix: str = "/api"
    environment: str = "production"
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = ["*"]

    # Auth provider (Supabase) token verification
    supabase_jwt_secret: str = ""
    supabase_jwt_audience: str = "authenticated"
    supabase_jwt_algorithm: str = "HS256"
    auth_cookie_name: str = "sb-access-token"

    # Hosted LLM (OpenAI-compatible chat completions)
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_chat_model: str = "gpt-4o-mini"
    openai_realtime_model: str = "gpt-realtime-mini-2025-10-06"
    openai_realtime_voice: str = "alloy"
    openai_timeout_seconds: float = 60.0

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    def __init__(self, **kwargs):
        # Hosting providers set DATABASE_URL uppercase; read it explicitly
        if not kwargs.get("database_url"):
            kwargs["database_url"] = os.getenv("DATABASE_URL", "")
        super().__init__(**kwargs)

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev", "local")


# Create settings instance
settings = Settings()

# Validate required DATABASE_URL
if not settings.database_url:
    raise ValueError("DATABASE_URL environment variable is required")
