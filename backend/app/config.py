"""
MindCare Configuration
======================
All environment variables in one place. Pydantic Settings validates
types at startup so a bad value fails at boot, not on the first request.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Loaded from environment variables or a .env file."""

    # --- Supabase ---
    supabase_url: str = "http://localhost:54321"
    supabase_service_key: str = ""  # service_role key for backend operations

    # --- App settings ---
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5000", "http://localhost:3000"]

    # --- Chat ---
    # GET /messages returns at most this many messages, oldest first.
    message_history_limit: int = 100
    # The tracker reads only user messages, further back than the chat view.
    tracker_history_limit: int = 1000
    # The sidebar only ever shows the most recent sessions.
    session_list_limit: int = 10
    # Artificial "typing" pause before a bot reply is stored. 0 disables it.
    reply_delay_seconds: float = 0.0

    # --- Mood tracking ---
    # Default lookback for GET /moods and GET /moods/stats.
    mood_window_days: int = 30

    # --- Crisis resources ---
    default_country: str = "KE"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
