from urllib.parse import urlparse

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql+asyncpg://localhost:5432/nero"
    app_api_key: str | None = None
    log_level: str = "INFO"

    # Hosted identity provider (Supabase project URL + anon key)
    supabase_url: str = ""
    supabase_anon_key: str = ""
    oauth_redirect_url: str = "nero://login"
    http_timeout_s: float = 10.0

    # Local persisted state
    session_file: str = ".nero/session.json"
    launch_flag_file: str = ".nero/has_launched"

    # Wait for the signup trigger to create the profile row before checking it
    signup_profile_delay_s: float = 0.5

    # Max submission failures kept for the UI
    notifications_limit: int = 50

    model_config = {"env_file": ".env", "extra": "ignore"}

    def is_supabase_configured(self) -> bool:
        if not self.supabase_url or not self.supabase_anon_key:
            return False
        parsed = urlparse(self.supabase_url)
        return parsed.scheme.startswith("http") and bool(parsed.netloc)


settings = Settings()
