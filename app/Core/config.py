from __future__ import annotations

import os
from functools import lru_cache
from dotenv import load_dotenv, find_dotenv

_env_path = find_dotenv(".env") or ".env"
load_dotenv(_env_path, override=False)


class Settings:
    """Central configuration (env driven)."""

    def __init__(self) -> None:
        # Supabase
        raw_url = os.getenv("SUPABASE_URL", "")
        self.supabase_url: str = raw_url.rstrip("/")
        self.supabase_anon_key: str = os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY", "")
        self.supabase_service_role_key: str = (
            os.getenv("SUPABASE_SERVICE_ROLE_KEY")
            or os.getenv("SUPABASE_SERVICE_KEY")
            or ""
        )
        # Grading and review writes bypass RLS, so prefer the service role key
        self.supabase_key: str = self.supabase_service_role_key or self.supabase_anon_key
        # Database (migrations only)
        self.database_url: str = os.getenv("DATABASE_URL", "")
        # Email
        self.smtp_host: str = os.getenv("SMTP_HOST", "")
        self.smtp_port: int = int(os.getenv("SMTP_PORT", "587"))
        self.smtp_user: str = os.getenv("SMTP_USER", "")
        self.smtp_pass: str = os.getenv("SMTP_PASS", "")
        self.smtp_timeout: float = float(os.getenv("SMTP_TIMEOUT", "10"))
        self.from_email: str = os.getenv("FROM_EMAIL", "CodeCraft Academy <no-reply@codecraft.academy>")
        self.site_url: str = os.getenv("SITE_URL", "").strip().rstrip("/")
        # App meta
        self.app_name: str = "Course Progress Backend"
        self.debug: bool = os.getenv("DEBUG", "False").lower() == "true"
        self.auth_whoami_timeout: float = float(os.getenv("AUTH_WHOAMI_TIMEOUT", "5"))
        self.settings_cache_seconds: int = int(os.getenv("SETTINGS_CACHE_SECONDS", "60"))

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host)

    def get_database_url(self) -> str:
        return self.database_url


@lru_cache()
def get_settings() -> Settings:
    return Settings()
