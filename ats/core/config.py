"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

import os
from functools import lru_cache
from typing import List, Optional
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
TEMPLATES_DIR = os.path.join(PACKAGE_DIR, "templates")


class Settings(BaseSettings):
    # MongoDB (applicants)
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "ongc-internship"

    # SQL (users / authentication)
    use_sqlite: bool = True
    sqlite_path: str = "ats_auth.sqlite"
    sql_host: str = "localhost"
    sql_port: int = 5432
    sql_user: str = "ats_user"
    sql_password: str = ""
    sql_database: str = "ongc_auth_db"

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Seeded accounts (only created when the users table is empty)
    seed_default_users: bool = True
    default_hr_password: str = "password123"
    default_admin_password: str = "admin123"

    # SMTP
    email_host: str = "smtp.gmail.com"
    email_port: int = 587
    email_user: str = ""
    email_pass: str = ""
    email_from_name: str = "ONGC Dehradun - SAIL"
    email_start_tls: bool = True
    email_validate_certs: bool = False
    email_timeout_seconds: float = 30.0
    email_batch_size: int = 5
    email_batch_delay_seconds: float = 1.0

    # Application form assets
    form_font_path: str = os.path.join(TEMPLATES_DIR, "NotoSansDevanagari-Regular.ttf")
    form_template_path: str = os.path.join(TEMPLATES_DIR, "template.pdf")

    # HTTP
    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:3000"]
    max_upload_size_mb: int = 10

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = "logs/app.log"

    # App
    environment: str = "production"
    debug: bool = False

    @property
    def sql_url(self) -> str:
        """Construct the SQLAlchemy URL (SQLite unless use_sqlite is off)."""
        if self.use_sqlite:
            return f"sqlite:///{self.sqlite_path}"
        return (
            f"postgresql://{self.sql_user}:{quote_plus(self.sql_password)}"
            f"@{self.sql_host}:{self.sql_port}/{self.sql_database}"
        )

    @property
    def email_configured(self) -> bool:
        return bool(self.email_user and self.email_pass)

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
