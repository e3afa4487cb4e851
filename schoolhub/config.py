"""Application configuration using Pydantic Settings."""
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    app_name: str = "SchoolHub"
    debug: bool = False

    # MongoDB
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_db_name: str = "schoolhub"

    # JWT
    jwt_secret_key: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60 * 24 * 7
    jwt_refresh_token_expire_days: int = 30

    # Grading / reports
    pass_mark: float = 50.0
    dashboard_trend_days: int = 7
    dashboard_top_limit: int = 5
    report_recent_attendance_limit: int = 30

    # Staff accounts provisioned at startup
    seed_admin_username: str = "admin"
    seed_admin_password: str = "admin123"
    seed_teacher_username: str = "teacher"
    seed_teacher_password: str = "teacher123"

    # CORS (comma-separated origins, e.g. "https://admin.school.example,http://localhost:3000")
    cors_origins: str = "http://localhost:3000"

    @model_validator(mode="after")
    def _validate_production_secrets(self):
        if not self.debug:
            if self.jwt_secret_key in ("change-me-in-production", ""):
                raise ValueError(
                    "JWT_SECRET_KEY must be set to a strong secret when DEBUG is not enabled. "
                    "Generate one with: python -c \"import secrets; print(secrets.token_hex(32))\""
                )
            for name, default in (
                ("seed_admin_password", "admin123"),
                ("seed_teacher_password", "teacher123"),
            ):
                if getattr(self, name) in (default, ""):
                    raise ValueError(
                        f"{name.upper()} must be changed from its default when DEBUG is not enabled."
                    )
        return self


settings = Settings()
