import os
from typing import Optional

from dotenv import load_dotenv


class Settings:
    """Centralised application configuration sourced from environment variables."""

    def __init__(self) -> None:
        load_dotenv()
        self.jwt_secret = self._get("JWT_SECRET")
        self.jwt_algorithm = os.getenv("JWT_ALGORITHM", "HS256")
        self.access_token_exp_minutes = self._get_int("ACCESS_TOKEN_EXP_MINUTES", default=60)
        self.refresh_token_exp_days = self._get_int("REFRESH_TOKEN_EXP_DAYS", default=30)
        self.activation_token_exp_hours = self._get_int("ACTIVATION_TOKEN_EXP_HOURS", default=72)
        self.recovery_token_exp_minutes = self._get_int("RECOVERY_TOKEN_EXP_MINUTES", default=60)
        self.client_url = os.getenv("CLIENT_URL", "http://localhost:3000")
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = self._get_int("PORT", default=8000)
        self.database_url = os.getenv("DATABASE_URL", "sqlite:///data/app.db")
        self.admin_default_email = os.getenv("ADMIN_EMAIL")
        self.admin_default_password = os.getenv("ADMIN_PASSWORD")
        origins = os.getenv("CORS_ALLOW_ORIGINS")
        if origins:
            self.cors_allow_origins = [item.strip() for item in origins.split(",") if item.strip()]
        else:
            self.cors_allow_origins = ["*"]

    @staticmethod
    def _get(key: str) -> str:
        value = os.getenv(key)
        if not value:
            raise RuntimeError(f"Missing required environment variable: {key}")
        return value

    @staticmethod
    def _get_int(key: str, default: Optional[int] = None) -> int:
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise RuntimeError(f"Missing required environment variable: {key}")
            return default
        try:
            return int(value)
        except ValueError as exc:
            raise RuntimeError(f"Environment variable {key} must be an integer") from exc
