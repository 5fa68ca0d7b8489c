"""
Application settings loaded from environment variables.
"""

from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL
from typing import Optional

DEFAULT_JWT_SECRET = "change-me-jwt-secret-key"


class Settings(BaseSettings):
    # ── Security Secrets ──────────────────────────────────────────────────
    jwt_secret: str = DEFAULT_JWT_SECRET   # HMAC secret for auth tokens
    jwt_algorithm: str = "HS256"
    jwt_expiry_seconds: int = 3600         # 1 hour
    bcrypt_rounds: int = 10

    # ── Database ─────────────────────────────────────────────────────────
    database_url: str = ""                 # takes precedence over the DB_* parts
    db_driver: str = "postgresql+asyncpg"
    db_host: str = "localhost"
    db_port: Optional[int] = None
    db_user: str = "user"
    db_password: str = "password"
    db_database: str = "student_records"
    db_pool_size: int = 10
    db_max_overflow: int = 20

    # ── Export ───────────────────────────────────────────────────────────
    export_tables: list = [
        "classes",
        "emploi_du_temps",
        "enseignants",
        "etudiants",
        "modules",
        "notifications",
        "presences",
        "seances",
        "taux_presence",
        "users_ifran",
        "volume_cours",
    ]

    # ── Server ───────────────────────────────────────────────────────────
    port: int = 3000
    host: str = "0.0.0.0"
    debug: bool = False
    cors_origins: list = ["*"]
    api_prefix: str = "/api"

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }

    @property
    def sqlalchemy_url(self) -> "str | URL":
        """
        Connection URL for the async engine.

        ``DATABASE_URL`` wins when set; otherwise the URL is assembled from
        the individual ``DB_*`` variables.
        """
        if self.database_url:
            return self.database_url
        return URL.create(
            self.db_driver,
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_database,
        )

    @property
    def uses_default_secret(self) -> bool:
        return self.jwt_secret == DEFAULT_JWT_SECRET


config = Settings()
