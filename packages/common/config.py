from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Strongly-typed settings model loaded from env / .env.

    Notes:
        - The database DSN and the JWT signing secret must be provided via
          environment variables; the application fails fast if missing.
        - Everything else has a development-friendly default.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        protected_namespaces=()
    )

    ENV: str = Field(default="dev", description="Deployment environment, e.g. dev/staging/prod")
    SERVICE_NAME: str = Field(default="blog", description="Service name")
    LOG_LEVEL: str = Field(default="INFO", description="Root log level")

    DATABASE_URL: str = Field(..., description="SQLAlchemy async DSN, e.g. postgresql+asyncpg://...")

    JWT_SECRET: str = Field(..., description="HMAC secret used to sign bearer tokens (must be provided)")
    JWT_ALGORITHM: str = Field(default="HS256", description="JWT signing algorithm")
    JWT_EXPIRE_MINUTES: int = Field(default=60 * 24 * 30, description="Token lifetime in minutes")
    BCRYPT_ROUNDS: int = Field(default=12, description="bcrypt work factor for password hashes")

    UPLOAD_DIR: str = Field(default="uploads", description="Directory where featured images are written")
    DEFAULT_FEATURED_IMAGE: str = Field(default="default-blog.jpg", description="Image used when none is uploaded")
    DEFAULT_AVATAR: str = Field(default="default-avatar.png", description="Avatar assigned at registration")

    FRONTEND_ORIGINS: str = Field(default="*", description="Comma-separated CORS origins")

    @property
    def allow_origins(self) -> list[str]:
        """Parsed `FRONTEND_ORIGINS` as a list."""
        return [o.strip() for o in self.FRONTEND_ORIGINS.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Return a cached singleton `Settings` instance."""
    return Settings()
