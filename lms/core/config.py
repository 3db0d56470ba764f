# lms/core/config.py
from pydantic_settings import BaseSettings

from lms.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    PROJECT_NAME: str = "Learning Management Backend"

    # Database
    # Either a full DSN or the individual components must be provided.
    DATABASE_URL: str | None = None
    DB_DRIVER: str = "postgresql+psycopg2"
    DB_USER: str | None = None
    DB_PASS: str | None = None
    DB_HOST: str | None = None
    DB_PORT: str | None = None
    DB_NAME: str | None = None

    # JWT Authentication
    JWT_SECRET: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 24 hours

    # Outbound email
    EMAIL_FROM: str
    EMAIL_PASSWORD: str
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587

    # One-time codes (registration + password reset)
    OTP_EXPIRE_MINUTES: int = 5

    # Pending registrations: "memory" or "redis"
    PENDING_STORE_BACKEND: str = "memory"
    PENDING_REGISTRATION_RETENTION_SECONDS: int = 60 * 60
    ADMIN_REGISTRATION_TOKEN: str | None = None

    # Redis (pending store + rq queue)
    REDIS_URL: str = "redis://localhost:6379/0"

    # Behaviour flags
    STRICT_SCORING: bool = False
    AUTO_RECOMPUTE_PROGRESS: bool = False
    CERTIFICATE_REISSUE_RETURNS_EXISTING: bool = False

    # Certificates / payments
    CERTIFICATE_VERIFY_BASE_URL: str = "https://yourdomain.com/verify"
    CERTIFICATE_CODE_ATTEMPTS: int = 5
    STUDENT_DISCOUNT_RATE: float = 0.20

    # HTTP / logging
    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"
    LOG_LEVEL: str = "INFO"
    EXPOSE_ERROR_DETAILS: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL

        parts = {
            "DB_USER": self.DB_USER,
            "DB_PASS": self.DB_PASS,
            "DB_HOST": self.DB_HOST,
            "DB_PORT": self.DB_PORT,
            "DB_NAME": self.DB_NAME,
        }
        missing = [name for name, value in parts.items() if not value]
        if missing:
            raise ConfigurationError(
                "Missing required database environment variables: "
                + ", ".join(missing)
            )
        return (
            f"{self.DB_DRIVER}://{self.DB_USER}:{self.DB_PASS}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
