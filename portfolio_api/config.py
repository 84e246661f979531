import os
from dotenv import load_dotenv
from fastapi import Request

# Charger les variables d'environnement
load_dotenv()

DEFAULT_JWT_SECRET = "dev-jwt-secret-change-me"


def _as_bool(value, default=False):
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Settings read from the environment (and .env when present)."""

    def __init__(self, **overrides):
        database_url = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
        if database_url.startswith("postgres://"):
            database_url = database_url.replace("postgres://", "postgresql://", 1)
        self.DATABASE_URL = database_url

        # Auth
        self.JWT_SECRET = os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET)
        self.JWT_ALGORITHM = "HS256"
        self.JWT_EXPIRES_DAYS = int(os.getenv("JWT_EXPIRES_DAYS", "7"))
        self.ALLOW_ADMIN_REGISTRATION = _as_bool(os.getenv("ALLOW_ADMIN_REGISTRATION"), True)

        # Object storage
        self.AWS_REGION = os.getenv("AWS_REGION")
        self.AWS_S3_BUCKET = os.getenv("AWS_S3_BUCKET")
        self.AWS_ACCESS_KEY_ID = os.getenv("AWS_ACCESS_KEY_ID")
        self.AWS_SECRET_ACCESS_KEY = os.getenv("AWS_SECRET_ACCESS_KEY")
        self.AWS_S3_ENDPOINT = os.getenv("AWS_S3_ENDPOINT")
        self.STORAGE_FALLBACK_DIR = os.getenv("STORAGE_FALLBACK_DIR")
        self.PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "").rstrip("/")

        # Uploads
        self.MAX_IMAGE_SIZE = int(os.getenv("MAX_IMAGE_SIZE", str(5 * 1024 * 1024)))

        # HTTP
        origins = os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
        self.CORS_ORIGINS = [o.strip() for o in origins.split(",") if o.strip()]
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise AttributeError(f"Unknown setting: {key}")
            setattr(self, key, value)

    @property
    def s3_configured(self) -> bool:
        return all([
            self.AWS_REGION,
            self.AWS_S3_BUCKET,
            self.AWS_ACCESS_KEY_ID,
            self.AWS_SECRET_ACCESS_KEY,
        ])


def get_config() -> Config:
    return Config()


# Dependency pour FastAPI
def get_app_config(request: Request) -> Config:
    return request.app.state.config
