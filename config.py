import os
from dotenv import load_dotenv
load_dotenv()


def _csv_env(name, default):
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [s.strip() for s in raw.split(",") if s.strip()]


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JWT_SECRET = os.getenv("JWT_SECRET", SECRET_KEY)
    SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", 60 * 60 * 24))
    AUTH_COOKIE_NAME = os.getenv("AUTH_COOKIE_NAME", "auth_token")
    AUTH_COOKIE_SECURE = os.getenv("FLASK_ENV") == "production"
    ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///hiring.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    SENDGRID_API_KEY = os.getenv("SENDGRID_API_KEY")
    MAIL_FROM = os.getenv("MAIL_FROM", "noreply@example.com")
    MAIL_FROM_NAME = os.getenv("MAIL_FROM_NAME", "MLSC Hiring")
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "local")
    LOCAL_STORAGE_DIR = os.getenv("LOCAL_STORAGE_DIR", "./storage")
    S3_ENDPOINT = os.getenv("S3_ENDPOINT")
    S3_REGION = os.getenv("S3_REGION")
    S3_BUCKET = os.getenv("S3_BUCKET")
    S3_ACCESS_KEY = os.getenv("S3_ACCESS_KEY")
    S3_SECRET_KEY = os.getenv("S3_SECRET_KEY")
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
    OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    REFERENCE_PREFIX = os.getenv("REFERENCE_PREFIX", "MLSC")
    CLUB_NAME = os.getenv("CLUB_NAME", "MLSC")
    # statuses whose change sends the applicant an email
    NOTIFY_STATUSES = _csv_env(
        "NOTIFY_STATUSES",
        ["Under Processing", "Interviewing", "Recommended", "Hired", "Rejected"],
    )
    PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:5000")
    ONBOARDING_TOKEN_TTL_DAYS = int(os.getenv("ONBOARDING_TOKEN_TTL_DAYS", 7))
    PER_PAGE = int(os.getenv("PER_PAGE", 20))
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    JWT_SECRET = "test-jwt-secret"
    ADMIN_USERNAME = "admin"
    ADMIN_PASSWORD = "admin-pass"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    WTF_CSRF_ENABLED = False
    # no redis in tests: RQWrapper runs jobs inline
    REDIS_URL = None
    SENDGRID_API_KEY = None
    OPENAI_API_KEY = None
    STORAGE_BACKEND = "local"
