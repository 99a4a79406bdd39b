"""Application settings read from the environment.

Protean's own configuration (databases, brokers, processing mode) lives in
``domain.toml``. Everything the HTTP surface and the adapters need is gathered
here so it can be overridden per deployment without touching code.
"""

import os


def _int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = _int("JWT_EXPIRES_MINUTES", 60)

RATE_LIMIT_PER_MINUTE = _int("RATE_LIMIT_PER_MINUTE", 100)
AUTH_RATE_LIMIT_PER_MINUTE = _int("AUTH_RATE_LIMIT_PER_MINUTE", 10)
# Peers whose X-Forwarded-For header is believed; empty means the header is ignored
TRUSTED_PROXIES = {proxy.strip() for proxy in os.getenv("TRUSTED_PROXIES", "").split(",") if proxy.strip()}

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
MAX_UPLOAD_BYTES = _int("MAX_UPLOAD_BYTES", 5 * 1024 * 1024)

PASSWORD_RESET_TTL_MINUTES = _int("PASSWORD_RESET_TTL_MINUTES", 60)

EMAIL_BACKEND = os.getenv("EMAIL_BACKEND", "console").lower()
SMTP_HOST = os.getenv("SMTP_HOST", "localhost")
SMTP_PORT = _int("SMTP_PORT", 587)
SMTP_USER = os.getenv("SMTP_USER", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
SMTP_FROM = os.getenv("SMTP_FROM", "no-reply@mycommerce.com")

CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

SEED_ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@mycommerce.com")
SEED_ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "Admin123!")
