# contact_api/core/config.py

import os
from dotenv import load_dotenv

from contact_api.core.exceptions import ConfigurationError

load_dotenv()

REQUIRED_SETTINGS = ("DATABASE_URL", "OWNER_EMAIL", "OWNER_PASS")


class Settings:
    def __init__(self):
        # Storage
        self.DATABASE_URL = os.getenv("DATABASE_URL")

        # Server
        self.HOST = os.getenv("HOST", "0.0.0.0")
        self.PORT = int(os.getenv("PORT", "5000"))
        self.DEBUG = os.getenv("DEBUG", "False").lower() == "true"
        self.ENVIRONMENT = os.getenv("ENVIRONMENT", "production")

        # CORS
        self.FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
        self.ALLOWED_ORIGINS = [origin.strip() for origin in self.FRONTEND_URL.split(",") if origin.strip()]

        # Logging
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.LOG_FILE = os.getenv("LOG_FILE")

        # Mail account (the site owner receives notifications and sends acknowledgments)
        self.OWNER_EMAIL = os.getenv("OWNER_EMAIL")
        self.OWNER_PASS = os.getenv("OWNER_PASS")
        self.OWNER_NAME = os.getenv("OWNER_NAME", "Portfolio Owner")
        self.MAIL_SENDER_LABEL = os.getenv("MAIL_SENDER_LABEL", "Portfolio Contact")
        self.SMTP_SERVER = os.getenv("SMTP_SERVER", "smtp.gmail.com")
        self.SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
        self.SMTP_TIMEOUT = float(os.getenv("SMTP_TIMEOUT", "10"))

        # Optional bearer token for the admin endpoints; unset leaves them open
        self.ADMIN_TOKEN = os.getenv("ADMIN_TOKEN") or None

        # Largest request body accepted, in bytes
        self.MAX_BODY_BYTES = int(os.getenv("MAX_BODY_BYTES", str(10 * 1024 * 1024)))

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    def validate(self):
        """Fail fast when a required setting is missing."""
        missing = [name for name in REQUIRED_SETTINGS if not getattr(self, name)]
        if missing:
            raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")
        return self


settings = Settings()
