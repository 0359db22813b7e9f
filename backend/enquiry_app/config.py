"""Service configuration: database, mail webhook, CORS and logging."""

import os

from dotenv import load_dotenv

load_dotenv()

# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./enquiries.db")
DB_ECHO = os.getenv("DB_ECHO", "false").lower() in ("1", "true", "yes")

# ---------------------------------------------------------------------------
# Mail collaborator (webhook that actually sends the emails)
# Leave NOTIFICATION_WEBHOOK_URL empty to disable outbound notifications.
# ---------------------------------------------------------------------------
NOTIFICATION_WEBHOOK_URL = os.getenv("NOTIFICATION_WEBHOOK_URL", "")
NOTIFICATION_MAX_RETRIES = int(os.getenv("NOTIFICATION_MAX_RETRIES", "3"))
NOTIFICATION_TIMEOUT = float(os.getenv("NOTIFICATION_TIMEOUT", "5"))
SENDER_EMAIL = os.getenv("SENDER_EMAIL", "hello@example.com")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")

# ---------------------------------------------------------------------------
# HTTP / logging
# ---------------------------------------------------------------------------
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if o.strip()
]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
