from __future__ import annotations

import logging
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

# mail.tm 临时邮箱
MAILTM_API_BASE = os.getenv("MAILTM_API_BASE", "https://api.mail.tm").rstrip("/")
MAILTM_EMAIL = os.getenv("MAILTM_EMAIL", "")
MAILTM_PASSWORD = os.getenv("MAILTM_PASSWORD", "")

# GameHub 平台
GAMEHUB_API_BASE = os.getenv("GAMEHUB_API_BASE", "").rstrip("/")
GAMEHUB_EMAIL = os.getenv("GAMEHUB_EMAIL", "")
GAMEHUB_CLIENTPARAMS = os.getenv("GAMEHUB_CLIENTPARAMS", "")
GAMEHUB_SECRET_KEY = os.getenv("GAMEHUB_SECRET_KEY", "")

TOKEN_STORE_FILE = os.getenv("TOKEN_STORE_FILE", "token_store.json")
TOKEN_STORE_KEY = os.getenv("TOKEN_STORE_KEY", "gamehub_token")

SETTLE_DELAY_SECONDS = float(os.getenv("SETTLE_DELAY_SECONDS", "5"))
TOKEN_LIFETIME_HOURS = int(os.getenv("TOKEN_LIFETIME_HOURS", "24"))
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "30"))

REFRESH_INTERVAL_MINUTES = int(os.getenv("REFRESH_INTERVAL_MINUTES", "240"))
REFRESH_SCHEDULER_ENABLED = os.getenv("REFRESH_SCHEDULER_ENABLED", "true").lower() == "true"
REFRESH_SERIALIZE_RUNS = os.getenv("REFRESH_SERIALIZE_RUNS", "false").lower() == "true"

WORKER_AUTH_HEADER = "X-Worker-Auth"
WORKER_AUTH_SECRET = os.getenv("WORKER_AUTH_SECRET", "")
LOCK_THRESHOLD = int(os.getenv("LOCK_THRESHOLD", "5"))
LOCK_DURATION_SECONDS = int(os.getenv("LOCK_DURATION_SECONDS", "3600"))

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger("token_refresher")
