# backend/escola/config.py
"""
Backend configuration loader
"""
from dotenv import load_dotenv
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

# Get directories
BACKEND_DIR = Path(__file__).parent.parent  # backend/
PROJECT_ROOT = BACKEND_DIR.parent           # repo root

# 1. Load SHARED .env from project root - ONLY FOR LOCAL
shared_env = PROJECT_ROOT / '.env'
if shared_env.exists():
    load_dotenv(shared_env)
    logger.info(f"✓ Loaded shared config: {shared_env}")
else:
    # In Cloud Run, .env won't exist - env vars come from deployment
    logger.debug("ℹ️  No shared .env found (expected in Cloud Run)")

# 2. Load BACKEND .env.local (overrides shared) - ONLY FOR LOCAL
local_env = BACKEND_DIR / '.env.local'
if local_env.exists():
    load_dotenv(local_env, override=True)
    logger.info(f"✓ Loaded backend config: {local_env}")

# ==================== FIREBASE CONFIGURATION ====================
FIREBASE_CREDENTIALS_PATH = os.getenv("FIREBASE_CREDENTIALS_PATH")
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")

# "firestore" in deployment, "memory" for local runs without credentials
STORE_BACKEND = os.getenv("STORE_BACKEND", "firestore").lower()

# Seconds between liveness checks of a realtime listener
WATCH_CHECK_INTERVAL = float(os.getenv("WATCH_CHECK_INTERVAL", "5.0"))

# ==================== JWT CONFIGURATION ====================
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")

if not JWT_SECRET_KEY:
    logger.warning("⚠️  WARNING: JWT_SECRET_KEY not set")

# ==================== BOARD CONFIGURATION ====================
# IANA zone used for "today", due dates and stuck counts; empty = host zone
TIMEZONE = os.getenv("TIMEZONE", "")

# A card is flagged as stuck after more than this many business days
STUCK_BUSINESS_DAYS = int(os.getenv("STUCK_BUSINESS_DAYS", "3"))

# ==================== SERVER CONFIGURATION ====================
PORT = int(os.getenv("PORT", 8000))
HOST = os.getenv("HOST", "0.0.0.0")
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
