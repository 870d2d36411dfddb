import os
from dotenv import load_dotenv

load_dotenv()

# --- Database ---
# Default to local SQLite, but prefer environment variable
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/wellness.db")

# Fix for common SQLAlchemy issues with postgres:// vs postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# --- OpenAI (structured output) ---
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").rstrip("/")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_TIMEOUT_SECONDS = float(os.getenv("OPENAI_TIMEOUT_SECONDS", "30"))

# Reported alongside usage estimates only, never enforced
_max_cents = os.getenv("OPENAI_MAX_DAILY_CENTS", "").strip()
OPENAI_MAX_DAILY_CENTS = float(_max_cents) if _max_cents else None

# --- Demo identity ---
DEMO_EMAIL = os.getenv("DEMO_EMAIL", "demo@neuraladapt.local")

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
