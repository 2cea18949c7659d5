# ABOUTME: Shared app configuration and constants used across API, pipeline and UI (core package).
# ABOUTME: Values come from the environment (.env via python-dotenv) with defaults kept in one place.

import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Auth: SECRET_KEY must be set (e.g. in .env); no default to avoid JWT forgery in production.
_SECRET_KEY = os.environ.get("SECRET_KEY")
if not _SECRET_KEY:
    raise ValueError(
        "SECRET_KEY environment variable must be set. For local dev, add SECRET_KEY=your-secret to .env."
    )
SECRET_KEY = _SECRET_KEY
ALGORITHM = "HS256"


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, str(default))
    try:
        return int(raw)
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


ACCESS_TOKEN_EXPIRE_MINUTES = _int_env("ACCESS_TOKEN_EXPIRE_MINUTES", 60)
MIN_PASSWORD_LENGTH = 8
MIN_USERNAME_LENGTH = 1
MAX_USERNAME_LENGTH = 128
MAX_EMAIL_LENGTH = 254

# CORS: comma-separated origins; default allows local Streamlit UI. Set in production.
_raw_cors = os.environ.get("CORS_ORIGINS", "http://localhost:8501")
CORS_ORIGINS = [o.strip() for o in _raw_cors.split(",") if o.strip()] or [
    "http://localhost:8501"
]

DB_PATH = os.environ.get("DRIFT_DB_PATH", "drift.db")

# Schedule generation
DEDICATION_LEVELS = ("casual", "moderate", "intense")
# Inclusive (min, max) tasks per day for each dedication level.
TASKS_PER_DAY = {
    "casual": (1, 2),
    "moderate": (2, 3),
    "intense": (3, 4),
}
MAX_SCHEDULE_DAYS = _int_env("MAX_SCHEDULE_DAYS", 90)
MAX_USER_INPUT_LENGTH = 2000

# Model backends: gemini (Google ADK), huggingface, ollama, mock.
LLM_BACKEND = os.environ.get("LLM_BACKEND", "gemini").strip().lower()
GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")
HF_API_TOKEN = os.environ.get("HF_API_TOKEN")
HF_BASE_URL = os.environ.get("HF_BASE_URL", "https://router.huggingface.co/v1").rstrip("/")
HF_MODEL = os.environ.get("HF_MODEL", "deepseek-ai/DeepSeek-R1:fireworks-ai")
OLLAMA_BASE_URL = os.environ.get("OLLAMA_BASE_URL", "http://127.0.0.1:11434").rstrip("/")
OLLAMA_MODEL = os.environ.get("OLLAMA_MODEL", "llama3.1")
LLM_TIMEOUT = _int_env("LLM_TIMEOUT", 120)

# Retrieval-augmented generation
KEYWORD_EXTRACTION = _bool_env("KEYWORD_EXTRACTION", True)
MAX_KEYWORDS = 8
RAG_ENABLED = _bool_env("RAG_ENABLED", True)
RAG_TOP_K = _int_env("RAG_TOP_K", 3)

# Achievement photo uploads (S3)
S3_BUCKET_NAME = os.environ.get("S3_BUCKET_NAME")
AWS_REGION = os.environ.get("AWS_REGION", "us-east-1")
MAX_UPLOAD_BYTES = _int_env("MAX_UPLOAD_BYTES", 5 * 1024 * 1024)
MAX_UPLOAD_FILES = _int_env("MAX_UPLOAD_FILES", 10)
PRESIGNED_URL_TTL = _int_env("PRESIGNED_URL_TTL", 3600)
