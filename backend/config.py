import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parents[1] / ".env"
load_dotenv(env_path)


# =========================================================
# MODEL
# =========================================================
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_API_KEY_ENV = "GEMINI_API_KEY"

# Stage 2 translates both outputs into this language
TARGET_LANGUAGE = os.getenv("TRANSCRIPT_TARGET_LANGUAGE", "Italian")


# =========================================================
# CREDENTIAL STORAGE
# =========================================================
CREDENTIAL_SOURCE = os.getenv("TRANSCRIPT_CREDENTIAL_SOURCE", "file").strip().lower()
CONFIG_DIR = Path(
    os.getenv("TRANSCRIPT_CONFIG_DIR", str(Path.home() / ".transcript_refiner"))
).expanduser()
CREDENTIAL_FILE = CONFIG_DIR / "credential.json"


# =========================================================
# SERVER
# =========================================================
LOG_LEVEL = os.getenv("TRANSCRIPT_LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("TRANSCRIPT_LOG_FILE") or None
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("TRANSCRIPT_CORS_ORIGINS", "*").split(",")
    if origin.strip()
]
HOST = os.getenv("TRANSCRIPT_HOST", "127.0.0.1")
PORT = int(os.getenv("TRANSCRIPT_PORT", "8000"))
