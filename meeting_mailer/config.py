# meeting_mailer/config.py
import os
from pathlib import Path

from dotenv import load_dotenv

# .env next to the package first, then whatever is found from the cwd
load_dotenv(Path(__file__).resolve().parents[1] / ".env")
load_dotenv()


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    # ---- LLM ----
    OPENAI_API_KEY: str | None = os.getenv("OPENAI_API_KEY") or None
    MODEL_NAME: str = os.getenv("MODEL_NAME") or "gpt-4-turbo"
    LLM_JSON_MODE: bool = _flag("LLM_JSON_MODE", "1")  # provider supports response_format=json_object
    TEMPERATURE: float | None = float(os.environ["TEMPERATURE"]) if os.getenv("TEMPERATURE") else None
    MAX_TOKENS: int | None = int(os.environ["MAX_TOKENS"]) if os.getenv("MAX_TOKENS") else None
    LLM_TIMEOUT_S: float = float(os.getenv("LLM_TIMEOUT_S", "60"))

    # ---- Email ----
    EMAIL_MODE: str = os.getenv("EMAIL_MODE", "direct").strip().lower()  # direct | redirect
    EMAIL_TRANSPORT: str | None = (os.getenv("EMAIL_TRANSPORT") or "").strip().lower() or None  # api | smtp
    EMAIL_API_KEY: str | None = os.getenv("EMAIL_API_KEY") or None
    EMAIL_API_URL: str = os.getenv("EMAIL_API_URL", "https://api.resend.com/emails")
    EMAIL_HOST: str | None = os.getenv("EMAIL_HOST") or None
    EMAIL_PORT: int = int(os.getenv("EMAIL_PORT", "587"))
    EMAIL_USER: str | None = os.getenv("EMAIL_USER") or None
    EMAIL_PASS: str | None = os.getenv("EMAIL_PASS") or None
    EMAIL_SECURE: bool = _flag("EMAIL_SECURE", "0")  # implicit TLS (port 465)
    EMAIL_FROM: str | None = os.getenv("EMAIL_FROM") or None
    OPERATOR_EMAIL: str | None = os.getenv("OPERATOR_EMAIL") or None
    EMAIL_SUBJECT: str = os.getenv("EMAIL_SUBJECT", "Meeting Summary and Action Items")
    EMAIL_TIMEOUT_S: float = float(os.getenv("EMAIL_TIMEOUT_S", "30"))

    # ---- Uploads ----
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "./uploads")
    MAX_UPLOAD_FILES: int = int(os.getenv("MAX_UPLOAD_FILES", "10"))
    MAX_UPLOAD_BYTES: int = int(os.getenv("MAX_UPLOAD_BYTES", str(50 * 1024 * 1024)))
    KEEP_UPLOADS: bool = _flag("KEEP_UPLOADS", "0")

    # ---- Server ----
    CORS_ORIGINS: list[str] = [
        o.strip()
        for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
        if o.strip()
    ]
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
