from __future__ import annotations

import os


def _split_csv(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


class Settings:
    PROJECT_NAME: str = "Math Problem Generator"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # GEMINI_API_KEY is accepted as a fallback name
    GOOGLE_API_KEY: str = os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY") or ""
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./math_problems.db")

    CORS_ORIGINS: list[str] = _split_csv(
        os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
    )
    SESSION_COOKIE_NAME: str = os.getenv("SESSION_COOKIE_NAME", "math_session")
    MAX_CONTROLLERS: int = int(os.getenv("MAX_CONTROLLERS", "1000"))


settings = Settings()
