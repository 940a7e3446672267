"""Settings read from the environment (and a local .env, if present)."""

from __future__ import annotations

import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"


class Settings(BaseModel):
    google_api_key: Optional[str] = None
    advisor_model: str = "gemini-1.5-flash"
    advisor_timeout: float = Field(30.0, gt=0)
    cors_origins: List[str] = Field(default_factory=lambda: DEFAULT_CORS_ORIGINS.split(","))
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        origins = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
        return cls(
            google_api_key=os.getenv("GOOGLE_API_KEY") or None,
            advisor_model=os.getenv("ADVISOR_MODEL", "gemini-1.5-flash"),
            advisor_timeout=float(os.getenv("ADVISOR_TIMEOUT", "30")),
            cors_origins=[origin.strip() for origin in origins.split(",") if origin.strip()],
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
