import os
from typing import List
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseModel):
    app_env: str = os.getenv("APP_ENV", "dev")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # LLM (any OpenAI-compatible endpoint)
    llm_api_key: str = os.getenv("LLM_API_KEY", "")
    llm_api_base: str | None = os.getenv("LLM_API_BASE") or None
    llm_model: str = os.getenv("LLM_MODEL", "gpt-4o-mini")
    llm_temperature: float = float(os.getenv("LLM_TEMPERATURE", "0.2"))
    llm_max_tokens: int = int(os.getenv("LLM_MAX_TOKENS", "700"))

    # Planner
    default_strategy: str = os.getenv("DEFAULT_STRATEGY", "rules")  # "rules" | "scored"
    max_question_chars: int = int(os.getenv("MAX_QUESTION_CHARS", "1000"))
    max_csv_bytes: int = int(os.getenv("MAX_CSV_BYTES", str(2 * 1024 * 1024)))

    # CORS (comma-separated)
    cors_origins: List[str] = [
        o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()
    ] or ["http://localhost:3000"]

settings = Settings()
