"""
Runtime configuration for NutriScan AI.
Values come from the environment (and a local .env file, if present).
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_GROQ_MODEL = "llama-3.3-70b-versatile"
DEFAULT_OFF_BASE_URL = "https://world.openfoodfacts.org"
DEFAULT_USER_AGENT = "NutriScan-AI/1.0"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class Config:
    groq_api_key: Optional[str] = None
    groq_model: str = DEFAULT_GROQ_MODEL
    ai_timeout: float = 30.0
    off_base_url: str = DEFAULT_OFF_BASE_URL
    off_timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    port: int = 5000
    log_level: str = "INFO"


def load_config():
    """Build a Config from the process environment"""
    load_dotenv()

    return Config(
        groq_api_key=os.getenv("GROQ_API_KEY") or None,
        groq_model=os.getenv("GROQ_MODEL", DEFAULT_GROQ_MODEL),
        ai_timeout=float(os.getenv("AI_TIMEOUT", "30")),
        off_base_url=os.getenv("OFF_BASE_URL", DEFAULT_OFF_BASE_URL).rstrip("/"),
        off_timeout=float(os.getenv("OFF_TIMEOUT", "10")),
        user_agent=os.getenv("OFF_USER_AGENT", DEFAULT_USER_AGENT),
        port=int(os.getenv("PORT", "5000")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level="INFO"):
    logging.basicConfig(level=level, format=LOG_FORMAT)
