# cropmatch/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseModel):
    # 🌱 Crop catalog
    crops_source: str = os.getenv("CROPS_SOURCE", "Crops")   # logical name, ".csv" is appended
    crops_dir: str = os.getenv("CROPS_DIR", os.path.expanduser("~/.cropmatch"))  # fallback location
    default_limit: int = int(os.getenv("DEFAULT_LIMIT", "20"))

    # 🤖 LLM
    openai_api_key: str = os.getenv("OPENAI_API_KEY", "")
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    llm_timeout: float = float(os.getenv("LLM_TIMEOUT", "12"))

    # 📜 Logging
    log_level: str = os.getenv("LOG_LEVEL", "info")
    log_format: str = os.getenv("LOG_FORMAT", "console")  # "console" | "json"

settings = Settings()
