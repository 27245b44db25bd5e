from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./coderoom.db"
    database_echo: bool = False

    # Judge0 через RapidAPI
    judge0_url: str = "https://judge0-ce.p.rapidapi.com/submissions"
    rapidapi_key: Optional[str] = None
    rapidapi_host: str = "judge0-ce.p.rapidapi.com"
    execution_poll_interval: float = 1.0
    execution_max_polls: int = 30
    execution_request_timeout: float = 10.0

    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: List[str] = ["http://localhost:5173"]

    default_language: str = "javascript"
    persist_language_changes: bool = True

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}
