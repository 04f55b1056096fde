import os
from dataclasses import dataclass, field
from typing import List

from dotenv import find_dotenv, load_dotenv

# Settings are read from the environment or a .env file, e.g.:
# DATABASE_URL=sqlite:///./grocery.db
# HOST=127.0.0.1
# PORT=3001
# CORS_ORIGINS=http://localhost:5173,http://localhost:3000
# LOG_LEVEL=INFO


def _split_origins(raw: str) -> List[str]:
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


@dataclass
class Config:
    DATABASE_URL: str = field(
        default_factory=lambda: os.getenv("DATABASE_URL", "sqlite:///./grocery.db")
    )
    HOST: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    PORT: int = field(default_factory=lambda: int(os.getenv("PORT", "3001")))
    CORS_ORIGINS: List[str] = None
    LOG_LEVEL: str = field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper()
    )

    def __post_init__(self):
        if self.CORS_ORIGINS is None:
            self.CORS_ORIGINS = _split_origins(os.getenv("CORS_ORIGINS", "*"))


def load_config(env_file=None) -> Config:
    """Build the settings, loading `env_file` first.

    Without `env_file` the nearest .env from the working directory is used.

    Variables already set in the environment win over the file.
    """
    load_dotenv(env_file or find_dotenv(usecwd=True))
    return Config()


config = load_config()
