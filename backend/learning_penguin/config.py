"""Application settings and validation."""

import os
from pathlib import Path

BASE = Path(__file__).resolve().parent.parent


class Settings:
    ENV: str
    HOST: str
    PORT: int
    DATABASE_URL: str
    CORS_ORIGINS: list
    UPLOAD_DIR: Path
    MAX_UPLOAD_BYTES: int
    LOG_LEVEL: str

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.HOST = os.getenv("HOST", "0.0.0.0")
        self.PORT = self._parse_int("PORT", "3000")
        self.DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE / 'penguin.db'}")
        self.CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGIN", "*").split(",") if o.strip()]
        self.UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", str(BASE / "uploads")))
        self.MAX_UPLOAD_BYTES = self._parse_int("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024))  # 10 MB default
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self._validate()

    @staticmethod
    def _parse_int(name: str, default: str) -> int:
        raw = os.getenv(name, default)
        try:
            return int(raw)
        except ValueError:
            raise RuntimeError(f"{name} must be an integer, got {raw!r}")

    def _validate(self):
        if not 0 < self.PORT < 65536:
            raise RuntimeError(f"PORT must be between 1 and 65535, got {self.PORT}")
        if self.MAX_UPLOAD_BYTES <= 0:
            raise RuntimeError("MAX_UPLOAD_BYTES must be positive")


settings = Settings()
