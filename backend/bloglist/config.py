"""Application settings and validation."""

import os
from datetime import timedelta
from pathlib import Path

BASE = Path(__file__).resolve().parent.parent


class TokenConfig:
    """Signing secret and lifetime policy for access tokens.

    Passed explicitly to the components that mint or verify tokens.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expires_in: timedelta = timedelta(hours=1)):
        if not secret:
            raise ValueError("token secret must not be empty")
        self.secret = secret
        self.algorithm = algorithm
        self.expires_in = expires_in


class Settings:
    ENV: str
    JWT_SECRET: str
    JWT_ALGORITHM: str
    JWT_EXPIRE_SECONDS: int
    DATABASE_URL: str
    ALLOW_INSECURE_JWT: bool
    ALLOW_DEV_CORS: bool
    LOG_LEVEL: str

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.JWT_SECRET = os.getenv("JWT_SECRET", "change_me_for_prod")
        self.JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
        self.JWT_EXPIRE_SECONDS = int(os.getenv("JWT_EXPIRE_SECONDS", "3600"))  # 1 hour
        self.DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE / 'bloglist.db'}")
        self.ALLOW_INSECURE_JWT = os.getenv("ALLOW_INSECURE_JWT", "false").lower() == "true"
        self.ALLOW_DEV_CORS = os.getenv("ALLOW_DEV_CORS", "true").lower() == "true"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self._validate()

    def _validate(self):
        if self.ENV != "dev" and not self.ALLOW_INSECURE_JWT and self.JWT_SECRET == "change_me_for_prod":
            raise RuntimeError("JWT_SECRET must be set to a non-default value in non-dev environments")
        if self.JWT_EXPIRE_SECONDS <= 0:
            raise RuntimeError("JWT_EXPIRE_SECONDS must be positive")

    @property
    def token_config(self) -> TokenConfig:
        return TokenConfig(
            secret=self.JWT_SECRET,
            algorithm=self.JWT_ALGORITHM,
            expires_in=timedelta(seconds=self.JWT_EXPIRE_SECONDS),
        )


settings = Settings()
