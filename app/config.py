"""
Configuration Management

Centralized configuration management using environment variables
with proper validation and type safety.
"""

import os
from typing import Optional
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


# Load environment variables from .env in backend directory (resolve to absolute path)
_backend_root = Path(__file__).resolve().parent.parent
_env_path = _backend_root / ".env"
if _env_path.exists():
    load_dotenv(dotenv_path=str(_env_path))
else:
    # Also load from current working directory so "python backend_server.py" picks up .env
    load_dotenv()


@dataclass
class MongoConfig:
    """MongoDB configuration"""
    uri: str
    db_name: Optional[str] = None  # Database name; if unset, uses 'botfront'


@dataclass
class AuthConfig:
    """JWT authentication configuration"""
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_expiration_hours: int = 24


@dataclass
class ServerConfig:
    """HTTP server configuration"""
    host: str
    port: int
    frontend_url: str = ""


@dataclass
class Config:
    """Main application configuration"""

    # MongoDB configuration
    mongo: MongoConfig

    # Bearer token configuration
    auth: AuthConfig

    # Server configuration
    server: ServerConfig

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create configuration from environment variables.

        Returns:
            Configured Config instance

        Raises:
            ValueError: If required environment variables are missing
        """
        mongodb_uri = os.getenv("MONGODB_URI")
        if not mongodb_uri:
            raise ValueError("MONGODB_URI environment variable is required")

        jwt_secret = os.getenv("JWT_SECRET_KEY")
        if not jwt_secret or not jwt_secret.strip():
            raise ValueError(
                "JWT_SECRET_KEY must be set in environment. "
                "Generate a secret (e.g. openssl rand -hex 32) and set it in .env"
            )

        return cls(
            mongo=MongoConfig(
                uri=mongodb_uri,
                db_name=os.getenv("MONGODB_DB_NAME") or None,
            ),
            auth=AuthConfig(
                jwt_secret=jwt_secret,
                jwt_expiration_hours=int(os.getenv("JWT_EXPIRATION_HOURS", "24")),
            ),
            server=ServerConfig(
                host=os.getenv("SERVER_HOST", "0.0.0.0"),
                port=int(os.getenv("SERVER_PORT", "8000")),
                frontend_url=os.getenv("FRONTEND_URL", ""),
            ),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        )


def get_config() -> Config:
    """
    Get configuration from environment variables.

    Returns:
        Configuration instance
    """
    return Config.from_env()
