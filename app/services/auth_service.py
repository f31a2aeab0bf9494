"""
Authentication Service

Issues and verifies the bearer JWTs that identify callers. Permissions
come from the role assignments stored on the user document.
"""

from typing import Optional, Dict, Any
from datetime import timedelta

import jwt

from app.config import Config
from app.db.mongo import get_database
from app.utils.logger import get_logger
from app.utils.datetime_utils import get_now_utc

logger = get_logger(__name__)


class AuthService:
    """Service for managing JWT tokens"""

    def __init__(self, config: Config):
        self.config = config
        self.db = get_database(config)
        self.jwt_secret = config.auth.jwt_secret
        self.jwt_algorithm = config.auth.jwt_algorithm

    def generate_token(self, user_id: str, email: Optional[str] = None) -> str:
        payload = {
            "user_id": user_id,
            "exp": get_now_utc() + timedelta(hours=self.config.auth.jwt_expiration_hours),
            "iat": get_now_utc(),
        }
        if email:
            payload["email"] = email
        return jwt.encode(payload, self.jwt_secret, algorithm=self.jwt_algorithm)

    def verify_token(self, token: str) -> Optional[Dict[str, Any]]:
        try:
            return jwt.decode(token, self.jwt_secret, algorithms=[self.jwt_algorithm])
        except jwt.ExpiredSignatureError:
            logger.warning("[AuthService] Token has expired")
            return None
        except jwt.InvalidTokenError:
            return None

    def get_user_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self.db["users"].find_one({"_id": user_id})
