from __future__ import annotations

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import Header, Request

from app.config import Settings
from app.errors import AuthError
from app.models import User

_PBKDF2_ROUNDS = 120_000


def hash_password(password: str) -> str:
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("ascii"), _PBKDF2_ROUNDS)
    return f"{salt}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        salt, expected = stored.split("$", 1)
    except ValueError:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("ascii"), _PBKDF2_ROUNDS)
    return hmac.compare_digest(digest.hex(), expected)


def issue_token(user: User, settings: Settings) -> str:
    payload = {
        "userId": user.id,
        "email": user.email,
        "exp": datetime.now(timezone.utc) + timedelta(hours=settings.token_ttl_hours),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm="HS256")


def decode_token(token: str, settings: Settings) -> Dict[str, Any]:
    return jwt.decode(token, settings.jwt_secret, algorithms=["HS256"])


def current_user(request: Request, authorization: Optional[str] = Header(None)) -> str:
    """FastAPI dependency returning the caller's user id."""
    parts = (authorization or "").split(" ")
    token = parts[1] if len(parts) > 1 else None
    if not token:
        raise AuthError("Access token required")

    settings: Settings = request.app.state.settings
    try:
        claims = decode_token(token, settings)
    except jwt.PyJWTError:
        raise AuthError("Invalid token", status_code=403)

    user_id = claims.get("userId")
    if not user_id:
        raise AuthError("Invalid token", status_code=403)
    return user_id
