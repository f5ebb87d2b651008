"""Сессионные JWT: выдаются при входе по email, проверяются на каждом запросе."""
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from inkflow.core.config import settings

BEARER_PREFIX = "bearer"


def issue_session_token(user_id: str, email: str, lifetime: Optional[timedelta] = None) -> str:
    """JWT с id пользователя в sub"""
    expires_at = datetime.utcnow() + (lifetime or timedelta(minutes=settings.access_token_expire_minutes))
    claims = {"sub": user_id, "email": email, "exp": expires_at}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def session_user_id(token: Optional[str]) -> Optional[str]:
    """id пользователя из валидного токена; None для просроченного или чужого"""
    if not token:
        return None
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    return claims.get("sub")


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Токен из заголовка вида "Bearer <token>" """
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != BEARER_PREFIX or not token.strip():
        return None
    return token.strip()
