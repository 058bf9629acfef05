from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from solidaria.core.config import settings

TOKEN_TYPE = "access"


def create_access_token(user_id: int, username: str, expires_delta: timedelta | None = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    claims = {
        "sub": str(user_id),
        "username": username,
        "iat": now,
        "exp": expire,
        "type": TOKEN_TYPE,
    }

    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
    except JWTError:
        return None

    if payload.get("type") != TOKEN_TYPE:
        return None

    return payload
