from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from ..config import settings

ALGO = "HS256"


def create_access_token(sub: str, secret_key: str | None = None) -> str:
    exp = datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_EXPIRES_MIN)
    payload = {"sub": sub, "exp": exp}
    return jwt.encode(payload, secret_key or settings.SECRET_KEY, algorithm=ALGO)


def decode_token(token: str, secret_key: str | None = None) -> dict | None:
    try:
        return jwt.decode(token, secret_key or settings.SECRET_KEY, algorithms=[ALGO])
    except JWTError:
        return None
