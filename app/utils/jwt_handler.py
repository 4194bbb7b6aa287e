from jose import jwt, JWTError
from datetime import timedelta
from app.config import settings
from app.utils.timezone_utils import get_utc_now

def create_access_token(data: dict, expires_minutes: int = 15):
    to_encode = data.copy()
    to_encode.update({"exp": get_utc_now() + timedelta(minutes=expires_minutes)})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def verify_token(token: str):
    if not token or not settings.SECRET_KEY:
        return None
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
