import time
import jwt
import logging
from typing import Optional
import bcrypt

from app.core.config import SECRET_KEY, JWT_EXPIRE_MIN, JWT_ALGO

logger = logging.getLogger("nexus.auth")


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.
    """
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.
    """
    try:
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    except ValueError as e:
        logger.warning("Password verification failed: %s", e)
        return False


def create_token(payload: dict, expire_min: int = JWT_EXPIRE_MIN) -> str:
    now = int(time.time())
    exp = now + expire_min * 60
    to_encode = {**payload, "iat": now, "exp": exp}
    return jwt.encode(to_encode, SECRET_KEY, algorithm=JWT_ALGO)


def verify_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGO])
    except jwt.PyJWTError as e:
        logger.info("Token verification failed: %s", e)
        return None
