# app/core/auth_utils.py
from jose import jwt, JWTError
from fastapi import Header, HTTPException

from app.core.config import JWT_SECRET_KEY, JWT_ALGORITHM


def decode_session_token(token: str) -> dict:
    try:
        return jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or Expired Token")


def verify_token(authorization: str = Header(None)) -> dict:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Unauthorized")

    token = authorization.split(" ", 1)[1]
    # Checks expiration and signature; payload carries the user id in "sub"
    return decode_session_token(token)
