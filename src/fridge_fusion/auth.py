"""Bearer-token authentication for private routes."""

from __future__ import annotations

import logging

import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from src.fridge_fusion.config import settings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    """Identity of the caller, taken from the token's ``id`` claim."""
    id: str


def decode_user_token(token: str) -> CurrentUser:
    """Verify *token* and return the user it was issued to."""
    if not settings.jwt_secret:
        raise HTTPException(status_code=500, detail="JWT_SECRET is not configured")

    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError as exc:
        logger.warning("Rejected token: %s", exc)
        raise HTTPException(status_code=401, detail="Not authorized, token failed") from exc

    user_id = payload.get("id")
    if not user_id:
        raise HTTPException(status_code=401, detail="Not authorized, token failed")
    return CurrentUser(id=str(user_id))


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> CurrentUser:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authorized, no token")
    return decode_user_token(credentials.credentials)
