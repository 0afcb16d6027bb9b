"""
Shared dependencies: resolve the caller from a bearer token minted by the identity service.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from .models.candidate import Candidate
from .platform.database import get_db
from .platform.security import bearer_scheme, decode_token

logger = logging.getLogger("hireperfect.auth")

_UNAUTHORIZED = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Not authenticated",
    headers={"WWW-Authenticate": "Bearer"},
)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Candidate:
    if credentials is None or (credentials.scheme or "").lower() != "bearer":
        raise _UNAUTHORIZED
    claims = decode_token(credentials.credentials)
    if not claims:
        raise _UNAUTHORIZED
    try:
        user_id = int(claims.get("sub"))
    except (TypeError, ValueError):
        raise _UNAUTHORIZED
    user = db.query(Candidate).filter(Candidate.id == user_id).first()
    if not user:
        logger.warning("Token subject %s has no account", user_id)
        raise _UNAUTHORIZED
    return user


def get_current_candidate(user: Candidate = Depends(get_current_user)) -> Candidate:
    if user.role != "candidate":
        raise HTTPException(status_code=403, detail="Candidate access required")
    return user


def get_current_admin(user: Candidate = Depends(get_current_user)) -> Candidate:
    if user.role != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user


__all__ = ["get_current_user", "get_current_candidate", "get_current_admin"]
