# solidaria/core/auth.py
#
# Resolves the bearer token into the calling User. Every write to the
# ledger and every organizer view goes through get_current_user.

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from solidaria.database import get_db
from solidaria.models.users import User
from solidaria.core.jwt import decode_access_token
from solidaria.core.oauth2 import oauth2_scheme


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    payload = decode_access_token(token)

    if payload is None:
        raise _unauthorized("Invalid or expired token")

    subject = payload.get("sub")

    if subject is None or not str(subject).isdigit():
        raise _unauthorized("Invalid token payload")

    user = db.query(User).filter(User.id == int(subject)).first()

    if user is None:
        raise _unauthorized("User not found")

    # Token issued for an account whose id was later reused
    if payload.get("username") != user.username:
        raise _unauthorized("Token does not match user")

    return user
