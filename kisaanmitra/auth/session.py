"""Sessions bound to a user identity.

A session is a signed bearer token. Signing out revokes the token's ``jti`` so it
stops authenticating before it expires. Code interested in sign-in/sign-out can
subscribe with :func:`on_session_change`.
"""
import logging
from datetime import timedelta
from typing import Callable, List, Optional, Tuple

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from kisaanmitra.auth.security import (
    oauth2_scheme,
    create_access_token,
    decode_access_token,
    token_data,
    ACCESS_TOKEN_EXPIRE_MINUTES,
)
from kisaanmitra.db.session import get_db
from kisaanmitra.errors import AuthRequiredError
from kisaanmitra.models.user import User as UserModel, RevokedToken
from kisaanmitra.schemas.user import SessionInfo, User as UserSchema

logger = logging.getLogger(__name__)

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"

SessionListener = Callable[[str, SessionInfo], None]

_listeners: List[SessionListener] = []


def on_session_change(callback: SessionListener) -> Callable[[], None]:
    """Subscribe to sign-in/sign-out events. Returns a function that unsubscribes."""
    _listeners.append(callback)

    def unsubscribe():
        if callback in _listeners:
            _listeners.remove(callback)

    return unsubscribe


def _notify(event: str, session: SessionInfo) -> None:
    for callback in list(_listeners):
        try:
            callback(event, session)
        except Exception:
            # A broken listener must not block sign-in or sign-out
            logger.exception("Session listener %r failed on %s", callback, event)


def _resolve(db: Session, token: Optional[str]) -> Optional[Tuple[UserModel, dict]]:
    if not token:
        return None
    payload = decode_access_token(token)
    if payload is None:
        return None
    data = token_data(payload)

    revoked = db.query(RevokedToken).filter(RevokedToken.jti == data.jti).first()
    if revoked is not None:
        return None

    user = db.query(UserModel).filter(UserModel.username == data.username).first()
    if user is None or not user.is_active:
        return None
    return user, payload


def _session(user: UserModel, payload: dict) -> SessionInfo:
    return SessionInfo(user=UserSchema.model_validate(user), expires_at=int(payload["exp"]))


def start_session(user: UserModel) -> Tuple[str, SessionInfo]:
    access_token = create_access_token(
        data={"sub": user.username},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    session = _session(user, decode_access_token(access_token))
    logger.info("User %s signed in", user.username)
    _notify(SIGNED_IN, session)
    return access_token, session


def get_current_session(db: Session, token: Optional[str]) -> Optional[SessionInfo]:
    resolved = _resolve(db, token)
    if resolved is None:
        return None
    return _session(*resolved)


def sign_out(db: Session, token: Optional[str]) -> bool:
    """Revoke the session behind ``token``. Returns False if it was not a live session."""
    resolved = _resolve(db, token)
    if resolved is None:
        return False
    user, payload = resolved

    db.add(RevokedToken(jti=payload["jti"]))
    try:
        db.commit()
    except IntegrityError:
        # Revoked concurrently by another request
        db.rollback()
        return False

    logger.info("User %s signed out", user.username)
    _notify(SIGNED_OUT, _session(user, payload))
    return True


async def get_current_user(token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)):
    resolved = _resolve(db, token)
    if resolved is None:
        raise AuthRequiredError("You must be logged in to do that")
    return resolved[0]

