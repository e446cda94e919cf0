import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Depends, Request, Response
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from pinvent.core.config import settings
from pinvent.core.database import get_db
from pinvent.core.errors import InternalError, UnauthorizedError

logger = logging.getLogger(__name__)


# ─── Password hashing ───

def hash_password(password: str) -> str:
    if not password:
        raise InternalError("Password could not be hashed")
    try:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
    except ValueError as e:
        logger.error("Password hashing failed: %s", e)
        raise InternalError("Password could not be hashed") from e


def verify_password(plain: str, hashed: str) -> bool:
    if not plain or not hashed:
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


# ─── Stateless signed sessions ───

class SessionIssuer:
    """Mints and verifies signed session tokens carrying a user id.

    Nothing is stored server-side: a token is valid as long as its signature
    checks out and it has not expired. Logging out only drops the cookie.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 1440):
        if not secret_key:
            raise ValueError("SessionIssuer needs a secret key")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, user_id: int) -> str:
        expire = datetime.now(timezone.utc) + timedelta(minutes=self.expire_minutes)
        return jwt.encode({"sub": str(user_id), "exp": expire}, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Optional[int]:
        if not token:
            return None
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None
        sub = payload.get("sub")
        try:
            return int(sub)
        except (TypeError, ValueError):
            return None


session_issuer = SessionIssuer(
    settings.SECRET_KEY,
    algorithm=settings.ALGORITHM,
    expire_minutes=settings.SESSION_EXPIRE_MINUTES,
)


def get_session_issuer() -> SessionIssuer:
    return session_issuer


# ─── Session cookie ───

def set_session_cookie(resp: Response, token: str, minutes: int = settings.SESSION_EXPIRE_MINUTES):
    resp.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        path="/",
        httponly=True,
        expires=datetime.now(timezone.utc) + timedelta(minutes=minutes),
        samesite="none",
        secure=True,
    )


def clear_session_cookie(resp: Response):
    # Same attribute profile as set_session_cookie, empty value, already expired
    resp.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value="",
        path="/",
        httponly=True,
        expires=datetime(1970, 1, 1, tzinfo=timezone.utc),
        samesite="none",
        secure=True,
    )


# ─── Request guards ───

def get_session_user_id(
    request: Request,
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> int:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        raise UnauthorizedError("Not authorized, please login")
    user_id = issuer.verify(token)
    if user_id is None:
        raise UnauthorizedError("Not authorized, please login")
    return user_id


def get_current_user(
    user_id: int = Depends(get_session_user_id),
    db: Session = Depends(get_db),
):
    from pinvent.models.user import User

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise UnauthorizedError("User not found")
    return user
