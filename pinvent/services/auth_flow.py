"""
Credential lifecycle: registration, login, profile, password change and reset.

Every function takes the request's SQLAlchemy session first and raises one of
the pinvent.core.errors exceptions on failure. Cookie handling stays in the
router; these functions only return the session token to deliver.
"""

import hashlib
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pinvent.core.auth import SessionIssuer, hash_password, verify_password
from pinvent.core.config import settings
from pinvent.core.errors import (
    AuthError,
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from pinvent.models.password_reset import PasswordResetToken
from pinvent.models.user import User
from pinvent.services.email import EmailDeliveryError, default_sender, password_reset_body

logger = logging.getLogger(__name__)

Notifier = Callable[..., None]

MAX_PASSWORD_BYTES = 72
MAX_BIO_LENGTH = 250


def hash_reset_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def _check_password_length(password: str):
    if len(password) < settings.MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters long"
        )
    # bcrypt only accepts the first 72 bytes
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")


def _check_bio_length(bio: Optional[str]):
    if bio and len(bio) > MAX_BIO_LENGTH:
        raise ValidationError(f"Bio must not be more than {MAX_BIO_LENGTH} characters")


# ─── Register ───
def register_user(
    db: Session,
    issuer: SessionIssuer,
    name: Optional[str],
    email: Optional[str],
    password: Optional[str],
    photo: Optional[str] = None,
    phone: Optional[str] = None,
    bio: Optional[str] = None,
) -> tuple[User, str]:
    if not name or not email or not password:
        raise ValidationError("Please fill all required fields")
    _check_password_length(password)
    _check_bio_length(bio)

    if db.query(User).filter(User.email == email).first():
        raise ConflictError("Email has already been registered")

    user = User(name=name, email=email, password_hash=hash_password(password))
    # Leave unset fields to the column defaults
    if photo:
        user.photo = photo
    if phone:
        user.phone = phone
    if bio:
        user.bio = bio

    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration for the same email
        db.rollback()
        raise ConflictError("Email has already been registered")
    db.refresh(user)

    logger.info("Registered user %s (id=%d)", user.email, user.id)
    return user, issuer.issue(user.id)


# ─── Login ───
def login_user(
    db: Session,
    issuer: SessionIssuer,
    email: Optional[str],
    password: Optional[str],
) -> tuple[User, str]:
    if not email or not password:
        raise ValidationError("Please add email and password")

    user = db.query(User).filter(User.email == email).first()
    if not user:
        raise NotFoundError("User not found, please sign up")

    if not verify_password(password, user.password_hash):
        logger.info("Failed login for user id=%d", user.id)
        raise AuthError("Password does not match email")

    logger.info("User id=%d logged in", user.id)
    return user, issuer.issue(user.id)


# ─── Session status ───
def login_status(issuer: SessionIssuer, token: Optional[str]) -> bool:
    if not token:
        return False
    return issuer.verify(token) is not None


# ─── Profile ───
def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def update_user(
    db: Session,
    user_id: int,
    name: Optional[str] = None,
    phone: Optional[str] = None,
    photo: Optional[str] = None,
    bio: Optional[str] = None,
) -> User:
    user = get_user(db, user_id)
    _check_bio_length(bio)

    # Blank values keep what is stored; email is not editable here
    user.name = name or user.name
    user.phone = phone or user.phone
    user.photo = photo or user.photo
    user.bio = bio or user.bio

    db.commit()
    db.refresh(user)
    return user


# ─── Change password ───
def change_password(
    db: Session,
    user_id: int,
    old_password: Optional[str],
    password: Optional[str],
) -> None:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found, please signup")
    if not old_password or not password:
        raise ValidationError("Please add old and new password")
    _check_password_length(password)

    if not verify_password(old_password, user.password_hash):
        raise AuthError("Old password is incorrect")

    user.password_hash = hash_password(password)
    db.commit()
    logger.info("Password changed for user id=%d", user.id)


# ─── Forgot password ───
def _store_reset_token(db: Session, user_id: int, token_hash: str):
    """Insert or overwrite the single reset token row of a user."""
    now = datetime.now(timezone.utc)
    values = {
        "token_hash": token_hash,
        "created_at": now,
        "expires_at": now + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES),
    }

    record = db.query(PasswordResetToken).filter(PasswordResetToken.user_id == user_id).first()
    if record is None:
        db.add(PasswordResetToken(user_id=user_id, **values))
    else:
        for key, value in values.items():
            setattr(record, key, value)

    try:
        db.commit()
    except IntegrityError:
        # A concurrent request inserted this user's row first; take it over
        db.rollback()
        db.query(PasswordResetToken).filter(
            PasswordResetToken.user_id == user_id
        ).update(values, synchronize_session=False)
        db.commit()


def forgot_password(db: Session, email: Optional[str], notifier: Notifier) -> None:
    if not email:
        raise ValidationError("Please add an email")

    user = db.query(User).filter(User.email == email).first()
    if not user:
        raise NotFoundError("User does not exist")

    # The raw token only ever leaves the server inside the email
    raw_token = secrets.token_hex(32)
    _store_reset_token(db, user.id, hash_reset_token(raw_token))

    reset_link = f"{settings.FRONTEND_URL}/resetpassword/{raw_token}"
    try:
        notifier(
            f"Password reset request from {settings.APP_NAME}",
            password_reset_body(user.name, reset_link),
            user.email,
            default_sender(),
        )
    except EmailDeliveryError as e:
        logger.error("Reset email for user id=%d not sent: %s", user.id, e)
        raise InternalError("Email not sent, please try again") from e

    logger.info("Password reset requested for user id=%d", user.id)


# ─── Reset password ───
def reset_password(db: Session, reset_token: str, password: Optional[str]) -> None:
    if not password:
        raise ValidationError("Please add a new password")
    _check_password_length(password)

    record = db.query(PasswordResetToken).filter(
        PasswordResetToken.token_hash == hash_reset_token(reset_token or ""),
    ).first()
    if not record or record.is_expired:
        raise NotFoundError("Invalid or expired token")

    user = db.query(User).filter(User.id == record.user_id).first()
    if not user:
        raise NotFoundError("User not found")

    user.password_hash = hash_password(password)
    # Single use: the token goes away with the password change
    db.delete(record)
    db.commit()
    logger.info("Password reset completed for user id=%d", user.id)
