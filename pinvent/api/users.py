from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from pinvent.core.auth import (
    SessionIssuer,
    clear_session_cookie,
    get_session_issuer,
    get_session_user_id,
    set_session_cookie,
)
from pinvent.core.config import settings
from pinvent.core.database import get_db
from pinvent.schemas.auth import (
    UserCreate, UserLogin, UserResponse, UserWithToken,
    ProfileUpdate, ChangePasswordRequest,
    PasswordResetRequest, PasswordResetConfirm,
    MessageResponse, ResetRequestResponse,
)
from pinvent.services import auth_flow
from pinvent.services.email import get_notifier

router = APIRouter(prefix="/api/users", tags=["users"])


def _with_token(user, token: str) -> UserWithToken:
    return UserWithToken(**UserResponse.model_validate(user).model_dump(), token=token)


# ─── Register ───
@router.post("/register", response_model=UserWithToken, status_code=status.HTTP_201_CREATED)
def register(
    data: UserCreate,
    response: Response,
    db: Session = Depends(get_db),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    user, token = auth_flow.register_user(
        db, issuer,
        name=data.name, email=data.email, password=data.password,
        photo=data.photo, phone=data.phone, bio=data.bio,
    )
    set_session_cookie(response, token)
    return _with_token(user, token)


# ─── Login ───
@router.post("/login", response_model=UserWithToken)
def login(
    data: UserLogin,
    response: Response,
    db: Session = Depends(get_db),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    user, token = auth_flow.login_user(db, issuer, data.email, data.password)
    set_session_cookie(response, token)
    return _with_token(user, token)


# ─── Logout ───
@router.get("/logout", response_model=MessageResponse)
def logout(response: Response):
    clear_session_cookie(response)
    return MessageResponse(message="Successfully logged out")


# ─── Get current user ───
@router.get("/getuser", response_model=UserResponse)
def get_user(
    user_id: int = Depends(get_session_user_id),
    db: Session = Depends(get_db),
):
    return auth_flow.get_user(db, user_id)


# ─── Login status ───
@router.get("/loggedin", response_model=bool)
def logged_in(
    request: Request,
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    return auth_flow.login_status(issuer, request.cookies.get(settings.SESSION_COOKIE_NAME))


# ─── Update profile ───
@router.patch("/updateuser", response_model=UserResponse)
def update_user(
    payload: ProfileUpdate,
    user_id: int = Depends(get_session_user_id),
    db: Session = Depends(get_db),
):
    return auth_flow.update_user(
        db, user_id,
        name=payload.name, phone=payload.phone, photo=payload.photo, bio=payload.bio,
    )


# ─── Change password ───
@router.patch("/changepassword", response_model=MessageResponse)
def change_password(
    payload: ChangePasswordRequest,
    user_id: int = Depends(get_session_user_id),
    db: Session = Depends(get_db),
):
    auth_flow.change_password(db, user_id, payload.oldPassword, payload.password)
    return MessageResponse(message="Password change successful")


# ─── Password Reset: Request (public, no session) ───
@router.post("/forgotpassword", response_model=ResetRequestResponse)
def forgot_password(
    payload: PasswordResetRequest,
    db: Session = Depends(get_db),
    notifier=Depends(get_notifier),
):
    auth_flow.forgot_password(db, payload.email, notifier)
    return ResetRequestResponse(success=True, message="Reset email sent")


# ─── Password Reset: Confirm (public, no session) ───
@router.put("/resetpassword/{reset_token}", response_model=MessageResponse)
def reset_password(
    reset_token: str,
    payload: PasswordResetConfirm,
    db: Session = Depends(get_db),
):
    auth_flow.reset_password(db, reset_token, payload.password)
    return MessageResponse(message="Password change successful. Please login.")
