from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from kisaanmitra.db.session import get_db
from kisaanmitra.models.user import User
from kisaanmitra.schemas.user import Token, UserWithToken, UserCreate, UserInDB, SessionInfo
from kisaanmitra.auth.security import oauth2_scheme, get_password_hash, verify_password
from kisaanmitra.auth.session import start_session, get_current_session, sign_out
from kisaanmitra.errors import AuthRequiredError

router = APIRouter(tags=["auth"])


def authenticate(db: Session, username: str, password: str) -> User:
    user = db.query(User).filter(User.username == username).first()
    if not user or not verify_password(password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user")
    return user

# LOGIN: returns user + token (frontend-friendly)
@router.post("/login", response_model=UserWithToken)
async def login_with_user(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    user = authenticate(db, form_data.username, form_data.password)
    access_token, _ = start_session(user)

    return UserWithToken(
        user=UserInDB.model_validate(user),
        access_token=access_token,
        token_type="bearer"
    )

# TOKEN-ONLY: OAuth2 compatibility (for Swagger/OAuth2PasswordBearer)
@router.post("/token", response_model=Token)
async def login_token_only(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    user = authenticate(db, form_data.username, form_data.password)
    access_token, _ = start_session(user)

    return {"access_token": access_token, "token_type": "bearer"}

# REGISTER: create user + return user + token
@router.post("/register", response_model=UserWithToken, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data: UserCreate,
    db: Session = Depends(get_db)
):
    existing_user = db.query(User).filter(
        (User.username == user_data.username) | (User.email == user_data.email)
    ).first()
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username or email already registered"
        )

    db_user = User(
        username=user_data.username,
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password),
        full_name=user_data.full_name,
    )

    db.add(db_user)
    db.commit()
    db.refresh(db_user)

    access_token, _ = start_session(db_user)

    return UserWithToken(
        user=UserInDB.model_validate(db_user),
        access_token=access_token,
        token_type="bearer"
    )

@router.get("/session", response_model=SessionInfo)
async def read_session(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
):
    session = get_current_session(db, token)
    if session is None:
        raise AuthRequiredError("No active session")
    return session

@router.post("/logout")
async def logout(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
):
    if not sign_out(db, token):
        raise AuthRequiredError("No active session")
    return {"ok": True}
