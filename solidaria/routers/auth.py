from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.orm import Session
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import SQLAlchemyError
import logging

from solidaria.database import get_db
from solidaria.models.users import User
from solidaria.schemas.user import TokenResponse, UserCreate, UserResponse
from solidaria.core.auth import get_current_user
from solidaria.core.hashing import hash_password, verify_password
from solidaria.core.jwt import create_access_token
from solidaria.core.rate_limiter import limiter

router = APIRouter(prefix="/auth", tags=["Authentication"])

logger = logging.getLogger("solidaria")


# ---------------- SIGNUP ----------------
@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")
def signup(request: Request, user_data: UserCreate, db: Session = Depends(get_db)):
    if db.query(User).filter(User.username == user_data.username).first():
        raise HTTPException(status_code=409, detail="Username already exists")

    if db.query(User).filter(User.email == user_data.email).first():
        raise HTTPException(status_code=409, detail="Email already exists")

    try:
        user = User(
            username=user_data.username,
            email=user_data.email,
            password_hash=hash_password(user_data.password),
            full_name=user_data.full_name,
            phone=user_data.phone,
        )
        db.add(user)
        db.commit()
        db.refresh(user)

    except SQLAlchemyError:
        db.rollback()
        logger.exception("Signup failed")
        raise HTTPException(status_code=500, detail="Unable to create account")

    return user


# ---------------- LOGIN (TOKEN-BASED) ----------------
@router.post("/login", response_model=TokenResponse)
@limiter.limit("10/minute")
def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    user = db.query(User).filter(User.username == form_data.username).first()

    if not user or not verify_password(form_data.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token(user.id, user.username)

    return {
        "access_token": token,
        "token_type": "bearer"
    }


# ---------------- CURRENT USER ----------------
@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
