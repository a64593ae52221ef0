from datetime import timedelta
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.db.database import get_db
from app.models.user import User
from app.schemas.user import UserCreate, UserRead
from app.core.security import verify_password, create_access_token, get_password_hash
from app.core.security import ACCESS_TOKEN_EXPIRE_MINUTES
from app.core.constants import ErrorMessages, ErrorCodes, AuthConfig
from app.core.exception import StorageError
from app.api.v1.endpoints.dependencies import get_current_user
from app.api.v1.responses import (
    AUTH_ERROR_RESPONSE,
    get_registration_responses,
    get_token_responses
)

# Setup logging
logger = logging.getLogger(__name__)

class Token(BaseModel):
    access_token: str
    token_type: str = AuthConfig.TOKEN_TYPE

class LoginRequest(BaseModel):
    email: str
    password: str

router = APIRouter(prefix="/auth", tags=["auth"])


def _authenticate(db: Session, email: str, password: str) -> Token:
    user = db.query(User).filter(User.email == email).first()

    if not user or not user.is_active or not verify_password(password, user.hashed_password):
        logger.warning(f"Failed login attempt for email: {email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "message": ErrorMessages.INVALID_CREDENTIALS,
                "error_code": ErrorCodes.INVALID_CREDENTIALS
            },
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(
        data={"sub": user.email},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    logger.info(f"Access token issued for user {user.id}")
    return Token(access_token=access_token)


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED, responses=get_registration_responses())
def register_user(user: UserCreate, db: Session = Depends(get_db)):
    """
    Register a new user.

    Usernames and emails are unique; the password is stored as a bcrypt hash.
    """
    logger.info(f"Registration attempt for email: {user.email}, username: {user.username}")

    if db.query(User).filter(User.username == user.username).first():
        logger.warning(f"Registration failed: Username '{user.username}' already exists")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": ErrorMessages.DUPLICATE_USERNAME,
                "error_code": ErrorCodes.DUPLICATE_RESOURCE,
                "username": user.username
            }
        )

    if db.query(User).filter(User.email == user.email).first():
        logger.warning(f"Registration failed: Email '{user.email}' already exists")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": ErrorMessages.DUPLICATE_EMAIL,
                "error_code": ErrorCodes.DUPLICATE_RESOURCE,
                "email": user.email
            }
        )

    db_user = User(
        email=user.email,
        username=user.username,
        full_name=user.full_name,
        hashed_password=get_password_hash(user.password),
        is_active=user.is_active
    )

    try:
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error during registration: {e}")
        raise StorageError() from e

    logger.info(f"User registered successfully: ID {db_user.id}, email: {db_user.email}")
    return db_user


@router.post("/token", response_model=Token, responses=get_token_responses())
def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    """OAuth2 password flow; the form's username field carries the email"""
    return _authenticate(db, form_data.username, form_data.password)


@router.post("/login", response_model=Token, responses=get_token_responses())
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """JSON login for clients that do not speak the OAuth2 form flow"""
    return _authenticate(db, credentials.email, credentials.password)


@router.get("/user", response_model=UserRead, responses={401: AUTH_ERROR_RESPONSE})
def read_current_user(current_user: User = Depends(get_current_user)):
    """The authenticated caller"""
    return current_user
