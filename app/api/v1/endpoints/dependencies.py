from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from typing import Optional
from app.db.database import get_db
from app.models.user import User
from app.core.security import decode_access_token
from app.core.constants import AuthConfig, ErrorMessages

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=AuthConfig.TOKEN_URL)
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl=AuthConfig.TOKEN_URL, auto_error=False)


def _user_from_token(db: Session, token: Optional[str]) -> Optional[User]:
    if not token:
        return None
    email = decode_access_token(token)
    if email is None:
        return None
    return db.query(User).filter(User.email == email, User.is_active.is_(True)).first()


def get_current_user(db: Session = Depends(get_db), token: str = Depends(oauth2_scheme)) -> User:
    """Get the current user from the database.
    Any endpoint that requires authentication can use this dependency.
    """
    user = _user_from_token(db, token)

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ErrorMessages.INVALID_TOKEN,
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


def get_current_user_optional(
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(optional_oauth2_scheme)
) -> Optional[User]:
    """Get the current user, or None for anonymous callers.
    Read endpoints use this so that signed-in users see their own vote and like state.
    """
    return _user_from_token(db, token)
