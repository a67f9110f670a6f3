from typing import Dict
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError, ExpiredSignatureError
from backend.config import SECRET_KEY, ALGORITHM

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(token: str = Depends(oauth2_scheme)) -> Dict[str, str]:
    """Owner of the bearer token; every workout, menu and share query is scoped to its user_id."""
    try:
        claims = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise _unauthorized("Session expired, please log in again")
    except JWTError:
        raise _unauthorized("Invalid token")

    email = claims.get("sub")
    user_id = claims.get("user_id")
    if not email or not user_id:
        raise _unauthorized("Invalid token")
    return {"email": email, "user_id": user_id}
