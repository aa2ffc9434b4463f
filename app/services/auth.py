"""
Resolución del usuario que hace la request.

La identidad la emite un proveedor externo: acá sólo se verifica el bearer
token y se busca (o crea) el usuario interno por `external_id`.
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crud import user as user_crud
from app.database import get_db
from app.models.user import User

load_dotenv()

logger = logging.getLogger(__name__)

# Security configuration
SECRET_KEY = os.getenv("SECRET_KEY", "your-secret-key")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

bearer_scheme = HTTPBearer(auto_error=False)


def decode_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None


def get_or_create_user(
    db: Session,
    external_id: str,
    name: Optional[str] = None,
    email: Optional[str] = None,
) -> User:
    """Primer ingreso de una identidad válida: se crea el usuario con rol USER"""
    user = user_crud.get_user_by_external_id(db, external_id)
    if user:
        return user

    try:
        return user_crud.create_user(db, external_id=external_id, name=name, email=email)
    except IntegrityError:
        # Otra request creó el mismo usuario en paralelo
        db.rollback()
        return user_crud.get_user_by_external_id(db, external_id)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception

    payload = decode_token(credentials.credentials)
    if payload is None:
        raise credentials_exception

    external_id = payload.get("sub")
    if not external_id:
        raise credentials_exception

    user = get_or_create_user(
        db, str(external_id), name=payload.get("name"), email=payload.get("email")
    )
    if user is None:
        logger.warning(f"Could not resolve user for identity {external_id}")
        raise credentials_exception
    return user
