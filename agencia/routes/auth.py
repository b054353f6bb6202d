# agencia/routes/auth.py

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from .. import auth as auth_utils
from ..database import get_db
from ..models.usuario import Usuario as DBUsuario
from ..permisos import CAPACIDADES_POR_ROL
from ..schemas.token import Token
from ..schemas.usuario import Usuario
from ..services.data_service import authenticate_user

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["Auth"]
)

@router.post("/login", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """
    Autentica un usuario activo y devuelve un token de acceso JWT.
    El token lleva el nombre de usuario (sub) y su rol.
    """
    user = authenticate_user(db, form_data.username, form_data.password)
    if user is None:
        logger.warning(f"Login fallido para el usuario '{form_data.username}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Usuario o contraseña incorrectos, o usuario inactivo",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token_expires = timedelta(minutes=auth_utils.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = auth_utils.create_access_token(
        data={"sub": user.username, "role": user.role.value},
        expires_delta=access_token_expires,
    )
    logger.info(f"Login exitoso: {user.username} ({user.role.value})")
    return {"access_token": access_token, "token_type": "bearer"}

@router.get("/me", response_model=Usuario)
def read_users_me(current_user: DBUsuario = Depends(auth_utils.get_current_active_user)):
    """Devuelve el usuario autenticado."""
    return current_user

@router.get("/me/permisos", response_model=list[str])
def read_my_capabilities(current_user: DBUsuario = Depends(auth_utils.get_current_active_user)):
    """Capacidades del usuario actual, para que el front-end arme el menú."""
    return sorted(c.value for c in CAPACIDADES_POR_ROL.get(current_user.role, frozenset()))
