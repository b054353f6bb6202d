import os
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from .database import get_db
from .models.usuario import Usuario
from .schemas.token import TokenData

logger = logging.getLogger(__name__)

# Configuración de seguridad
# Asegúrate de que estas variables de entorno estén configuradas en tu archivo .env
SECRET_KEY = os.getenv("SECRET_KEY")
ALGORITHM = os.getenv("ALGORITHM", "HS256") # Default a HS256 si no está en .env
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 480)) # Una jornada de trabajo

if not SECRET_KEY:
    logger.warning("SECRET_KEY no configurada: no se podrán emitir ni validar tokens.")

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# OAuth2 Bearer token (para proteger rutas)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login") # 'auth/login' es la ruta del endpoint de login

# Funciones de hashing y verificación de contraseñas
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifica si una contraseña plana coincide con un hash."""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Genera el hash de una contraseña plana."""
    return pwd_context.hash(password)

# Funciones para crear y manejar tokens JWT
def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    """Crea un token de acceso JWT."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt

# --- DEPENDENCIAS DE USUARIO ---

async def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)):
    """Obtiene el usuario autenticado a partir del token JWT."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="No se pudieron validar las credenciales",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        username: str = payload.get("sub")

        if username is None:
            raise credentials_exception

        token_data = TokenData(username=username, role=payload.get("role"))

    except JWTError:
        raise credentials_exception

    user = db.query(Usuario).filter(Usuario.username == token_data.username).first()

    if user is None:
        raise credentials_exception

    return user

def get_current_active_user(current_user: Usuario = Depends(get_current_user)):
    """
    Obtiene el usuario autenticado y verifica que esté activo.
    Un usuario desactivado pierde el acceso aunque su token siga vigente.
    """
    if not current_user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Usuario inactivo")
    return current_user
