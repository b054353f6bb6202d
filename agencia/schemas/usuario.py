# agencia/schemas/usuario.py

from pydantic import BaseModel, Field, ConfigDict, EmailStr
from typing import Optional
from datetime import datetime
from ..models.enums import RolUsuarioEnum

# --- Esquema base para Usuario ---
class UsuarioBase(BaseModel):
    username: str = Field(..., min_length=3, max_length=50, description="Nombre de usuario, debe ser único")
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr = Field(..., max_length=100)
    role: RolUsuarioEnum = RolUsuarioEnum.operator
    is_active: bool = True

# --- Esquema para crear un Usuario ---
class UsuarioCreate(UsuarioBase):
    password: str = Field(..., min_length=6, description="Contraseña para el usuario")


# --- Esquema para actualizar un Usuario ---
class UsuarioUpdate(BaseModel):
    """
    Esquema para actualizar los datos de un Usuario.
    Todos los campos son opcionales para permitir actualizaciones parciales.
    """
    username: Optional[str] = Field(None, min_length=3, max_length=50)
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = Field(None, max_length=100)
    role: Optional[RolUsuarioEnum] = None
    is_active: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=6, description="Nueva contraseña para el usuario")

# --- Esquema principal para Usuario (respuesta de lectura) ---
# Nunca expone el hash de la contraseña.
class Usuario(BaseModel):
    id: int
    username: str
    name: str
    email: str
    role: RolUsuarioEnum
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
