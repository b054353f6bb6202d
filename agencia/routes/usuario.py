# agencia/routes/usuario.py

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from sqlalchemy import or_

from .. import auth as auth_utils
from ..database import get_db
from ..models.usuario import Usuario as DBUsuario
from ..models.enums import RolUsuarioEnum
from ..permisos import Capacidad, require_capability
from ..schemas.usuario import Usuario, UsuarioCreate, UsuarioUpdate
from ..services.data_service import usuarios

router = APIRouter(
    prefix="/usuarios",
    tags=["usuarios"]
)

# --- Endpoint para Listar Usuarios ---
@router.get("/", response_model=List[Usuario])
def read_usuarios(
    search: Optional[str] = Query(None, description="Buscar por usuario, nombre o email"),
    role: Optional[RolUsuarioEnum] = Query(None, description="Filtrar por rol"),
    is_active: Optional[bool] = Query(None, description="Filtrar por estado"),
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.users))
):
    query = db.query(DBUsuario)
    if search:
        query = query.filter(
            or_(
                DBUsuario.username.ilike(f"%{search}%"),
                DBUsuario.name.ilike(f"%{search}%"),
                DBUsuario.email.ilike(f"%{search}%"),
            )
        )
    if role:
        query = query.filter(DBUsuario.role == role)
    if is_active is not None:
        query = query.filter(DBUsuario.is_active == is_active)
    return query.order_by(DBUsuario.username).all()

# --- Endpoint para Obtener un Usuario por ID ---
@router.get("/{usuario_id}", response_model=Usuario)
def read_usuario(
    usuario_id: int,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.users))
):
    return usuarios.get(db, usuario_id)

# --- Endpoint para Crear un Usuario ---
@router.post("/", response_model=Usuario, status_code=status.HTTP_201_CREATED)
def create_usuario(
    usuario_data: UsuarioCreate,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.users))
):
    """
    Crea un usuario nuevo. La contraseña se guarda hasheada con bcrypt.
    """
    if db.query(DBUsuario).filter(DBUsuario.username == usuario_data.username).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Ya existe un usuario con este nombre de usuario.")

    fields = usuario_data.model_dump(exclude={"password"})
    fields["password"] = auth_utils.get_password_hash(usuario_data.password)
    return usuarios.create(db, fields)

# --- Endpoint para Actualizar un Usuario ---
@router.put("/{usuario_id}", response_model=Usuario)
def update_usuario(
    usuario_id: int,
    usuario_update: UsuarioUpdate,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.users))
):
    update_data = usuario_update.model_dump(exclude_unset=True)

    if usuario_id == current_user.id and update_data.get("is_active") is False:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No puedes desactivar tu propio usuario.")

    if "username" in update_data:
        existing = db.query(DBUsuario).filter(
            DBUsuario.username == update_data["username"],
            DBUsuario.id != usuario_id,
        ).first()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Ya existe un usuario con este nombre de usuario.")

    if update_data.get("password"):
        update_data["password"] = auth_utils.get_password_hash(update_data["password"])
    else:
        update_data.pop("password", None)

    return usuarios.update(db, usuario_id, update_data)

# --- Endpoint para Activar/Desactivar un Usuario ---
@router.patch("/{usuario_id}/estado", response_model=Usuario)
def toggle_usuario(
    usuario_id: int,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.users))
):
    if usuario_id == current_user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No puedes desactivar tu propio usuario.")
    db_usuario = usuarios.get(db, usuario_id)
    return usuarios.update(db, usuario_id, {"is_active": not db_usuario.is_active})

# --- Endpoint para Eliminar un Usuario ---
@router.delete("/{usuario_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_usuario(
    usuario_id: int,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.users))
):
    if usuario_id == current_user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No puedes eliminar tu propio usuario.")
    usuarios.delete(db, usuario_id)
