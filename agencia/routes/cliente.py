# agencia/routes/cliente.py

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query, File, UploadFile, Response
from sqlalchemy.orm import Session
from sqlalchemy import or_

from ..database import get_db
from ..models.cliente import Cliente as DBCliente
from ..models.usuario import Usuario as DBUsuario
from ..permisos import Capacidad, require_capability
from ..schemas.cliente import (
    Cliente,
    ClienteCreate,
    ClienteUpdate,
    ClienteDocumentos,
    ImportacionResultado,
)
from ..services import backup_service
from ..services.data_service import clientes, import_clients
from ..utils.documentos_utils import clientes_con_documentos_por_vencer, documento_vencido

router = APIRouter(
    prefix="/clientes",
    tags=["clientes"]
)

# --- Endpoint para Listar Clientes ---
@router.get("/", response_model=List[Cliente])
def read_clientes(
    search: Optional[str] = Query(None, description="Buscar por nombre, email o DNI"),
    skip: int = Query(0, ge=0, description="Número de elementos a omitir (paginación)"),
    limit: int = Query(100, gt=0, description="Número máximo de elementos a retornar (paginación)"),
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.clients))
):
    """
    Obtiene una lista de clientes con búsqueda y paginación.
    """
    query = db.query(DBCliente)

    if search:
        query = query.filter(
            or_(
                DBCliente.name.ilike(f"%{search}%"),
                DBCliente.email.ilike(f"%{search}%"),
                DBCliente.dni.ilike(f"%{search}%"),
            )
        )

    return query.order_by(DBCliente.name).offset(skip).limit(limit).all()

# --- Endpoint de Documentos por Vencer ---
@router.get("/documentos-por-vencer", response_model=List[ClienteDocumentos])
def read_documentos_por_vencer(
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.clients))
):
    """
    Clientes con DNI o pasaporte vencido o que vence en los próximos 30 días.
    """
    resultado = []
    for c in clientes_con_documentos_por_vencer(clientes.list(db, order_by=DBCliente.name)):
        resultado.append(ClienteDocumentos(
            id=c.id,
            name=c.name,
            dni=c.dni,
            vencimiento_dni=c.vencimiento_dni,
            vencimiento_pasaporte=c.vencimiento_pasaporte,
            dni_vencido=documento_vencido(c.vencimiento_dni),
            pasaporte_vencido=documento_vencido(c.vencimiento_pasaporte),
        ))
    return resultado

# --- Endpoint para la Plantilla de Importación ---
@router.get("/plantilla")
def download_plantilla(
    current_user: DBUsuario = Depends(require_capability(Capacidad.clients))
):
    headers = {'Content-Disposition': 'attachment; filename="plantilla-clientes.csv"'}
    return Response(content=backup_service.plantilla_clientes_csv(), media_type='text/csv; charset=utf-8', headers=headers)

# --- Endpoint para Importar Clientes (CSV o backup JSON) ---
@router.post("/importar", response_model=ImportacionResultado, status_code=status.HTTP_201_CREATED)
def importar_clientes(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.clients))
):
    """
    Agrega los clientes del archivo. No detecta duplicados.
    """
    contenido = backup_service.leer_archivo_importacion(file)
    filas = backup_service.parsear_importacion(contenido, file.filename)
    importados = import_clients(db, filas)
    return ImportacionResultado(importados=importados, message=f"Se importaron {importados} clientes exitosamente.")

# --- Endpoint para Obtener un Cliente por ID ---
@router.get("/{cliente_id}", response_model=Cliente)
def get_cliente(
    cliente_id: int,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.clients))
):
    return clientes.get(db, cliente_id)

# --- Endpoint para Crear un Nuevo Cliente ---
@router.post("/", response_model=Cliente, status_code=status.HTTP_201_CREATED)
def create_cliente(
    cliente_data: ClienteCreate,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.clients))
):
    return clientes.create(db, cliente_data.model_dump())

# --- Endpoint para Actualizar un Cliente ---
@router.put("/{cliente_id}", response_model=Cliente)
def update_cliente(
    cliente_id: int,
    cliente_update: ClienteUpdate,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.clients))
):
    """
    Actualiza solo los campos enviados.
    """
    update_data = cliente_update.model_dump(exclude_unset=True)
    for campo in ("name", "dni", "phone", "address", "fecha_nacimiento"):
        if campo in update_data and update_data[campo] is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"El campo '{campo}' no puede quedar vacío.")
    return clientes.update(db, cliente_id, update_data)

# --- Endpoint para Eliminar un Cliente ---
@router.delete("/{cliente_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_cliente(
    cliente_id: int,
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.clients))
):
    """
    Elimina el cliente. Sus pasajes y pagos no se borran en cascada.
    """
    clientes.delete(db, cliente_id)
