# agencia/routes/backup.py

import json
import logging

from fastapi import APIRouter, Depends, File, UploadFile, Response, status
from sqlalchemy.orm import Session

from ..contexto import ContextoAplicacion, get_contexto
from ..database import get_db
from ..models.usuario import Usuario as DBUsuario
from ..permisos import Capacidad, require_capability
from ..schemas.cliente import ImportacionResultado
from ..schemas.cuenta import ReporteIntegridad
from ..services import backup_service
from ..services.cuentas_service import find_orphaned_records
from ..services.data_service import import_clients

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/backup",
    tags=["backup"]
)

def _descarga_json(data: dict, filename: str) -> Response:
    headers = {'Content-Disposition': f'attachment; filename="{filename}"'}
    return Response(
        content=json.dumps(data, ensure_ascii=False, indent=2),
        media_type='application/json',
        headers=headers,
    )

def _descarga_csv(contenido: str, filename: str) -> Response:
    headers = {'Content-Disposition': f'attachment; filename="{filename}"'}
    return Response(content=contenido, media_type='text/csv; charset=utf-8', headers=headers)

# --- Exportaciones JSON ---
@router.get("/completo")
def export_backup_completo(
    current_user: DBUsuario = Depends(require_capability(Capacidad.backup)),
    ctx: ContextoAplicacion = Depends(get_contexto)
):
    """Clientes, viajes, pagos, pasajeros y buses con metadatos."""
    logger.info(f"Backup completo solicitado por {current_user.username}")
    return _descarga_json(
        backup_service.backup_completo(ctx),
        backup_service.nombre_archivo("backup-completo", "json"),
    )

@router.get("/clientes")
def export_backup_clientes(
    current_user: DBUsuario = Depends(require_capability(Capacidad.backup)),
    ctx: ContextoAplicacion = Depends(get_contexto)
):
    return _descarga_json(
        backup_service.backup_clientes(ctx),
        backup_service.nombre_archivo("backup-clientes", "json"),
    )

@router.get("/cuentas")
def export_backup_cuentas(
    current_user: DBUsuario = Depends(require_capability(Capacidad.backup)),
    ctx: ContextoAplicacion = Depends(get_contexto)
):
    """Saldos ARS/USD, viajes y pagos de cada cliente, con resumen."""
    return _descarga_json(
        backup_service.backup_cuentas(ctx),
        backup_service.nombre_archivo("backup-cuentas-corrientes", "json"),
    )

# --- Exportaciones CSV ---
@router.get("/clientes.csv")
def export_clientes_csv(
    current_user: DBUsuario = Depends(require_capability(Capacidad.backup)),
    ctx: ContextoAplicacion = Depends(get_contexto)
):
    return _descarga_csv(
        backup_service.exportar_clientes_csv(ctx.clients),
        backup_service.nombre_archivo("clientes", "csv"),
    )

@router.get("/cuentas.csv")
def export_cuentas_csv(
    current_user: DBUsuario = Depends(require_capability(Capacidad.backup)),
    ctx: ContextoAplicacion = Depends(get_contexto)
):
    return _descarga_csv(
        backup_service.exportar_cuentas_csv(ctx),
        backup_service.nombre_archivo("cuentas-corrientes", "csv"),
    )

@router.get("/plantilla-clientes.csv")
def export_plantilla(
    current_user: DBUsuario = Depends(require_capability(Capacidad.backup))
):
    return _descarga_csv(backup_service.plantilla_clientes_csv(), "plantilla-clientes.csv")

# --- Importación ---
@router.post("/importar", response_model=ImportacionResultado, status_code=status.HTTP_201_CREATED)
def import_backup(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: DBUsuario = Depends(require_capability(Capacidad.backup))
):
    """
    Importa los clientes de un backup JSON (o CSV de plantilla).
    Se agregan a los existentes; no se reemplaza nada.
    """
    contenido = backup_service.leer_archivo_importacion(file)
    filas = backup_service.parsear_importacion(contenido, file.filename)
    importados = import_clients(db, filas)
    return ImportacionResultado(importados=importados, message=f"Se importaron {importados} clientes exitosamente.")

# --- Integridad ---
@router.get("/integridad", response_model=ReporteIntegridad)
def read_integridad(
    current_user: DBUsuario = Depends(require_capability(Capacidad.backup)),
    ctx: ContextoAplicacion = Depends(get_contexto)
):
    """Pasajeros y pagos que referencian viajes o clientes inexistentes."""
    return find_orphaned_records(ctx.clients, ctx.trips, ctx.trip_passengers, ctx.payments)
