# agencia/permisos.py
"""
Capacidades por rol.

Cada pantalla de la API exige una capacidad; el rol del usuario define el
conjunto de capacidades que tiene. El administrador las tiene todas.
"""
from enum import Enum
from typing import Dict, FrozenSet

from fastapi import Depends, HTTPException, status

from .auth import get_current_active_user
from .models.enums import RolUsuarioEnum


class Capacidad(str, Enum):
    dashboard = "dashboard"
    clients = "clients"
    trips = "trips"
    accounts = "accounts"
    accounts_summary = "accounts_summary"  # Totales de saldos (los operadores solo ven recibos)
    buses = "buses"
    users = "users"
    backup = "backup"


CAPACIDADES_POR_ROL: Dict[RolUsuarioEnum, FrozenSet[Capacidad]] = {
    RolUsuarioEnum.admin: frozenset(Capacidad),
    RolUsuarioEnum.manager: frozenset({
        Capacidad.clients,
        Capacidad.trips,
        Capacidad.accounts,
        Capacidad.accounts_summary,
        Capacidad.buses,
        Capacidad.dashboard,
    }),
    RolUsuarioEnum.operator: frozenset({
        Capacidad.clients,
        Capacidad.trips,
        Capacidad.accounts,
        Capacidad.dashboard,
    }),
    RolUsuarioEnum.readonly: frozenset({Capacidad.dashboard}),
}


def has_capability(role, tag) -> bool:
    """True si el rol tiene la capacidad. Roles o capacidades desconocidos no tienen permisos."""
    try:
        rol = RolUsuarioEnum(role)
        capacidad = Capacidad(tag)
    except ValueError:
        return False
    return capacidad in CAPACIDADES_POR_ROL.get(rol, frozenset())


def require_capability(tag: Capacidad):
    """
    Dependencia que verifica que el usuario autenticado y activo tenga la capacidad.
    Devuelve el usuario para que la ruta pueda usarlo.
    """
    def _require_capability_inner(current_user=Depends(get_current_active_user)):
        if not has_capability(current_user.role, tag):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="No tienes permisos suficientes para acceder a este recurso.",
            )
        return current_user
    return _require_capability_inner
