from datetime import date, timedelta
from typing import Any, Iterable, List, Optional

DIAS_AVISO_VENCIMIENTO = 30


def documento_vencido(vencimiento: Optional[date], hoy: Optional[date] = None) -> bool:
    if vencimiento is None:
        return False
    hoy = hoy or date.today()
    return vencimiento < hoy


def documento_por_vencer(vencimiento: Optional[date], hoy: Optional[date] = None) -> bool:
    """True si vence dentro de los próximos 30 días (incluye los ya vencidos)."""
    if vencimiento is None:
        return False
    hoy = hoy or date.today()
    return vencimiento <= hoy + timedelta(days=DIAS_AVISO_VENCIMIENTO)


def clientes_con_documentos_por_vencer(clients: Iterable[Any], hoy: Optional[date] = None) -> List[Any]:
    return [
        c for c in clients
        if documento_por_vencer(c.vencimiento_dni, hoy)
        or documento_por_vencer(c.vencimiento_pasaporte, hoy)
    ]
