from pydantic import BaseModel
from typing import List, Optional
from decimal import Decimal

from .cliente import Cliente

class KpiCard(BaseModel):
    title: str
    value: str
    icon: Optional[str] = None

class IngresosMoneda(BaseModel):
    currency: str
    total: Decimal  # Solo pagos de tipo "payment" en esta moneda

# --- Esquema principal ---

class DashboardData(BaseModel):
    total_clients: int
    total_buses: int
    total_asientos: int
    viajes_activos: int
    ingresos: List[IngresosMoneda]
    kpi_cards: List[KpiCard]
    ultimos_clientes: List[Cliente]
