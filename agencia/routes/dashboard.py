from fastapi import APIRouter, Depends, Query

from ..contexto import ContextoAplicacion, get_contexto
from ..models.usuario import Usuario as DBUsuario
from ..permisos import Capacidad, require_capability
from ..schemas.cliente import Cliente
from ..schemas.dashboard import DashboardData, IngresosMoneda, KpiCard
from ..services.cuentas_service import compute_income_by_currency
from ..services.recibo_service import MONEDAS, formatear_monto

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"]
)

@router.get("/", response_model=DashboardData)
def get_dashboard_data(
    ultimos: int = Query(5, gt=0, le=50, description="Cantidad de clientes recientes"),
    current_user: DBUsuario = Depends(require_capability(Capacidad.dashboard)),
    ctx: ContextoAplicacion = Depends(get_contexto)
):
    total_asientos = sum(bus.asientos for bus in ctx.buses)
    viajes_activos = sum(1 for t in ctx.trips if not t.archived)
    ingresos = compute_income_by_currency(ctx.payments)

    # --- KPIs ---
    kpi_cards = [
        KpiCard(title="Clientes", value=str(len(ctx.clients)), icon="users"),
        KpiCard(title="Viajes activos", value=str(viajes_activos), icon="map"),
        KpiCard(title="Buses", value=f"{len(ctx.buses)} ({total_asientos} asientos)", icon="bus"),
    ]
    for moneda, total in ingresos.items():
        simbolo = MONEDAS.get(moneda, ("$", moneda))[0]
        kpi_cards.append(KpiCard(title=f"Ingresos {moneda}", value=f"{simbolo}{formatear_monto(total)}", icon="dollar-sign"))

    ultimos_clientes = sorted(
        ctx.clients,
        key=lambda c: (c.created_at is not None, c.created_at, c.id),
        reverse=True,
    )[:ultimos]

    return DashboardData(
        total_clients=len(ctx.clients),
        total_buses=len(ctx.buses),
        total_asientos=total_asientos,
        viajes_activos=viajes_activos,
        ingresos=[IngresosMoneda(currency=m, total=t) for m, t in ingresos.items()],
        kpi_cards=kpi_cards,
        ultimos_clientes=[Cliente.model_validate(c) for c in ultimos_clientes],
    )
