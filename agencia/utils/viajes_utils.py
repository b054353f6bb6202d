from typing import Any, Iterable, List, Optional

from ..models.enums import TipoViajeEnum

# Los vuelos no tienen bus: se asume una capacidad fija
ASIENTOS_VUELO = 300
# Los cruceros se asignan por cabina, sin tope práctico
CAPACIDAD_CRUCERO = 999

ETIQUETAS_TIPO_VIAJE = {
    TipoViajeEnum.grupal.value: "viaje grupal",
    TipoViajeEnum.individual.value: "viaje individual",
    TipoViajeEnum.crucero.value: "crucero",
    TipoViajeEnum.aereo.value: "vuelo",
}


def _tipo(viaje: Any) -> str:
    return getattr(viaje.type, "value", viaje.type)


def etiqueta_tipo_viaje(viaje: Any) -> str:
    return ETIQUETAS_TIPO_VIAJE.get(_tipo(viaje), "viaje")


def describe_passenger_location(pasajero: Any, viaje: Any) -> str:
    """Sufijo ' - Asiento N' (grupales y aéreos) o ' - Cabina X' (cruceros)."""
    tipo = _tipo(viaje)
    if tipo in (TipoViajeEnum.grupal.value, TipoViajeEnum.aereo.value):
        return f" - Asiento {pasajero.numero_asiento}"
    if tipo == TipoViajeEnum.crucero.value:
        return f" - Cabina {pasajero.numero_cabina}"
    return ""


def pasajeros_del_viaje(trip_id, trip_passengers: Iterable[Any]) -> List[Any]:
    return [p for p in trip_passengers if p.trip_id == trip_id]


def asientos_ocupados(trip_id, trip_passengers: Iterable[Any], exclude_passenger_id=None) -> set:
    return {
        p.numero_asiento for p in trip_passengers
        if p.trip_id == trip_id
        and p.id != exclude_passenger_id
        and p.numero_asiento is not None
    }


def _capacidad(viaje: Any, bus: Optional[Any]) -> int:
    tipo = _tipo(viaje)
    if tipo == TipoViajeEnum.individual.value:
        return 1
    if tipo == TipoViajeEnum.crucero.value:
        return CAPACIDAD_CRUCERO
    if tipo == TipoViajeEnum.aereo.value:
        return ASIENTOS_VUELO
    # Grupal: sin bus asignado no hay asientos
    return bus.asientos if bus is not None else 0


def cantidad_asientos_disponibles(viaje: Any, bus: Optional[Any], trip_passengers: Iterable[Any]) -> int:
    """Lugares libres del viaje. Individuales y cruceros no descuentan pasajeros."""
    tipo = _tipo(viaje)
    if tipo in (TipoViajeEnum.individual.value, TipoViajeEnum.crucero.value):
        return _capacidad(viaje, bus)
    return max(_capacidad(viaje, bus) - len(pasajeros_del_viaje(viaje.id, trip_passengers)), 0)


def numeros_asiento_disponibles(
    viaje: Any,
    bus: Optional[Any],
    trip_passengers: Iterable[Any],
    exclude_passenger_id=None,
) -> List[int]:
    """
    Números de asiento libres para el viaje.

    - individual: siempre [1]
    - crucero: [] (se asignan cabinas, no asientos)
    - grupal: 1..asientos del bus, menos los ocupados
    - aereo: 1..300, menos los ocupados
    """
    tipo = _tipo(viaje)
    if tipo == TipoViajeEnum.individual.value:
        return [1]
    if tipo == TipoViajeEnum.crucero.value:
        return []

    ocupados = asientos_ocupados(viaje.id, trip_passengers, exclude_passenger_id)
    return [n for n in range(1, _capacidad(viaje, bus) + 1) if n not in ocupados]


def normalizar_ubicacion(viaje: Any, numero_asiento: Optional[int], numero_cabina: Optional[str]):
    """
    Deja solo el identificador que corresponde al tipo de viaje.

    Individual: asiento 1. Crucero: solo cabina. Grupal y aéreo: solo asiento.
    """
    tipo = _tipo(viaje)
    if tipo == TipoViajeEnum.individual.value:
        numero_asiento = 1
    if tipo == TipoViajeEnum.crucero.value:
        return None, numero_cabina
    return numero_asiento, None


def _es_crucero(tipo) -> bool:
    return getattr(tipo, "value", tipo) == TipoViajeEnum.crucero.value


def cambia_tipo_de_ubicacion(tipo_actual, tipo_nuevo) -> bool:
    """True si el cambio de tipo pasa de cabinas a asientos o al revés."""
    return _es_crucero(tipo_actual) != _es_crucero(tipo_nuevo)


def validar_ubicacion_pasajero(
    viaje: Any,
    bus: Optional[Any],
    trip_passengers: Iterable[Any],
    numero_asiento: Optional[int],
    numero_cabina: Optional[str],
    exclude_passenger_id=None,
) -> Optional[str]:
    """
    Verifica asiento/cabina según el tipo de viaje.

    Returns:
        None si es válido, o el mensaje de error.
    """
    tipo = _tipo(viaje)
    if tipo == TipoViajeEnum.crucero.value:
        if not numero_cabina or not numero_cabina.strip():
            return "Debe indicar el número de cabina para un crucero."
        return None

    if tipo == TipoViajeEnum.individual.value:
        if numero_asiento not in (None, 1):
            return "Los viajes individuales solo tienen el asiento 1."
        return None

    if numero_asiento is None:
        return "Debe indicar el número de asiento."
    if tipo == TipoViajeEnum.grupal.value and bus is None:
        return "El viaje grupal no tiene un bus asignado."
    if numero_asiento > _capacidad(viaje, bus):
        return f"El asiento {numero_asiento} no existe en este viaje."
    if numero_asiento in asientos_ocupados(viaje.id, trip_passengers, exclude_passenger_id):
        return f"El asiento {numero_asiento} ya está ocupado."
    return None


def clientes_disponibles(trip_id, clients: Iterable[Any], trip_passengers: Iterable[Any]) -> List[Any]:
    """Clientes que todavía no están en el viaje."""
    en_viaje = {p.client_id for p in trip_passengers if p.trip_id == trip_id}
    return [c for c in clients if c.id not in en_viaje]
