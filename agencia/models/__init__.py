#aqui se el __init__.py para importar las clases y funciones necesarias
from .base import Base
from .usuario import Usuario
from .cliente import Cliente
from .bus import Bus
from .viaje import Viaje # Importa el modelo Viaje
from .pasajero_viaje import PasajeroViaje # Tabla de unión cliente-viaje
from .pago import Pago
from .enums import RolUsuarioEnum, MonedaEnum, TipoViajeEnum, TipoPagoEnum, TipoServicioEnum # Importa los enums
