from enum import Enum

class RolUsuarioEnum(str, Enum): # Usamos str, enum.Enum
    admin = "admin"
    manager = "manager"
    operator = "operator"
    readonly = "readonly"


class MonedaEnum(str, Enum):
    ARS = "ARS"
    USD = "USD"

class TipoViajeEnum(str, Enum):
     grupal = "grupal"
     individual = "individual"
     crucero = "crucero"
     aereo = "aereo"

class TipoPagoEnum(str, Enum):
     payment = "payment"
     charge = "charge"

class TipoServicioEnum(str, Enum):
    ejecutivo = "ejecutivo"
    semicama = "semicama"
    cama = "cama"
    suite = "suite"
