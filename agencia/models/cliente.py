# agencia/models/cliente.py
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, func
from .base import Base

class Cliente(Base):
    __tablename__ = "clients"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False) # "Apellido y Nombre"
    email = Column(String(100), nullable=True)
    phone = Column(String(30), nullable=False)
    address = Column(Text, nullable=False)
    dni = Column(String(20), nullable=False, index=True)
    fecha_nacimiento = Column(Date, nullable=False)

    # Documentación de viaje
    vencimiento_dni = Column(Date, nullable=True)
    numero_pasaporte = Column(String(30), nullable=True)
    vencimiento_pasaporte = Column(Date, nullable=True)

    created_at = Column(DateTime, default=func.now(), nullable=True)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=True)

    # Sin relaciones inversas: los pasajes y pagos de un cliente eliminado quedan en la base
    # y su limpieza depende del operador.

    def __repr__(self):
        return f"<Cliente(id={self.id}, name='{self.name}', dni='{self.dni}')>"
