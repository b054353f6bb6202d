# agencia/models/bus.py
from sqlalchemy import Column, Integer, String, DateTime, CheckConstraint, func
from .base import Base
from .enums import TipoServicioEnum

class Bus(Base):
    __tablename__ = "buses"

    id = Column(Integer, primary_key=True, index=True)
    patente = Column(String(20), unique=True, nullable=False) # Patente única
    asientos = Column(Integer, nullable=False)
    tipo_servicio = Column(String(20), default=TipoServicioEnum.semicama.value, nullable=False)
    imagen_distribucion = Column(String(255), nullable=True) # Ruta a la imagen de distribución de asientos

    created_at = Column(DateTime, default=func.now(), nullable=True)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=True)

    __table_args__ = (
        CheckConstraint('asientos > 0', name='chk_asientos_positivo'),
    )

    def __repr__(self):
        return f"<Bus(id={self.id}, patente='{self.patente}', asientos={self.asientos})>"
