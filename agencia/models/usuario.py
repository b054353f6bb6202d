# agencia/models/usuario.py

from sqlalchemy import Column, Integer, String, DateTime, Boolean, Enum, func
from .base import Base
from .enums import RolUsuarioEnum


class Usuario(Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False) # Almacenar el hash aquí
    name = Column(String(100), nullable=False)
    email = Column(String(100), nullable=False)
    role = Column(Enum(RolUsuarioEnum), default=RolUsuarioEnum.operator, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Campos de auditoría
    created_at = Column(DateTime, default=func.now(), nullable=True)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=True)

    def __repr__(self):
        return f"<Usuario(id={self.id}, username='{self.username}', role='{self.role}')>"
