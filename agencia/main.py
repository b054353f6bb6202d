import os
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from dotenv import load_dotenv

# --- Carga de Variables de Entorno ---
load_dotenv()

from agencia.models.base import Base
from agencia.database import engine
from agencia.routes import (
    auth, usuario, cliente, bus, viaje, pago, cuentas, backup, dashboard, uploads
)
from agencia.utils.imagenes_utils import STATIC_DIR

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# --- Creación de la Aplicación FastAPI ---
app = FastAPI(
    title="LT Tour Operator - Back-office",
    description="API para la gestión de clientes, viajes, pasajeros, pagos y cuentas corrientes.",
    version="1.0.0"
)

# --- Middlewares ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Montaje de Archivos Estáticos ---
os.makedirs(STATIC_DIR, exist_ok=True)
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

# --- Creación de Tablas en la Base de Datos (para desarrollo) ---
Base.metadata.create_all(bind=engine)

# --- Inclusión de Routers de la API ---
app.include_router(auth.router)
app.include_router(usuario.router)
app.include_router(cliente.router)
app.include_router(bus.router)
app.include_router(viaje.router)
app.include_router(pago.router)
app.include_router(cuentas.router)
app.include_router(backup.router)
app.include_router(dashboard.router)
app.include_router(uploads.router)
