# agencia/services/recibo_service.py
"""
Recibos de pago imprimibles: HTML (plantilla Jinja2) y PDF (ReportLab).
"""
import io
import os
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple
from xml.sax.saxutils import escape

from jinja2 import Environment, FileSystemLoader, select_autoescape
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from sqlalchemy.orm import Session

from ..models.bus import Bus as DBBus
from ..models.cliente import Cliente as DBCliente
from ..models.pago import Pago as DBPago
from ..models.pasajero_viaje import PasajeroViaje as DBPasajeroViaje
from ..models.viaje import Viaje as DBViaje
from ..utils.viajes_utils import etiqueta_tipo_viaje

logger = logging.getLogger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")

EMPRESA = {
    "nombre": "LT Tour Operator",
    "lema": "Tu compañía de confianza para viajar",
}

MONEDAS = {
    "USD": ("US$", "DÓLARES AMERICANOS"),
    "ARS": ("$", "PESOS ARGENTINOS"),
}

TIPOS_SALIDA = {
    "grupal": "Salida Grupal",
    "individual": "Salida Individual",
    "crucero": "Crucero",
    "aereo": "Vuelo",
}

_env = Environment(
    loader=FileSystemLoader(TEMPLATES_DIR),
    autoescape=select_autoescape(["html"]),
)


def formatear_monto(monto) -> str:
    """1234.5 -> '1.234,50' (formato argentino)."""
    texto = f"{Decimal(str(monto)):,.2f}"
    return texto.replace(",", "_").replace(".", ",").replace("_", ".")


@dataclass
class DatosRecibo:
    receipt_number: str
    monto: str
    simbolo: str
    moneda_nombre: str
    descripcion: str
    fecha_pago: str
    generado: str
    cliente_nombre: Optional[str] = None
    cliente_dni: Optional[str] = None
    cliente_email: Optional[str] = None
    cliente_telefono: Optional[str] = None
    viaje_destino: Optional[str] = None
    viaje_etiqueta: str = "viaje"
    viaje_tipo: str = "N/A"
    fecha_salida: str = "N/A"
    detalles: List[Tuple[str, str]] = field(default_factory=list)


def armar_datos_recibo(db: Session, pago: DBPago) -> DatosRecibo:
    """Reúne cliente, viaje, pasajero y bus del pago. Los datos faltantes se muestran como N/A."""
    cliente = db.query(DBCliente).filter(DBCliente.id == pago.client_id).first()
    viaje = None
    if pago.trip_id is not None:
        viaje = db.query(DBViaje).filter(DBViaje.id == pago.trip_id).first()

    moneda = getattr(pago.currency, "value", pago.currency)
    simbolo, moneda_nombre = MONEDAS.get(moneda, ("$", moneda))

    datos = DatosRecibo(
        receipt_number=pago.receipt_number or f"PAGO-{pago.id}",
        monto=formatear_monto(pago.amount),
        simbolo=simbolo,
        moneda_nombre=moneda_nombre,
        descripcion=pago.description or "",
        fecha_pago=pago.date.strftime("%d/%m/%Y") if pago.date else "N/A",
        generado=datetime.now().strftime("%d/%m/%Y"),
    )

    if cliente is not None:
        datos.cliente_nombre = cliente.name
        datos.cliente_dni = cliente.dni
        datos.cliente_email = cliente.email
        datos.cliente_telefono = cliente.phone

    if viaje is None:
        return datos

    tipo = getattr(viaje.type, "value", viaje.type)
    datos.viaje_destino = viaje.destino
    datos.viaje_etiqueta = etiqueta_tipo_viaje(viaje)
    datos.viaje_tipo = TIPOS_SALIDA.get(tipo, "N/A")
    datos.fecha_salida = viaje.fecha_salida.strftime("%d/%m/%Y") if viaje.fecha_salida else "N/A"

    pasajero = db.query(DBPasajeroViaje).filter(
        DBPasajeroViaje.client_id == pago.client_id,
        DBPasajeroViaje.trip_id == viaje.id,
    ).first()

    if tipo == "grupal":
        bus = db.query(DBBus).filter(DBBus.id == viaje.bus_id).first() if viaje.bus_id else None
        if pasajero is not None:
            datos.detalles.append(("Asiento", f"N° {pasajero.numero_asiento}"))
        datos.detalles.append((
            "Bus",
            f"{bus.patente if bus else 'N/A'} - {bus.tipo_servicio if bus else 'N/A'}",
        ))
    elif tipo == "aereo":
        if pasajero is not None:
            datos.detalles.append(("Asiento", f"N° {pasajero.numero_asiento}"))
        datos.detalles.append(("Aerolínea", viaje.aerolinea or "N/A"))
        datos.detalles.append(("Vuelo", viaje.numero_vuelo or "N/A"))
        datos.detalles.append(("Clase", viaje.clase or "N/A"))
    elif tipo == "crucero":
        if pasajero is not None:
            datos.detalles.append(("Cabina", pasajero.numero_cabina or "N/A"))
        datos.detalles.append(("Naviera", viaje.naviera or "N/A"))
        datos.detalles.append(("Barco", viaje.barco or "N/A"))
        datos.detalles.append(("Tipo de Cabina", viaje.cabina or "N/A"))

    return datos


def render_recibo_html(datos: DatosRecibo) -> str:
    return _env.get_template("recibo.html").render(recibo=datos, empresa=EMPRESA)


def render_recibo_pdf(datos: DatosRecibo) -> bytes:
    """Genera el recibo en PDF con el mismo contenido que la versión HTML."""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, leftMargin=0.75*inch, rightMargin=0.75*inch,
                            topMargin=0.75*inch, bottomMargin=0.75*inch)
    styles = getSampleStyleSheet()
    elements = []

    elements.append(Paragraph(f"<b>{EMPRESA['nombre']}</b>", styles['h1']))
    elements.append(Paragraph(EMPRESA['lema'], styles['Normal']))
    elements.append(Spacer(1, 12))
    elements.append(Paragraph("<b>RECIBO DE PAGO</b>", styles['h2']))
    elements.append(Paragraph(f"N° {datos.receipt_number}", styles['Normal']))
    elements.append(Spacer(1, 16))

    estilo_info = TableStyle([
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ('FONTSIZE', (0, 0), (-1, -1), 10),
    ])

    elements.append(Paragraph("<b>Información del Cliente</b>", styles['h3']))
    cliente_table = Table([
        ["Nombre:", datos.cliente_nombre or "N/A"],
        ["DNI:", datos.cliente_dni or "N/A"],
        ["Email:", datos.cliente_email or "N/A"],
        ["Teléfono:", datos.cliente_telefono or "N/A"],
    ], colWidths=[2*inch, 4*inch])
    cliente_table.setStyle(estilo_info)
    elements.append(cliente_table)
    elements.append(Spacer(1, 12))

    if datos.viaje_destino:
        elements.append(Paragraph(f"<b>Detalles del {datos.viaje_etiqueta}</b>", styles['h3']))
        filas = [
            ["Destino:", datos.viaje_destino],
            ["Tipo:", datos.viaje_tipo],
            ["Fecha de Salida:", datos.fecha_salida],
        ]
        filas.extend([f"{etiqueta}:", valor] for etiqueta, valor in datos.detalles)
        viaje_table = Table(filas, colWidths=[2*inch, 4*inch])
        viaje_table.setStyle(estilo_info)
        elements.append(viaje_table)
        elements.append(Spacer(1, 12))

    total_table = Table([
        ["TOTAL PAGADO:", f"{datos.simbolo}{datos.monto}"],
        ["Moneda:", datos.moneda_nombre],
        ["Concepto:", Paragraph(escape(datos.descripcion), styles['Normal'])],
        ["Fecha de pago:", datos.fecha_pago],
    ], colWidths=[2*inch, 4*inch])
    total_table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, -1), colors.whitesmoke),
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('FONTNAME', (1, 0), (1, 0), 'Helvetica-Bold'),
        ('TEXTCOLOR', (1, 0), (1, 0), colors.HexColor("#2563eb")),
        ('FONTSIZE', (1, 0), (1, 0), 14),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('BOX', (0, 0), (-1, -1), 0.5, colors.grey),
    ]))
    elements.append(total_table)
    elements.append(Spacer(1, 30))

    elements.append(Paragraph(f"<b>{EMPRESA['nombre']}</b> - {EMPRESA['lema']}", styles['Normal']))
    elements.append(Paragraph("Gracias por confiar en nosotros", styles['Normal']))
    elements.append(Paragraph(f"Recibo generado el {datos.generado}", styles['Normal']))

    doc.build(elements)
    logger.debug(f"Recibo PDF {datos.receipt_number} generado.")
    return buffer.getvalue()
