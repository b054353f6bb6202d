import os
import uuid
import logging
from io import BytesIO

from fastapi import HTTPException, status
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

STATIC_DIR = os.getenv("STATIC_DIR", "static")
MAX_IMAGE_SIZE_MB = int(os.getenv("MAX_IMAGE_SIZE_MB", 5))
UPLOAD_SUBDIR = "uploads"


def upload_dir() -> str:
    path = os.path.join(STATIC_DIR, UPLOAD_SUBDIR)
    os.makedirs(path, exist_ok=True)
    return path


def guardar_imagen(contents: bytes, content_type: str) -> str:
    """
    Valida y guarda una imagen como .webp.

    Returns:
        Ruta pública de la imagen (/static/uploads/<uuid>.webp).
    """
    if not content_type or not content_type.startswith("image/"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Solo se aceptan imágenes.")

    if len(contents) > MAX_IMAGE_SIZE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"La imagen no puede superar los {MAX_IMAGE_SIZE_MB} MB.",
        )

    try:
        image = Image.open(BytesIO(contents))
        image.load()
    except (UnidentifiedImageError, OSError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="El archivo no es una imagen válida.")

    # Convertir a RGB (webp no soporta alfa en algunos casos)
    if image.mode in ("RGBA", "P", "LA"):
        image = image.convert("RGB")

    unique_filename = f"{uuid.uuid4()}.webp"
    file_path = os.path.join(upload_dir(), unique_filename)

    try:
        image.save(file_path, "WEBP", quality=80)
    except Exception as e:
        logger.error(f"Error al guardar imagen: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error al procesar la imagen.")

    return f"/static/{UPLOAD_SUBDIR}/{unique_filename}"
