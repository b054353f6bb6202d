from fastapi import APIRouter, Depends, File, UploadFile

from ..auth import get_current_active_user
from ..models.usuario import Usuario as DBUsuario
from ..utils.imagenes_utils import guardar_imagen

router = APIRouter(
    prefix="/uploads",
    tags=["Uploads"]
)

@router.post("/image/")
async def upload_image(
    file: UploadFile = File(...),
    current_user: DBUsuario = Depends(get_current_active_user)
):
    # Leer archivo en memoria
    contents = await file.read()
    await file.close()

    public_path = guardar_imagen(contents, file.content_type)
    return {"file_path": public_path}
