# catalog/routers/images.py
from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from catalog.core.dependencies import get_image_store
from catalog.utils.file_upload import ImageStore

router = APIRouter(tags=["Images"])


@router.get("/image/{image_filename}", response_class=FileResponse)
def get_image(image_filename: str, images: ImageStore = Depends(get_image_store)):
    """
    Serve a stored image.
    Unknown names fall back to the default image instead of a 404.
    """
    path = images.resolve(image_filename)
    return FileResponse(path, media_type="image/jpeg")
