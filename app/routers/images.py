from fastapi import APIRouter, Depends, File, Request, UploadFile

from app.config import Settings
from app.dependencies import get_current_user, get_settings
from app.models import User
from app.schemas import ImageUploadResponse
from app.services import image_service

router = APIRouter(prefix="/image", tags=["images"])


@router.post("/upload", status_code=201, response_model=ImageUploadResponse)
async def upload_image(
    request: Request,
    image: UploadFile = File(...),
    user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
):
    path = await image_service.save_image(image, settings)
    return {"url": f"{str(request.base_url).rstrip('/')}{path}"}
