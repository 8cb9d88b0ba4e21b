import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Query, Request, HTTPException, File, UploadFile, Form

from core.config import ImageDeliveryConfig
from domain.enums.image_options import ProviderConvention
from domain.enums.image_presets import ImagePreset
from domain.schemas.file_schema import ImageUploadRequest
from domain.schemas.transformation import TransformationRequest
from infrastructure.r2_client import R2Client
from services.file_service import FileService
from services.image_url_service import ImageUrlService

logger = logging.getLogger(__name__)

router = APIRouter()
image_service = ImageUrlService()
r2_client = R2Client()
file_service = FileService(r2_client)


def _service_for(convention: Optional[ProviderConvention]) -> ImageUrlService:
    if convention is None or convention == image_service.config.convention:
        return image_service
    config = image_service.config.model_copy(update={"convention": convention})
    return ImageUrlService(config)


def _parse_widths(widths: Optional[str]) -> Optional[list]:
    if not widths:
        return None
    try:
        return [int(width) for width in widths.split(",") if width.strip()]
    except ValueError:
        raise HTTPException(400, "widths debe ser una lista de enteros separada por comas")


@router.get("/images/url")
async def get_image_url(
    src: str = Query("", description="Referencia de la imagen (clave o URL absoluta)"),
    width: Optional[int] = Query(None, gt=0),
    height: Optional[int] = Query(None, gt=0),
    quality: Optional[int] = Query(None, ge=1, le=100),
    format: Optional[str] = None,
    fit: Optional[str] = None,
    gravity: Optional[str] = None,
    crop: Optional[str] = Query(None, description="Alias de fit"),
    focus: Optional[str] = Query(None, description="Alias de gravity"),
    blur: Optional[int] = Query(None, gt=0),
    convention: Optional[ProviderConvention] = None,
):
    fields = {
        "width": width,
        "height": height,
        "quality": quality,
        "format": format,
        "fit": fit,
        "gravity": gravity,
        "crop": crop,
        "focus": focus,
        "blur": blur,
    }
    # Solo los campos presentes, para que crop/focus no choquen con un fit/gravity vacío
    transformation = TransformationRequest(**{k: v for k, v in fields.items() if v is not None})
    service = _service_for(convention)
    return {"url": service.get_optimized_image_url(src, transformation)}


@router.get("/images/srcset")
async def get_image_srcset(
    src: str = "",
    widths: Optional[str] = Query(None, description="Anchos separados por comas, ej. 400,800"),
    format: str = "webp",
    convention: Optional[ProviderConvention] = None,
):
    service = _service_for(convention)
    parsed = _parse_widths(widths)
    responsive_set = (
        service.get_responsive_set(src, parsed, format=format)
        if parsed is not None
        else service.get_responsive_set(src, format=format)
    )
    return {
        "srcset": responsive_set.to_srcset(),
        "entries": [entry.model_dump() for entry in responsive_set.entries],
    }


@router.get("/images/progressive")
async def get_progressive_image(
    src: str = "",
    width: Optional[int] = Query(None, gt=0),
    quality: Optional[int] = Query(None, ge=1, le=100),
    blur: Optional[int] = Query(None, gt=0, description="Blur del placeholder"),
    convention: Optional[ProviderConvention] = None,
):
    service = _service_for(convention)
    pair = service.get_progressive_image_set(src, width=width, quality=quality, placeholder_blur=blur)
    return pair.model_dump()


@router.get("/images/preset/{preset}")
async def get_preset_image(preset: str, src: str = ""):
    """
    Devuelve la URL de una imagen según un preset de la tienda.

    Presets válidos: THUMBNAIL, BANNER, GALLERY, BLUR_UP, LAZY, FULL_SIZE
    """
    try:
        selected = ImagePreset[preset.upper()]
    except KeyError:
        raise HTTPException(400, f"Preset no válido. Opciones disponibles: {', '.join([p.name for p in ImagePreset])}")
    return {"url": image_service.get_preset_url(src, selected), "preset": selected.name}


@router.post("/upload-r2-image")
async def upload_r2_image(
        file: UploadFile = File(None),
        fileName: str = Form(None),
        folder: str = Form("products"),
        preset: str = Form(None),  # Parámetro opcional para redimensionar antes de subir
):
    if file is None or not fileName:
        raise HTTPException(400, "Missing file or filename")

    content_type = file.content_type or "image/jpeg"
    if not content_type.startswith("image/"):
        raise HTTPException(400, "Solo se permiten archivos de imagen")

    if preset:
        try:
            upload_request = FileService.request_for_preset(ImagePreset[preset.upper()], fileName, folder, content_type)
        except KeyError:
            raise HTTPException(400, f"Preset no válido. Opciones disponibles: {', '.join([p.name for p in ImagePreset])}")
    else:
        upload_request = ImageUploadRequest(
            folder_name=folder or "products",
            desired_filename=fileName,
            content_type=content_type,
        )

    try:
        content = await file.read()
        result = file_service.process_and_upload(content, upload_request)
    except ValueError as e:
        raise HTTPException(400, str(e))
    except Exception as e:
        logger.error(f"Error subiendo a R2: {e}")
        raise HTTPException(500, f"Failed to upload to Cloudflare R2: {str(e)}")
    finally:
        await file.close()

    return {
        "success": True,
        "url": result["url"],
        "fileName": result["fileName"],
        "message": "File uploaded successfully to Cloudflare R2",
    }


@router.delete("/delete-r2-image")
async def delete_r2_image(request: Request):
    try:
        payload = await request.json()
    except ValueError:
        payload = {}

    file_name = payload.get("fileName") if isinstance(payload, dict) else None
    if not file_name:
        raise HTTPException(status_code=400, detail="Missing fileName")

    try:
        deleted = file_service.delete(file_name)
    except Exception as e:
        logger.error(f"Error eliminando de R2: {e}")
        raise HTTPException(500, f"Failed to delete from Cloudflare R2: {str(e)}")

    if not deleted:
        raise HTTPException(500, "Failed to delete from Cloudflare R2")

    return {
        "success": True,
        "message": "File deleted successfully from Cloudflare R2",
        "fileName": file_name,
    }


@router.get("/health")
async def health():
    config: ImageDeliveryConfig = image_service.config
    return {
        "status": "healthy" if image_service.is_configured() else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "images": {
            "origin": config.origin or "missing",
            "convention": config.convention.value,
        },
        "storage": {
            "bucket": r2_client.bucket or "missing",
            "credentials": "***configured***" if r2_client.is_configured() else "missing",
        },
    }
