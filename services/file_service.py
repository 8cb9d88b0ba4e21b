from PIL import Image, UnidentifiedImageError
import io
import re
import time
import logging
from datetime import datetime, timezone
from typing import Optional

from domain.enums.image_presets import ImagePreset
from domain.schemas.file_schema import ImageUploadRequest
from infrastructure.r2_client import R2Client

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")

_FORMATS = {
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/png": "PNG",
    "image/webp": "WEBP",
}


class FileService:
    def __init__(self, client: Optional[R2Client] = None):
        self.r2_client = client or R2Client()

    def process_and_upload(self, file_content: bytes, request: ImageUploadRequest, timestamp: Optional[int] = None) -> dict:
        if not file_content:
            raise ValueError("Archivo vacío")
        if not request.content_type.startswith("image/"):
            raise ValueError(f"Solo se permiten archivos de imagen, recibido {request.content_type}")

        # Procesar imagen
        content = file_content
        if request.target_width:
            content = self._process_image(file_content, request)

        # Generar clave final
        object_key = self.build_object_key(request.folder_name, request.desired_filename, timestamp)

        logger.info(f"Subiendo {object_key} ({len(content)} bytes, {request.content_type})")

        # Subir a R2
        url = self.r2_client.upload_file(
            content,
            object_key,
            content_type=request.content_type,
            metadata={
                "originalName": request.desired_filename,
                "uploadedAt": datetime.now(timezone.utc).isoformat(),
            },
        )
        return {"url": url, "fileName": object_key}

    def delete(self, object_key: str) -> bool:
        if not object_key:
            raise ValueError("Falta fileName")
        return self.r2_client.delete_file(object_key)

    @staticmethod
    def build_object_key(folder: Optional[str], file_name: str, timestamp: Optional[int] = None) -> str:
        """Clave del objeto: {carpeta}/{timestamp en ms}_{nombre limpio}"""
        timestamp = timestamp if timestamp is not None else int(time.time() * 1000)
        sanitized = _UNSAFE_CHARS.sub("_", file_name)
        return f"{folder or 'products'}/{timestamp}_{sanitized}"

    @staticmethod
    def request_for_preset(preset: ImagePreset, desired_filename: str, folder_name: str = "products",
                           content_type: str = "image/jpeg") -> ImageUploadRequest:
        return ImageUploadRequest(
            folder_name=folder_name,
            desired_filename=desired_filename,
            content_type=content_type,
            target_width=preset.width,
            target_height=preset.height,
        )

    def _process_image(self, image_bytes: bytes, request: ImageUploadRequest) -> bytes:
        output_format = _FORMATS.get(request.content_type.lower(), "JPEG")

        try:
            source = Image.open(io.BytesIO(image_bytes))
        except UnidentifiedImageError as e:
            raise ValueError(f"Archivo no es una imagen válida: {e}")

        with source as img:
            # Convertir a RGB si es necesario
            if img.mode in ('RGBA', 'LA') and output_format == "JPEG":
                background = Image.new('RGB', img.size, (255, 255, 255))
                background.paste(img, mask=img.split()[-1])
                img = background
            elif img.mode not in ('RGB', 'RGBA'):
                img = img.convert('RGB')

            original_width, original_height = img.size

            if request.target_height:
                # Tamaño exacto manteniendo relación de aspecto, con relleno blanco
                ratio = min(request.target_width / original_width,
                            request.target_height / original_height)
                new_size = (max(int(original_width * ratio), 1),
                            max(int(original_height * ratio), 1))
                resized_img = img.resize(new_size, Image.LANCZOS)

                final_img = Image.new(resized_img.mode,
                                      (request.target_width, request.target_height),
                                      (255, 255, 255) if resized_img.mode == 'RGB' else (255, 255, 255, 0))
                offset = ((request.target_width - new_size[0]) // 2,
                          (request.target_height - new_size[1]) // 2)
                final_img.paste(resized_img, offset)
            else:
                # Solo ancho: nunca se agranda
                final_img = img.copy()
                if original_width > request.target_width:
                    height = max(int(original_height * request.target_width / original_width), 1)
                    final_img = final_img.resize((request.target_width, height), Image.LANCZOS)

            # Convertir a bytes
            img_byte_arr = io.BytesIO()
            final_img.save(img_byte_arr, format=output_format, quality=85)
            return img_byte_arr.getvalue()
