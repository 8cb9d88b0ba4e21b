from typing import Optional

from pydantic import BaseModel

class ImageUploadRequest(BaseModel):
    folder_name: str = "products"  # Ej: "products", "categories"
    desired_filename: str  # Ej: "saree kanjivaram.jpg"
    content_type: str = "image/jpeg"
    target_width: Optional[int] = None  # Ej: 1200, si falta no se redimensiona
    target_height: Optional[int] = None  # Ej: 600
