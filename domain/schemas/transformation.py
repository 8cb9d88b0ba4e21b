from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class TransformationRequest(BaseModel):
    """
    Transformaciones pedidas para una imagen. Todos los campos son opcionales;
    los que faltan no se codifican. Los valores no se validan contra el
    proveedor, se envían tal cual.
    """
    model_config = ConfigDict(frozen=True)

    width: Optional[int] = None
    height: Optional[int] = None
    quality: Optional[int] = None
    format: Optional[str] = None
    fit: Optional[str] = None  # Alias: crop
    gravity: Optional[str] = None  # Alias: focus
    blur: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _map_aliases(cls, data):
        # ImageKit usa crop/focus, Cloudflare fit/gravity
        if isinstance(data, dict):
            data = dict(data)
            if "crop" in data:
                crop = data.pop("crop")
                data.setdefault("fit", crop)
            if "focus" in data:
                focus = data.pop("focus")
                data.setdefault("gravity", focus)
        return data

    @field_validator("format", "fit", "gravity", mode="before")
    @classmethod
    def _enum_to_value(cls, value):
        if isinstance(value, Enum):
            return value.value
        return value

    def merged(self, **overrides) -> "TransformationRequest":
        """Devuelve una copia con los campos indicados sobrescritos (None se ignora)"""
        data = self.model_dump()
        data.update({key: value for key, value in overrides.items() if value is not None})
        return TransformationRequest(**data)

    def is_empty(self) -> bool:
        return all(value is None for value in self.model_dump().values())
