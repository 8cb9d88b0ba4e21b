from typing import Dict, List, Optional, Tuple

from domain.enums.image_options import ProviderConvention
from domain.schemas.transformation import TransformationRequest

# Orden canónico de los campos; mantiene estables las URLs (claves de caché)
CANONICAL_ORDER = ("width", "height", "quality", "format", "fit", "gravity", "blur")


class TransformationEncoder:
    """Estrategia base: convierte una TransformationRequest en un segmento de URL"""

    convention: ProviderConvention
    keys: Dict[str, str] = {}

    def pairs(self, transformation: Optional[TransformationRequest]) -> List[Tuple[str, str]]:
        """Pares (clave del proveedor, valor) en orden canónico, sin campos vacíos"""
        if transformation is None:
            return []

        pairs = []
        for field in CANONICAL_ORDER:
            value = getattr(transformation, field)
            # 0 y "" se tratan como ausentes
            if value is None or value == "" or value == 0:
                continue
            pairs.append((self.keys[field], str(value)))
        return pairs

    def encode(self, transformation: Optional[TransformationRequest]) -> str:
        raise NotImplementedError


class PathSegmentEncoder(TransformationEncoder):
    """Un solo token de path separado por comas: w-400,h-400,q-80,f-webp"""

    convention = ProviderConvention.PATH_SEGMENT
    keys = {
        "width": "w",
        "height": "h",
        "quality": "q",
        "format": "f",
        "fit": "c",
        "gravity": "fo",
        "blur": "bl",
    }

    def encode(self, transformation: Optional[TransformationRequest]) -> str:
        return ",".join(f"{key}-{value}" for key, value in self.pairs(transformation))


class QueryStringEncoder(TransformationEncoder):
    """Parámetros de query: width=400&height=400&quality=80&format=webp"""

    convention = ProviderConvention.QUERY_STRING
    keys = {
        "width": "width",
        "height": "height",
        "quality": "quality",
        "format": "format",
        "fit": "fit",
        "gravity": "gravity",
        "blur": "blur",
    }

    def encode(self, transformation: Optional[TransformationRequest]) -> str:
        return "&".join(f"{key}={value}" for key, value in self.pairs(transformation))


_ENCODERS = {
    ProviderConvention.PATH_SEGMENT: PathSegmentEncoder(),
    ProviderConvention.QUERY_STRING: QueryStringEncoder(),
}


def get_encoder(convention: ProviderConvention) -> TransformationEncoder:
    return _ENCODERS[ProviderConvention(convention)]


def encode_transformation(transformation: Optional[TransformationRequest], convention: ProviderConvention) -> str:
    return get_encoder(convention).encode(transformation)
