from enum import Enum


class ProviderConvention(str, Enum):
    """
    Forma en la que un proveedor recibe las transformaciones.
    - PATH_SEGMENT: un token en el path, ej. w-400,q-80,f-webp (ImageKit)
    - QUERY_STRING: parámetros de query, ej. width=400&quality=80 (Cloudflare)
    """
    PATH_SEGMENT = "path-segment"
    QUERY_STRING = "query-string"


class AbsoluteUrlPolicy(str, Enum):
    """Qué hacer cuando la referencia ya es una URL absoluta"""
    PASS_THROUGH = "pass-through"  # La URL se considera final
    STRIP_HOST = "strip-host"  # Se quita esquema y host y se recompone sobre el origen
    PROXY = "proxy"  # Se envuelve con el prefijo del proxy de imágenes


class ImageProvider(str, Enum):
    IMAGEKIT = "imagekit"
    R2 = "r2"


class ImageFormat(str, Enum):
    WEBP = "webp"
    JPEG = "jpeg"
    JPG = "jpg"
    PNG = "png"
    AVIF = "avif"
    AUTO = "auto"


class FitMode(str, Enum):
    # Cloudflare
    SCALE_DOWN = "scale-down"
    CONTAIN = "contain"
    COVER = "cover"
    CROP = "crop"
    PAD = "pad"
    # ImageKit
    MAINTAIN_RATIO = "maintain_ratio"
    FORCE = "force"
    AT_MAX = "at_max"
    AT_LEAST = "at_least"


class Gravity(str, Enum):
    AUTO = "auto"
    CENTER = "center"
    FACE = "face"
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"
    SIDE = "side"


class LoadingStrategy(str, Enum):
    LAZY = "lazy"
    EAGER = "eager"
