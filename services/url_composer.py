import logging
from typing import Optional

from core.config import ImageDeliveryConfig
from domain.enums.image_options import AbsoluteUrlPolicy, ProviderConvention
from domain.schemas.transformation import TransformationRequest
from services.path_normalizer import is_absolute_url, normalize_path
from services.transformation_encoder import get_encoder

logger = logging.getLogger(__name__)


class UrlComposer:
    """
    Arma la URL final a partir de la referencia guardada, las transformaciones
    y el origen configurado. Función pura: sin red, sin caché, sin estado.
    """

    def __init__(self, config: ImageDeliveryConfig):
        self.config = config
        self.encoder = get_encoder(config.convention)

    @property
    def origin(self) -> str:
        return self.config.origin

    def compose(self, reference: Optional[str], transformation: Optional[TransformationRequest] = None) -> str:
        reference = (reference or "").strip()
        if not reference:
            return ""

        if self.config.default_quality and transformation is not None and transformation.quality is None:
            transformation = transformation.merged(quality=self.config.default_quality)

        segment = self.encoder.encode(transformation)

        if is_absolute_url(reference):
            policy = self.config.absolute_policy
            if policy == AbsoluteUrlPolicy.PASS_THROUGH:
                return reference
            if policy == AbsoluteUrlPolicy.PROXY:
                return self.wrap_with_proxy(reference, segment)

        path = normalize_path(reference, self.config.absolute_policy)
        if not path:
            logger.warning(f"Referencia de imagen sin path utilizable: {reference[:80]}")
            return ""

        return self.join(path, segment)

    def join(self, path: str, segment: str) -> str:
        """Une origen, segmento y path según la convención del proveedor"""
        origin = self.origin

        if self.config.convention == ProviderConvention.PATH_SEGMENT:
            parts = [origin, segment, path] if segment else [origin, path]
            return "/".join(parts)

        url = f"{origin}/{path}"
        if not segment:
            return url
        separator = "&" if "?" in path else "?"
        return f"{url}{separator}{segment}"

    def wrap_with_proxy(self, url: str, segment: str) -> str:
        """
        Envuelve una URL absoluta con el proxy de redimensionado:
        /cdn-cgi/image/{params}/{url}. Sin parámetros la URL queda igual.
        """
        if not url:
            return ""
        if not segment:
            return url
        prefix = self.config.proxy_prefix.rstrip("/")
        return f"{prefix}/{segment}/{url}"
