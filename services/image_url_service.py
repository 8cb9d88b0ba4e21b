from typing import Iterable, Optional, Union

from core.config import ImageDeliveryConfig
from domain.enums.image_options import ImageProvider
from domain.enums.image_presets import ImagePreset
from domain.models import ProgressivePair, ResponsiveSet, ResponsiveUrls
from domain.schemas.transformation import TransformationRequest
from services.responsive_set_builder import DEFAULT_WIDTHS, ResponsiveSetBuilder
from services.url_composer import UrlComposer


THUMBNAIL_SIZES = {
    "small": 100,
    "medium": 200,
    "large": 300,
}

PLACEHOLDER_IMAGE_URL = (
    "https://images.unsplash.com/photo-1594633313593-bab3825d0caf"
    "?ixlib=rb-4.0.3&auto=format&fit=crop&w={width}&h={height}&q=80"
)

R2_HOST_MARKERS = ("r2.dev", "r2.cloudflarestorage.com")


class ImageUrlService:
    """
    Punto de entrada para las URLs de imágenes de la tienda.
    El proveedor (ImageKit o R2) se elige al construir la configuración;
    los llamadores no saben qué convención se usa.
    """

    def __init__(self, config: Optional[ImageDeliveryConfig] = None):
        self.config = config or ImageDeliveryConfig.from_settings()
        self.composer = UrlComposer(self.config)
        self.builder = ResponsiveSetBuilder(self.composer)

    @classmethod
    def for_provider(cls, provider: ImageProvider) -> "ImageUrlService":
        return cls(ImageDeliveryConfig.for_provider(provider))

    def get_optimized_image_url(self, src: Optional[str], transformation: Optional[TransformationRequest] = None, **options) -> str:
        """URL optimizada; acepta una TransformationRequest o los campos sueltos (width=..., crop=...)"""
        if options:
            transformation = (transformation or TransformationRequest()).merged(
                **TransformationRequest(**options).model_dump()
            )
        return self.composer.compose(src, transformation)

    def get_thumbnail_url(self, src: Optional[str], size: Union[int, str] = 150) -> str:
        pixels = self.get_thumbnail_size(size)
        return self.composer.compose(src, TransformationRequest(
            width=pixels,
            height=pixels,
            quality=85,
            format="webp",
            fit="cover",
        ))

    @staticmethod
    def get_thumbnail_size(size: Union[int, str]) -> int:
        """Traduce small/medium/large a píxeles; los enteros se devuelven igual"""
        if isinstance(size, int):
            return size
        return THUMBNAIL_SIZES.get(str(size).lower(), THUMBNAIL_SIZES["medium"])

    def get_full_size_url(self, src: Optional[str]) -> str:
        return self.composer.compose(src, TransformationRequest(width=1200, quality=90))

    def get_responsive_urls(self, src: Optional[str]) -> ResponsiveUrls:
        """URLs para distintos tamaños de pantalla"""
        return ResponsiveUrls(
            small=self.composer.compose(src, TransformationRequest(width=400, quality=75)),
            medium=self.composer.compose(src, TransformationRequest(width=800, quality=80)),
            large=self.composer.compose(src, TransformationRequest(width=1200, quality=85)),
            xlarge=self.composer.compose(src, TransformationRequest(width=1600, quality=90)),
        )

    def get_responsive_set(
        self,
        src: Optional[str],
        widths: Iterable[int] = DEFAULT_WIDTHS,
        transformation: Optional[TransformationRequest] = None,
        format: str = "webp",
    ) -> ResponsiveSet:
        return self.builder.build(src, widths, transformation, format)

    def generate_src_set(
        self,
        src: Optional[str],
        widths: Iterable[int] = DEFAULT_WIDTHS,
        transformation: Optional[TransformationRequest] = None,
        format: str = "webp",
    ) -> str:
        return self.builder.build_srcset(src, widths, transformation, format)

    def get_progressive_image_set(
        self,
        src: Optional[str],
        transformation: Optional[TransformationRequest] = None,
        width: Optional[int] = None,
        quality: Optional[int] = None,
        placeholder_blur: Optional[int] = None,
    ) -> ProgressivePair:
        return self.builder.progressive_pair(
            src,
            transformation,
            width=width,
            quality=quality,
            placeholder_blur=placeholder_blur,
        )

    def preset_transformation(self, preset: ImagePreset) -> TransformationRequest:
        return TransformationRequest(
            width=preset.width,
            height=preset.height,
            quality=preset.quality,
            format=preset.format,
            fit=preset.fit,
        )

    def get_preset_url(self, src: Optional[str], preset: ImagePreset) -> str:
        return self.composer.compose(src, self.preset_transformation(preset))

    @staticmethod
    def get_placeholder_url(width: int = 400, height: int = 400) -> str:
        return PLACEHOLDER_IMAGE_URL.format(width=width, height=height)

    def is_configured(self) -> bool:
        return self.config.is_configured()

    @staticmethod
    def is_r2_url(url: Optional[str]) -> bool:
        return bool(url) and any(marker in url for marker in R2_HOST_MARKERS)
