from typing import Optional

from domain.enums.image_options import LoadingStrategy
from domain.enums.image_presets import ImagePreset
from services.image_url_service import ImageUrlService
from services.viewport_loader import DEFAULT_THRESHOLD, ViewportGatedLoader

DEFAULT_SIZES = "(max-width: 640px) 100vw, (max-width: 1024px) 50vw, 33vw"


class ImageView:
    """
    Componente de imagen único parametrizado por preset
    (miniatura, banner, galería, blur-up, diferida).
    """

    def __init__(self, url_service: ImageUrlService):
        self.url_service = url_service

    def create(
        self,
        src: Optional[str],
        preset: ImagePreset = ImagePreset.BLUR_UP,
        alt: str = "",
        sizes: str = DEFAULT_SIZES,
        strategy: LoadingStrategy = LoadingStrategy.LAZY,
        threshold: float = DEFAULT_THRESHOLD,
        root_margin: Optional[float] = None,
    ) -> ViewportGatedLoader:
        transformation = self.url_service.preset_transformation(preset)

        if preset.progressive:
            pair = self.url_service.get_progressive_image_set(
                src,
                transformation,
                placeholder_blur=10 if preset == ImagePreset.BLUR_UP else None,
            )
            placeholder, full = pair.placeholder, pair.full
            src_set = self.url_service.generate_src_set(src, transformation=transformation)
        else:
            # Miniaturas y banners no tienen placeholder propio
            full = self.url_service.get_preset_url(src, preset)
            placeholder = ""
            src_set = ""

        return ViewportGatedLoader(
            placeholder_url=placeholder,
            full_url=full,
            src_set=src_set,
            sizes=sizes,
            alt=alt,
            root_margin=preset.root_margin if root_margin is None else root_margin,
            threshold=threshold,
            strategy=strategy,
            fallback_url=self.url_service.config.fallback_url,
        )
