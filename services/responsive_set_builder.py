import logging
from typing import Iterable, Optional

from domain.models import ProgressivePair, ResponsiveEntry, ResponsiveSet
from domain.schemas.transformation import TransformationRequest
from services.url_composer import UrlComposer

logger = logging.getLogger(__name__)

DEFAULT_WIDTHS = (400, 800, 1200, 1600)
DEFAULT_FORMAT = "webp"
PLACEHOLDER_WIDTH = 50
PLACEHOLDER_QUALITY = 20


class ResponsiveSetBuilder:
    def __init__(self, composer: UrlComposer):
        self.composer = composer

    def build(
        self,
        reference: Optional[str],
        widths: Iterable[int] = DEFAULT_WIDTHS,
        transformation: Optional[TransformationRequest] = None,
        format: str = DEFAULT_FORMAT,
    ) -> ResponsiveSet:
        """Una URL por ancho, con el formato forzado a webp salvo que se indique otro"""
        if not reference:
            return ResponsiveSet()

        base = transformation or TransformationRequest()
        entries = []
        for width in widths:
            # bool es subclase de int
            if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
                logger.warning(f"Ancho inválido ignorado en srcset: {width!r}")
                continue
            url = self.composer.compose(reference, base.merged(width=width, format=format))
            if not url:
                continue
            entries.append(ResponsiveEntry(width=width, url=url))

        return ResponsiveSet(entries=entries)

    def build_srcset(
        self,
        reference: Optional[str],
        widths: Iterable[int] = DEFAULT_WIDTHS,
        transformation: Optional[TransformationRequest] = None,
        format: str = DEFAULT_FORMAT,
    ) -> str:
        return self.build(reference, widths, transformation, format).to_srcset()

    def progressive_pair(
        self,
        reference: Optional[str],
        transformation: Optional[TransformationRequest] = None,
        width: Optional[int] = None,
        quality: Optional[int] = None,
        placeholder_width: int = PLACEHOLDER_WIDTH,
        placeholder_quality: int = PLACEHOLDER_QUALITY,
        placeholder_blur: Optional[int] = None,
        format: str = DEFAULT_FORMAT,
    ) -> ProgressivePair:
        """
        Par de carga progresiva: un placeholder barato (ancho y calidad mínimos,
        opcionalmente borroso) y la imagen completa con el ancho y calidad pedidos.
        Ambas URLs salen de la misma referencia.
        """
        base = transformation or TransformationRequest()

        placeholder = self.composer.compose(
            reference,
            base.merged(
                width=placeholder_width,
                quality=placeholder_quality,
                format=format,
                blur=placeholder_blur,
            ),
        )
        full = self.composer.compose(
            reference,
            base.merged(width=width, quality=quality, format=format),
        )
        return ProgressivePair(placeholder=placeholder, full=full)
