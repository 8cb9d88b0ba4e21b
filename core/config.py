from typing import Optional

from pydantic import BaseModel
from dotenv import load_dotenv
import os

from domain.enums.image_options import AbsoluteUrlPolicy, ImageProvider, ProviderConvention

load_dotenv()  # Carga las variables de entorno desde .env

class Settings(BaseModel):
    R2_PUBLIC_URL: Optional[str] = os.getenv("VITE_R2_PUBLIC_URL")
    R2_CDN_URL: Optional[str] = os.getenv("VITE_R2_CDN_URL")
    R2_ENDPOINT: Optional[str] = os.getenv("CLOUDFLARE_R2_ENDPOINT")
    R2_ACCESS_KEY_ID: Optional[str] = os.getenv("CLOUDFLARE_R2_ACCESS_KEY_ID")
    R2_SECRET_ACCESS_KEY: Optional[str] = os.getenv("CLOUDFLARE_R2_SECRET_ACCESS_KEY")
    R2_BUCKET_NAME: Optional[str] = os.getenv("CLOUDFLARE_R2_BUCKET_NAME")
    R2_REGION: str = "auto"
    IMAGEKIT_URL_ENDPOINT: Optional[str] = os.getenv("VITE_IMAGEKIT_URL_ENDPOINT")
    IMAGEKIT_PUBLIC_KEY: Optional[str] = os.getenv("VITE_IMAGEKIT_PUBLIC_KEY")
    IMAGEKIT_DEFAULT_ENDPOINT: str = "https://ik.imagekit.io"
    IMAGE_PROVIDER: str = os.getenv("IMAGE_PROVIDER", ImageProvider.R2.value)
    IMAGE_PROXY_PREFIX: str = "/cdn-cgi/image"

settings = Settings()

R2_PUBLIC_URL = settings.R2_PUBLIC_URL
R2_CDN_URL = settings.R2_CDN_URL
R2_ENDPOINT = settings.R2_ENDPOINT
R2_ACCESS_KEY_ID = settings.R2_ACCESS_KEY_ID
R2_SECRET_ACCESS_KEY = settings.R2_SECRET_ACCESS_KEY
R2_BUCKET_NAME = settings.R2_BUCKET_NAME
R2_REGION = settings.R2_REGION
IMAGEKIT_URL_ENDPOINT = settings.IMAGEKIT_URL_ENDPOINT
IMAGEKIT_PUBLIC_KEY = settings.IMAGEKIT_PUBLIC_KEY
IMAGE_PROVIDER = settings.IMAGE_PROVIDER


class ImageDeliveryConfig(BaseModel):
    """
    Configuración explícita de la entrega de imágenes.
    Se inyecta en el compositor de URLs para que los tests puedan fijar orígenes
    sin tocar variables de entorno.
    """
    base_url: str = ""
    cdn_url: Optional[str] = None
    convention: ProviderConvention = ProviderConvention.QUERY_STRING
    absolute_policy: AbsoluteUrlPolicy = AbsoluteUrlPolicy.PASS_THROUGH
    proxy_prefix: str = "/cdn-cgi/image"
    default_quality: Optional[int] = None
    fallback_url: str = "/placeholder.svg"  # Se muestra cuando la imagen completa falla
    provider: ImageProvider = ImageProvider.R2
    public_key: Optional[str] = None  # Solo ImageKit
    default_origin: Optional[str] = None  # Endpoint público del proveedor si no hay uno propio

    @property
    def origin(self) -> str:
        """Origen efectivo: CDN, URL base, endpoint por defecto o cadena vacía."""
        return (self.cdn_url or self.base_url or self.default_origin or "").rstrip("/")

    def is_configured(self) -> bool:
        """ImageKit necesita clave pública y endpoint propio; R2 solo un origen"""
        if self.provider == ImageProvider.IMAGEKIT:
            return bool(self.public_key and self.base_url)
        return bool(self.origin)

    @classmethod
    def for_provider(cls, provider: ImageProvider, source: Settings = None) -> "ImageDeliveryConfig":
        """Construye la configuración de un proveedor a partir de los settings"""
        source = source or settings

        if provider == ImageProvider.IMAGEKIT:
            return cls(
                base_url=source.IMAGEKIT_URL_ENDPOINT or "",
                default_origin=source.IMAGEKIT_DEFAULT_ENDPOINT,
                provider=ImageProvider.IMAGEKIT,
                public_key=source.IMAGEKIT_PUBLIC_KEY or None,
                convention=ProviderConvention.PATH_SEGMENT,
                absolute_policy=AbsoluteUrlPolicy.PASS_THROUGH,
                proxy_prefix=source.IMAGE_PROXY_PREFIX,
                default_quality=80,
            )

        return cls(
            base_url=source.R2_PUBLIC_URL or "",
            cdn_url=source.R2_CDN_URL or None,
            convention=ProviderConvention.QUERY_STRING,
            absolute_policy=AbsoluteUrlPolicy.PASS_THROUGH,
            proxy_prefix=source.IMAGE_PROXY_PREFIX,
        )

    @classmethod
    def from_settings(cls, source: Settings = None) -> "ImageDeliveryConfig":
        source = source or settings
        try:
            provider = ImageProvider(source.IMAGE_PROVIDER.lower())
        except ValueError:
            provider = ImageProvider.R2
        return cls.for_provider(provider, source)
