import re
import logging
from typing import Optional
from urllib.parse import urlsplit

from domain.enums.image_options import AbsoluteUrlPolicy

logger = logging.getLogger(__name__)

_ABSOLUTE_URL = re.compile(r"^https?://", re.IGNORECASE)
_LEADING_SLASHES = re.compile(r"^/+")
_REPEATED_SLASHES = re.compile(r"/{2,}")


def is_absolute_url(reference: Optional[str]) -> bool:
    return bool(reference) and bool(_ABSOLUTE_URL.match(reference))


def clean_relative_path(path: str) -> str:
    """Quita las barras iniciales y colapsa las repetidas"""
    return _REPEATED_SLASHES.sub("/", _LEADING_SLASHES.sub("", path))


def normalize_path(reference: Optional[str], absolute_policy: AbsoluteUrlPolicy = AbsoluteUrlPolicy.PASS_THROUGH) -> str:
    """
    Convierte una referencia guardada en una clave relativa canónica.

    - Vacío o None devuelve "".
    - URL absoluta: se devuelve intacta, salvo con STRIP_HOST, donde se quitan
      esquema y host y queda el path (con su query).
    - Resto: sin barras iniciales y sin barras repetidas.

    Nunca lanza excepciones; una entrada irreconocible se devuelve tal cual.
    """
    if not reference or not isinstance(reference, str):
        return ""

    reference = reference.strip()

    if is_absolute_url(reference):
        if absolute_policy != AbsoluteUrlPolicy.STRIP_HOST:
            return reference
        try:
            parts = urlsplit(reference)
        except ValueError:
            logger.warning(f"URL absoluta malformada, se devuelve sin cambios: {reference[:80]}")
            return reference
        path = clean_relative_path(parts.path)
        return f"{path}?{parts.query}" if parts.query else path

    return clean_relative_path(reference)
