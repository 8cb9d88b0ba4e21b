"""
Carga de imágenes condicionada al viewport.

Modela el componente de imagen diferida/progresiva del frontend:

    PENDING --(intersección >= umbral)--> IN_VIEW --(load)--> LOADED
                                             |
                                             +----(error)---> FAILED

Mientras está en PENDING solo se pinta el placeholder borroso. Al entrar en
IN_VIEW empieza a cargarse la imagen completa y el placeholder sigue visible
hasta LOADED. FAILED muestra la imagen de respaldo.
"""
import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterator, Optional

from domain.enums.image_options import LoadingStrategy

logger = logging.getLogger(__name__)

DEFAULT_ROOT_MARGIN = 200
DEFAULT_THRESHOLD = 0.1


class LoaderState(str, Enum):
    PENDING = "pending"
    IN_VIEW = "in_view"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def area(self) -> float:
        return max(self.width, 0) * max(self.height, 0)

    def expand(self, margin: float) -> "Rect":
        """Agranda el rectángulo `margin` píxeles por cada lado (rootMargin)"""
        return Rect(self.left - margin, self.top - margin, self.width + 2 * margin, self.height + 2 * margin)

    def intersection(self, other: "Rect") -> Optional["Rect"]:
        left = max(self.left, other.left)
        top = max(self.top, other.top)
        right = min(self.right, other.right)
        bottom = min(self.bottom, other.bottom)
        if right < left or bottom < top:
            return None
        return Rect(left, top, right - left, bottom - top)


def intersection_ratio(target: Rect, viewport: Rect, root_margin: float = 0) -> float:
    """Fracción del elemento que cae dentro del viewport ampliado por root_margin"""
    overlap = target.intersection(viewport.expand(root_margin))
    if overlap is None:
        return 0.0
    if target.area == 0:
        # Un elemento sin tamaño cuenta como visible si toca el viewport
        return 1.0
    return overlap.area / target.area


@dataclass(frozen=True)
class IntersectionEntry:
    target_id: str
    ratio: float
    is_intersecting: bool


class ViewportObserver:
    """Equivalente al IntersectionObserver del navegador para un viewport simulado"""

    def __init__(
        self,
        callback: Callable[[IntersectionEntry], None],
        root_margin: float = DEFAULT_ROOT_MARGIN,
        threshold: float = DEFAULT_THRESHOLD,
    ):
        self.callback = callback
        self.root_margin = root_margin
        self.threshold = threshold
        self._targets: Dict[str, Rect] = {}
        self._connected = True

    @property
    def connected(self) -> bool:
        return self._connected

    def observe(self, target_id: str, rect: Rect) -> None:
        if not self._connected:
            return
        self._targets[target_id] = rect

    def unobserve(self, target_id: str) -> None:
        self._targets.pop(target_id, None)

    def disconnect(self) -> None:
        self._targets.clear()
        self._connected = False

    def check(self, viewport: Rect) -> None:
        """Entrega una entrada por cada objetivo que alcanza el umbral"""
        # Copia: el callback puede desconectar el observador
        for target_id, rect in list(self._targets.items()):
            if not self._connected:
                break
            ratio = intersection_ratio(rect, viewport, self.root_margin)
            if ratio > 0 and ratio >= self.threshold:
                self.callback(IntersectionEntry(target_id=target_id, ratio=ratio, is_intersecting=True))


@dataclass(frozen=True)
class RenderedImage:
    """Lo que el componente pinta en un instante dado"""
    state: LoaderState
    placeholder_url: str
    placeholder_visible: bool
    full_url: Optional[str]
    src_set: str
    sizes: str
    fallback_url: Optional[str]
    alt: str = ""


class ViewportGatedLoader:
    """
    Máquina de estados de una imagen. Cada instancia tiene su propio
    observador; ninguna transición se dispara dos veces.
    """

    def __init__(
        self,
        placeholder_url: str,
        full_url: str,
        src_set: str = "",
        sizes: str = "100vw",
        alt: str = "",
        root_margin: float = DEFAULT_ROOT_MARGIN,
        threshold: float = DEFAULT_THRESHOLD,
        strategy: LoadingStrategy = LoadingStrategy.LAZY,
        fallback_url: str = "/placeholder.svg",
        observer_factory: Callable[..., ViewportObserver] = ViewportObserver,
    ):
        self.placeholder_url = placeholder_url
        self.full_url = full_url
        self.src_set = src_set
        self.sizes = sizes
        self.alt = alt
        self.root_margin = root_margin
        self.threshold = threshold
        self.strategy = LoadingStrategy(strategy)
        self.fallback_url = fallback_url
        self.observer_factory = observer_factory
        self.target_id = f"img-{uuid.uuid4().hex[:8]}"
        self._state = LoaderState.PENDING
        self._observer: Optional[ViewportObserver] = None

    @property
    def state(self) -> LoaderState:
        return self._state

    @property
    def observer(self) -> Optional[ViewportObserver]:
        return self._observer

    @contextmanager
    def mount(self, rect: Rect) -> Iterator["ViewportGatedLoader"]:
        """
        Monta el componente: adquiere el observador y garantiza su liberación
        al dispararse, al desmontar o si ocurre un error.
        """
        self._acquire(rect)
        try:
            yield self
        finally:
            self._release()

    def move(self, rect: Rect) -> None:
        """Actualiza la posición del elemento (scroll o layout)"""
        if self._observer is not None:
            self._observer.observe(self.target_id, rect)

    def check(self, viewport: Rect) -> LoaderState:
        if self._observer is not None:
            self._observer.check(viewport)
        return self._state

    def on_intersection(self, entry: IntersectionEntry) -> None:
        if self._state != LoaderState.PENDING or not entry.is_intersecting:
            return
        # Observación de un solo disparo
        self._release()
        self._transition(LoaderState.IN_VIEW)

    def on_load(self) -> None:
        if self._state != LoaderState.IN_VIEW:
            logger.debug(f"Evento load ignorado en estado {self._state.value} ({self.target_id})")
            return
        self._transition(LoaderState.LOADED)

    def on_error(self) -> None:
        if self._state != LoaderState.IN_VIEW:
            logger.debug(f"Evento error ignorado en estado {self._state.value} ({self.target_id})")
            return
        logger.warning(f"No se pudo cargar la imagen {self.full_url}, se muestra {self.fallback_url}")
        self._transition(LoaderState.FAILED)

    def render(self) -> RenderedImage:
        state = self._state
        show_full = state in (LoaderState.IN_VIEW, LoaderState.LOADED)
        return RenderedImage(
            state=state,
            placeholder_url=self.placeholder_url,
            placeholder_visible=state in (LoaderState.PENDING, LoaderState.IN_VIEW),
            full_url=self.full_url if show_full else None,
            src_set=self.src_set if show_full else "",
            sizes=self.sizes,
            fallback_url=self.fallback_url if state == LoaderState.FAILED else None,
            alt=self.alt,
        )

    def _acquire(self, rect: Rect) -> None:
        if self._state != LoaderState.PENDING:
            return
        if self.strategy == LoadingStrategy.EAGER:
            self._transition(LoaderState.IN_VIEW)
            return
        self._observer = self.observer_factory(
            self.on_intersection,
            root_margin=self.root_margin,
            threshold=self.threshold,
        )
        self._observer.observe(self.target_id, rect)

    def _release(self) -> None:
        if self._observer is not None:
            self._observer.disconnect()
            self._observer = None

    def _transition(self, new_state: LoaderState) -> None:
        if self._state == new_state:
            return
        logger.debug(f"{self.target_id}: {self._state.value} -> {new_state.value}")
        self._state = new_state
