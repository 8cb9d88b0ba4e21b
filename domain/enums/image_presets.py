from enum import Enum

class ImagePreset(Enum):
    """
    Presets de imágenes de la tienda.
    Cada valor es (ancho, alto, calidad, formato, ajuste, margen del observador en px).
    - Miniaturas: cuadradas, baja resolución.
    - Banners: rectangulares, anchos completos.
    - Galería y blur-up: ancho medio con carga progresiva.
    """

    # Miniatura en listas y carrito (cuadrada)
    THUMBNAIL = (150, 150, 85, "webp", "cover", 50)

    # Banner de la portada (rectangular)
    BANNER = (1600, 600, 85, "webp", "cover", 200)

    # Imagen de galería en el detalle del producto
    GALLERY = (1200, None, 85, "webp", None, 200)

    # Carga progresiva con placeholder borroso
    BLUR_UP = (800, None, 80, "webp", None, 200)

    # Carga diferida simple
    LAZY = (800, None, None, "webp", None, 50)

    # Imagen a tamaño completo
    FULL_SIZE = (1200, None, 90, "auto", None, 200)

    @property
    def width(self):
        """Devuelve el ancho de la imagen."""
        return self.value[0]

    @property
    def height(self):
        """Devuelve el alto de la imagen (None mantiene la proporción)."""
        return self.value[1]

    @property
    def quality(self):
        return self.value[2]

    @property
    def format(self):
        return self.value[3]

    @property
    def fit(self):
        return self.value[4]

    @property
    def root_margin(self):
        """Margen en píxeles con el que se expande el viewport al observar."""
        return self.value[5]

    @property
    def progressive(self):
        """Indica si el preset muestra un placeholder borroso mientras carga."""
        return self in (ImagePreset.BLUR_UP, ImagePreset.GALLERY, ImagePreset.LAZY)
