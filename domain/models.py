from pydantic import BaseModel
from typing import List

class ResponsiveEntry(BaseModel):
    width: int
    url: str

    def descriptor(self) -> str:
        return f"{self.url} {self.width}w"

class ResponsiveSet(BaseModel):
    entries: List[ResponsiveEntry] = []

    def to_srcset(self) -> str:
        """Cadena para el atributo srcset: "{url} {w}w, ..." """
        return ", ".join(entry.descriptor() for entry in self.entries)

    def widths(self) -> List[int]:
        return [entry.width for entry in self.entries]

    def url_for(self, viewport_width: int) -> str:
        """URL más pequeña que cubre el ancho pedido, como lo haría el navegador"""
        if not self.entries:
            return ""
        candidates = sorted(self.entries, key=lambda entry: entry.width)
        for entry in candidates:
            if entry.width >= viewport_width:
                return entry.url
        return candidates[-1].url

class ProgressivePair(BaseModel):
    placeholder: str
    full: str

class ResponsiveUrls(BaseModel):
    small: str
    medium: str
    large: str
    xlarge: str
