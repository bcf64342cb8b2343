"""
Geometria fixa da folha de etiquetas.

Todos os valores em pontos (1/72 pol.). Coordenadas com origem no canto
superior esquerdo da página, y crescendo para baixo.
"""
from __future__ import annotations

from dataclasses import dataclass

MM_TO_PT = 2.83465

LABEL_WIDTH_MM = 65
LABEL_HEIGHT_MM = 35

# A4
PAGE_WIDTH_PT = 595.28
PAGE_HEIGHT_PT = 841.89

WHITE = "#FFFFFF"
GEMA_YELLOW = "#FCD900"

FONT_PRODUCT_NAME = "ProductName"
FONT_PRICE = "Price"
FONT_MEASURE = "Measure"


@dataclass(frozen=True)
class LabelGeometry:
    label_width: float = LABEL_WIDTH_MM * MM_TO_PT
    label_height: float = LABEL_HEIGHT_MM * MM_TO_PT
    page_width: float = PAGE_WIDTH_PT
    page_height: float = PAGE_HEIGHT_PT
    margin: float = 40
    gap_x: float = 10
    gap_y: float = 10
    labels_per_row: int = 2

    @property
    def printable_bottom(self) -> float:
        return self.page_height - self.margin


@dataclass(frozen=True)
class FieldStyle:
    font: str
    size: float
    color: str


@dataclass(frozen=True)
class FieldLayout:
    """Deslocamentos verticais de cada campo a partir do topo da etiqueta."""
    name_offset_y: float = 4
    name_line_height: float = 15
    name_max_chars: int = 23
    price_offset_y: float = 36
    measure_offset_y: float = 80
    name: FieldStyle = FieldStyle(FONT_PRODUCT_NAME, 14, WHITE)
    price: FieldStyle = FieldStyle(FONT_PRICE, 36, GEMA_YELLOW)
    measure: FieldStyle = FieldStyle(FONT_MEASURE, 12, GEMA_YELLOW)


DEFAULT_GEOMETRY = LabelGeometry()
DEFAULT_FIELDS = FieldLayout()
